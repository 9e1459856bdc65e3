"""
Frontend serving: public assets, the built client in production and a Vite
dev-server proxy in development.
"""

import logging
from pathlib import Path
from typing import Awaitable, Callable, Optional

import httpx
from fastapi import FastAPI, HTTPException, Request, Response
from fastapi.responses import FileResponse
from fastapi.staticfiles import StaticFiles

logger = logging.getLogger(__name__)

FrontendFallback = Callable[[Request, str], Awaitable[Response]]

# Hop-by-hop headers must not be forwarded by a proxy
HOP_BY_HOP_HEADERS = {
    "connection",
    "keep-alive",
    "proxy-authenticate",
    "proxy-authorization",
    "te",
    "trailers",
    "transfer-encoding",
    "upgrade",
    "content-encoding",
    "content-length",
}


def resolve_asset(root: Path, relative_path: str) -> Optional[Path]:
    """Return the file under root for relative_path, or None if absent or outside root"""
    if not relative_path:
        return None
    try:
        root = root.resolve()
        candidate = (root / relative_path).resolve()
    except (OSError, ValueError):
        return None
    if root not in candidate.parents:
        return None
    return candidate if candidate.is_file() else None


def mount_public_assets(app: FastAPI, public_dir: str) -> None:
    """
    Serve the public asset directory under /public and as a root fallback.

    The root fallback hands unmatched paths to `app.state.frontend_fallback`,
    installed later by serve_static or setup_dev_server.
    """
    root = Path(public_dir)
    if root.is_dir():
        app.mount("/public", StaticFiles(directory=root), name="public")
        logger.info(f"📁 Serving public assets from {root}")
    else:
        logger.warning(f"⚠️ Public asset directory not found: {root}")

    @app.api_route("/{full_path:path}", methods=["GET", "HEAD"], include_in_schema=False)
    async def frontend(request: Request, full_path: str):
        if full_path == "api" or full_path.startswith("api/"):
            raise HTTPException(status_code=404, detail="Not Found")

        asset = resolve_asset(root, full_path)
        if asset is not None:
            return FileResponse(asset)

        fallback: Optional[FrontendFallback] = getattr(request.app.state, "frontend_fallback", None)
        if fallback is None:
            raise HTTPException(status_code=404, detail="Not Found")
        return await fallback(request, full_path)


def serve_static(app: FastAPI, dist_dir: str) -> None:
    """Production: serve the built client, falling back to index.html for client routes"""
    root = Path(dist_dir)
    index = root / "index.html"
    if not index.is_file():
        raise FileNotFoundError(
            f"Could not find the build directory: {root.resolve()}, make sure to build the client first"
        )

    async def serve_build(request: Request, full_path: str) -> Response:
        asset = resolve_asset(root, full_path)
        return FileResponse(asset or index)

    app.state.frontend_fallback = serve_build
    logger.info(f"📦 Serving built client from {root}")


def setup_dev_server(app: FastAPI, server, dev_server_url: str) -> httpx.AsyncClient:
    """
    Development: forward asset requests to the Vite dev server.

    The proxy client lives on app.state and is closed by the app lifespan.
    """
    client = httpx.AsyncClient(base_url=dev_server_url, timeout=30.0)
    app.state.dev_proxy_client = client

    async def proxy_to_vite(request: Request, full_path: str) -> Response:
        headers = {
            key: value
            for key, value in request.headers.items()
            if key.lower() not in HOP_BY_HOP_HEADERS and key.lower() != "host"
        }
        try:
            upstream = await client.request(
                request.method,
                f"/{full_path}",
                params=request.query_params,
                headers=headers,
            )
        except httpx.HTTPError as e:
            logger.error(f"❌ Vite dev server unreachable at {dev_server_url}: {e}")
            raise HTTPException(status_code=502, detail="Dev server unavailable") from e

        response_headers = {
            key: value
            for key, value in upstream.headers.items()
            if key.lower() not in HOP_BY_HOP_HEADERS
        }
        return Response(
            content=upstream.content,
            status_code=upstream.status_code,
            headers=response_headers,
        )

    app.state.frontend_fallback = proxy_to_vite
    port = getattr(getattr(server, "config", None), "port", None)
    logger.info(f"🔧 Development mode: proxying frontend on port {port} to {dev_server_url}")
    return client
