import httpx
import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from softwarepar.frontend import mount_public_assets, resolve_asset, serve_static, setup_dev_server


@pytest.fixture
def public_dir(tmp_path):
    root = tmp_path / "public"
    (root / "img").mkdir(parents=True)
    (root / "img" / "logo.svg").write_text("<svg/>", encoding="utf-8")
    (root / "robots.txt").write_text("User-agent: *", encoding="utf-8")
    (tmp_path / "secret.env").write_text("GMAIL_PASS=x", encoding="utf-8")
    return root


@pytest.fixture
def dist_dir(tmp_path):
    root = tmp_path / "dist"
    (root / "assets").mkdir(parents=True)
    (root / "index.html").write_text("<html>shell</html>", encoding="utf-8")
    (root / "assets" / "app.js").write_text("console.log(1)", encoding="utf-8")
    return root


def build_app(public_dir, dist_dir=None):
    app = FastAPI()

    @app.get("/api/ping")
    def ping():
        return {"pong": True}

    mount_public_assets(app, str(public_dir))
    if dist_dir is not None:
        serve_static(app, str(dist_dir))
    return app


def test_public_assets_are_served_under_prefix_and_root(public_dir, dist_dir):
    client = TestClient(build_app(public_dir, dist_dir))

    assert client.get("/public/img/logo.svg").text == "<svg/>"
    assert client.get("/img/logo.svg").text == "<svg/>"
    assert client.get("/robots.txt").text == "User-agent: *"


def test_api_routes_win_over_the_catch_all(public_dir, dist_dir):
    client = TestClient(build_app(public_dir, dist_dir))

    assert client.get("/api/ping").json() == {"pong": True}
    assert client.get("/api/unknown").status_code == 404


def test_production_serves_build_and_falls_back_to_index(public_dir, dist_dir):
    client = TestClient(build_app(public_dir, dist_dir))

    assert client.get("/assets/app.js").text == "console.log(1)"
    assert client.get("/").text == "<html>shell</html>"
    assert client.get("/dashboard/projects/3").text == "<html>shell</html>"


def test_without_fallback_unknown_paths_are_404(public_dir):
    client = TestClient(build_app(public_dir))
    assert client.get("/dashboard").status_code == 404


def test_resolve_asset_rejects_paths_outside_root(public_dir):
    assert resolve_asset(public_dir, "../secret.env") is None
    assert resolve_asset(public_dir, "img") is None
    assert resolve_asset(public_dir, "robots.txt") == (public_dir / "robots.txt").resolve()


def test_serve_static_requires_a_build(tmp_path):
    with pytest.raises(FileNotFoundError, match="build the client first"):
        serve_static(FastAPI(), str(tmp_path / "missing"))


def test_dev_server_installs_proxy_fallback(public_dir):
    app = FastAPI()
    mount_public_assets(app, str(public_dir))
    client = setup_dev_server(app, server=None, dev_server_url="http://localhost:5173")

    assert app.state.dev_proxy_client is client
    assert client.base_url.host == "localhost"
    assert app.state.frontend_fallback is not None


def test_dev_proxy_forwards_to_vite(public_dir, monkeypatch):
    app = FastAPI()
    mount_public_assets(app, str(public_dir))
    proxy = setup_dev_server(app, server=None, dev_server_url="http://vite.local")

    calls = []

    async def fake_request(method, url, params=None, headers=None):
        calls.append((method, url))
        return httpx.Response(200, text="<html>vite</html>", headers={"content-type": "text/html"})

    monkeypatch.setattr(proxy, "request", fake_request)

    response = TestClient(app).get("/src/main.tsx")
    assert response.status_code == 200
    assert response.text == "<html>vite</html>"
    assert calls == [("GET", "/src/main.tsx")]
