"""
Startup sequence for the SoftwarePar server.

Steps run in order: storage probe (fatal), payment-config warm-up (background,
non-fatal), API routes, public assets, error handlers, dev/prod frontend,
listen.
"""

import asyncio
import enum
import logging
from typing import Awaitable, Callable, Optional

import uvicorn
from fastapi import FastAPI

from .config import Settings
from .database import check_database_connection
from .frontend import mount_public_assets, serve_static, setup_dev_server
from .mercadopago import load_mercadopago_config
from .middleware import ErrorReporter, install_error_handlers
from .routes import register_routes as default_register_routes
from .tasks import TaskSupervisor

logger = logging.getLogger(__name__)

LISTEN_HOST = "0.0.0.0"
READY_POLL_INTERVAL = 0.05


class BootState(str, enum.Enum):
    PENDING = "pending"
    RUNNING = "running"
    ABORTED_AT_STORAGE_CHECK = "aborted_at_storage_check"


class StorageUnavailableError(RuntimeError):
    """The database could not be reached during startup"""


def uvicorn_server(app: FastAPI, host: str, port: int) -> uvicorn.Server:
    return uvicorn.Server(uvicorn.Config(app, host=host, port=port, log_level="info"))


async def _probe_storage() -> int:
    return await asyncio.to_thread(check_database_connection)


async def _load_payment_config():
    return await asyncio.to_thread(load_mercadopago_config)


class Bootstrap:
    """Runs the startup sequence once and reports where it ended"""

    def __init__(
        self,
        app: FastAPI,
        settings: Settings,
        *,
        probe_storage: Callable[[], Awaitable] = _probe_storage,
        load_payment_config: Callable[[], Awaitable] = _load_payment_config,
        register_routes: Callable[[FastAPI], None] = default_register_routes,
        server_factory: Callable[[FastAPI, str, int], uvicorn.Server] = uvicorn_server,
        supervisor: Optional[TaskSupervisor] = None,
        reporter: Optional[ErrorReporter] = None,
    ):
        self.app = app
        self.settings = settings
        self.probe_storage = probe_storage
        self.load_payment_config = load_payment_config
        self.register_routes = register_routes
        self.server_factory = server_factory
        self.supervisor = supervisor or getattr(app.state, "supervisor", None) or TaskSupervisor()
        self.reporter = reporter or ErrorReporter()
        self.state = BootState.PENDING
        self.server = None

    async def run(self) -> BootState:
        logger.info("🚀 Starting server...")
        await self._check_storage()

        self.supervisor.spawn(
            "mercadopago-config",
            self.load_payment_config(),
            success_message="✅ MercadoPago configuration loaded from database",
        )

        # Asset catch-all goes after the API routes so it never shadows them
        self.register_routes(self.app)
        mount_public_assets(self.app, self.settings.client_public_dir)
        install_error_handlers(self.app, self.reporter)

        self.server = self.server_factory(self.app, LISTEN_HOST, self.settings.port)
        if self.settings.is_development:
            setup_dev_server(self.app, self.server, self.settings.vite_dev_server_url)
        else:
            serve_static(self.app, self.settings.dist_dir)

        await self._listen(self.server)
        return self.state

    async def _check_storage(self) -> None:
        logger.info("🔗 Checking PostgreSQL connection...")
        try:
            await self.probe_storage()
        except Exception as e:
            self.state = BootState.ABORTED_AT_STORAGE_CHECK
            logger.error(f"❌ Error connecting to PostgreSQL: {e}")
            raise StorageUnavailableError("Could not connect to the database") from e

    async def _listen(self, server) -> None:
        serve_task = asyncio.ensure_future(server.serve())
        while not getattr(server, "started", False) and not serve_task.done():
            await asyncio.sleep(READY_POLL_INTERVAL)

        if getattr(server, "started", False):
            self.state = BootState.RUNNING
            logger.info(f"serving on port {self.settings.port}")

        await serve_task
