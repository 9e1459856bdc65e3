import asyncio
import logging
import sys
from contextlib import asynccontextmanager

from fastapi import FastAPI

from .bootstrap import Bootstrap, StorageUnavailableError
from .config import ConfigurationError, Settings, load_settings
from .database import dispose_engine, init_engine
from .email_service import Mailer
from .email_transport import build_transport
from .middleware import RequestLoggingMiddleware
from .tasks import TaskSupervisor

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)
logger = logging.getLogger(__name__)

# Reduce verbosity of third-party libraries
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("httpcore").setLevel(logging.WARNING)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Application starting up...")
    yield
    logger.info("Application shutting down...")

    await app.state.supervisor.shutdown()

    dev_proxy_client = getattr(app.state, "dev_proxy_client", None)
    if dev_proxy_client is not None:
        await dev_proxy_client.aclose()

    dispose_engine()


def create_app(settings: Settings, mailer: Mailer) -> FastAPI:
    """
    Create the FastAPI application with request logging and shared state.

    Routes, assets and error handlers are attached later by Bootstrap.
    """
    app = FastAPI(
        title="SoftwarePar API",
        version="1.0.0",
        lifespan=lifespan,
        docs_url="/api/docs" if settings.is_development else None,
        redoc_url=None,
        openapi_url="/api/openapi.json" if settings.is_development else None,
    )
    app.state.settings = settings
    app.state.mailer = mailer
    app.state.supervisor = TaskSupervisor()

    app.add_middleware(RequestLoggingMiddleware)
    return app


def main() -> None:
    try:
        settings = load_settings()
    except ConfigurationError as e:
        logger.error(f"❌ Invalid configuration: {e}")
        sys.exit(1)

    logging.getLogger().setLevel(settings.log_level)

    init_engine(settings.database_url)
    mailer = Mailer(build_transport(settings), contact_inbox=settings.contact_inbox)
    app = create_app(settings, mailer)

    try:
        asyncio.run(Bootstrap(app, settings).run())
    except StorageUnavailableError as e:
        logger.error(f"❌ Startup aborted: {e}")
        sys.exit(1)
    except KeyboardInterrupt:
        logger.info("👋 Server stopped by user")


if __name__ == "__main__":
    main()
