from fastapi import FastAPI

from .contact import router as contact_router
from .health import router as health_router


def register_routes(app: FastAPI) -> None:
    app.include_router(health_router)
    app.include_router(contact_router)
