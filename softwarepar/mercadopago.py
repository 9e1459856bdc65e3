"""MercadoPago configuration loader - credentials are stored in the database"""

import logging
from dataclasses import dataclass
from typing import Optional

from sqlalchemy import select

from .database import SessionLocal
from .models import PaymentProviderSettings

logger = logging.getLogger(__name__)

PROVIDER_NAME = "mercadopago"


class PaymentConfigError(Exception):
    """Raised when no usable MercadoPago configuration is available"""


@dataclass(frozen=True)
class MercadoPagoConfig:
    access_token: str
    public_key: str
    webhook_secret: Optional[str] = None
    is_production: bool = False

    @property
    def environment(self) -> str:
        return "production" if self.is_production else "sandbox"


_config: Optional[MercadoPagoConfig] = None


def load_mercadopago_config(session_factory=SessionLocal) -> MercadoPagoConfig:
    """Read the newest active MercadoPago settings row and cache it"""
    global _config

    with session_factory() as db:
        row = (
            db.execute(
                select(PaymentProviderSettings)
                .where(
                    PaymentProviderSettings.provider == PROVIDER_NAME,
                    PaymentProviderSettings.is_active.is_(True),
                )
                .order_by(PaymentProviderSettings.id.desc())
                .limit(1)
            )
            .scalars()
            .first()
        )

    if row is None:
        raise PaymentConfigError("MercadoPago is not configured in the database")

    _config = MercadoPagoConfig(
        access_token=row.access_token,
        public_key=row.public_key,
        webhook_secret=row.webhook_secret,
        is_production=bool(row.is_production),
    )
    logger.info(f"💳 MercadoPago configuration loaded (env={_config.environment})")
    return _config


def get_mercadopago_config(session_factory=SessionLocal) -> MercadoPagoConfig:
    """
    Return the cached configuration.

    If the startup warm-up failed or has not finished yet, the load is retried
    here so the caller gets either a config or a PaymentConfigError.
    """
    if _config is not None:
        return _config
    logger.warning("⚠️ MercadoPago configuration not cached, loading on demand")
    return load_mercadopago_config(session_factory)


def is_mercadopago_configured() -> bool:
    return _config is not None


def reset_mercadopago_config() -> None:
    global _config
    _config = None
