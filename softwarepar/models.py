from sqlalchemy import Boolean, Column, DateTime, Integer, String, Text
from sqlalchemy.sql import func

from .database import Base


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    full_name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    role = Column(String(20), default="client", nullable=False)  # client, partner, admin
    created_at = Column(DateTime(timezone=True), server_default=func.now())


class PaymentProviderSettings(Base):
    """Credentials for a payment provider, managed from the admin panel"""

    __tablename__ = "payment_provider_settings"

    id = Column(Integer, primary_key=True, index=True)
    provider = Column(String(50), nullable=False, index=True)  # mercadopago
    access_token = Column(Text, nullable=False)
    public_key = Column(String(255), nullable=False)
    webhook_secret = Column(String(255), nullable=True)
    is_production = Column(Boolean, default=False, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
