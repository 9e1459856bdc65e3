import pytest

from softwarepar.database import check_database_connection
from softwarepar.mercadopago import (
    PaymentConfigError,
    get_mercadopago_config,
    is_mercadopago_configured,
    load_mercadopago_config,
    reset_mercadopago_config,
)
from softwarepar.models import PaymentProviderSettings, User


@pytest.fixture(autouse=True)
def clear_cache():
    reset_mercadopago_config()
    yield
    reset_mercadopago_config()


def add_settings(session_factory, **overrides):
    values = {
        "provider": "mercadopago",
        "access_token": "APP_USR-token",
        "public_key": "APP_USR-public",
        "is_production": False,
        "is_active": True,
    }
    values.update(overrides)
    with session_factory() as db:
        db.add(PaymentProviderSettings(**values))
        db.commit()


def test_load_without_settings_raises(session_factory):
    with pytest.raises(PaymentConfigError):
        load_mercadopago_config(session_factory)
    assert is_mercadopago_configured() is False


def test_load_picks_newest_active_row_and_caches_it(session_factory):
    add_settings(session_factory, access_token="old-token")
    add_settings(session_factory, access_token="live-token", is_production=True)
    add_settings(session_factory, access_token="disabled-token", is_active=False)

    config = load_mercadopago_config(session_factory)

    assert config.access_token == "live-token"
    assert config.environment == "production"
    assert is_mercadopago_configured() is True
    assert get_mercadopago_config(session_factory) is config


def test_other_providers_are_ignored(session_factory):
    add_settings(session_factory, provider="stripe")
    with pytest.raises(PaymentConfigError):
        load_mercadopago_config(session_factory)


def test_get_retries_after_a_failed_warm_up(session_factory):
    with pytest.raises(PaymentConfigError):
        load_mercadopago_config(session_factory)

    add_settings(session_factory, webhook_secret="whsec")
    config = get_mercadopago_config(session_factory)

    assert config.webhook_secret == "whsec"
    assert config.environment == "sandbox"


def test_storage_probe_counts_at_most_one_user(session_factory):
    assert check_database_connection(session_factory) == 0

    with session_factory() as db:
        db.add_all(
            [
                User(full_name="Ana Pérez", email="ana@x.com"),
                User(full_name="Luis Gómez", email="luis@partner.com", role="partner"),
            ]
        )
        db.commit()

    assert check_database_connection(session_factory) == 1
