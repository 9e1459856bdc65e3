import pytest

from softwarepar.database import dispose_engine
from softwarepar.main import main

APP_ENV_VARS = ("DATABASE_URL", "GMAIL_USER", "GMAIL_PASS", "MAIL_PROVIDER", "RESEND_API_KEY", "APP_ENV")


@pytest.fixture
def clean_env(monkeypatch):
    for name in APP_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    yield monkeypatch
    dispose_engine()


def test_missing_configuration_exits_with_status_1(clean_env, caplog):
    with pytest.raises(SystemExit) as excinfo:
        main()

    assert excinfo.value.code == 1
    assert "DATABASE_URL" in caplog.text


def test_unreachable_storage_exits_with_status_1(clean_env, tmp_path, caplog):
    # The database file has no users table, so the startup check fails
    clean_env.setenv("DATABASE_URL", f"sqlite:///{tmp_path / 'empty.db'}")
    clean_env.setenv("GMAIL_USER", "notificaciones@softwarepar.lat")
    clean_env.setenv("GMAIL_PASS", "app-password")

    with pytest.raises(SystemExit) as excinfo:
        main()

    assert excinfo.value.code == 1
    assert "Startup aborted" in caplog.text
