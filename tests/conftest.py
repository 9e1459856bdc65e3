import threading

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from softwarepar import models  # noqa: F401 - registers tables on Base
from softwarepar.config import Settings
from softwarepar.database import Base
from softwarepar.email_service import Mailer

CONTACT_INBOX = "softwarepar.lat@gmail.com"


class RecordingTransport:
    """Accepts every message and keeps it for assertions"""

    def __init__(self):
        self.sent = []
        self._lock = threading.Lock()

    def send(self, message):
        with self._lock:
            self.sent.append(message)


class FailingTransport:
    def __init__(self, error=None):
        self.error = error or ConnectionRefusedError("535 5.7.8 Username and Password not accepted")
        self.attempts = 0

    def send(self, message):
        self.attempts += 1
        raise self.error


@pytest.fixture
def settings(tmp_path):
    public_dir = tmp_path / "client" / "public"
    public_dir.mkdir(parents=True)
    dist_dir = tmp_path / "dist" / "public"
    dist_dir.mkdir(parents=True)
    (dist_dir / "index.html").write_text("<html><body>app shell</body></html>", encoding="utf-8")

    return Settings(
        database_url="sqlite://",
        mail_user="notificaciones@softwarepar.lat",
        mail_password="app-password",
        contact_inbox=CONTACT_INBOX,
        port=5055,
        client_public_dir=str(public_dir),
        dist_dir=str(dist_dir),
    )


@pytest.fixture
def transport():
    return RecordingTransport()


@pytest.fixture
def mailer(transport):
    return Mailer(transport, contact_inbox=CONTACT_INBOX)


@pytest.fixture
def session_factory():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield sessionmaker(bind=engine, autocommit=False, autoflush=False)
    Base.metadata.drop_all(engine)
    engine.dispose()
