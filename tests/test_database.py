import pytest
from sqlalchemy.exc import OperationalError
from sqlalchemy.pool import StaticPool

from softwarepar import database
from softwarepar.database import Base, SessionLocal, check_database_connection, dispose_engine, init_engine


def test_init_engine_binds_the_session_factory():
    engine = init_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    try:
        assert database.engine is engine
        Base.metadata.create_all(engine)
        assert check_database_connection(SessionLocal) == 0
    finally:
        dispose_engine()

    assert database.engine is None


def test_probe_propagates_driver_errors(tmp_path):
    # No tables were created, so the users query fails
    init_engine(f"sqlite:///{tmp_path / 'empty.db'}")
    try:
        with pytest.raises(OperationalError):
            check_database_connection(SessionLocal)
    finally:
        dispose_engine()
