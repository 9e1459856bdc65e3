import logging
import os
import time
from typing import Optional

from sqlalchemy import create_engine, event, select
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker

logger = logging.getLogger(__name__)

# Get environment-specific pool settings
POOL_SIZE = int(os.getenv("DB_POOL_SIZE", "10"))
MAX_OVERFLOW = int(os.getenv("DB_MAX_OVERFLOW", "20"))
POOL_TIMEOUT = int(os.getenv("DB_POOL_TIMEOUT", "30"))
POOL_RECYCLE = int(os.getenv("DB_POOL_RECYCLE", "300"))
ENABLE_QUERY_LOGGING = os.getenv("DB_LOG_SLOW_QUERIES", "true").lower() == "true"
SLOW_QUERY_THRESHOLD = float(os.getenv("DB_SLOW_QUERY_THRESHOLD", "1.0"))

SessionLocal = sessionmaker(autocommit=False, autoflush=False)
Base = declarative_base()

engine: Optional[Engine] = None


def _install_slow_query_logging(target: Engine) -> None:
    @event.listens_for(target, "before_cursor_execute")
    def before_cursor_execute(conn, _cursor, statement, _parameters, context, _executemany):
        conn.info.setdefault("query_start_time", []).append(time.time())

    @event.listens_for(target, "after_cursor_execute")
    def after_cursor_execute(conn, _cursor, statement, _parameters, context, _executemany):
        total = time.time() - conn.info["query_start_time"].pop(-1)
        if total > SLOW_QUERY_THRESHOLD:
            logger.warning(f"🐌 Slow query ({total:.2f}s): {statement[:200]}...")


def init_engine(database_url: str, **engine_kwargs) -> Engine:
    """Create the process-wide engine and bind SessionLocal to it"""
    global engine

    options = {"pool_pre_ping": True, "echo": False}
    if not database_url.startswith("sqlite"):
        options.update(
            pool_recycle=POOL_RECYCLE,
            pool_size=POOL_SIZE,
            max_overflow=MAX_OVERFLOW,
            pool_timeout=POOL_TIMEOUT,
        )
    options.update(engine_kwargs)

    try:
        engine = create_engine(database_url, **options)
    except Exception as e:
        logger.error(f"❌ Failed to create database engine: {e}")
        raise

    if ENABLE_QUERY_LOGGING:
        _install_slow_query_logging(engine)

    SessionLocal.configure(bind=engine)
    logger.info("✅ Database engine created successfully")
    return engine


def dispose_engine() -> None:
    global engine
    if engine is not None:
        engine.dispose()
        engine = None


def check_database_connection(session_factory=SessionLocal) -> int:
    """
    Storage liveness probe: read at most one row from the users table.

    Returns the number of rows read (0 or 1). Driver errors propagate.
    """
    from .models import User

    with session_factory() as db:
        rows = db.execute(select(User.id).limit(1)).all()

    logger.info("✅ Database connection successful")
    logger.info(f"👥 Users in database: {'yes' if rows else 'empty database'}")
    return len(rows)
