# costtrack/db/session.py
import os

from sqlalchemy import create_engine, event
from sqlalchemy.engine import make_url
from sqlalchemy.orm import sessionmaker

from costtrack.logger import get_logger

logger = get_logger(__name__)

_engine = None
_SessionLocal = None


def _connect_args(db_url: str, timeout: float) -> dict:
    '''
    Driver level timeouts, so a stuck query fails instead of hanging the request.
    '''
    backend = make_url(db_url).get_backend_name()
    if backend == "sqlite":
        return {"check_same_thread": False, "timeout": timeout}
    if backend == "postgresql":
        return {
            "connect_timeout": int(timeout),
            "options": f"-c statement_timeout={int(timeout * 1000)}",
        }
    return {}


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def get_engine():
    global _engine
    if _engine is None:
        db_url = os.environ.get("DATABASE_URL")
        if not db_url:
            raise RuntimeError("DATABASE_URL not set")
        timeout = float(os.environ.get("DB_TIMEOUT_SECONDS", 15))
        logger.info(
            "Using database URL: %s",
            make_url(db_url).render_as_string(hide_password=True),
        )
        _engine = create_engine(
            db_url,
            connect_args=_connect_args(db_url, timeout),
            pool_pre_ping=True,
            echo=os.environ.get("DB_ECHO", "false").lower() == "true",
        )
        if _engine.dialect.name == "sqlite":
            event.listen(_engine, "connect", _enable_sqlite_foreign_keys)
    return _engine


def get_session():
    global _SessionLocal
    if _SessionLocal is None:
        _SessionLocal = sessionmaker(
            autocommit=False,
            autoflush=False,
            bind=get_engine()
        )
    return _SessionLocal()


def dispose_engine() -> None:
    """Drop the cached engine so the next call re-reads DATABASE_URL."""
    global _engine, _SessionLocal
    if _engine is not None:
        _engine.dispose()
    _engine = None
    _SessionLocal = None
