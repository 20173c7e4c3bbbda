import logging
import sqlite3
from dataclasses import dataclass
from typing import Optional

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.pool import StaticPool

from app.config import Settings, get_settings


app_settings: Settings = get_settings()
logger = logging.getLogger(__name__)

_SQLITE_BUSY_TIMEOUT_SECONDS = 30
_SQLITE_BUSY_TIMEOUT_MS = _SQLITE_BUSY_TIMEOUT_SECONDS * 1000


@dataclass(frozen=True)
class StoreStatus:
    ok: bool
    error: Optional[str] = None


def _is_sqlite_memory(url) -> bool:
    sqlite_db = url.database
    if sqlite_db in (None, "", ":memory:"):
        return True
    return url.query.get("mode") == "memory"


def build_engine(database_url: str) -> Engine:
    db_url = make_url(database_url)
    is_sqlite = db_url.get_backend_name() == "sqlite"
    is_sqlite_memory = is_sqlite and _is_sqlite_memory(db_url)

    connect_args = {}
    engine_kwargs: dict[str, object] = dict(pool_pre_ping=True)
    if is_sqlite:
        connect_args = {"check_same_thread": False, "timeout": _SQLITE_BUSY_TIMEOUT_SECONDS}
        if is_sqlite_memory:
            engine_kwargs.update(poolclass=StaticPool)

    new_engine = create_engine(
        database_url,
        connect_args=connect_args,
        **engine_kwargs,
    )

    if is_sqlite:
        @event.listens_for(new_engine, "connect")
        def _set_sqlite_pragmas(dbapi_connection, _connection_record):
            cursor = dbapi_connection.cursor()
            try:
                cursor.execute("PRAGMA foreign_keys=ON")
                cursor.execute(f"PRAGMA busy_timeout={_SQLITE_BUSY_TIMEOUT_MS}")
                if not is_sqlite_memory:
                    try:
                        cursor.execute("PRAGMA journal_mode=WAL")
                        cursor.execute("PRAGMA synchronous=NORMAL")
                    except sqlite3.DatabaseError:
                        pass
            finally:
                cursor.close()

    return new_engine


def check_store(target: Engine) -> StoreStatus:
    """Round-trip the store once so startup can refuse to run without it."""
    try:
        with target.connect() as conn:
            conn.execute(text("SELECT 1"))
    except SQLAlchemyError as exc:
        logger.error("Store check failed for %s: %s", target.url.render_as_string(hide_password=True), exc)
        return StoreStatus(ok=False, error=str(exc))
    return StoreStatus(ok=True)


engine = build_engine(app_settings.DATABASE_URL)
