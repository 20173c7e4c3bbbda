from app.database.base import Base
from app.database.engine import build_engine, check_store, engine, StoreStatus
from app.database.session import SessionLocal, build_session_factory

__all__ = [
    "Base",
    "SessionLocal",
    "StoreStatus",
    "build_engine",
    "build_session_factory",
    "check_store",
    "engine",
]
