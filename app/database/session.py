from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from app.database.engine import engine


def build_session_factory(bind: Engine) -> sessionmaker:
    """Sessions keep loaded rows usable after commit so services can return them."""
    return sessionmaker(
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,
        bind=bind,
    )


SessionLocal = build_session_factory(engine)


def get_db():
    db = SessionLocal()
    try:
        yield db
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()
