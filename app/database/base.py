import uuid

from sqlalchemy.orm import declarative_base

Base = declarative_base()


def generate_id() -> str:
    return uuid.uuid4().hex


__all__ = ["Base", "generate_id"]
