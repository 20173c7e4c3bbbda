from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Index, String, Text

from app.core.constants import DEFAULT_CUSTOMER_CHANNEL
from app.database.base import Base


class Customer(Base):
    __tablename__ = "customers"

    phone = Column(String, primary_key=True)
    name = Column(String)
    channel = Column(String, nullable=False, default=DEFAULT_CUSTOMER_CHANNEL)
    notes = Column(Text, nullable=False, default="")

    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    __table_args__ = (
        Index("idx_customers_name", "name"),
    )

    @property
    def id(self) -> str:
        return self.phone


__all__ = ["Customer"]
