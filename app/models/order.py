from datetime import datetime, timezone

from sqlalchemy import JSON, Column, DateTime, Index, String, Text

from app.core.constants import ORDER_STATUS_PENDING
from app.database.base import Base, generate_id


class Order(Base):
    __tablename__ = "orders"

    id = Column(String(32), primary_key=True, default=generate_id)

    table_number = Column(JSON)
    customer_name = Column(String)
    channel = Column(String)
    status = Column(String, nullable=False, default=ORDER_STATUS_PENDING)
    items = Column(JSON)
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
        Index("idx_orders_status", "status"),
    )


__all__ = ["Order"]
