from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Float, Index, String, Text
from sqlalchemy.orm import relationship

from app.database.base import Base, generate_id


class Product(Base):
    __tablename__ = "products"

    id = Column(String(32), primary_key=True, default=generate_id)

    description = Column(String, nullable=False)
    unit = Column(String, nullable=False)
    unit_size = Column(Float)
    unit_price = Column(Float)
    yield_percent = Column(Float)

    notes = Column(Text, nullable=False, default="")
    location = Column(String, nullable=False, default="")

    previous_quantity = Column(Float, nullable=False, default=0)
    purchase_quantity = Column(Float, nullable=False, default=0)
    current_quantity = Column(Float, nullable=False, default=0)

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

    purchases = relationship(
        "Purchase",
        back_populates="product",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    __table_args__ = (
        Index("idx_products_description", "description"),
        Index("idx_products_description_unit", "description", "unit"),
    )


__all__ = ["Product"]
