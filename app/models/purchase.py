from datetime import datetime, timezone

from sqlalchemy import Column, Date, DateTime, Float, ForeignKey, Index, String
from sqlalchemy.orm import relationship

from app.database.base import Base, generate_id


class Purchase(Base):
    __tablename__ = "purchases"

    id = Column(String(32), primary_key=True, default=generate_id)
    product_id = Column(
        String(32),
        ForeignKey("products.id", ondelete="CASCADE"),
        nullable=False,
    )

    purchase_date = Column(Date, nullable=False)
    quantity = Column(Float, nullable=False)
    total_price = Column(Float, nullable=False)
    unit_price = Column(Float)
    supplier = Column(String, nullable=False, default="")

    stock_before = Column(Float, nullable=False, default=0)
    stock_after = Column(Float, nullable=False, default=0)

    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    product = relationship("Product", back_populates="purchases")

    __table_args__ = (
        Index("idx_purchases_product_date", "product_id", "purchase_date"),
    )


__all__ = ["Purchase"]
