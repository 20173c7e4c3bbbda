import logging

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.constants import ORDER_STATUS_PENDING
from app.core.dates import utc_now
from app.core.errors import NotFoundError
from app.database.base import generate_id
from app.models.order import Order
from app.schemas.order import OrderCreate

logger = logging.getLogger(__name__)


def create_order(db: Session, payload: OrderCreate) -> Order:
    now = utc_now()
    order = Order(
        id=generate_id(),
        **payload.model_dump(),
        status=ORDER_STATUS_PENDING,
        created_at=now,
        updated_at=now,
    )
    db.add(order)
    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise
    logger.info("Order %s created (channel=%s, table=%s)", order.id, order.channel, order.table_number)
    return order


def list_orders(db: Session, status: str = ORDER_STATUS_PENDING) -> list[Order]:
    # Equality filter only; callers get no ordering guarantee.
    orders = db.execute(select(Order).where(Order.status == status)).scalars().all()
    return list(orders)


def get_order(db: Session, order_id: str) -> Order:
    order = db.get(Order, order_id)
    if order is None:
        raise NotFoundError("Order not found")
    return order


__all__ = ["create_order", "get_order", "list_orders"]
