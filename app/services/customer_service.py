import logging
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.config import get_settings
from app.core.dates import utc_now
from app.core.errors import BadRequestError, NotFoundError
from app.models.customer import Customer
from app.schemas.customer import CustomerUpsert

logger = logging.getLogger(__name__)


def upsert_customer(db: Session, payload: CustomerUpsert) -> tuple[Customer, bool]:
    """Create or overwrite a customer keyed by phone.

    Returns the stored customer and whether it was newly created.
    """
    phone = (payload.phone or "").strip()
    if not phone:
        raise BadRequestError("phone is required")

    now = utc_now()
    customer = db.get(Customer, phone)
    created = customer is None
    if created:
        customer = Customer(
            phone=phone,
            name=payload.name,
            channel=payload.channel,
            notes=payload.notes,
            created_at=now,
            updated_at=now,
        )
        db.add(customer)
    else:
        customer.name = payload.name
        customer.channel = payload.channel
        customer.notes = payload.notes
        customer.updated_at = now

    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise
    db.refresh(customer)
    logger.info("Customer %s %s", phone, "created" if created else "updated")
    return customer, created


def list_customers(db: Session, limit: Optional[int] = None) -> list[Customer]:
    if limit is None:
        limit = get_settings().CUSTOMER_LIST_LIMIT
    customers = (
        db.execute(select(Customer).order_by(Customer.name.asc()).limit(limit))
        .scalars()
        .all()
    )
    return list(customers)


def get_customer(db: Session, phone: str) -> Customer:
    customer = db.get(Customer, phone)
    if customer is None:
        raise NotFoundError("Customer not found")
    return customer


__all__ = ["get_customer", "list_customers", "upsert_customer"]
