import logging
import math
from dataclasses import dataclass
from datetime import date, datetime
from typing import Iterable, Optional

from sqlalchemy import func, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.config import get_settings
from app.core.dates import today_utc, utc_now
from app.core.errors import BadRequestError, NotFoundError
from app.database.base import generate_id
from app.models.product import Product
from app.models.purchase import Purchase
from app.services.product_service import get_product

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PurchaseOutcome:
    product_id: str
    purchase_id: str
    stock_before: float
    stock_after: float
    unit_price: float
    created_new_product: bool = False


def compute_unit_price(total_price: float, quantity: float) -> float:
    if not float(quantity) > 0:
        raise BadRequestError("quantity must be greater than zero")
    unit_price = float(total_price) / float(quantity)
    if not math.isfinite(unit_price):
        raise BadRequestError("totalPrice / quantity does not give a finite unit price")
    return unit_price


def _increment_stock(
    db: Session,
    product_id: str,
    quantity: float,
    unit_price: float,
    now: datetime,
) -> Optional[Product]:
    # Single UPDATE: every SET expression reads the pre-update row, so
    # previous_quantity receives the old current_quantity.
    stock = func.coalesce(Product.current_quantity, 0)
    result = db.execute(
        update(Product)
        .where(Product.id == product_id)
        .values(
            previous_quantity=stock,
            purchase_quantity=quantity,
            current_quantity=stock + quantity,
            unit_price=unit_price,
            updated_at=now,
        )
        .execution_options(synchronize_session=False)
    )
    if result.rowcount == 0:
        return None
    return db.execute(
        select(Product)
        .where(Product.id == product_id)
        .execution_options(populate_existing=True)
    ).scalar_one()


def _append_purchase(
    db: Session,
    product_id: str,
    *,
    purchase_date: date,
    quantity: float,
    total_price: float,
    unit_price: float,
    stock_before: float,
    stock_after: float,
    supplier: str,
    now: datetime,
) -> Purchase:
    purchase = Purchase(
        id=generate_id(),
        product_id=product_id,
        purchase_date=purchase_date,
        quantity=quantity,
        total_price=total_price,
        unit_price=unit_price,
        supplier=supplier,
        stock_before=stock_before,
        stock_after=stock_after,
        created_at=now,
    )
    db.add(purchase)
    return purchase


def record_purchase(
    db: Session,
    product_id: str,
    *,
    quantity: float,
    total_price: float,
    purchase_date: Optional[date] = None,
    supplier: str = "",
) -> PurchaseOutcome:
    """Restock a product and append the matching ledger entry.

    The product's unit price is replaced by the price of this purchase.
    """
    unit_price = compute_unit_price(total_price, quantity)
    now = utc_now()
    try:
        product = _increment_stock(db, product_id, quantity, unit_price, now)
        if product is None:
            db.rollback()
            raise NotFoundError("Product not found")
        purchase = _append_purchase(
            db,
            product.id,
            purchase_date=purchase_date or today_utc(),
            quantity=quantity,
            total_price=total_price,
            unit_price=unit_price,
            stock_before=product.previous_quantity,
            stock_after=product.current_quantity,
            supplier=supplier,
            now=now,
        )
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise

    logger.info(
        "Purchase %s recorded for product %s: %s -> %s",
        purchase.id,
        product.id,
        purchase.stock_before,
        purchase.stock_after,
    )
    return PurchaseOutcome(
        product_id=product.id,
        purchase_id=purchase.id,
        stock_before=purchase.stock_before,
        stock_after=purchase.stock_after,
        unit_price=unit_price,
    )


def find_product_by_description_unit(db: Session, description: str, unit: str) -> Optional[Product]:
    return (
        db.execute(
            select(Product)
            .where(Product.description == description, Product.unit == unit)
            .order_by(Product.created_at.asc(), Product.id.asc())
            .limit(1)
        )
        .scalars()
        .first()
    )


def quick_purchase(
    db: Session,
    *,
    description: str,
    unit: str,
    quantity: float,
    total_price: float,
    purchase_date: Optional[date] = None,
    supplier: str = "",
) -> PurchaseOutcome:
    existing = find_product_by_description_unit(db, description, unit)
    if existing is not None:
        outcome = record_purchase(
            db,
            existing.id,
            quantity=quantity,
            total_price=total_price,
            purchase_date=purchase_date,
            supplier=supplier,
        )
        logger.info("Quick purchase reused product %s (%s / %s)", existing.id, description, unit)
        return outcome

    unit_price = compute_unit_price(total_price, quantity)
    now = utc_now()
    product = Product(
        id=generate_id(),
        description=description,
        unit=unit,
        unit_size=None,
        unit_price=unit_price,
        yield_percent=None,
        notes="",
        location="",
        previous_quantity=0,
        purchase_quantity=quantity,
        current_quantity=quantity,
        created_at=now,
        updated_at=now,
    )
    db.add(product)
    purchase = _append_purchase(
        db,
        product.id,
        purchase_date=purchase_date or today_utc(),
        quantity=quantity,
        total_price=total_price,
        unit_price=unit_price,
        stock_before=0,
        stock_after=quantity,
        supplier=supplier,
        now=now,
    )
    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise

    logger.info("Quick purchase created product %s (%s / %s)", product.id, description, unit)
    return PurchaseOutcome(
        product_id=product.id,
        purchase_id=purchase.id,
        stock_before=0,
        stock_after=quantity,
        unit_price=unit_price,
        created_new_product=True,
    )


def load_purchases(db: Session, product_id: str, limit: Optional[int] = None) -> list[Purchase]:
    query = (
        select(Purchase)
        .where(Purchase.product_id == product_id)
        .order_by(Purchase.purchase_date.desc(), Purchase.created_at.desc())
    )
    if limit is not None:
        query = query.limit(limit)
    return list(db.execute(query).scalars().all())


def average_unit_price(purchases: Iterable) -> Optional[float]:
    prices = []
    for purchase in purchases:
        value = getattr(purchase, "unit_price", None)
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            continue
        if not math.isfinite(value):
            continue
        prices.append(float(value))
    if not prices:
        return None
    return sum(prices) / len(prices)


def _recent_window(window: Optional[int]) -> int:
    if window is None:
        return get_settings().SUMMARY_PURCHASE_COUNT
    return window


def product_history(db: Session, product_id: str, window: Optional[int] = None) -> dict:
    product = get_product(db, product_id)
    purchases = load_purchases(db, product_id)
    return {
        "product": product,
        "purchases": purchases,
        "average_last4_unit_price": average_unit_price(purchases[: _recent_window(window)]),
    }


def product_summary(db: Session, product_id: str, window: Optional[int] = None) -> dict:
    product = get_product(db, product_id)
    last_purchases = load_purchases(db, product_id, limit=_recent_window(window))
    return {
        "product": product,
        "last_purchases": last_purchases,
        "avg_last4_unit_price": average_unit_price(last_purchases),
    }


__all__ = [
    "PurchaseOutcome",
    "average_unit_price",
    "compute_unit_price",
    "find_product_by_description_unit",
    "load_purchases",
    "product_history",
    "product_summary",
    "quick_purchase",
    "record_purchase",
]
