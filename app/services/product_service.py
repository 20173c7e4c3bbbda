import logging
from typing import Any, Iterable

from pydantic import ValidationError
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.constants import PRODUCT_UPDATABLE_FIELDS
from app.core.dates import utc_now
from app.core.errors import BadRequestError, NotFoundError
from app.database.base import generate_id
from app.models.product import Product
from app.schemas.product import BatchProductItem, ProductCreate

logger = logging.getLogger(__name__)

_BATCH_REQUIRED_FIELDS = (
    ("description", "description"),
    ("unit", "unit"),
    ("unitPrice", "unit_price"),
)
_NON_NULLABLE_UPDATES = {"description", "unit"}
_BLANK_WHEN_NULL = {"notes", "location"}


def create_product(db: Session, payload: ProductCreate) -> Product:
    now = utc_now()
    product = Product(
        id=generate_id(),
        **payload.model_dump(),
        created_at=now,
        updated_at=now,
    )
    db.add(product)
    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise
    db.refresh(product)
    logger.info("Product %s created (%s / %s)", product.id, product.description, product.unit)
    return product


def _missing_batch_fields(raw: dict) -> list[str]:
    missing = []
    for wire_name, attr_name in _BATCH_REQUIRED_FIELDS:
        value = raw.get(wire_name, raw.get(attr_name))
        if attr_name == "unit_price":
            if value is None:
                missing.append(wire_name)
        elif not value:
            missing.append(wire_name)
    return missing


def validate_batch_item(raw: Any) -> tuple[BatchProductItem | None, str | None]:
    if not isinstance(raw, dict):
        return None, "entry must be an object"
    missing = _missing_batch_fields(raw)
    if missing:
        return None, "missing required fields: {}".format(", ".join(missing))
    try:
        return BatchProductItem.model_validate(raw), None
    except ValidationError as exc:
        fields = sorted({".".join(str(part) for part in err["loc"]) for err in exc.errors()})
        return None, "invalid fields: {}".format(", ".join(fields))


def batch_create_products(db: Session, items: Iterable[Any]) -> dict:
    """Create every well-formed entry in one transaction.

    Malformed entries do not abort the batch; each one is reported back as
    rejected together with the reason.
    """
    items = list(items)
    now = utc_now()
    results = []
    products = []
    for index, raw in enumerate(items):
        item, reason = validate_batch_item(raw)
        if item is None:
            logger.warning("Batch entry %s rejected: %s", index, reason)
            results.append({"index": index, "status": "rejected", "reason": reason})
            continue
        product = Product(
            id=generate_id(),
            description=item.description,
            unit=item.unit,
            unit_price=item.unit_price,
            unit_size=None,
            yield_percent=None,
            notes="",
            location="",
            previous_quantity=0,
            purchase_quantity=0,
            current_quantity=0,
            created_at=now,
            updated_at=now,
        )
        products.append(product)
        results.append({"index": index, "status": "accepted", "id": product.id})

    if products:
        db.add_all(products)
        try:
            db.commit()
        except SQLAlchemyError:
            db.rollback()
            raise

    logger.info("Batch create: %s submitted, %s created", len(items), len(products))
    return {"total": len(items), "created": len(products), "results": results}


def list_products(db: Session) -> list[Product]:
    products = db.execute(select(Product).order_by(Product.description.asc())).scalars().all()
    return list(products)


def get_product(db: Session, product_id: str) -> Product:
    product = db.get(Product, product_id)
    if product is None:
        raise NotFoundError("Product not found")
    return product


def update_product(db: Session, product_id: str, changes: dict) -> Product:
    product = get_product(db, product_id)

    update_data = {key: value for key, value in changes.items() if key in PRODUCT_UPDATABLE_FIELDS}
    if not update_data:
        raise BadRequestError("No fields to update")

    for key in sorted(_NON_NULLABLE_UPDATES & update_data.keys()):
        if not update_data[key]:
            raise BadRequestError(f"{key} cannot be empty")

    for key, value in update_data.items():
        if value is None and key in _BLANK_WHEN_NULL:
            value = ""
        setattr(product, key, value)
    product.updated_at = utc_now()

    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise
    db.refresh(product)
    logger.info("Product %s updated: %s", product.id, ", ".join(sorted(update_data)))
    return product


__all__ = [
    "batch_create_products",
    "create_product",
    "get_product",
    "list_products",
    "update_product",
    "validate_batch_item",
]
