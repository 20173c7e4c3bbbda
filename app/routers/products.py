from typing import Any, List

from fastapi import APIRouter, Body, Depends, HTTPException
from sqlalchemy.orm import Session

from app.dependencies import get_db
from app.schemas.common import CreatedResponse
from app.schemas.product import (
    BatchCreateResponse,
    ProductCreate,
    ProductHistory,
    ProductRead,
    ProductSummary,
    ProductUpdate,
    PurchaseCreate,
    PurchaseRecorded,
    QuickPurchaseCreate,
    QuickPurchaseResult,
)
from app.services.product_service import (
    batch_create_products,
    create_product,
    list_products,
    update_product,
)
from app.services.purchase_service import (
    product_history,
    product_summary,
    quick_purchase,
    record_purchase,
)

router = APIRouter(prefix="/products", tags=["Products"])


@router.post("", response_model=CreatedResponse, status_code=201)
def create_product_route(payload: ProductCreate, db: Session = Depends(get_db)):
    product = create_product(db, payload)
    return CreatedResponse(id=product.id, message="Product created")


@router.post("/batch", response_model=BatchCreateResponse, status_code=201)
def batch_create_route(payload: Any = Body(...), db: Session = Depends(get_db)):
    items = payload if isinstance(payload, list) else None
    if isinstance(payload, dict):
        items = payload.get("items")
    if not isinstance(items, list) or not items:
        raise HTTPException(
            status_code=400,
            detail="Send a product array in 'items' or as the request body.",
        )
    outcome = batch_create_products(db, items)
    return BatchCreateResponse(message="Products created in batch", **outcome)


@router.get("", response_model=List[ProductRead])
def list_products_route(db: Session = Depends(get_db)):
    return list_products(db)


@router.post("/quick-purchase", response_model=QuickPurchaseResult, status_code=201)
def quick_purchase_route(payload: QuickPurchaseCreate, db: Session = Depends(get_db)):
    outcome = quick_purchase(
        db,
        description=payload.description,
        unit=payload.unit,
        quantity=payload.quantity,
        total_price=payload.total_price,
        purchase_date=payload.purchase_date,
        supplier=payload.supplier,
    )
    return QuickPurchaseResult(
        message="Purchase recorded (quick-purchase)",
        product_id=outcome.product_id,
        purchase_id=outcome.purchase_id,
        created_new_product=outcome.created_new_product,
    )


@router.post("/{product_id}/purchase", response_model=PurchaseRecorded, status_code=201)
def record_purchase_route(
    product_id: str,
    payload: PurchaseCreate,
    db: Session = Depends(get_db),
):
    outcome = record_purchase(
        db,
        product_id,
        quantity=payload.quantity,
        total_price=payload.total_price,
        purchase_date=payload.purchase_date,
    )
    return PurchaseRecorded(purchase_id=outcome.purchase_id, message="Purchase recorded")


@router.get("/{product_id}/history", response_model=ProductHistory)
def product_history_route(product_id: str, db: Session = Depends(get_db)):
    return product_history(db, product_id)


@router.get("/{product_id}/summary", response_model=ProductSummary)
def product_summary_route(product_id: str, db: Session = Depends(get_db)):
    return product_summary(db, product_id)


@router.patch("/{product_id}", response_model=ProductRead)
def update_product_route(
    product_id: str,
    payload: ProductUpdate,
    db: Session = Depends(get_db),
):
    return update_product(db, product_id, payload.model_dump(exclude_unset=True))


__all__ = ["router"]
