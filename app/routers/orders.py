from typing import List

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.core.constants import ORDER_STATUS_PENDING
from app.dependencies import get_db
from app.schemas.common import CreatedResponse
from app.schemas.order import OrderCreate, OrderRead
from app.services.order_service import create_order, get_order, list_orders

router = APIRouter(prefix="/orders", tags=["Orders"])


@router.post("", response_model=CreatedResponse, status_code=201)
def create_order_route(payload: OrderCreate, db: Session = Depends(get_db)):
    order = create_order(db, payload)
    return CreatedResponse(id=order.id, message="Order created")


@router.get("", response_model=List[OrderRead])
def list_orders_route(
    status: str = Query(ORDER_STATUS_PENDING, description="Order status to filter on"),
    db: Session = Depends(get_db),
):
    return list_orders(db, status=status or ORDER_STATUS_PENDING)


@router.get("/{order_id}", response_model=OrderRead)
def get_order_route(order_id: str, db: Session = Depends(get_db)):
    return get_order(db, order_id)


__all__ = ["router"]
