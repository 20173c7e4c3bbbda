from typing import List

from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

from app.dependencies import get_db
from app.schemas.customer import CustomerRead, CustomerUpsert
from app.services.customer_service import get_customer, list_customers, upsert_customer

router = APIRouter(prefix="/customers", tags=["Customers"])


@router.post(
    "",
    response_model=CustomerRead,
    responses={201: {"description": "Customer created"}},
)
def upsert_customer_route(
    payload: CustomerUpsert,
    response: Response,
    db: Session = Depends(get_db),
):
    customer, created = upsert_customer(db, payload)
    response.status_code = 201 if created else 200
    return customer


@router.get("", response_model=List[CustomerRead])
def list_customers_route(db: Session = Depends(get_db)):
    return list_customers(db)


@router.get("/{phone}", response_model=CustomerRead)
def get_customer_route(phone: str, db: Session = Depends(get_db)):
    return get_customer(db, phone)


__all__ = ["router"]
