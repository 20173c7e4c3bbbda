from datetime import date, datetime
from typing import List, Literal, Optional

from pydantic import Field, FiniteFloat

from app.core.constants import DEFAULT_YIELD_PERCENT
from app.schemas.common import CamelModel


class ProductBase(CamelModel):
    description: str = Field(min_length=1)
    unit: str = Field(min_length=1)
    unit_size: Optional[float] = None
    unit_price: Optional[float] = None
    yield_percent: Optional[float] = DEFAULT_YIELD_PERCENT
    notes: str = ""
    location: str = ""


class ProductCreate(ProductBase):
    unit_size: Optional[FiniteFloat] = None
    unit_price: FiniteFloat
    yield_percent: Optional[FiniteFloat] = DEFAULT_YIELD_PERCENT
    previous_quantity: FiniteFloat = 0
    purchase_quantity: FiniteFloat = 0
    current_quantity: FiniteFloat = 0


class ProductUpdate(CamelModel):
    description: Optional[str] = None
    unit: Optional[str] = None
    unit_size: Optional[FiniteFloat] = None
    unit_price: Optional[FiniteFloat] = None
    yield_percent: Optional[FiniteFloat] = None
    notes: Optional[str] = None
    location: Optional[str] = None


class ProductRead(ProductBase):
    id: str
    previous_quantity: float
    purchase_quantity: float
    current_quantity: float
    created_at: datetime
    updated_at: datetime


class BatchProductItem(CamelModel):
    description: str = Field(min_length=1)
    unit: str = Field(min_length=1)
    unit_price: FiniteFloat


class BatchItemResult(CamelModel):
    index: int
    status: Literal["accepted", "rejected"]
    id: Optional[str] = None
    reason: Optional[str] = None


class BatchCreateResponse(CamelModel):
    message: str
    total: int
    created: int
    results: List[BatchItemResult] = Field(default_factory=list)


class PurchaseCreate(CamelModel):
    quantity: float = Field(gt=0, allow_inf_nan=False)
    total_price: float = Field(ge=0, allow_inf_nan=False)
    purchase_date: Optional[date] = None


class QuickPurchaseCreate(PurchaseCreate):
    # A zero total is treated as a missing price on this path.
    total_price: float = Field(gt=0, allow_inf_nan=False)
    description: str = Field(min_length=1)
    unit: str = Field(min_length=1)
    supplier: str = ""


class PurchaseRead(CamelModel):
    id: str
    product_id: str
    purchase_date: date
    quantity: float
    total_price: float
    unit_price: Optional[float] = None
    supplier: str = ""
    stock_before: float
    stock_after: float
    created_at: datetime


class PurchaseRecorded(CamelModel):
    purchase_id: str
    message: str


class QuickPurchaseResult(CamelModel):
    message: str
    product_id: str
    purchase_id: str
    created_new_product: bool


class ProductHistory(CamelModel):
    product: ProductRead
    purchases: List[PurchaseRead] = Field(default_factory=list)
    average_last4_unit_price: Optional[float] = None


class ProductSummary(CamelModel):
    product: ProductRead
    last_purchases: List[PurchaseRead] = Field(default_factory=list)
    avg_last4_unit_price: Optional[float] = None
