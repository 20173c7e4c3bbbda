from datetime import datetime
from typing import Any, Optional

from app.schemas.common import CamelModel


class OrderCreate(CamelModel):
    # Stored as sent: table numbers may be numeric or labels, items are opaque.
    table_number: Any = None
    customer_name: Optional[str] = None
    channel: Optional[str] = None
    items: Any = None
    notes: str = ""


class OrderRead(OrderCreate):
    id: str
    status: str
    created_at: datetime
    updated_at: datetime
