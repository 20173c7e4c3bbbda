from datetime import datetime
from typing import Optional

from app.core.constants import DEFAULT_CUSTOMER_CHANNEL
from app.schemas.common import CamelModel


class CustomerUpsert(CamelModel):
    phone: Optional[str] = None
    name: Optional[str] = None
    channel: str = DEFAULT_CUSTOMER_CHANNEL
    notes: str = ""


class CustomerRead(CamelModel):
    id: str
    phone: str
    name: Optional[str] = None
    channel: str
    notes: str
    created_at: datetime
    updated_at: datetime
