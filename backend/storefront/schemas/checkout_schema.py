from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class Recipient(BaseModel):
    """Shipping/billing details typed in at checkout."""

    model_config = ConfigDict(str_strip_whitespace=True)
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    address: str = Field(..., min_length=1, max_length=255)
    city: str = Field(..., min_length=1, max_length=100)
    province: str = Field(..., min_length=1, max_length=50)
    postal_code: str = Field(..., min_length=1, max_length=20)
    phone: str = Field(..., min_length=1, max_length=30)


class OrderDraft(Recipient):
    """
    A checked-out but unpaid order. Lives in the visitor's session between
    checkout and payment and is never written to the database itself.
    """

    draft_id: str
    owner: str
    total_cents: int = Field(..., ge=0)
    line_count: int = Field(..., ge=0)
    created_at: datetime


class PaymentIn(BaseModel):
    stripe_token: str = Field(..., min_length=1)
    stripe_email: str = Field(..., min_length=3, max_length=255)


class OrderDetailOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: int
    product_id: int
    quantity: int
    price_cents: int


class OrderOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: int
    user_id: str
    first_name: str
    last_name: str
    address: str
    city: str
    province: str
    postal_code: str
    phone: str
    total_cents: int
    order_date: datetime
    charge_id: Optional[str] = None
    details: List[OrderDetailOut]
