"""Orders placed from accepted quotes."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import ClassVar, Optional

from sqlmodel import Field, SQLModel

from ._ids import new_id, utcnow

PAYMENT_STATUSES = ("pending", "partial", "paid")
DELIVERY_STATUSES = ("pending", "scheduled", "delivered")


class Order(SQLModel, table=True):
    """Customer order with independent payment and delivery progress."""

    __tablename__: ClassVar[str] = "orders"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=32)
    order_number: Optional[str] = Field(default=None, max_length=32, index=True)
    customer_id: Optional[str] = Field(default=None, foreign_key="customers.id", index=True)
    quote_id: Optional[str] = Field(default=None, foreign_key="quotes.id")
    payment_status: str = Field(default="pending", nullable=False, max_length=16, index=True)
    delivery_status: str = Field(default="pending", nullable=False, max_length=16, index=True)
    total_amount: Decimal = Field(default=Decimal("0"), max_digits=12, decimal_places=2)
    created_at: datetime = Field(default_factory=utcnow, nullable=False, index=True)
