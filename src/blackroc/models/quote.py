"""Quotes issued to customers."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import ClassVar, Optional

from sqlmodel import Field, SQLModel

from ._ids import new_id, utcnow

QUOTE_STATUSES = ("draft", "pending", "approved", "rejected", "converted")


class Quote(SQLModel, table=True):
    """Price quote; read-only to the dashboard."""

    __tablename__: ClassVar[str] = "quotes"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=32)
    quote_number: Optional[str] = Field(default=None, max_length=32, index=True)
    customer_id: Optional[str] = Field(default=None, foreign_key="customers.id", index=True)
    status: str = Field(default="draft", nullable=False, max_length=16, index=True)
    total_amount: Decimal = Field(default=Decimal("0"), max_digits=12, decimal_places=2)
    created_at: datetime = Field(default_factory=utcnow, nullable=False, index=True)
