"""Invoices raised against customer orders."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import ClassVar, Optional

from sqlmodel import Field, SQLModel

from ._ids import new_id, utcnow


class Invoice(SQLModel, table=True):
    """Invoice with a running outstanding amount.

    ``outstanding_amount`` may be NULL on rows imported before payments were
    reconciled; readers treat missing values as zero.
    """

    __tablename__: ClassVar[str] = "invoices"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=32)
    customer_id: str = Field(foreign_key="customers.id", nullable=False, index=True)
    order_id: Optional[str] = Field(default=None, foreign_key="orders.id")
    invoice_number: str = Field(nullable=False, max_length=32, index=True)
    invoice_date: date = Field(default_factory=date.today, nullable=False)
    due_date: Optional[date] = Field(default=None)
    total_amount: Decimal = Field(default=Decimal("0"), max_digits=12, decimal_places=2)
    paid_amount: Decimal = Field(default=Decimal("0"), max_digits=12, decimal_places=2)
    outstanding_amount: Optional[Decimal] = Field(default=None, max_digits=12, decimal_places=2)
    created_at: datetime = Field(default_factory=utcnow, nullable=False)
