"""Read-only dashboard records and the derived statistics snapshot."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional


class RecordKind(str, Enum):
    QUOTE = "quote"
    ORDER = "order"


@dataclass(frozen=True, slots=True)
class QuoteSummary:
    id: str
    quote_number: Optional[str]
    status: str
    created_at: datetime

    @property
    def status_group(self) -> str:
        """Collapse statuses the dashboard does not badge into ``other``."""

        return self.status if self.status in {"draft", "pending", "approved"} else "other"


@dataclass(frozen=True, slots=True)
class OrderSummary:
    id: str
    order_number: Optional[str]
    payment_status: str
    delivery_status: str
    created_at: datetime


@dataclass(frozen=True, slots=True)
class DashboardStats:
    """Counts and balance shown on the dashboard cards."""

    total_quotes: int = 0
    total_orders: int = 0
    pending_orders: int = 0
    pending_deliveries: int = 0
    outstanding_balance: Decimal = Decimal("0.00")


@dataclass(frozen=True, slots=True)
class DashboardSnapshot:
    """One consistent aggregation result, published only after every read settled."""

    stats: DashboardStats = field(default_factory=DashboardStats)
    recent_quotes: tuple[QuoteSummary, ...] = ()
    recent_orders: tuple[OrderSummary, ...] = ()
    failed: tuple[str, ...] = ()

    @property
    def degraded(self) -> bool:
        return bool(self.failed)
