"""Dashboard statistics aggregation.

All reads are independent, so they are launched together and joined once.
A failing read degrades only its own field to a zero value; the caller always
gets a complete snapshot.
"""

from __future__ import annotations

import asyncio
from decimal import Decimal, InvalidOperation
from typing import Any, Awaitable, Iterable, TypeVar

from ..domain.repositories.dashboard import DashboardQueries
from ..domain.stats import DashboardSnapshot, DashboardStats, RecordKind
from ..errors import classify
from ..logging_config import get_logger
from .notifications import NotificationKind, Notifier

logger = get_logger(__name__)

T = TypeVar("T")

ZERO = Decimal("0")
CENT = Decimal("0.01")

LOAD_ERROR_TITLE = "Error loading dashboard data"
LOAD_ERROR_DESCRIPTION = "Please try refreshing the page."

READS = (
    "recent_quotes",
    "recent_orders",
    "total_quotes",
    "total_orders",
    "pending_orders",
    "pending_deliveries",
    "outstanding_balance",
)


def parse_amount(value: Any) -> Decimal:
    """Parse one outstanding amount; missing, invalid or non-positive values count as 0."""

    if value is None or isinstance(value, bool):
        return ZERO
    if isinstance(value, Decimal):
        amount = value
    else:
        try:
            amount = Decimal(str(value).strip())
        except (InvalidOperation, ValueError):
            return ZERO
    if not amount.is_finite() or amount <= 0:
        return ZERO
    return amount


def sum_outstanding(values: Iterable[Any]) -> Decimal:
    """Fold outstanding amounts into one balance, rounded to cents."""

    total = ZERO
    for value in values:
        total += parse_amount(value)
    return total.quantize(CENT)


class AggregationService:
    """Builds the dashboard snapshot for one identity."""

    def __init__(self, queries: DashboardQueries, notifier: Notifier, *, recent_limit: int = 5):
        self.queries = queries
        self.notifier = notifier
        self.recent_limit = recent_limit

    async def load(self, identity_id: str) -> DashboardSnapshot:
        """Run every read concurrently and return one snapshot once all settled."""
        failed: set[str] = set()

        async def guarded(name: str, read: Awaitable[T], default: T) -> T:
            try:
                return await read
            except Exception as exc:
                logger.warning(
                    "Dashboard read failed",
                    extra={"read": name, "kind": classify(exc).value, "error": str(exc)},
                )
                failed.add(name)
                return default

        q = self.queries
        (
            recent_quotes,
            recent_orders,
            total_quotes,
            total_orders,
            pending_orders,
            pending_deliveries,
            outstanding,
        ) = await asyncio.gather(
            guarded("recent_quotes", q.list_recent(RecordKind.QUOTE, self.recent_limit), []),
            guarded("recent_orders", q.list_recent(RecordKind.ORDER, self.recent_limit), []),
            guarded("total_quotes", q.count(RecordKind.QUOTE), 0),
            guarded("total_orders", q.count(RecordKind.ORDER), 0),
            guarded("pending_orders", q.count(RecordKind.ORDER, payment_status="pending"), 0),
            guarded("pending_deliveries", q.count(RecordKind.ORDER, delivery_status="pending"), 0),
            guarded("outstanding_balance", q.outstanding_amounts(identity_id), []),
        )

        snapshot = DashboardSnapshot(
            stats=DashboardStats(
                total_quotes=int(total_quotes or 0),
                total_orders=int(total_orders or 0),
                pending_orders=int(pending_orders or 0),
                pending_deliveries=int(pending_deliveries or 0),
                outstanding_balance=sum_outstanding(outstanding or []),
            ),
            recent_quotes=tuple(recent_quotes[: self.recent_limit]),
            recent_orders=tuple(recent_orders[: self.recent_limit]),
            failed=tuple(name for name in READS if name in failed),
        )

        if snapshot.degraded:
            self.notifier.notify(NotificationKind.ERROR, LOAD_ERROR_TITLE, LOAD_ERROR_DESCRIPTION)
        logger.info(
            "Dashboard snapshot loaded",
            extra={"identity_id": identity_id, "failed_reads": list(snapshot.failed)},
        )
        return snapshot

    async def load_stats(self, identity_id: str) -> DashboardStats:
        snapshot = await self.load(identity_id)
        return snapshot.stats
