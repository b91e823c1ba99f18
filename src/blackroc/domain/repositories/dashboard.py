"""Read-only queries behind the dashboard statistics."""

from __future__ import annotations

from typing import Any, Protocol, Union

from ..stats import OrderSummary, QuoteSummary, RecordKind

Summary = Union[QuoteSummary, OrderSummary]


class DashboardQueries(Protocol):
    """Backend reads the aggregation service fans out over.

    Implementations raise on failure; the aggregation service guards each
    call independently.
    """

    async def list_recent(self, kind: RecordKind, limit: int) -> list[Summary]:
        """Return the newest ``limit`` records of ``kind``, newest first."""
        ...

    async def count(self, kind: RecordKind, **filters: str) -> int:
        """Count records of ``kind`` whose columns equal the given filters."""
        ...

    async def outstanding_amounts(self, identity_id: str) -> list[Any]:
        """Return raw positive outstanding amounts of invoices owned by ``identity_id``."""
        ...
