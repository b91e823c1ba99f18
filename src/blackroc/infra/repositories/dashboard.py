"""SQLModel implementation of the dashboard read queries."""

from __future__ import annotations

import asyncio
from decimal import Decimal
from typing import Any, Callable, TypeVar

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import select

from ...domain.stats import OrderSummary, QuoteSummary, RecordKind
from ...errors import TransientBackendError
from ...models import Customer, Invoice, Order, Quote
from ..database import SessionFactory

T = TypeVar("T")

_MODELS = {RecordKind.QUOTE: Quote, RecordKind.ORDER: Order}


def _summarize(row: Quote | Order) -> QuoteSummary | OrderSummary:
    if isinstance(row, Quote):
        return QuoteSummary(
            id=row.id,
            quote_number=row.quote_number,
            status=row.status,
            created_at=row.created_at,
        )
    return OrderSummary(
        id=row.id,
        order_number=row.order_number,
        payment_status=row.payment_status,
        delivery_status=row.delivery_status,
        created_at=row.created_at,
    )


class SQLModelDashboardQueries:
    """Dashboard reads executed on worker threads.

    Database errors surface as ``TransientBackendError`` so the aggregation
    service can degrade each read on its own.
    """

    def __init__(self, session_factory: SessionFactory):
        self.session_factory = session_factory

    async def list_recent(self, kind: RecordKind, limit: int) -> list[QuoteSummary | OrderSummary]:
        return await self._run(self._list_recent_sync, kind, limit)

    async def count(self, kind: RecordKind, **filters: str) -> int:
        return await self._run(self._count_sync, kind, filters)

    async def outstanding_amounts(self, identity_id: str) -> list[Decimal | None]:
        return await self._run(self._outstanding_sync, identity_id)

    async def _run(self, fn: Callable[..., T], *args: Any) -> T:
        try:
            return await asyncio.to_thread(fn, *args)
        except SQLAlchemyError as exc:
            raise TransientBackendError(str(exc)) from exc

    def _list_recent_sync(self, kind: RecordKind, limit: int) -> list[QuoteSummary | OrderSummary]:
        model = _MODELS[kind]
        with self.session_factory() as session:
            statement = select(model).order_by(model.created_at.desc()).limit(limit)  # type: ignore[attr-defined]
            return [_summarize(row) for row in session.exec(statement).all()]

    def _count_sync(self, kind: RecordKind, filters: dict[str, str]) -> int:
        model = _MODELS[kind]
        clauses = []
        for column, value in filters.items():
            if column not in model.model_fields:
                raise ValueError(f"{model.__name__} has no column {column!r}")
            clauses.append(getattr(model, column) == value)
        with self.session_factory() as session:
            statement = select(func.count(model.id)).where(*clauses)
            return int(session.exec(statement).one())

    def _outstanding_sync(self, identity_id: str) -> list[Decimal | None]:
        statement = (
            select(Invoice.outstanding_amount)
            .join(Customer, Invoice.customer_id == Customer.id)
            .where(Invoice.outstanding_amount > 0, Customer.user_id == identity_id)
        )
        with self.session_factory() as session:
            return list(session.exec(statement).all())
