"""Demo data for local dashboards (quotes, orders and invoices for one user)."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal
from typing import Optional

from sqlalchemy import func
from sqlmodel import Session, select

from ..infra.database import SessionFactory
from ..logging_config import get_logger
from ..models import Customer, Invoice, Order, Quote, User

logger = get_logger(__name__)

_QUOTE_SEED = (
    # (days ago, status, total)
    (1, "pending", "18450.00"),
    (3, "approved", "9200.50"),
    (6, "draft", "3120.00"),
    (9, "converted", "27500.00"),
    (14, "rejected", "1480.75"),
    (21, "approved", "6600.00"),
)

_ORDER_SEED = (
    # (days ago, payment status, delivery status, total)
    (2, "pending", "pending", "9200.50"),
    (8, "partial", "scheduled", "27500.00"),
    (20, "paid", "delivered", "6600.00"),
    (35, "paid", "pending", "12040.00"),
)


@dataclass(frozen=True)
class SeedSummary:
    """Aggregate counts returned after demo seeding."""

    quotes: int
    orders: int
    invoices: int
    customer_id: str


def _ensure_customer(session: Session, user: User, company: str) -> Customer:
    customer = session.exec(select(Customer).where(Customer.user_id == user.id)).first()
    if customer is not None:
        return customer
    customer = Customer(
        user_id=user.id,
        name=user.email.split("@")[0].replace(".", " ").title(),
        email=user.email,
        phone="0119721349",
        company=company,
    )
    session.add(customer)
    session.flush()
    return customer


def _count(session: Session, model, customer_id: str) -> int:
    return session.exec(select(func.count(model.id)).where(model.customer_id == customer_id)).one()


def run_demo_seed(
    session_factory: SessionFactory,
    *,
    user_id: str,
    company: str = "Demo Construction (Pty) Ltd",
    force: bool = False,
    now: Optional[datetime] = None,
) -> SeedSummary:
    """Seed demo records idempotently for ``user_id`` and return counts.

    Creates the user's customer profile when missing, so the dashboard skips
    onboarding for seeded accounts.
    """

    now = now or datetime.now(timezone.utc)
    with session_factory() as session:
        user = session.get(User, user_id)
        if user is None:
            raise ValueError(f"User {user_id} not found")
        customer = _ensure_customer(session, user, company)

        if not force and _count(session, Invoice, customer.id):
            logger.info("Demo data already present", extra={"customer_id": customer.id})
            return SeedSummary(
                quotes=_count(session, Quote, customer.id),
                orders=_count(session, Order, customer.id),
                invoices=_count(session, Invoice, customer.id),
                customer_id=customer.id,
            )

        prefix = customer.id[:4].upper()
        quotes = [
            Quote(
                quote_number=f"Q-{prefix}-{index:03d}",
                customer_id=customer.id,
                status=status,
                total_amount=Decimal(total),
                created_at=now - timedelta(days=days),
            )
            for index, (days, status, total) in enumerate(_QUOTE_SEED, start=1)
        ]
        orders = [
            Order(
                order_number=f"O-{prefix}-{index:03d}",
                customer_id=customer.id,
                payment_status=payment,
                delivery_status=delivery,
                total_amount=Decimal(total),
                created_at=now - timedelta(days=days),
            )
            for index, (days, payment, delivery, total) in enumerate(_ORDER_SEED, start=1)
        ]
        session.add_all(quotes + orders)
        session.flush()

        invoices = []
        for index, order in enumerate(orders, start=1):
            paid = {"paid": order.total_amount, "partial": order.total_amount / 2}.get(
                order.payment_status, Decimal("0")
            )
            invoices.append(
                Invoice(
                    customer_id=customer.id,
                    order_id=order.id,
                    invoice_number=f"INV-{prefix}-{index:03d}",
                    invoice_date=order.created_at.date(),
                    due_date=order.created_at.date() + timedelta(days=30),
                    total_amount=order.total_amount,
                    paid_amount=paid,
                    outstanding_amount=order.total_amount - paid,
                )
            )
        # Legacy import row whose outstanding amount was never reconciled.
        invoices.append(
            Invoice(
                customer_id=customer.id,
                invoice_number=f"INV-{prefix}-LEGACY",
                invoice_date=date.today() - timedelta(days=400),
                total_amount=Decimal("0"),
                outstanding_amount=None,
            )
        )
        session.add_all(invoices)
        session.commit()

        summary = SeedSummary(
            quotes=len(quotes), orders=len(orders), invoices=len(invoices), customer_id=customer.id
        )
        logger.info("Demo data seeded", extra={"customer_id": customer.id, "quotes": summary.quotes})
        return summary
