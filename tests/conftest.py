"""Pytest configuration and shared fixtures for BlackRoc tests.

This module provides database fixtures, record factories and fakes for testing
repositories, services and routes without touching the real app database.
"""

from __future__ import annotations

import tempfile
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from pathlib import Path

import pytest
from sqlmodel import SQLModel, create_engine

from blackroc.domain.identity import Identity
from blackroc.domain.profile import CustomerProfile
from blackroc.infra.database import create_session_factory
from blackroc.models import Customer, Invoice, Order, Quote, User
from blackroc.services.notifications import NotificationQueue

from tests.fakes import FakeAuth, FakeDashboardQueries, FakeProfileRepository

# =============================================================================
# Database Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def isolated_data_dir(tmp_path, monkeypatch):
    """Keep config-created directories and log files inside the test tmp dir."""

    monkeypatch.setenv("BLACKROC_DATA_DIR", str(tmp_path))
    monkeypatch.delenv("BLACKROC_DATABASE_URL", raising=False)


@pytest.fixture(scope="function")
def db_engine():
    """Create an isolated SQLite database file for each test.

    Yields:
        Engine: SQLModel engine connected to test database
    """
    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
        db_path = Path(f.name)

    engine = create_engine(
        f"sqlite:///{db_path}", echo=False, connect_args={"check_same_thread": False}
    )
    SQLModel.metadata.create_all(engine)

    yield engine

    engine.dispose()
    db_path.unlink(missing_ok=True)


@pytest.fixture(scope="function")
def session_factory(db_engine):
    """Session factory matching the one repositories receive in production."""

    return create_session_factory(db_engine)


# =============================================================================
# Record Factories
# =============================================================================


@pytest.fixture
def user_factory(session_factory):
    """Factory for persisted users (password hash is a placeholder)."""

    def _create_user(email: str = "buyer@example.com") -> User:
        with session_factory() as session:
            user = User(email=email, password_hash="dummy-hash")
            session.add(user)
            session.commit()
            session.refresh(user)
            return user

    return _create_user


@pytest.fixture
def customer_factory(session_factory):
    """Factory for customer profiles, optionally owned by a user."""

    def _create_customer(
        owner: User | None = None,
        name: str = "Thabo Builders",
        email: str = "buyer@example.com",
        phone: str = "0215550100",
        company: str = "X",
    ) -> Customer:
        with session_factory() as session:
            customer = Customer(
                user_id=owner.id if owner else None,
                name=name,
                email=email,
                phone=phone,
                company=company,
            )
            session.add(customer)
            session.commit()
            session.refresh(customer)
            return customer

    return _create_customer


@pytest.fixture
def quote_factory(session_factory):
    def _create_quote(
        status: str = "pending",
        age_days: int = 0,
        quote_number: str | None = None,
    ) -> Quote:
        with session_factory() as session:
            quote = Quote(
                status=status,
                quote_number=quote_number,
                created_at=datetime.now(timezone.utc) - timedelta(days=age_days),
            )
            session.add(quote)
            session.commit()
            session.refresh(quote)
            return quote

    return _create_quote


@pytest.fixture
def order_factory(session_factory):
    def _create_order(
        payment_status: str = "pending",
        delivery_status: str = "pending",
        age_days: int = 0,
    ) -> Order:
        with session_factory() as session:
            order = Order(
                payment_status=payment_status,
                delivery_status=delivery_status,
                created_at=datetime.now(timezone.utc) - timedelta(days=age_days),
            )
            session.add(order)
            session.commit()
            session.refresh(order)
            return order

    return _create_order


@pytest.fixture
def invoice_factory(session_factory):
    def _create_invoice(customer: Customer, outstanding: str | None, number: str = "INV-1") -> Invoice:
        with session_factory() as session:
            invoice = Invoice(
                customer_id=customer.id,
                invoice_number=number,
                outstanding_amount=Decimal(outstanding) if outstanding is not None else None,
            )
            session.add(invoice)
            session.commit()
            session.refresh(invoice)
            return invoice

    return _create_invoice


# =============================================================================
# Core Fakes
# =============================================================================


@pytest.fixture
def identity() -> Identity:
    return Identity(id="user-1", email="buyer@example.com")


@pytest.fixture
def existing_profile(identity) -> CustomerProfile:
    return CustomerProfile(
        id="cust-1",
        owner_identity_id=identity.id,
        name="Thabo Builders",
        email=identity.email,
        phone="0215550100",
        company="X",
    )


@pytest.fixture
def notifier() -> NotificationQueue:
    return NotificationQueue(maxlen=10)


@pytest.fixture
def fake_auth(identity) -> FakeAuth:
    return FakeAuth(identity)


@pytest.fixture
def fake_repo() -> FakeProfileRepository:
    return FakeProfileRepository()


@pytest.fixture
def fake_queries() -> FakeDashboardQueries:
    return FakeDashboardQueries(
        counts={
            "total_quotes": 12,
            "total_orders": 7,
            "pending_orders": 3,
            "pending_deliveries": 2,
        },
        outstanding=["150.50", None, "49.50"],
    )


# =============================================================================
# Flask Fixtures
# =============================================================================


@pytest.fixture
def app(monkeypatch):
    monkeypatch.setenv("BLACKROC_SECRET_KEY", "test-secret")

    from blackroc import create_app

    app = create_app("testing")
    app.config.update(TESTING=True)
    yield app
    app.extensions["blackroc"].engine.dispose()


@pytest.fixture
def client(app):
    with app.test_client() as client:
        yield client
