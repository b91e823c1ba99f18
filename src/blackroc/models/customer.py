"""Customer profile owned by a signed-in identity."""

from __future__ import annotations

from datetime import datetime
from typing import ClassVar, Optional

from sqlmodel import Field, SQLModel

from ._ids import new_id, utcnow


class Customer(SQLModel, table=True):
    """Business-facing customer record.

    ``user_id`` is the owning identity. Staff-created customers have no owner,
    so the column is nullable; the unique index still allows at most one
    profile per identity.
    """

    __tablename__: ClassVar[str] = "customers"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=32)
    user_id: Optional[str] = Field(
        default=None, foreign_key="users.id", unique=True, index=True, max_length=32
    )
    name: str = Field(nullable=False, max_length=120)
    email: str = Field(nullable=False, max_length=255)
    phone: str = Field(nullable=False, max_length=32)
    company: str = Field(default="", nullable=False, max_length=120)
    created_at: datetime = Field(default_factory=utcnow, nullable=False)
    updated_at: Optional[datetime] = Field(default=None)
