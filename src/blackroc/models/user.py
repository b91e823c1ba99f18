"""User model backing the auth provider."""

from __future__ import annotations

from datetime import datetime
from typing import ClassVar, Optional

from sqlmodel import Field, SQLModel

from ._ids import new_id, utcnow


class User(SQLModel, table=True):
    """Sign-in account; its id is the session identity."""

    __tablename__: ClassVar[str] = "users"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=32)
    email: str = Field(nullable=False, unique=True, index=True, max_length=255)
    password_hash: str = Field(nullable=False, max_length=255)
    created_at: datetime = Field(default_factory=utcnow, nullable=False)
    last_sign_in: Optional[datetime] = Field(default=None)
