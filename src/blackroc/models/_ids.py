"""Identifier and timestamp defaults shared by table models."""

from __future__ import annotations

from datetime import datetime, timezone
from uuid import uuid4


def new_id() -> str:
    """Return a random string primary key."""

    return uuid4().hex


def utcnow() -> datetime:
    return datetime.now(timezone.utc)
