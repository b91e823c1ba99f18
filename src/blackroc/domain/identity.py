"""Authenticated subject for the current session."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Identity:
    """Opaque subject id plus the email it signed in with."""

    id: str
    email: str
