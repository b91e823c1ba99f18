"""Classified results returned by the profile repository.

Every repository call returns one of these values instead of raising, so
callers branch on the outcome type rather than on exception classes.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from ..errors import ErrorKind
from .profile import CustomerProfile


@dataclass(frozen=True, slots=True)
class Found:
    profile: CustomerProfile


@dataclass(frozen=True, slots=True)
class NotFound:
    """No profile exists for the identity yet (first-time user)."""


@dataclass(frozen=True, slots=True)
class Created:
    profile: CustomerProfile


@dataclass(frozen=True, slots=True)
class Updated:
    profile: CustomerProfile


@dataclass(frozen=True, slots=True)
class PermissionDenied:
    reason: str = "Permission denied by the backend."

    @property
    def kind(self) -> ErrorKind:
        return ErrorKind.PERMISSION_DENIED


@dataclass(frozen=True, slots=True)
class Failed:
    reason: str
    kind: ErrorKind = ErrorKind.TRANSIENT


FindOutcome = Union[Found, NotFound, Failed]
CreateOutcome = Union[Created, PermissionDenied, Failed]
UpdateOutcome = Union[Updated, PermissionDenied, Failed]
