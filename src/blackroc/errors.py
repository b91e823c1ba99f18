"""Error taxonomy shared by the dashboard core and its backend adapters."""

from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    """Classification attached to every failure the core reports."""

    NOT_FOUND = "not_found"
    PERMISSION_DENIED = "permission_denied"
    VALIDATION = "validation"
    TRANSIENT = "transient"
    AUTH = "auth"


class BackendError(Exception):
    """Base class for failures raised by backend adapters."""

    kind: ErrorKind = ErrorKind.TRANSIENT


class PermissionDeniedError(BackendError):
    """The active session is not allowed to write the requested row."""

    kind = ErrorKind.PERMISSION_DENIED


class TransientBackendError(BackendError):
    """Network or database failure; the same call may succeed later."""

    kind = ErrorKind.TRANSIENT


class AuthError(BackendError):
    """The auth provider could not resolve or establish a session."""

    kind = ErrorKind.AUTH


def classify(exc: BaseException) -> ErrorKind:
    """Map an exception raised by a backend call onto the taxonomy."""

    if isinstance(exc, BackendError):
        return exc.kind
    return ErrorKind.TRANSIENT
