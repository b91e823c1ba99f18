"""Dashboard entry check: is there a signed-in identity?"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Optional, Protocol, Union

from ..domain.identity import Identity
from ..logging_config import get_logger

logger = get_logger(__name__)


class IdentitySource(Protocol):
    def current_identity(self) -> Optional[Identity]:
        ...


@dataclass(frozen=True, slots=True)
class Authenticated:
    identity: Identity


@dataclass(frozen=True, slots=True)
class Unauthenticated:
    reason: str = "no session"


SessionResult = Union[Authenticated, Unauthenticated]


async def resolve_session(auth: IdentitySource) -> SessionResult:
    """Resolve the current identity, failing closed.

    Any error from the auth provider is reported as ``Unauthenticated``; the
    caller redirects to sign-in rather than retrying.
    """
    try:
        identity = await asyncio.to_thread(auth.current_identity)
    except Exception as exc:
        logger.warning("Auth provider failed; treating session as signed out", extra={"error": str(exc)})
        return Unauthenticated(reason="auth provider error")
    if identity is None:
        return Unauthenticated()
    return Authenticated(identity)
