"""Bounded retry over classified outcomes."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Awaitable, Callable, Generic, Optional, TypeVar

from ..logging_config import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class RetryPolicy(Generic[T]):
    """Re-run an operation while its outcome matches ``retry_on``.

    ``before_retry`` runs between attempts; returning False stops retrying and
    the last outcome is returned as-is.
    """

    max_attempts: int
    retry_on: Callable[[T], bool]
    before_retry: Optional[Callable[[], Awaitable[bool]]] = None
    name: str = "operation"

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")

    async def run(self, operation: Callable[[], Awaitable[T]]) -> T:
        attempt = 1
        outcome = await operation()
        while attempt < self.max_attempts and self.retry_on(outcome):
            logger.info(
                "Retrying %s", self.name, extra={"attempt": attempt + 1, "outcome": type(outcome).__name__}
            )
            if self.before_retry is not None and not await self.before_retry():
                logger.info("Retry precondition failed for %s", self.name)
                break
            attempt += 1
            outcome = await operation()
        return outcome
