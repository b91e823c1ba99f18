"""In-memory collaborators for exercising the dashboard core without a database."""

from __future__ import annotations

import asyncio
from collections.abc import Mapping
from typing import Any, Optional

from blackroc.domain.identity import Identity
from blackroc.domain.outcomes import Created, Failed, Found, NotFound, PermissionDenied, Updated
from blackroc.domain.profile import CustomerProfile, ProfileDraft
from blackroc.domain.stats import RecordKind
from blackroc.errors import AuthError, TransientBackendError


class FakeAuth:
    """Auth provider double; ``identities`` is consumed one per lookup once set."""

    def __init__(self, identity: Optional[Identity] = None, *, fail: bool = False):
        self.identity = identity
        self.fail = fail
        self.identities: list[Optional[Identity]] = []
        self.lookups = 0
        self.ended = False

    def current_identity(self) -> Optional[Identity]:
        self.lookups += 1
        if self.fail:
            raise AuthError("auth provider unavailable")
        if self.identities:
            return self.identities.pop(0)
        return self.identity

    def end_session(self) -> None:
        self.ended = True
        self.identity = None


class FakeProfileRepository:
    """Scripted profile repository.

    ``create_results`` / ``update_results`` are consumed in order; when they
    run out, writes succeed. Setting ``hold`` parks writes until it is set.
    """

    def __init__(self, profile: Optional[CustomerProfile] = None, *, find_result=None):
        self.profile = profile
        self.find_result = find_result
        self.create_results: list[Any] = []
        self.update_results: list[Any] = []
        self.find_calls: list[str] = []
        self.create_calls: list[tuple[dict[str, str], str]] = []
        self.update_calls: list[tuple[str, dict[str, str]]] = []
        self.hold: Optional[asyncio.Event] = None

    @property
    def network_calls(self) -> int:
        return len(self.find_calls) + len(self.create_calls) + len(self.update_calls)

    async def find(self, identity_id: str):
        self.find_calls.append(identity_id)
        await asyncio.sleep(0)
        if self.find_result is not None:
            return self.find_result
        if self.profile is None:
            return NotFound()
        return Found(self.profile)

    async def create(self, draft: ProfileDraft, identity_id: str):
        self.create_calls.append((draft.as_record(), identity_id))
        if self.hold is not None:
            await self.hold.wait()
        if self.create_results:
            return self.create_results.pop(0)
        self.profile = CustomerProfile(id="cust-1", owner_identity_id=identity_id, **draft.as_record())
        return Created(self.profile)

    async def update(self, profile_id: str, patch: Mapping[str, str]):
        self.update_calls.append((profile_id, dict(patch)))
        if self.hold is not None:
            await self.hold.wait()
        if self.update_results:
            return self.update_results.pop(0)
        self.profile = self.profile.with_patch(patch)
        return Updated(self.profile)


class FakeDashboardQueries:
    """Scripted dashboard reads; names listed in ``failing`` raise."""

    def __init__(
        self,
        *,
        quotes: Optional[list] = None,
        orders: Optional[list] = None,
        counts: Optional[dict[str, int]] = None,
        outstanding: Optional[list] = None,
        failing: Optional[set[str]] = None,
    ):
        self.quotes = quotes or []
        self.orders = orders or []
        self.counts = counts or {}
        self.outstanding = outstanding or []
        self.failing = failing or set()
        self.started: list[str] = []
        self.gate: Optional[asyncio.Event] = None
        self.expected_reads: Optional[int] = None

    async def _enter(self, name: str) -> None:
        self.started.append(name)
        if self.expected_reads is not None and len(self.started) == self.expected_reads:
            self.gate.set()
        if self.gate is not None:
            await self.gate.wait()
        else:
            await asyncio.sleep(0)
        if name in self.failing:
            raise TransientBackendError(f"{name} failed")

    async def list_recent(self, kind: RecordKind, limit: int) -> list:
        name = "recent_quotes" if kind is RecordKind.QUOTE else "recent_orders"
        await self._enter(name)
        rows = self.quotes if kind is RecordKind.QUOTE else self.orders
        return rows[:limit]

    async def count(self, kind: RecordKind, **filters: str) -> int:
        if kind is RecordKind.QUOTE:
            name = "total_quotes"
        elif filters.get("payment_status") == "pending":
            name = "pending_orders"
        elif filters.get("delivery_status") == "pending":
            name = "pending_deliveries"
        else:
            name = "total_orders"
        await self._enter(name)
        return self.counts.get(name, 0)

    async def outstanding_amounts(self, identity_id: str) -> list:
        await self._enter("outstanding_balance")
        return list(self.outstanding)


def failed(reason: str = "backend unavailable") -> Failed:
    return Failed(reason=reason)


def denied() -> PermissionDenied:
    return PermissionDenied(reason="row-level security violation")
