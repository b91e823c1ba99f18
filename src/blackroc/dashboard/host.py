"""Dashboard view instance: session gate, profile flow and statistics."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Optional, Protocol

from ..domain.identity import Identity
from ..domain.repositories import DashboardQueries, ProfileRepository
from ..domain.stats import DashboardSnapshot
from ..logging_config import get_logger
from ..services.aggregation import AggregationService
from ..services.notifications import NotificationKind, Notifier
from ..services.profile_controller import ProfileController
from ..services.session_gate import Authenticated, Unauthenticated, resolve_session
from .navigation import PUBLIC_ROUTE, SIGN_IN_ROUTE, Navigator

if TYPE_CHECKING:
    from .context import AppContext

logger = get_logger(__name__)


class SessionAuth(Protocol):
    def current_identity(self) -> Optional[Identity]:
        ...

    def end_session(self) -> None:
        ...


class DashboardHost:
    """Owns everything one dashboard view shows.

    After ``teardown()`` nothing this host started may change its state or
    emit notifications.
    """

    def __init__(
        self,
        *,
        auth: SessionAuth,
        profile_repo: ProfileRepository,
        dashboard_queries: DashboardQueries,
        navigator: Navigator,
        notifier: Notifier,
        recent_limit: int = 5,
        create_attempts: int = 2,
    ):
        self.auth = auth
        self.profile_repo = profile_repo
        self.navigator = navigator
        self.notifier = notifier
        self.create_attempts = create_attempts
        self.aggregation = AggregationService(dashboard_queries, notifier, recent_limit=recent_limit)
        self.identity: Optional[Identity] = None
        self.profile: Optional[ProfileController] = None
        self.snapshot: Optional[DashboardSnapshot] = None
        self._tasks: set[asyncio.Task] = set()
        self._torn_down = False

    @classmethod
    def from_context(
        cls, ctx: AppContext, navigator: Navigator, notifier: Optional[Notifier] = None
    ) -> DashboardHost:
        return cls(
            auth=ctx.auth,
            profile_repo=ctx.profile_repo,
            dashboard_queries=ctx.dashboard_queries,
            navigator=navigator,
            notifier=notifier if notifier is not None else ctx.notifications,
            recent_limit=ctx.config.RECENT_LIMIT,
            create_attempts=ctx.config.PROFILE_CREATE_MAX_ATTEMPTS,
        )

    @property
    def torn_down(self) -> bool:
        return self._torn_down

    async def mount(self) -> bool:
        """Gate the view, then run the profile check and statistics concurrently.

        Returns False when the user was sent to sign-in (or the view is gone).
        """
        if self._torn_down:
            return False
        result = await resolve_session(self.auth)
        if self._torn_down:
            return False
        if isinstance(result, Unauthenticated):
            logger.info("Dashboard entry without session", extra={"reason": result.reason})
            self.navigator.go(SIGN_IN_ROUTE)
            return False

        self.identity = result.identity
        self.profile = ProfileController(
            result.identity,
            self.profile_repo,
            self.notifier,
            session_check=self._session_still_valid,
            create_attempts=self.create_attempts,
        )
        await self._run(self.profile.check(), self._load_snapshot())
        return not self._torn_down

    async def refresh(self) -> Optional[DashboardSnapshot]:
        """Reload statistics only; the profile flow is left alone."""
        if self._torn_down or self.identity is None:
            return self.snapshot
        await self._run(self._load_snapshot())
        return self.snapshot

    async def sign_out(self) -> bool:
        try:
            await asyncio.to_thread(self.auth.end_session)
        except Exception as exc:
            logger.error("Sign out failed", extra={"error": str(exc)})
            self.notifier.notify(NotificationKind.ERROR, "Sign out failed", "Please try again.")
            return False
        self.notifier.notify(
            NotificationKind.SUCCESS,
            "Signed out successfully",
            "You have been signed out of your account",
        )
        self.teardown()
        self.navigator.go(PUBLIC_ROUTE)
        return True

    def teardown(self) -> None:
        """Discard in-flight work; late results never reach this host."""
        self._torn_down = True
        if self.profile is not None:
            self.profile.dispose()
        for task in list(self._tasks):
            task.cancel()

    async def _run(self, *coros) -> None:
        tasks = [asyncio.create_task(coro) for coro in coros]
        self._tasks.update(tasks)
        try:
            results = await asyncio.gather(*tasks, return_exceptions=True)
        finally:
            self._tasks.difference_update(tasks)
        for result in results:
            if isinstance(result, Exception):
                logger.error("Dashboard task crashed", exc_info=result)

    async def _load_snapshot(self) -> None:
        snapshot = await self.aggregation.load(self.identity.id)
        if not self._torn_down:
            self.snapshot = snapshot

    async def _session_still_valid(self) -> bool:
        result = await resolve_session(self.auth)
        return isinstance(result, Authenticated) and result.identity.id == self.identity.id
