"""Customer profile onboarding and editing.

One controller instance backs one dashboard view. It owns a single state tag,
a single draft and a single error slot; every transition goes through the
methods below. Results that arrive after ``dispose()`` are dropped.

    CHECKING ──find──> HAS_PROFILE | NEEDS_ONBOARDING | CHECK_FAILED
    NEEDS_ONBOARDING ──submit──> SUBMITTING ──> HAS_PROFILE | NEEDS_ONBOARDING (+error)
    HAS_PROFILE ──begin_edit──> EDITING ──submit──> SUBMITTING ──> HAS_PROFILE | EDITING (+error)
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Awaitable, Callable, Optional

from ..domain.identity import Identity
from ..domain.outcomes import Created, CreateOutcome, Failed, Found, NotFound, PermissionDenied, Updated
from ..domain.profile import CustomerProfile, ProfileDraft
from ..domain.repositories.profile import ProfileRepository
from ..errors import ErrorKind
from ..logging_config import get_logger
from .notifications import NotificationKind, Notifier
from .retry import RetryPolicy

logger = get_logger(__name__)

SessionCheck = Callable[[], Awaitable[bool]]

PERMISSION_HELP = (
    "Your account was not allowed to save this profile, even after re-checking your session. "
    "This usually means the access-control configuration for customer profiles is wrong; "
    "please contact support."
)
SESSION_LOST_HELP = "Your session expired while saving your profile. Please sign in again and retry."


class ProfileState(str, Enum):
    CHECKING = "checking"
    CHECK_FAILED = "check_failed"
    NEEDS_ONBOARDING = "needs_onboarding"
    HAS_PROFILE = "has_profile"
    EDITING = "editing"
    SUBMITTING = "submitting"


@dataclass(frozen=True, slots=True)
class ProfileError:
    kind: ErrorKind
    message: str
    fields: tuple[str, ...] = ()


class ProfileController:
    """State machine behind the onboarding and edit-profile forms."""

    def __init__(
        self,
        identity: Identity,
        repository: ProfileRepository,
        notifier: Notifier,
        *,
        session_check: SessionCheck,
        create_attempts: int = 2,
    ):
        self.identity = identity
        self.repository = repository
        self.notifier = notifier
        self.state = ProfileState.CHECKING
        self.profile: Optional[CustomerProfile] = None
        self.draft: Optional[ProfileDraft] = None
        self.error: Optional[ProfileError] = None
        self.create_attempts = 0
        self._submitting_from: Optional[ProfileState] = None
        self._submitted: Optional[ProfileDraft] = None
        self._disposed = False
        self._create_policy: RetryPolicy[CreateOutcome] = RetryPolicy(
            max_attempts=create_attempts,
            retry_on=lambda outcome: isinstance(outcome, PermissionDenied),
            before_retry=session_check,
            name="profile create",
        )

    @property
    def form_visible(self) -> bool:
        return self.state in (ProfileState.NEEDS_ONBOARDING, ProfileState.EDITING, ProfileState.SUBMITTING)

    @property
    def disposed(self) -> bool:
        return self._disposed

    def dispose(self) -> None:
        """Detach from the view; in-flight results will be ignored."""
        self._disposed = True

    async def check(self) -> ProfileState:
        """Decide between onboarding, an existing profile, or a silent failure."""
        self._set_state(ProfileState.CHECKING)
        outcome = await self.repository.find(self.identity.id)
        if self._disposed:
            return self.state
        self._apply_find(outcome)
        return self.state

    async def begin_edit(self) -> ProfileState:
        """Open the edit form. The onboarding form is left alone so typed input survives."""
        if self._disposed or self.state in (
            ProfileState.SUBMITTING,
            ProfileState.EDITING,
            ProfileState.NEEDS_ONBOARDING,
        ):
            return self.state
        if self.profile is None:
            outcome = await self.repository.find(self.identity.id)
            if self._disposed:
                return self.state
            self._apply_find(outcome)
            if self.profile is None:
                return self.state
        self.draft = ProfileDraft.from_profile(self.profile)
        self._set_state(ProfileState.EDITING)
        return self.state

    def cancel_edit(self) -> None:
        if self.state is ProfileState.EDITING:
            self.draft = None
            self._set_state(ProfileState.HAS_PROFILE)

    def update_field(self, name: str, value: Any) -> None:
        """Local draft change; nothing is sent until ``submit``."""
        if self.draft is None:
            raise RuntimeError("No profile form is open.")
        self.draft.set(name, value)

    async def submit(self) -> ProfileState:
        """Submit the open form. A no-op while a submission is in flight."""
        if self._disposed or self.state is ProfileState.SUBMITTING:
            return self.state
        if self.state is ProfileState.NEEDS_ONBOARDING:
            return await self._submit_onboarding()
        if self.state is ProfileState.EDITING:
            return await self._submit_edit()
        logger.debug("Submit ignored in state %s", self.state.value)
        return self.state

    async def _submit_onboarding(self) -> ProfileState:
        if not self._validate_draft():
            return self.state

        self._begin_submit()
        self.create_attempts = 0
        outcome = await self._create_policy.run(self._create_once)
        if self._disposed:
            return self.state

        if isinstance(outcome, Created):
            self.profile = outcome.profile
            self.draft = None
            self._set_state(ProfileState.HAS_PROFILE)
            self.notifier.notify(
                NotificationKind.SUCCESS, "Profile created", "Your customer profile has been saved."
            )
        elif self.create_attempts > 1:
            # A second attempt only happens after a denial.
            logger.error(
                "Profile create failed after permission retry",
                extra={"identity_id": self.identity.id, "final_outcome": type(outcome).__name__},
            )
            message = PERMISSION_HELP
            if isinstance(outcome, Failed):
                message = f"{PERMISSION_HELP} (Last error: {outcome.reason})"
            self._fail_submit(ProfileError(ErrorKind.PERMISSION_DENIED, message))
        elif isinstance(outcome, PermissionDenied):
            retry_skipped = self._create_policy.max_attempts > 1
            logger.error(
                "Profile create denied",
                extra={"identity_id": self.identity.id, "session_lost": retry_skipped},
            )
            message = SESSION_LOST_HELP if retry_skipped else PERMISSION_HELP
            self._fail_submit(ProfileError(ErrorKind.PERMISSION_DENIED, message))
        else:
            self._fail_submit(ProfileError(outcome.kind, outcome.reason))
        return self.state

    async def _create_once(self) -> CreateOutcome:
        self.create_attempts += 1
        return await self.repository.create(self._submitted, self.identity.id)

    async def _submit_edit(self) -> ProfileState:
        if not self._validate_draft():
            return self.state

        patch = self.draft.diff(self.profile)
        if not patch:
            self.draft = None
            self._set_state(ProfileState.HAS_PROFILE)
            self.notifier.notify(NotificationKind.SUCCESS, "Profile updated", "No changes to save.")
            return self.state

        self._begin_submit()
        outcome = await self.repository.update(self.profile.id, patch)
        if self._disposed:
            return self.state

        if isinstance(outcome, Updated):
            self.profile = outcome.profile
            self.draft = None
            self._set_state(ProfileState.HAS_PROFILE)
            self.notifier.notify(
                NotificationKind.SUCCESS, "Profile updated", "Your changes have been saved."
            )
        else:
            self._fail_submit(ProfileError(outcome.kind, outcome.reason))
        return self.state

    def _apply_find(self, outcome: Found | NotFound | Failed) -> None:
        if isinstance(outcome, Found):
            self.profile = outcome.profile
            self.draft = None
            self.error = None
            self._set_state(ProfileState.HAS_PROFILE)
        elif isinstance(outcome, NotFound):
            self.profile = None
            self.draft = ProfileDraft.for_identity_email(self.identity.email)
            self.error = None
            self._set_state(ProfileState.NEEDS_ONBOARDING)
        else:
            # The rest of the dashboard keeps working; no form, no toast.
            logger.error(
                "Profile check failed",
                extra={"identity_id": self.identity.id, "reason": outcome.reason},
            )
            self.draft = None
            self.error = ProfileError(outcome.kind, outcome.reason)
            self._set_state(ProfileState.CHECK_FAILED)

    def _validate_draft(self) -> bool:
        if self.draft.validate():
            self.error = None
            return True
        missing = tuple(self.draft.missing_fields())
        self.error = ProfileError(
            ErrorKind.VALIDATION,
            "Please fill in all required fields: " + ", ".join(missing) + ".",
            fields=missing,
        )
        self.notifier.notify(NotificationKind.ERROR, "Missing information", self.error.message)
        return False

    def _begin_submit(self) -> None:
        self._submitting_from = self.state
        # Retries resend exactly what the user submitted.
        self._submitted = ProfileDraft(**self.draft.as_record())
        self.error = None
        self._set_state(ProfileState.SUBMITTING)

    def _fail_submit(self, error: ProfileError) -> None:
        self.error = error
        self._set_state(self._submitting_from or ProfileState.NEEDS_ONBOARDING)
        title = "Error creating profile" if self.state is ProfileState.NEEDS_ONBOARDING else "Error updating profile"
        self.notifier.notify(NotificationKind.ERROR, title, error.message)

    def _set_state(self, state: ProfileState) -> None:
        if state is not self.state:
            logger.debug("Profile state %s -> %s", self.state.value, state.value)
        self.state = state
