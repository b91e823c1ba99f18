"""Profile repository protocol."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Protocol

from ..outcomes import CreateOutcome, FindOutcome, UpdateOutcome
from ..profile import ProfileDraft


class ProfileRepository(Protocol):
    """Typed access to the customer profile keyed by owning identity.

    Implementations never raise for backend failures; they return a
    classified outcome instead.
    """

    async def find(self, identity_id: str) -> FindOutcome:
        """Look up the profile owned by ``identity_id``."""
        ...

    async def create(self, draft: ProfileDraft, identity_id: str) -> CreateOutcome:
        """Insert a profile owned by ``identity_id`` and return the stored row."""
        ...

    async def update(self, profile_id: str, patch: Mapping[str, str]) -> UpdateOutcome:
        """Apply ``patch`` to an existing profile; absent keys are left untouched."""
        ...
