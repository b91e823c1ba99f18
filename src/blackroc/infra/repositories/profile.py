"""SQLModel implementation of the profile repository."""

from __future__ import annotations

import asyncio
from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Callable, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import select

from ...domain.identity import Identity
from ...domain.outcomes import (
    CreateOutcome,
    Created,
    Failed,
    FindOutcome,
    Found,
    NotFound,
    PermissionDenied,
    UpdateOutcome,
    Updated,
)
from ...domain.profile import PROFILE_FIELDS, CustomerProfile, ProfileDraft
from ...errors import BackendError, ErrorKind, PermissionDeniedError
from ...logging_config import get_logger
from ...models.customer import Customer
from ..database import SessionFactory

logger = get_logger(__name__)

IdentityResolver = Callable[[], Optional[Identity]]


def _to_profile(row: Customer) -> CustomerProfile:
    return CustomerProfile(
        id=row.id,
        owner_identity_id=row.user_id,
        name=row.name,
        email=row.email,
        phone=row.phone,
        company=row.company or "",
    )


class SQLModelProfileRepository:
    """SQLModel-based profile repository.

    Writes are only accepted from the identity that owns the row, as resolved
    by ``current_identity`` at the time of the write.
    """

    def __init__(self, session_factory: SessionFactory, current_identity: IdentityResolver):
        self.session_factory = session_factory
        self.current_identity = current_identity

    async def find(self, identity_id: str) -> FindOutcome:
        """Look up the profile owned by ``identity_id``."""
        try:
            profile = await asyncio.to_thread(self._find_sync, identity_id)
        except SQLAlchemyError as exc:
            logger.warning("Profile lookup failed", extra={"identity_id": identity_id, "error": str(exc)})
            return Failed(reason="Could not load your profile.")
        if profile is None:
            return NotFound()
        return Found(profile)

    async def create(self, draft: ProfileDraft, identity_id: str) -> CreateOutcome:
        """Insert a profile owned by ``identity_id``."""
        try:
            profile = await asyncio.to_thread(self._insert_sync, draft.as_record(), identity_id)
        except PermissionDeniedError as exc:
            logger.warning("Profile insert denied", extra={"identity_id": identity_id, "error": str(exc)})
            return PermissionDenied(reason=str(exc))
        except IntegrityError:
            logger.warning("Profile insert conflicted", extra={"identity_id": identity_id})
            return Failed(reason="A profile already exists for this account.")
        except (SQLAlchemyError, BackendError) as exc:
            logger.error("Profile insert failed", extra={"identity_id": identity_id, "error": str(exc)})
            return Failed(reason="Could not save your profile.")
        return Created(profile)

    async def update(self, profile_id: str, patch: Mapping[str, str]) -> UpdateOutcome:
        """Apply ``patch`` to an existing profile; absent keys are preserved."""
        unknown = sorted(set(patch) - set(PROFILE_FIELDS))
        if unknown:
            return Failed(reason=f"Unknown profile fields: {', '.join(unknown)}", kind=ErrorKind.VALIDATION)
        try:
            profile = await asyncio.to_thread(self._update_sync, profile_id, dict(patch))
        except PermissionDeniedError as exc:
            logger.warning("Profile update denied", extra={"profile_id": profile_id, "error": str(exc)})
            return PermissionDenied(reason=str(exc))
        except (SQLAlchemyError, BackendError) as exc:
            logger.error("Profile update failed", extra={"profile_id": profile_id, "error": str(exc)})
            return Failed(reason="Could not update your profile.")
        if profile is None:
            return Failed(reason="Profile no longer exists.", kind=ErrorKind.NOT_FOUND)
        return Updated(profile)

    def _require_identity(self) -> Identity:
        identity = self.current_identity()
        if identity is None:
            raise PermissionDeniedError("No active session for this write.")
        return identity

    def _find_sync(self, identity_id: str) -> Optional[CustomerProfile]:
        with self.session_factory() as session:
            row = session.exec(select(Customer).where(Customer.user_id == identity_id)).first()
            return _to_profile(row) if row is not None else None

    def _insert_sync(self, record: dict[str, str], identity_id: str) -> CustomerProfile:
        identity = self._require_identity()
        if identity.id != identity_id:
            raise PermissionDeniedError("The signed-in account cannot create this profile.")
        with self.session_factory() as session:
            row = Customer(user_id=identity_id, **record)
            session.add(row)
            session.commit()
            session.refresh(row)
            return _to_profile(row)

    def _update_sync(self, profile_id: str, patch: dict[str, str]) -> Optional[CustomerProfile]:
        identity = self._require_identity()
        with self.session_factory() as session:
            row = session.get(Customer, profile_id)
            if row is None:
                return None
            if row.user_id != identity.id:
                raise PermissionDeniedError("The signed-in account does not own this profile.")
            for name, value in patch.items():
                setattr(row, name, value)
            row.updated_at = datetime.now(timezone.utc)
            session.add(row)
            session.commit()
            session.refresh(row)
            return _to_profile(row)
