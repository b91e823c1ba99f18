"""Customer profile value and the editable draft behind the profile form."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Optional

PROFILE_FIELDS = ("name", "email", "phone", "company")
REQUIRED_FIELDS = ("name", "email", "phone")

_FIELD_LABELS = {
    "name": "Name",
    "email": "Email",
    "phone": "Phone",
    "company": "Company",
}


@dataclass(frozen=True, slots=True)
class CustomerProfile:
    """Immutable snapshot of a customer profile row."""

    id: str
    owner_identity_id: Optional[str]
    name: str
    email: str
    phone: str
    company: str = ""

    def with_patch(self, patch: Mapping[str, str]) -> CustomerProfile:
        """Return a copy with only the patched fields replaced."""

        values = {name: getattr(self, name) for name in PROFILE_FIELDS}
        values.update({k: v for k, v in patch.items() if k in PROFILE_FIELDS})
        return CustomerProfile(id=self.id, owner_identity_id=self.owner_identity_id, **values)


@dataclass(slots=True)
class ProfileDraft:
    """Represents profile form input prior to validation."""

    name: str = ""
    email: str = ""
    phone: str = ""
    company: str = ""
    errors: dict[str, list[str]] = field(default_factory=dict, init=False)

    @classmethod
    def for_identity_email(cls, email: str) -> ProfileDraft:
        """Blank onboarding draft pre-filled with the signed-in email only."""

        return cls(email=email)

    @classmethod
    def from_profile(cls, profile: CustomerProfile) -> ProfileDraft:
        return cls(
            name=profile.name,
            email=profile.email,
            phone=profile.phone,
            company=profile.company,
        )

    def set(self, name: str, value: Any) -> None:
        """Replace one field; the value is kept as typed until validation."""

        if name not in PROFILE_FIELDS:
            raise ValueError(f"Unknown profile field: {name}")
        setattr(self, name, "" if value is None else str(value))

    def validate(self) -> bool:
        """Strip whitespace and check required fields are present."""

        self.errors.clear()
        for name in PROFILE_FIELDS:
            setattr(self, name, getattr(self, name).strip())
        for name in REQUIRED_FIELDS:
            if not getattr(self, name):
                self._add_error(name, f"{_FIELD_LABELS[name]} is required.")
        return not self.errors

    def missing_fields(self) -> list[str]:
        return [name for name in REQUIRED_FIELDS if name in self.errors]

    def as_record(self) -> dict[str, str]:
        return {name: getattr(self, name) for name in PROFILE_FIELDS}

    def diff(self, profile: CustomerProfile) -> dict[str, str]:
        """Return only the fields whose value differs from ``profile``."""

        return {
            name: getattr(self, name)
            for name in PROFILE_FIELDS
            if getattr(self, name) != getattr(profile, name)
        }

    def _add_error(self, field_name: str, message: str) -> None:
        self.errors.setdefault(field_name, []).append(message)
