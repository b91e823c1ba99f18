"""Credential form validation helpers."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from ...services.auth import MIN_PASSWORD_LENGTH, normalize_email


@dataclass(slots=True)
class CredentialsForm:
    """Represents sign-in or registration input prior to validation."""

    email: str = ""
    password: str = ""
    errors: dict[str, list[str]] = field(default_factory=dict, init=False)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> CredentialsForm:
        """Create a form populated from request data."""

        email = data.get("email")
        password = data.get("password")
        return cls(
            email=normalize_email(email if isinstance(email, str) else ""),
            password=password if isinstance(password, str) else "",
        )

    def validate(self, *, new_account: bool = False) -> bool:
        self.errors.clear()
        if not self.email:
            self._add_error("email", "Email is required.")
        elif "@" not in self.email:
            self._add_error("email", "Enter a valid email address.")
        if not self.password:
            self._add_error("password", "Password is required.")
        elif new_account and len(self.password) < MIN_PASSWORD_LENGTH:
            self._add_error(
                "password", f"Password must be at least {MIN_PASSWORD_LENGTH} characters."
            )
        return not self.errors

    def _add_error(self, field_name: str, message: str) -> None:
        self.errors.setdefault(field_name, []).append(message)


@dataclass(slots=True)
class PasswordChangeForm:
    """Current password plus the new password typed twice."""

    current_password: str = ""
    new_password: str = ""
    confirm_password: str = ""
    errors: dict[str, list[str]] = field(default_factory=dict, init=False)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> PasswordChangeForm:
        values = {}
        for name in ("current_password", "new_password", "confirm_password"):
            value = data.get(name)
            values[name] = value if isinstance(value, str) else ""
        return cls(**values)

    def validate(self) -> bool:
        self.errors.clear()
        if not self.current_password:
            self.errors.setdefault("current_password", []).append("Current password is required.")
        if len(self.new_password) < MIN_PASSWORD_LENGTH:
            self.errors.setdefault("new_password", []).append(
                f"Password must be at least {MIN_PASSWORD_LENGTH} characters."
            )
        elif self.new_password != self.confirm_password:
            self.errors.setdefault("confirm_password", []).append("New passwords do not match.")
        return not self.errors
