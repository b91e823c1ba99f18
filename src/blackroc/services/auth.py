"""Authentication and session management services."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional, Protocol

from argon2 import PasswordHasher
from argon2.exceptions import InvalidHash, VerificationError, VerifyMismatchError
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import select

from ..domain.identity import Identity
from ..errors import AuthError
from ..infra.database import SessionFactory
from ..logging_config import get_logger
from ..models.user import User

logger = get_logger(__name__)

_hasher = PasswordHasher()
MIN_PASSWORD_LENGTH = 6


def normalize_email(email: str) -> str:
    return (email or "").strip().lower()


def _validate_credentials(email: str, password: str) -> None:
    if "@" not in email or email.startswith("@") or email.endswith("@"):
        raise ValueError("Enter a valid email address.")
    if len(password or "") < MIN_PASSWORD_LENGTH:
        raise ValueError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters.")


def get_user_by_email(email: str, session_factory: SessionFactory) -> Optional[User]:
    """Fetch a user by email."""
    email = normalize_email(email)
    with session_factory() as session:
        user = session.exec(select(User).where(User.email == email)).first()
        if user:
            session.expunge(user)
        return user


def create_user(*, email: str, password: str, session_factory: SessionFactory) -> User:
    """Create a new user with hashed password."""

    email = normalize_email(email)
    _validate_credentials(email, password)
    password_hash = _hasher.hash(password)
    with session_factory() as session:
        existing = session.exec(select(User).where(User.email == email)).first()
        if existing:
            raise ValueError("An account with this email already exists.")
        user = User(email=email, password_hash=password_hash)
        session.add(user)
        session.commit()
        session.refresh(user)
        session.expunge(user)
        return user


def change_password(
    *, user_id: str, current_password: str, new_password: str, session_factory: SessionFactory
) -> User:
    """Replace a user's password after re-checking the current one.

    Raises ``ValueError`` when the current password is wrong or the new one is
    too short or unchanged.
    """

    if len(new_password or "") < MIN_PASSWORD_LENGTH:
        raise ValueError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters.")
    with session_factory() as session:
        user = session.get(User, user_id)
        if user is None:
            raise ValueError("User not found")
        try:
            _hasher.verify(user.password_hash, current_password or "")
        except (VerifyMismatchError, InvalidHash, VerificationError):
            raise ValueError("Current password is incorrect.") from None
        if current_password == new_password:
            raise ValueError("New password must differ from the current one.")
        user.password_hash = _hasher.hash(new_password)
        session.add(user)
        session.commit()
        session.refresh(user)
        session.expunge(user)
        return user


def authenticate(*, email: str, password: str, session_factory: SessionFactory) -> Optional[User]:
    """Validate credentials and return the user when correct."""

    email = normalize_email(email)
    if not email:
        return None
    with session_factory() as session:
        user = session.exec(select(User).where(User.email == email)).first()
        if user is None:
            return None
        try:
            _hasher.verify(user.password_hash, password)
        except (VerifyMismatchError, InvalidHash, VerificationError):
            return None

        user.last_sign_in = datetime.now(timezone.utc)
        session.add(user)
        session.commit()
        session.refresh(user)
        session.expunge(user)
        return user


class SessionStore(Protocol):
    """Holds the signed-in user id for one client."""

    def get(self) -> Optional[str]:
        ...

    def set(self, user_id: str) -> None:
        ...

    def clear(self) -> None:
        ...


class MemorySessionStore:
    """Process-local session store for the desktop shell and tests."""

    def __init__(self, user_id: Optional[str] = None):
        self._user_id = user_id

    def get(self) -> Optional[str]:
        return self._user_id

    def set(self, user_id: str) -> None:
        self._user_id = user_id

    def clear(self) -> None:
        self._user_id = None


class AuthProvider:
    """Resolves, begins and ends sessions against the users table."""

    def __init__(self, session_factory: SessionFactory, store: SessionStore):
        self.session_factory = session_factory
        self.store = store

    def current_identity(self) -> Optional[Identity]:
        """Return the identity behind the stored session, if it still exists.

        Raises ``AuthError`` when the user table cannot be read.
        """
        user_id = self.store.get()
        if not user_id:
            return None
        try:
            with self.session_factory() as session:
                user = session.get(User, user_id)
                identity = Identity(id=user.id, email=user.email) if user else None
        except SQLAlchemyError as exc:
            raise AuthError("Could not verify the current session.") from exc
        if identity is None:
            logger.info("Stored session points at a missing user", extra={"user_id": user_id})
            self.store.clear()
        return identity

    def begin_session(self, email: str, password: str) -> Optional[Identity]:
        """Sign in; returns ``None`` on bad credentials."""
        user = authenticate(email=email, password=password, session_factory=self.session_factory)
        if user is None:
            logger.info("Sign-in rejected", extra={"email": normalize_email(email)})
            return None
        self.store.set(user.id)
        logger.info("Session started", extra={"user_id": user.id})
        return Identity(id=user.id, email=user.email)

    def register(self, email: str, password: str) -> Identity:
        """Create an account and sign it in.

        Raises ``ValueError`` for invalid or duplicate credentials.
        """
        user = create_user(email=email, password=password, session_factory=self.session_factory)
        self.store.set(user.id)
        logger.info("Account registered", extra={"user_id": user.id})
        return Identity(id=user.id, email=user.email)

    def end_session(self) -> None:
        user_id = self.store.get()
        self.store.clear()
        if user_id:
            logger.info("Session ended", extra={"user_id": user_id})

    def change_password(self, current_password: str, new_password: str) -> Identity:
        """Change the signed-in user's password.

        Raises ``AuthError`` without a session and ``ValueError`` for rejected
        passwords.
        """
        identity = self.current_identity()
        if identity is None:
            raise AuthError("Sign in to change your password.")
        change_password(
            user_id=identity.id,
            current_password=current_password,
            new_password=new_password,
            session_factory=self.session_factory,
        )
        logger.info("Password changed", extra={"user_id": identity.id})
        return identity
