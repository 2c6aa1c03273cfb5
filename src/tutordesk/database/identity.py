"""Identity provider: email/password authentication.

The application never sees passwords beyond this module; it maps the
returned identity to a staff record by email.
"""

from __future__ import annotations

import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, Optional

import bcrypt
from sqlalchemy.orm import Session, sessionmaker

from tutordesk.database.models import IdentityAccount
from tutordesk.domain.errors import (
    AuthError,
    ConflictError,
    ValidationError,
    duplicate_account,
    invalid_credentials,
    required_field,
)
from tutordesk.logging_config import get_logger

logger = get_logger("database.identity")

AuthStateListener = Callable[[Optional["Identity"]], None]


@dataclass(frozen=True)
class Identity:
    """Opaque authenticated identity."""

    uid: str
    email: str


def _to_bcrypt_secret(password: str) -> bytes:
    """bcrypt only uses the first 72 bytes; truncate explicitly."""
    return password.encode("utf-8")[:72]


def hash_password(password: str, rounds: int = 12) -> str:
    """Return a bcrypt hash as a UTF-8 string."""
    return bcrypt.hashpw(_to_bcrypt_secret(password), bcrypt.gensalt(rounds=rounds)).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """Verify a password against a stored bcrypt hash."""
    return bcrypt.checkpw(_to_bcrypt_secret(password), password_hash.encode("utf-8"))


class IdentityProvider(ABC):
    """Abstract email/password identity provider."""

    @abstractmethod
    def sign_in(self, email: str, password: str) -> Identity:
        """Authenticate and make the identity current.

        Raises:
            AuthError: On unknown user or wrong password
        """
        pass

    @abstractmethod
    def sign_out(self) -> None:
        """Clear the current identity."""
        pass

    @abstractmethod
    def create_account(self, email: str, password: str) -> Identity:
        """Register a new email/password identity.

        Raises:
            ValidationError: If email or password is empty
            ConflictError: If the email is already registered
        """
        pass

    @abstractmethod
    def delete_account(self, uid: str) -> bool:
        """Remove an identity. Returns False when no such identity exists."""
        pass

    @abstractmethod
    def on_auth_state_changed(self, callback: AuthStateListener) -> Callable[[], None]:
        """Call ``callback`` with the current identity now and on every change."""
        pass

    @property
    @abstractmethod
    def current_identity(self) -> Optional[Identity]:
        """The signed-in identity, if any."""
        pass


class SQLAlchemyIdentityProvider(IdentityProvider):
    """Identity provider backed by the identities table."""

    def __init__(self, session_factory: sessionmaker[Session], rounds: int = 12):
        """Initialize identity provider.

        Args:
            session_factory: Session factory sharing the record store's engine
            rounds: bcrypt cost factor for new password hashes
        """
        self.session_factory = session_factory
        self.rounds = rounds
        self._current: Optional[Identity] = None
        self._listeners: list[AuthStateListener] = []

    def _set_current(self, identity: Optional[Identity]) -> None:
        self._current = identity
        for listener in list(self._listeners):
            listener(identity)

    @property
    def current_identity(self) -> Optional[Identity]:
        return self._current

    def sign_in(self, email: str, password: str) -> Identity:
        """Authenticate by email and password."""
        email = (email or "").strip().lower()
        with self.session_factory() as session:
            account = session.query(IdentityAccount).filter(IdentityAccount.email == email).first()
            if account is None or not verify_password(password or "", account.password_hash):
                logger.info("Failed sign-in for %s", email)
                raise AuthError(invalid_credentials())
            identity = Identity(uid=account.uid, email=account.email)

        self._set_current(identity)
        return identity

    def sign_out(self) -> None:
        """Clear the current identity."""
        if self._current is not None:
            self._set_current(None)

    def create_account(self, email: str, password: str) -> Identity:
        """Register a new identity."""
        email = (email or "").strip().lower()
        if not email:
            raise ValidationError(required_field("Email"))
        if not password:
            raise ValidationError(required_field("Password"))

        with self.session_factory() as session:
            existing = session.query(IdentityAccount).filter(IdentityAccount.email == email).first()
            if existing is not None:
                raise ConflictError(duplicate_account(email))
            account = IdentityAccount(
                uid=uuid.uuid4().hex,
                email=email,
                password_hash=hash_password(password, rounds=self.rounds),
            )
            session.add(account)
            session.commit()
            identity = Identity(uid=account.uid, email=account.email)

        logger.info("Created identity for %s", email)
        return identity

    def delete_account(self, uid: str) -> bool:
        """Remove an identity by uid."""
        with self.session_factory() as session:
            account = session.get(IdentityAccount, uid)
            if account is None:
                return False
            session.delete(account)
            session.commit()

        logger.info("Deleted identity %s", uid)
        return True

    def on_auth_state_changed(self, callback: AuthStateListener) -> Callable[[], None]:
        """Register an auth state listener."""
        self._listeners.append(callback)
        callback(self._current)

        def unsubscribe() -> None:
            if callback in self._listeners:
                self._listeners.remove(callback)

        return unsubscribe
