"""Explicit sign-in session and live subscriptions."""

from dataclasses import dataclass
from typing import Optional

from tutordesk.database import mappers
from tutordesk.database.base import ChangeListener, RecordStore, Unsubscribe
from tutordesk.database.identity import Identity, IdentityProvider
from tutordesk.domain.entities import Collection, StaffMember
from tutordesk.domain.errors import (
    AuthError,
    not_signed_in,
    staff_profile_missing,
)
from tutordesk.logging_config import get_logger

logger = get_logger("domain.session")


@dataclass(frozen=True)
class Session:
    """A signed-in staff member.

    Created on successful sign-in and passed explicitly to every operation
    whose result depends on who is asking.
    """

    staff: StaffMember
    identity: Identity

    @property
    def handle(self) -> str:
        return self.staff.handle

    @property
    def is_admin(self) -> bool:
        return self.staff.is_admin


class SessionManager:
    """Signs staff in and out and owns the session's live subscriptions.

    Watchers registered with ``watch`` are subscribed while a session is
    active. On every session change all subscriptions are torn down before
    the new session's are installed, and notifications still arriving for a
    previous session are dropped.
    """

    def __init__(self, store: RecordStore, identity_provider: IdentityProvider):
        """Initialize session manager.

        Args:
            store: Record store instance
            identity_provider: Identity provider instance
        """
        self.store = store
        self.identity_provider = identity_provider
        self._session: Optional[Session] = None
        self._generation = 0
        self._watchers: list[tuple[Collection, ChangeListener]] = []
        self._unsubscribers: list[Unsubscribe] = []
        self._stop_auth_listener = identity_provider.on_auth_state_changed(self._on_auth_state_changed)

    @property
    def current(self) -> Optional[Session]:
        return self._session

    @property
    def generation(self) -> int:
        """Counter bumped on every session change."""
        return self._generation

    def require(self) -> Session:
        """Return the active session.

        Raises:
            AuthError: If nobody is signed in
        """
        if self._session is None:
            raise AuthError(not_signed_in())
        return self._session

    def sign_in(self, email: str, password: str) -> Session:
        """Authenticate and map the identity to a staff record.

        Raises:
            AuthError: On bad credentials, or when no staff record has the email
        """
        identity = self.identity_provider.sign_in(email, password)
        matches = self.store.query_documents(Collection.STAFF, {"email": identity.email})
        if not matches:
            logger.error("Identity %s has no staff record", identity.email)
            self.identity_provider.sign_out()
            raise AuthError(staff_profile_missing(identity.email))

        session = Session(staff=mappers.staff_to_domain(matches[0]), identity=identity)
        self._activate(session)
        logger.info("Signed in as %s", session.handle)
        return session

    def sign_out(self) -> None:
        """End the session and stop its subscriptions."""
        self.identity_provider.sign_out()
        self._activate(None)

    def close(self) -> None:
        """Sign out and detach from the identity provider."""
        self.sign_out()
        self._stop_auth_listener()

    def watch(self, collection: Collection, on_change: ChangeListener) -> None:
        """Receive live snapshots of a collection for every session.

        The listener is subscribed now if a session is active, and again each
        time a new session starts.
        """
        self._watchers.append((collection, on_change))
        if self._session is not None:
            self._subscribe(collection, on_change, self._generation)

    def _subscribe(self, collection: Collection, on_change: ChangeListener, generation: int) -> None:
        def deliver(documents: list[dict]) -> None:
            if generation != self._generation:
                logger.debug("Dropped stale %s snapshot", collection.value)
                return
            on_change(documents)

        self._unsubscribers.append(self.store.subscribe(collection, deliver))

    def _teardown(self) -> None:
        unsubscribers, self._unsubscribers = self._unsubscribers, []
        for unsubscribe in unsubscribers:
            unsubscribe()

    def _activate(self, session: Optional[Session]) -> None:
        self._teardown()
        self._generation += 1
        self._session = session
        if session is None:
            return
        for collection, on_change in self._watchers:
            self._subscribe(collection, on_change, self._generation)

    def _on_auth_state_changed(self, identity: Optional[Identity]) -> None:
        # Signed out elsewhere: drop the session and its data feeds
        if identity is None and self._session is not None:
            self._activate(None)

