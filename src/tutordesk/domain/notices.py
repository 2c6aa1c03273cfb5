"""Notice board service and reaction toggling."""

import uuid
from dataclasses import replace
from datetime import datetime, UTC
from typing import Callable, Optional, Sequence

from tutordesk.database import mappers
from tutordesk.database.base import RecordStore
from tutordesk.domain.access import can_edit, can_view, filter_visible
from tutordesk.domain.entities import (
    Collection,
    Comment,
    Notice,
    NotFound,
    Reaction,
    UpdateResult,
    Updated,
)
from tutordesk.domain.errors import (
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
    record_not_editable,
    required_field,
)
from tutordesk.domain.session import Session
from tutordesk.logging_config import get_logger

logger = get_logger("domain.notices")


def toggle_reaction(reactions: Sequence[Reaction], emoji: str, actor: str) -> tuple[Reaction, ...]:
    """Add or remove an actor's emoji reaction.

    An actor holds at most one reaction per distinct emoji; reacting again
    with the same emoji removes it.
    """
    existing = Reaction(emoji=emoji, user=actor)
    if existing in reactions:
        return tuple(r for r in reactions if r != existing)
    return tuple(reactions) + (existing,)


def _content(text: str) -> str:
    text = (text or "").strip()
    if not text:
        raise ValidationError(required_field("Content"))
    return text


class NoticeService:
    """Service for the notice board."""

    def __init__(self, store: RecordStore, clock: Callable[[], datetime] = lambda: datetime.now(UTC)):
        """Initialize notice service.

        Args:
            store: Record store instance
            clock: Returns the current time for new notices and comments
        """
        self.store = store
        self.clock = clock

    def _load(self, notice_id: str) -> Optional[Notice]:
        doc = self.store.get_document(Collection.NOTICES, notice_id)
        if doc is None:
            return None
        return mappers.notice_to_domain(doc)

    def _save(self, notice: Notice, **fields) -> UpdateResult:
        try:
            self.store.update_document(Collection.NOTICES, notice.id, fields)
        except NotFoundError:
            return self._missing(notice.id)
        return Updated(Collection.NOTICES, notice.id)

    def _missing(self, notice_id: str) -> NotFound:
        logger.warning("Notice %s not found", notice_id)
        return NotFound(Collection.NOTICES, notice_id)

    def post_notice(
        self, session: Session, content: str, recipients: Optional[Sequence[str]] = None
    ) -> str:
        """Post a notice.

        Args:
            session: Author's session
            content: Notice text
            recipients: Staff handles, or None for everyone

        Returns:
            Notice ID
        """
        notice = Notice(
            id=self.store.new_id(Collection.NOTICES),
            author=session.handle,
            content=_content(content),
            posted_at=self.clock(),
            recipients=tuple(recipients) if recipients else None,
        )
        self.store.insert_document(Collection.NOTICES, notice.id, mappers.notice_to_document(notice))
        logger.info("%s posted notice %s", session.handle, notice.id)
        return notice.id

    def list_notices(self, session: Session) -> list[Notice]:
        """Notices visible to the session, newest first."""
        notices = [mappers.notice_to_domain(doc) for doc in self.store.list_documents(Collection.NOTICES)]
        visible = filter_visible(session.staff, notices)
        return sorted(visible, key=lambda n: n.posted_at, reverse=True)

    def toggle_reaction(self, session: Session, notice_id: str, emoji: str) -> UpdateResult:
        """Toggle the session's emoji reaction on a notice."""
        notice = self._load(notice_id)
        if notice is None or not can_view(session.staff, notice):
            return self._missing(notice_id)

        reactions = toggle_reaction(notice.reactions, emoji, session.handle)
        return self._save(notice, reactions=mappers.reactions_to_document(reactions))

    def add_comment(self, session: Session, notice_id: str, content: str) -> UpdateResult:
        """Append a comment to a notice."""
        text = _content(content)
        notice = self._load(notice_id)
        if notice is None or not can_view(session.staff, notice):
            return self._missing(notice_id)

        comment = Comment(
            id=f"comment-{uuid.uuid4().hex[:12]}",
            author=session.handle,
            content=text,
            posted_at=self.clock(),
        )
        comments = notice.comments + (comment,)
        return self._save(notice, comments=[mappers.comment_to_document(c) for c in comments])

    def toggle_comment_reaction(
        self, session: Session, notice_id: str, comment_id: str, emoji: str
    ) -> UpdateResult:
        """Toggle the session's emoji reaction on one comment of a notice."""
        notice = self._load(notice_id)
        if notice is None or not can_view(session.staff, notice):
            return self._missing(notice_id)
        if not any(c.id == comment_id for c in notice.comments):
            logger.warning("Comment %s not found on notice %s", comment_id, notice_id)
            return NotFound(Collection.NOTICES, comment_id)

        comments = tuple(
            replace(c, reactions=toggle_reaction(c.reactions, emoji, session.handle))
            if c.id == comment_id
            else c
            for c in notice.comments
        )
        return self._save(notice, comments=[mappers.comment_to_document(c) for c in comments])

    def update_notice(self, session: Session, notice_id: str, content: str) -> UpdateResult:
        """Change a notice's text (author or administrator only)."""
        text = _content(content)
        notice = self._load(notice_id)
        if notice is None:
            return self._missing(notice_id)
        if not can_edit(session.staff, notice):
            raise PermissionDeniedError(record_not_editable("notice", notice_id))
        return self._save(notice, content=text)

    def delete_notice(self, session: Session, notice_id: str) -> UpdateResult:
        """Delete a notice (author or administrator only)."""
        notice = self._load(notice_id)
        if notice is None:
            return self._missing(notice_id)
        if not can_edit(session.staff, notice):
            raise PermissionDeniedError(record_not_editable("notice", notice_id))

        if not self.store.delete_document(Collection.NOTICES, notice_id):
            return self._missing(notice_id)
        return Updated(Collection.NOTICES, notice_id)
