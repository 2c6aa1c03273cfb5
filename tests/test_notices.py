"""Tests for notices, comments and reactions."""

import pytest

from tutordesk.domain.entities import NotFound, Reaction, Updated
from tutordesk.domain.errors import PermissionDeniedError, ValidationError
from tutordesk.domain.notices import toggle_reaction


def test_toggle_reaction_adds_then_removes():
    """Test that toggling twice restores the original reactions."""
    original = (Reaction("👍", "gabriella"),)

    added = toggle_reaction(original, "🎉", "bruno.costa")
    removed = toggle_reaction(added, "🎉", "bruno.costa")

    assert added == (Reaction("👍", "gabriella"), Reaction("🎉", "bruno.costa"))
    assert removed == original


def test_toggle_reaction_allows_distinct_emojis():
    reactions = toggle_reaction((), "👍", "bruno.costa")
    reactions = toggle_reaction(reactions, "❤️", "bruno.costa")

    assert len(reactions) == 2


def test_toggle_reaction_is_per_actor():
    reactions = toggle_reaction((), "👍", "bruno.costa")
    reactions = toggle_reaction(reactions, "👍", "gabriella")

    assert reactions == (Reaction("👍", "bruno.costa"), Reaction("👍", "gabriella"))


def test_post_and_list_newest_first(notice_service, admin_session, staff_session):
    """Test listing notices newest first."""
    first = notice_service.post_notice(admin_session, "Team meeting on Friday")
    second = notice_service.post_notice(staff_session, "Room 2 is booked")

    notices = notice_service.list_notices(admin_session)

    assert [n.id for n in notices] == [second, first]
    assert notices[1].recipients is None


def test_notice_addressed_to_others_is_hidden(notice_service, admin_session, staff_session):
    notice_service.post_notice(admin_session, "Payroll details", recipients=["gabriella"])
    visible = notice_service.post_notice(admin_session, "Bring the workbooks", recipients=["bruno.costa"])

    assert [n.id for n in notice_service.list_notices(staff_session)] == [visible]


def test_post_empty_notice_rejected(notice_service, admin_session):
    with pytest.raises(ValidationError):
        notice_service.post_notice(admin_session, "   ")


def test_reaction_round_trip_on_notice(notice_service, admin_session, staff_session):
    """Test toggling a reaction on a stored notice twice."""
    notice_id = notice_service.post_notice(admin_session, "Welcome!")

    assert isinstance(notice_service.toggle_reaction(staff_session, notice_id, "👍"), Updated)
    assert notice_service.list_notices(admin_session)[0].reactions == (Reaction("👍", "bruno.costa"),)

    notice_service.toggle_reaction(staff_session, notice_id, "👍")
    assert notice_service.list_notices(admin_session)[0].reactions == ()


def test_react_to_missing_notice(notice_service, staff_session):
    result = notice_service.toggle_reaction(staff_session, "missing", "👍")

    assert isinstance(result, NotFound)


def test_comments_and_comment_reactions(notice_service, admin_session, staff_session):
    """Test commenting and reacting to a comment."""
    notice_id = notice_service.post_notice(admin_session, "Welcome!")
    notice_service.add_comment(staff_session, notice_id, "Thanks!")

    comment = notice_service.list_notices(admin_session)[0].comments[0]
    assert comment.author == "bruno.costa"
    assert comment.content == "Thanks!"

    result = notice_service.toggle_comment_reaction(admin_session, notice_id, comment.id, "❤️")

    assert isinstance(result, Updated)
    assert notice_service.list_notices(admin_session)[0].comments[0].reactions == (Reaction("❤️", "gabriella"),)


def test_react_to_missing_comment(notice_service, admin_session):
    notice_id = notice_service.post_notice(admin_session, "Welcome!")

    result = notice_service.toggle_comment_reaction(admin_session, notice_id, "comment-missing", "👍")

    assert isinstance(result, NotFound)


def test_only_author_or_admin_edits(notice_service, admin_session, staff_session):
    """Test edit and delete permissions on notices."""
    notice_id = notice_service.post_notice(admin_session, "Original")

    with pytest.raises(PermissionDeniedError):
        notice_service.update_notice(staff_session, notice_id, "Changed")
    with pytest.raises(PermissionDeniedError):
        notice_service.delete_notice(staff_session, notice_id)

    own = notice_service.post_notice(staff_session, "Mine")
    assert isinstance(notice_service.update_notice(staff_session, own, "Mine, edited"), Updated)
    assert isinstance(notice_service.delete_notice(admin_session, own), Updated)
    assert [n.id for n in notice_service.list_notices(admin_session)] == [notice_id]


def test_toggle_reaction_from_empty():
    assert toggle_reaction((), "👍", "alice") == (Reaction("👍", "alice"),)
    assert toggle_reaction((Reaction("👍", "alice"),), "👍", "alice") == ()
