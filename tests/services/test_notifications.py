# tests/services/test_notifications.py
"""Tests for the notification emitter and inbox operations."""

import pytest

from civic_pulse.models import Anonymous, Identified, Notification
from civic_pulse.services.errors import NotFoundError, PermissionDeniedError
from civic_pulse.services.notifications import (
    NotificationEmitter,
    NotificationTemplate,
    RelatedEntity,
)


@pytest.fixture()
def emitter() -> NotificationEmitter:
    return NotificationEmitter()


def _send(db_session, emitter, user, template=NotificationTemplate.REVIEW_APPROVED):
    return emitter.notify(db_session, Identified(user.user_id), template, RelatedEntity("review", 7))


def test_notify_identified_author(db_session, emitter, author) -> None:
    notification = emitter.notify(
        db_session,
        Identified(author.user_id),
        NotificationTemplate.REVIEW_FLAGGED,
        RelatedEntity(kind="review", entity_id=11),
        flag_count=5,
    )

    assert notification is not None
    assert notification.user_id == author.user_id
    assert notification.is_read is False
    assert notification.type == "warning"
    assert "flagged by 5 users" in notification.message
    assert (notification.related_entity_type, notification.related_entity_id) == ("review", 11)


def test_notify_anonymous_author_writes_nothing(db_session, emitter) -> None:
    assert emitter.notify(db_session, Anonymous(), NotificationTemplate.REVIEW_REMOVED) is None
    assert db_session.query(Notification).count() == 0


def test_inbox_lists_newest_first_and_counts_unread(db_session, emitter, author) -> None:
    first = _send(db_session, emitter, author)
    second = _send(db_session, emitter, author, NotificationTemplate.REVIEW_REMOVED)

    inbox = emitter.list_for(db_session, author.user_id)

    assert [item.notification_id for item in inbox] == [
        second.notification_id,
        first.notification_id,
    ]
    assert emitter.unread_count(db_session, author.user_id) == 2

    emitter.mark_read(db_session, author.user_id, first.notification_id)
    assert emitter.unread_count(db_session, author.user_id) == 1


def test_mark_all_read_reports_changed_rows(db_session, emitter, author, voter) -> None:
    for _ in range(3):
        _send(db_session, emitter, author)
    _send(db_session, emitter, voter)

    assert emitter.mark_all_read(db_session, author.user_id) == 3
    assert emitter.mark_all_read(db_session, author.user_id) == 0
    assert emitter.unread_count(db_session, voter.user_id) == 1


def test_other_users_notifications_are_off_limits(db_session, emitter, author, voter) -> None:
    notification = _send(db_session, emitter, author)

    with pytest.raises(PermissionDeniedError):
        emitter.mark_read(db_session, voter.user_id, notification.notification_id)
    with pytest.raises(PermissionDeniedError):
        emitter.delete(db_session, voter.user_id, notification.notification_id)
    with pytest.raises(NotFoundError):
        emitter.mark_read(db_session, author.user_id, 98765)


def test_delete_and_delete_all(db_session, emitter, author) -> None:
    keep = _send(db_session, emitter, author)
    drop = _send(db_session, emitter, author)

    emitter.delete(db_session, author.user_id, drop.notification_id)
    assert [item.notification_id for item in emitter.list_for(db_session, author.user_id)] == [
        keep.notification_id
    ]

    assert emitter.delete_all(db_session, author.user_id) == 1
    assert emitter.list_for(db_session, author.user_id) == []
