"""Tests for notification fan-out and the recipient operations."""

import logging

import pytest
from sqlalchemy import select
from sqlalchemy.exc import OperationalError

from talent_radar.core.exceptions import NotificationNotFoundError, PermissionDeniedError
from talent_radar.models import DiscussionThread, Notification, NotificationType
from talent_radar.repositories import NotificationRepository
from talent_radar.services import comments, notifications, polls, replies, threads


def _received(db_session, user) -> list[Notification]:
    stmt = select(Notification).where(Notification.recipient_id == user.id)
    return list(db_session.scalars(stmt))


def test_new_thread_notifies_followers(
    db_session, test_user, other_user, make_user, follow
) -> None:
    muted = make_user()
    follow(other_user, test_user)
    follow(muted, test_user, enabled=False)

    thread = threads.create_thread(db_session, test_user, "Scouting notes", "Thoughts on Endrick")

    received = _received(db_session, other_user)
    assert len(received) == 1
    assert received[0].notification_type == NotificationType.THREAD
    assert received[0].related_entity_id == thread.id
    assert received[0].triggered_by_id == test_user.id
    assert _received(db_session, muted) == []
    assert _received(db_session, test_user) == []


def test_new_poll_notifies_followers(db_session, test_user, other_user, follow) -> None:
    follow(other_user, test_user)

    poll = polls.create_poll(db_session, test_user, "Best under-21?", ["Yamal", "Zaire-Emery"])

    received = _received(db_session, other_user)
    assert [item.notification_type for item in received] == [NotificationType.POLL]
    assert received[0].action_url == f"/polls/{poll.id}"


def test_reply_notifies_thread_and_parent_authors(
    db_session, thread, test_user, other_user, moderator
) -> None:
    parent = replies.create_reply(db_session, thread.id, moderator, "Agree with this")
    replies.create_reply(
        db_session, thread.id, other_user, "Not convinced", parent_reply_id=parent.id
    )

    to_author = _received(db_session, test_user)
    to_parent = _received(db_session, moderator)
    assert len(to_author) == 2
    assert len(to_parent) == 1
    assert to_parent[0].triggered_by_id == other_user.id
    assert _received(db_session, other_user) == []


def test_author_replying_to_own_thread_is_not_notified(db_session, thread, test_user) -> None:
    replies.create_reply(db_session, thread.id, test_user, "Bumping this")
    assert _received(db_session, test_user) == []


def test_comment_reply_notifies_parent_author(db_session, player, test_user, other_user) -> None:
    parent = comments.create_comment(db_session, player.id, test_user, "Elite dribbler")
    comments.create_comment(
        db_session, player.id, other_user, "Final ball needs work", parent_comment_id=parent.id
    )

    received = _received(db_session, test_user)
    assert [item.notification_type for item in received] == [NotificationType.COMMENT_REPLY]


def test_failed_delivery_keeps_triggering_write(
    db_session, test_user, other_user, follow, mocker, caplog
) -> None:
    follow(other_user, test_user)
    mocker.patch.object(
        NotificationRepository,
        "add_all",
        side_effect=OperationalError("INSERT", {}, Exception("database is locked")),
    )

    with caplog.at_level(logging.WARNING, logger="talent_radar.services.notifications"):
        thread = threads.create_thread(db_session, test_user, "Still saved", "Body")

    mocker.stopall()
    assert db_session.get(DiscussionThread, thread.id) is not None
    assert _received(db_session, other_user) == []
    assert "Failed to deliver" in caplog.text


def test_mark_as_read_and_counts(db_session, test_user, other_user, follow) -> None:
    follow(other_user, test_user)
    threads.create_thread(db_session, test_user, "One", "Body")
    threads.create_thread(db_session, test_user, "Two", "Body")

    assert notifications.unread_count(db_session, other_user) == 2
    newest = notifications.list_notifications(db_session, other_user)[0]

    read = notifications.mark_as_read(db_session, newest.id, other_user)
    assert read.is_read is True
    assert read.read_at is not None
    assert notifications.unread_count(db_session, other_user) == 1
    unread = notifications.list_notifications(db_session, other_user, unread_only=True)
    assert newest.id not in [item.id for item in unread]

    assert notifications.mark_all_as_read(db_session, other_user) == 1
    assert notifications.unread_count(db_session, other_user) == 0
    assert notifications.mark_all_as_read(db_session, other_user) == 0


def test_mark_as_read_checks_owner(db_session, test_user, other_user, follow) -> None:
    follow(other_user, test_user)
    threads.create_thread(db_session, test_user, "Mine", "Body")
    notification = _received(db_session, other_user)[0]

    with pytest.raises(PermissionDeniedError):
        notifications.mark_as_read(db_session, notification.id, test_user)
    with pytest.raises(NotificationNotFoundError):
        notifications.mark_as_read(db_session, 999_999, other_user)
