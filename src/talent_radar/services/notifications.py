"""Notification fan-out and the recipient-facing notification operations."""
from __future__ import annotations

import logging
from collections.abc import Iterable

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from talent_radar.core.exceptions import NotificationNotFoundError, PermissionDeniedError
from talent_radar.db.time import utcnow
from talent_radar.db.unit_of_work import unit_of_work
from talent_radar.models import (
    DiscussionReply,
    DiscussionThread,
    Notification,
    NotificationType,
    Player,
    PlayerComment,
    Poll,
    User,
)
from talent_radar.repositories import NotificationRepository, UserRepository

__all__ = [
    "NotificationDispatcher",
    "list_notifications",
    "unread_count",
    "mark_as_read",
    "mark_all_as_read",
]

logger = logging.getLogger(__name__)


def _display(user: User) -> str:
    return user.display_name or user.username


class NotificationDispatcher:
    """Builds notifications for community events and stores them.

    Delivery runs in its own transaction after the triggering write has been
    committed. A failed delivery is rolled back and logged; it never undoes
    or fails the write that triggered it.
    """

    def __init__(self, db: Session) -> None:
        self.db = db
        self.users = UserRepository(db)
        self.notifications = NotificationRepository(db)

    def notify_followers_of_new_thread(self, thread: DiscussionThread, author: User) -> int:
        return self._notify_followers(
            author,
            NotificationType.THREAD,
            title="New discussion",
            message=f'{_display(author)} started a discussion: "{thread.title}"',
            entity=("THREAD", thread.id),
            action_url=f"/discussions/threads/{thread.id}",
        )

    def notify_followers_of_new_poll(self, poll: Poll, author: User) -> int:
        return self._notify_followers(
            author,
            NotificationType.POLL,
            title="New poll",
            message=f'{_display(author)} created a poll: "{poll.question}"',
            entity=("POLL", poll.id),
            action_url=f"/polls/{poll.id}",
        )

    def notify_followers_of_new_rating(self, player: Player, rater: User) -> int:
        return self._notify_followers(
            rater,
            NotificationType.RATING,
            title="New player rating",
            message=f"{_display(rater)} rated {player.name}",
            entity=("PLAYER", player.id),
            action_url=f"/players/{player.id}",
        )

    def notify_of_new_reply(
        self,
        reply: DiscussionReply,
        thread: DiscussionThread,
        replier: User,
        parent: DiscussionReply | None = None,
    ) -> int:
        """Tell the thread author, and the author of the replied-to reply, about a reply."""
        recipients = [thread.author_id]
        if parent is not None:
            recipients.append(parent.author_id)
        return self._deliver(
            Notification(
                recipient_id=recipient_id,
                triggered_by_id=replier.id,
                notification_type=NotificationType.REPLY,
                title="New reply",
                message=f'{_display(replier)} replied in "{thread.title}"',
                related_entity_type="REPLY",
                related_entity_id=reply.id,
                action_url=f"/discussions/threads/{thread.id}#reply-{reply.id}",
            )
            for recipient_id in _unique_recipients(recipients, exclude=replier.id)
        )

    def notify_of_comment_reply(
        self, reply: PlayerComment, parent: PlayerComment, replier: User
    ) -> int:
        return self._deliver(
            Notification(
                recipient_id=recipient_id,
                triggered_by_id=replier.id,
                notification_type=NotificationType.COMMENT_REPLY,
                title="New reply to your comment",
                message=f"{_display(replier)} replied to your comment",
                related_entity_type="COMMENT",
                related_entity_id=reply.id,
                action_url=f"/players/{reply.player_id}#comment-{reply.id}",
            )
            for recipient_id in _unique_recipients([parent.author_id], exclude=replier.id)
        )

    def _notify_followers(
        self,
        actor: User,
        notification_type: NotificationType,
        *,
        title: str,
        message: str,
        entity: tuple[str, int],
        action_url: str,
    ) -> int:
        follower_ids = self.users.notifiable_follower_ids(actor.id)
        return self._deliver(
            Notification(
                recipient_id=follower_id,
                triggered_by_id=actor.id,
                notification_type=notification_type,
                title=title,
                message=message,
                related_entity_type=entity[0],
                related_entity_id=entity[1],
                action_url=action_url,
            )
            for follower_id in _unique_recipients(follower_ids, exclude=actor.id)
        )

    def _deliver(self, notifications: Iterable[Notification]) -> int:
        batch = list(notifications)
        if not batch:
            return 0
        try:
            self.notifications.add_all(batch)
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            logger.warning(
                "Failed to deliver %d %s notification(s)",
                len(batch),
                batch[0].notification_type.value,
                exc_info=True,
            )
            return 0
        logger.info(
            "Delivered %d %s notification(s)", len(batch), batch[0].notification_type.value
        )
        return len(batch)


def _unique_recipients(candidates: Iterable[int], exclude: int) -> list[int]:
    seen: list[int] = []
    for candidate in candidates:
        if candidate != exclude and candidate not in seen:
            seen.append(candidate)
    return seen


def list_notifications(
    db: Session, user: User, *, unread_only: bool = False, limit: int = 20, offset: int = 0
) -> list[Notification]:
    """Return the user's notifications, newest first."""
    return NotificationRepository(db).list_for_recipient(user.id, unread_only, limit, offset)


def unread_count(db: Session, user: User) -> int:
    return NotificationRepository(db).count_unread(user.id)


def mark_as_read(db: Session, notification_id: int, user: User) -> Notification:
    """Mark one of the user's notifications as read."""
    repo = NotificationRepository(db)
    notification = repo.get(notification_id)
    if notification is None:
        raise NotificationNotFoundError(notification_id)
    if notification.recipient_id != user.id:
        raise PermissionDeniedError("You can only mark your own notifications as read")
    if notification.is_read:
        return notification
    with unit_of_work(db, "mark notification read"):
        notification.is_read = True
        notification.read_at = utcnow()
    return notification


def mark_all_as_read(db: Session, user: User) -> int:
    """Mark every unread notification of the user as read and return how many changed."""
    with unit_of_work(db, "mark all notifications read"):
        updated = NotificationRepository(db).mark_all_read(user.id, utcnow())
    logger.info("Marked %d notification(s) read for user %s", updated, user.id)
    return updated
