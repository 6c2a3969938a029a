"""Discussion replies and reply votes.

Reply counters move through atomic increments, so concurrent votes on the
same reply never overwrite each other's adjustment.
"""
from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from talent_radar.core.exceptions import (
    DuplicateReactionError,
    InvalidRequestError,
    PermissionDeniedError,
    ReplyNotFoundError,
    ThreadLockedError,
)
from talent_radar.db.time import utcnow
from talent_radar.db.unit_of_work import unit_of_work
from talent_radar.models import DiscussionReply, ReplyVote, User, VoteType
from talent_radar.repositories import ReplyRepository
from talent_radar.services.notifications import NotificationDispatcher
from talent_radar.services.reactions import (
    ReactionChange,
    apply_increments,
    counter_deltas,
    increment,
    reconcile,
    require,
)
from talent_radar.services.threads import get_thread

__all__ = [
    "create_reply",
    "get_reply",
    "update_reply",
    "delete_reply",
    "list_thread_replies",
    "list_child_replies",
    "vote_on_reply",
    "remove_reply_vote",
    "get_reply_vote",
]

logger = logging.getLogger(__name__)

VOTE_COLUMNS = {VoteType.UPVOTE: "upvotes", VoteType.DOWNVOTE: "downvotes"}


def _clean_content(content: str | None) -> str:
    cleaned = (content or "").strip()
    if not cleaned:
        raise InvalidRequestError("Reply content cannot be empty")
    return cleaned


def get_reply(db: Session, reply_id: int) -> DiscussionReply:
    reply = ReplyRepository(db).get_active(reply_id)
    if reply is None:
        raise ReplyNotFoundError(reply_id)
    return reply


def create_reply(
    db: Session,
    thread_id: int,
    author: User,
    content: str,
    parent_reply_id: int | None = None,
) -> DiscussionReply:
    """Reply in a thread, optionally to another reply in the same thread.

    Raises:
        InvalidRequestError: If the content is blank.
        ThreadNotFoundError: If the thread does not exist.
        ThreadLockedError: If the thread is locked.
        ReplyNotFoundError: If the parent reply is missing or in another thread.
    """
    require(thread_id=thread_id)
    cleaned = _clean_content(content)
    thread = get_thread(db, thread_id)
    if thread.is_locked:
        raise ThreadLockedError(thread_id)

    repo = ReplyRepository(db)
    parent = None
    if parent_reply_id is not None:
        parent = repo.get_active(parent_reply_id)
        if parent is None or parent.thread_id != thread_id:
            raise ReplyNotFoundError(
                parent_reply_id, details="The parent reply does not belong to this thread"
            )

    with unit_of_work(db, "create reply"):
        reply = repo.add(
            DiscussionReply(
                thread_id=thread_id,
                author_id=author.id,
                parent_reply_id=parent_reply_id,
                content=cleaned,
            )
        )
        increment(thread, "reply_count", 1)
        thread.last_activity_at = utcnow()
    logger.info("User %s replied %s in thread %s", author.id, reply.id, thread_id)

    NotificationDispatcher(db).notify_of_new_reply(reply, thread, author, parent)
    return reply


def update_reply(db: Session, reply_id: int, user: User, content: str) -> DiscussionReply:
    cleaned = _clean_content(content)
    reply = get_reply(db, reply_id)
    if reply.author_id != user.id and not user.can_moderate:
        raise PermissionDeniedError("You can only edit your own replies")
    thread = get_thread(db, reply.thread_id)
    if thread.is_locked and not user.can_moderate:
        raise ThreadLockedError(thread.id)
    with unit_of_work(db, "update reply"):
        reply.content = cleaned
    logger.info("User %s edited reply %s", user.id, reply_id)
    return reply


def delete_reply(db: Session, reply_id: int, user: User) -> None:
    """Soft-delete a reply and drop it from the thread's reply count."""
    reply = get_reply(db, reply_id)
    if reply.author_id != user.id and not user.can_moderate:
        raise PermissionDeniedError("You can only delete your own replies")
    thread = get_thread(db, reply.thread_id)
    with unit_of_work(db, "delete reply"):
        reply.is_deleted = True
        increment(thread, "reply_count", -1)
    logger.info("User %s deleted reply %s", user.id, reply_id)


def list_thread_replies(
    db: Session, thread_id: int, limit: int = 50, offset: int = 0
) -> list[DiscussionReply]:
    get_thread(db, thread_id)
    return ReplyRepository(db).list_for_thread(thread_id, limit, offset)


def list_child_replies(db: Session, reply_id: int) -> list[DiscussionReply]:
    get_reply(db, reply_id)
    return ReplyRepository(db).list_children(reply_id)


def vote_on_reply(
    db: Session, reply_id: int, user: User, vote_type: VoteType | None
) -> ReplyVote | None:
    """Apply a user's reaction to a reply.

    Returns:
        The stored vote, or ``None`` when the reaction withdrew the vote.

    Raises:
        InvalidRequestError: If the reply id or vote type is missing.
        ReplyNotFoundError: If the reply is missing or deleted.
        ThreadLockedError: If the reply's thread is locked.
        DuplicateReactionError: If a concurrent request stored a vote first.
        StorageError: If the database write fails.
    """
    require(reply_id=reply_id, vote_type=vote_type)
    requested = VoteType(vote_type)
    repo = ReplyRepository(db)
    reply = _votable_reply(db, repo, reply_id)

    with unit_of_work(
        db,
        "reply vote",
        on_conflict=lambda: DuplicateReactionError("reply", reply_id),
    ):
        existing = repo.get_vote(reply_id, user.id)
        current = existing.vote_type if existing else None
        change = reconcile(current, requested)
        result: ReplyVote | None
        if existing is None:
            result = repo.add_vote(
                ReplyVote(reply_id=reply_id, user_id=user.id, vote_type=requested)
            )
        elif change is ReactionChange.REMOVED:
            repo.delete_vote(existing)
            result = None
        else:
            existing.vote_type = requested
            result = existing
        apply_increments(reply, VOTE_COLUMNS, counter_deltas(change, current, requested))

    logger.info(
        "Reply %s vote by user %s %s (%s)", reply_id, user.id, change.value, requested.value
    )
    return result


def _votable_reply(db: Session, repo: ReplyRepository, reply_id: int) -> DiscussionReply:
    reply = repo.get_active(reply_id)
    if reply is None:
        raise ReplyNotFoundError(reply_id)
    thread = get_thread(db, reply.thread_id)
    if thread.is_locked:
        raise ThreadLockedError(thread.id)
    return reply


def remove_reply_vote(db: Session, reply_id: int, user: User) -> bool:
    """Withdraw the user's vote on a reply if there is one; locked threads keep their votes."""
    repo = ReplyRepository(db)
    reply = _votable_reply(db, repo, reply_id)
    existing = repo.get_vote(reply_id, user.id)
    if existing is None:
        return False
    with unit_of_work(db, "remove reply vote"):
        increment(reply, VOTE_COLUMNS[existing.vote_type], -1)
        repo.delete_vote(existing)
    logger.info("Reply %s vote by user %s removed", reply_id, user.id)
    return True


def get_reply_vote(db: Session, reply_id: int, user: User) -> VoteType | None:
    get_reply(db, reply_id)
    vote = ReplyRepository(db).get_vote(reply_id, user.id)
    return vote.vote_type if vote else None
