"""Player comments: authoring, moderation and vote reconciliation.

Comment vote counters are recounted from the vote table after every change,
so they always match the stored votes even if an earlier write drifted.
"""
from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from talent_radar.core.exceptions import (
    CommentNotFoundError,
    DuplicateReactionError,
    InvalidRequestError,
    PermissionDeniedError,
    PlayerNotFoundError,
)
from talent_radar.db.unit_of_work import unit_of_work
from talent_radar.models import PlayerComment, PlayerCommentVote, User, VoteType
from talent_radar.repositories import CommentRepository, PlayerRepository
from talent_radar.services.notifications import NotificationDispatcher
from talent_radar.services.reactions import ReactionChange, reconcile, require

__all__ = [
    "create_comment",
    "update_comment",
    "delete_comment",
    "feature_comment",
    "get_comment",
    "list_player_comments",
    "list_comment_replies",
    "list_featured_comments",
    "vote_on_comment",
    "remove_comment_vote",
    "get_comment_vote",
]

logger = logging.getLogger(__name__)


def _clean_content(content: str | None) -> str:
    cleaned = (content or "").strip()
    if not cleaned:
        raise InvalidRequestError("Comment content cannot be empty")
    return cleaned


def _ensure_can_edit(comment: PlayerComment, user: User, action: str) -> None:
    if comment.author_id != user.id and not user.can_moderate:
        raise PermissionDeniedError(f"You can only {action} your own comments")


def get_comment(db: Session, comment_id: int) -> PlayerComment:
    comment = CommentRepository(db).get_active(comment_id)
    if comment is None:
        raise CommentNotFoundError(comment_id)
    return comment


def create_comment(
    db: Session,
    player_id: int,
    author: User,
    content: str,
    parent_comment_id: int | None = None,
) -> PlayerComment:
    """Post a comment on a player, optionally as a reply to another comment.

    Args:
        db: Database session.
        player_id: Player the comment is about.
        author: The commenting user.
        content: Comment body; surrounding whitespace is trimmed.
        parent_comment_id: Comment being replied to, which must be on the same player.

    Returns:
        The persisted comment.

    Raises:
        InvalidRequestError: If the content is blank.
        PlayerNotFoundError: If the player does not exist.
        CommentNotFoundError: If the parent is missing, deleted or on another player.
    """
    require(player_id=player_id)
    cleaned = _clean_content(content)
    comments = CommentRepository(db)
    player = PlayerRepository(db).get(player_id)
    if player is None:
        raise PlayerNotFoundError(player_id)

    parent = None
    if parent_comment_id is not None:
        parent = comments.get_active(parent_comment_id)
        if parent is None or parent.player_id != player_id:
            raise CommentNotFoundError(
                parent_comment_id, details="The parent comment is not on this player"
            )

    with unit_of_work(db, "create comment"):
        comment = comments.add(
            PlayerComment(
                player_id=player_id,
                author_id=author.id,
                parent_comment_id=parent_comment_id,
                content=cleaned,
            )
        )
    logger.info("User %s commented %s on player %s", author.id, comment.id, player_id)

    if parent is not None:
        NotificationDispatcher(db).notify_of_comment_reply(comment, parent, author)
    return comment


def update_comment(db: Session, comment_id: int, user: User, content: str) -> PlayerComment:
    cleaned = _clean_content(content)
    comment = get_comment(db, comment_id)
    _ensure_can_edit(comment, user, "edit")
    with unit_of_work(db, "update comment"):
        comment.content = cleaned
    logger.info("User %s edited comment %s", user.id, comment_id)
    return comment


def delete_comment(db: Session, comment_id: int, user: User) -> None:
    """Soft-delete a comment; its votes stay on record."""
    comment = get_comment(db, comment_id)
    _ensure_can_edit(comment, user, "delete")
    with unit_of_work(db, "delete comment"):
        comment.is_deleted = True
    logger.info("User %s deleted comment %s", user.id, comment_id)


def feature_comment(db: Session, comment_id: int, user: User, featured: bool = True) -> PlayerComment:
    if not user.can_moderate:
        raise PermissionDeniedError("Only moderators can feature comments")
    comment = get_comment(db, comment_id)
    with unit_of_work(db, "feature comment"):
        comment.is_featured = featured
    logger.info("User %s set featured=%s on comment %s", user.id, featured, comment_id)
    return comment


def list_player_comments(
    db: Session, player_id: int, limit: int = 20, offset: int = 0
) -> list[PlayerComment]:
    """Top-level comments on a player, newest first."""
    if PlayerRepository(db).get(player_id) is None:
        raise PlayerNotFoundError(player_id)
    return CommentRepository(db).list_top_level(player_id, limit, offset)


def list_comment_replies(db: Session, comment_id: int) -> list[PlayerComment]:
    get_comment(db, comment_id)
    return CommentRepository(db).list_replies(comment_id)


def list_featured_comments(db: Session, player_id: int) -> list[PlayerComment]:
    return CommentRepository(db).list_featured(player_id)


def _recount(repo: CommentRepository, comment: PlayerComment) -> None:
    comment.upvotes = repo.count_votes(comment.id, VoteType.UPVOTE)
    comment.downvotes = repo.count_votes(comment.id, VoteType.DOWNVOTE)


def vote_on_comment(
    db: Session, comment_id: int, user: User, vote_type: VoteType | None
) -> PlayerCommentVote | None:
    """Apply a user's reaction to a comment.

    A first reaction is stored, the same reaction again withdraws it, and a
    different reaction replaces it. The comment's counters are recounted in
    the same transaction.

    Returns:
        The stored vote, or ``None`` when the reaction withdrew the vote.

    Raises:
        InvalidRequestError: If the comment id or vote type is missing.
        CommentNotFoundError: If the comment is missing or deleted.
        DuplicateReactionError: If a concurrent request stored a vote first.
        StorageError: If the database write fails.
    """
    require(comment_id=comment_id, vote_type=vote_type)
    requested = VoteType(vote_type)
    repo = CommentRepository(db)
    comment = repo.get_active(comment_id)
    if comment is None:
        raise CommentNotFoundError(comment_id)

    with unit_of_work(
        db,
        "comment vote",
        on_conflict=lambda: DuplicateReactionError("comment", comment_id),
    ):
        existing = repo.get_vote(comment_id, user.id)
        change = reconcile(existing.vote_type if existing else None, requested)
        result: PlayerCommentVote | None
        if existing is None:
            result = repo.add_vote(
                PlayerCommentVote(comment_id=comment_id, user_id=user.id, vote_type=requested)
            )
        elif change is ReactionChange.REMOVED:
            repo.delete_vote(existing)
            result = None
        else:
            existing.vote_type = requested
            db.flush()
            result = existing
        _recount(repo, comment)

    logger.info(
        "Comment %s vote by user %s %s (%s)", comment_id, user.id, change.value, requested.value
    )
    return result


def remove_comment_vote(db: Session, comment_id: int, user: User) -> bool:
    """Withdraw the user's vote on a comment if there is one."""
    repo = CommentRepository(db)
    comment = repo.get_active(comment_id)
    if comment is None:
        raise CommentNotFoundError(comment_id)
    existing = repo.get_vote(comment_id, user.id)
    if existing is None:
        return False
    with unit_of_work(db, "remove comment vote"):
        repo.delete_vote(existing)
        _recount(repo, comment)
    logger.info("Comment %s vote by user %s removed", comment_id, user.id)
    return True


def get_comment_vote(db: Session, comment_id: int, user: User) -> VoteType | None:
    get_comment(db, comment_id)
    vote = CommentRepository(db).get_vote(comment_id, user.id)
    return vote.vote_type if vote else None
