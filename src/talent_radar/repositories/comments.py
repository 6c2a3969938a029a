"""Data access helpers for player comments and comment votes."""

from __future__ import annotations

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from talent_radar.models import PlayerComment, PlayerCommentVote, VoteType

__all__ = ["CommentRepository"]


class CommentRepository:
    """Thin wrapper around database access for comments and their votes."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get_active(self, comment_id: int) -> PlayerComment | None:
        """Return a comment unless it is missing or soft-deleted."""
        stmt = select(PlayerComment).where(
            PlayerComment.id == comment_id,
            PlayerComment.is_deleted.is_(False),
        )
        return self.session.scalars(stmt).first()

    def add(self, comment: PlayerComment) -> PlayerComment:
        self.session.add(comment)
        self.session.flush()
        return comment

    def list_top_level(self, player_id: int, limit: int, offset: int) -> list[PlayerComment]:
        stmt = (
            select(PlayerComment)
            .where(
                PlayerComment.player_id == player_id,
                PlayerComment.parent_comment_id.is_(None),
                PlayerComment.is_deleted.is_(False),
            )
            .order_by(PlayerComment.created_at.desc(), PlayerComment.id.desc())
            .limit(limit)
            .offset(offset)
        )
        return list(self.session.scalars(stmt))

    def list_replies(self, comment_id: int) -> list[PlayerComment]:
        stmt = (
            select(PlayerComment)
            .where(
                PlayerComment.parent_comment_id == comment_id,
                PlayerComment.is_deleted.is_(False),
            )
            .order_by(PlayerComment.created_at.asc(), PlayerComment.id.asc())
        )
        return list(self.session.scalars(stmt))

    def list_featured(self, player_id: int) -> list[PlayerComment]:
        stmt = (
            select(PlayerComment)
            .where(
                PlayerComment.player_id == player_id,
                PlayerComment.is_featured.is_(True),
                PlayerComment.is_deleted.is_(False),
            )
            .order_by(PlayerComment.created_at.desc(), PlayerComment.id.desc())
        )
        return list(self.session.scalars(stmt))

    def get_vote(self, comment_id: int, user_id: int) -> PlayerCommentVote | None:
        stmt = select(PlayerCommentVote).where(
            PlayerCommentVote.comment_id == comment_id,
            PlayerCommentVote.user_id == user_id,
        )
        return self.session.scalars(stmt).first()

    def add_vote(self, vote: PlayerCommentVote) -> PlayerCommentVote:
        self.session.add(vote)
        self.session.flush()
        return vote

    def delete_vote(self, vote: PlayerCommentVote) -> None:
        self.session.delete(vote)
        self.session.flush()

    def count_votes(self, comment_id: int, vote_type: VoteType) -> int:
        stmt = select(func.count(PlayerCommentVote.id)).where(
            PlayerCommentVote.comment_id == comment_id,
            PlayerCommentVote.vote_type == vote_type,
        )
        return self.session.scalar(stmt) or 0
