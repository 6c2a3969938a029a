"""Data access helpers for discussion threads, replies and reply votes."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import or_, select
from sqlalchemy.orm import Session

from talent_radar.models import (
    DiscussionCategory,
    DiscussionReply,
    DiscussionThread,
    ReplyVote,
)

__all__ = ["ThreadRepository", "ReplyRepository"]


class ThreadRepository:
    """Thin wrapper around database access for categories and threads."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, thread_id: int) -> DiscussionThread | None:
        return self.session.get(DiscussionThread, thread_id)

    def get_category(self, category_id: int) -> DiscussionCategory | None:
        return self.session.get(DiscussionCategory, category_id)

    def list_categories(self) -> list[DiscussionCategory]:
        stmt = (
            select(DiscussionCategory)
            .where(DiscussionCategory.is_active.is_(True))
            .order_by(DiscussionCategory.display_order.asc(), DiscussionCategory.id.asc())
        )
        return list(self.session.scalars(stmt))

    def add(self, thread: DiscussionThread) -> DiscussionThread:
        self.session.add(thread)
        self.session.flush()
        return thread

    def list_recent(
        self, category_id: int | None, limit: int, offset: int
    ) -> list[DiscussionThread]:
        stmt = select(DiscussionThread)
        if category_id is not None:
            stmt = stmt.where(DiscussionThread.category_id == category_id)
        stmt = (
            stmt.order_by(
                DiscussionThread.is_pinned.desc(),
                DiscussionThread.last_activity_at.desc(),
                DiscussionThread.id.desc(),
            )
            .limit(limit)
            .offset(offset)
        )
        return list(self.session.scalars(stmt))

    def list_pinned(self) -> list[DiscussionThread]:
        stmt = (
            select(DiscussionThread)
            .where(DiscussionThread.is_pinned.is_(True))
            .order_by(DiscussionThread.last_activity_at.desc(), DiscussionThread.id.desc())
        )
        return list(self.session.scalars(stmt))

    def list_active_since(self, since: datetime, limit: int) -> list[DiscussionThread]:
        stmt = (
            select(DiscussionThread)
            .where(DiscussionThread.last_activity_at >= since)
            .order_by(
                DiscussionThread.view_count.desc(),
                DiscussionThread.reply_count.desc(),
                DiscussionThread.id.desc(),
            )
            .limit(limit)
        )
        return list(self.session.scalars(stmt))

    def search(self, term: str, limit: int, offset: int) -> list[DiscussionThread]:
        pattern = f"%{term}%"
        stmt = (
            select(DiscussionThread)
            .where(
                or_(
                    DiscussionThread.title.ilike(pattern),
                    DiscussionThread.content.ilike(pattern),
                )
            )
            .order_by(DiscussionThread.last_activity_at.desc(), DiscussionThread.id.desc())
            .limit(limit)
            .offset(offset)
        )
        return list(self.session.scalars(stmt))


class ReplyRepository:
    """Thin wrapper around database access for replies and their votes."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get_active(self, reply_id: int) -> DiscussionReply | None:
        """Return a reply unless it is missing or soft-deleted."""
        stmt = select(DiscussionReply).where(
            DiscussionReply.id == reply_id,
            DiscussionReply.is_deleted.is_(False),
        )
        return self.session.scalars(stmt).first()

    def add(self, reply: DiscussionReply) -> DiscussionReply:
        self.session.add(reply)
        self.session.flush()
        return reply

    def list_for_thread(self, thread_id: int, limit: int, offset: int) -> list[DiscussionReply]:
        stmt = (
            select(DiscussionReply)
            .where(
                DiscussionReply.thread_id == thread_id,
                DiscussionReply.is_deleted.is_(False),
            )
            .order_by(DiscussionReply.created_at.asc(), DiscussionReply.id.asc())
            .limit(limit)
            .offset(offset)
        )
        return list(self.session.scalars(stmt))

    def list_children(self, reply_id: int) -> list[DiscussionReply]:
        stmt = (
            select(DiscussionReply)
            .where(
                DiscussionReply.parent_reply_id == reply_id,
                DiscussionReply.is_deleted.is_(False),
            )
            .order_by(DiscussionReply.created_at.asc(), DiscussionReply.id.asc())
        )
        return list(self.session.scalars(stmt))

    def get_vote(self, reply_id: int, user_id: int) -> ReplyVote | None:
        stmt = select(ReplyVote).where(
            ReplyVote.reply_id == reply_id,
            ReplyVote.user_id == user_id,
        )
        return self.session.scalars(stmt).first()

    def add_vote(self, vote: ReplyVote) -> ReplyVote:
        self.session.add(vote)
        self.session.flush()
        return vote

    def delete_vote(self, vote: ReplyVote) -> None:
        self.session.delete(vote)
        self.session.flush()
