"""Data access helpers for polls, options and poll votes."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from talent_radar.models import Poll, PollOption, PollVote

__all__ = ["PollRepository"]


class PollRepository:
    """Thin wrapper around database access for polls."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, poll_id: int) -> Poll | None:
        return self.session.get(Poll, poll_id)

    def get_option(self, poll_id: int, option_id: int) -> PollOption | None:
        """Return the option only when it belongs to ``poll_id``."""
        stmt = select(PollOption).where(
            PollOption.id == option_id,
            PollOption.poll_id == poll_id,
        )
        return self.session.scalars(stmt).first()

    def add(self, poll: Poll) -> Poll:
        self.session.add(poll)
        self.session.flush()
        return poll

    def list_active(self, now: datetime, limit: int, offset: int) -> list[Poll]:
        stmt = (
            select(Poll)
            .where(
                Poll.is_active.is_(True),
                (Poll.expires_at.is_(None)) | (Poll.expires_at > now),
            )
            .order_by(Poll.created_at.desc(), Poll.id.desc())
            .limit(limit)
            .offset(offset)
        )
        return list(self.session.scalars(stmt))

    def list_most_popular(self, limit: int) -> list[Poll]:
        stmt = select(Poll).order_by(Poll.total_votes.desc(), Poll.id.desc()).limit(limit)
        return list(self.session.scalars(stmt))

    def user_vote_on_poll(self, poll_id: int, user_id: int) -> PollVote | None:
        stmt = select(PollVote).where(PollVote.poll_id == poll_id, PollVote.user_id == user_id)
        return self.session.scalars(stmt).first()

    def user_vote_on_option(self, option_id: int, user_id: int) -> PollVote | None:
        stmt = select(PollVote).where(
            PollVote.poll_option_id == option_id,
            PollVote.user_id == user_id,
        )
        return self.session.scalars(stmt).first()

    def user_votes(self, poll_id: int, user_id: int) -> list[PollVote]:
        stmt = select(PollVote).where(PollVote.poll_id == poll_id, PollVote.user_id == user_id)
        return list(self.session.scalars(stmt))

    def address_votes(self, poll_id: int, ip_address: str) -> list[PollVote]:
        stmt = select(PollVote).where(
            PollVote.poll_id == poll_id,
            PollVote.ip_address == ip_address,
        )
        return list(self.session.scalars(stmt))

    def add_vote(self, vote: PollVote) -> PollVote:
        self.session.add(vote)
        self.session.flush()
        return vote

    def delete_vote(self, vote: PollVote) -> None:
        self.session.delete(vote)
        self.session.flush()

    def deactivate_expired(self, now: datetime) -> int:
        """Mark every active poll whose expiry has passed as inactive."""
        stmt = (
            update(Poll)
            .where(
                Poll.is_active.is_(True),
                Poll.expires_at.is_not(None),
                Poll.expires_at < now,
            )
            .values(is_active=False)
            .execution_options(synchronize_session=False)
        )
        result = self.session.execute(stmt)
        return result.rowcount or 0
