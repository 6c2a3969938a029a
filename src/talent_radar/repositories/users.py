"""Data access helpers for users and follow edges."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.orm import Session

from talent_radar.models import User, UserFollow

__all__ = ["UserRepository"]


class UserRepository:
    """Thin wrapper around database access for users."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, user_id: int) -> User | None:
        return self.session.get(User, user_id)

    def get_by_username(self, username: str) -> User | None:
        return self.session.scalars(select(User).where(User.username == username)).first()

    def notifiable_follower_ids(self, user_id: int) -> list[int]:
        """Return ids of followers who have notifications enabled for ``user_id``."""
        stmt = select(UserFollow.follower_id).where(
            UserFollow.following_id == user_id,
            UserFollow.notification_enabled.is_(True),
        )
        return list(self.session.scalars(stmt))
