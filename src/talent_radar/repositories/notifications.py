"""Data access helpers for notifications."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import func, select, update
from sqlalchemy.orm import Session

from talent_radar.models import Notification

__all__ = ["NotificationRepository"]


class NotificationRepository:
    """Thin wrapper around database access for notifications."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, notification_id: int) -> Notification | None:
        return self.session.get(Notification, notification_id)

    def add_all(self, notifications: list[Notification]) -> None:
        self.session.add_all(notifications)
        self.session.flush()

    def list_for_recipient(
        self, recipient_id: int, unread_only: bool, limit: int, offset: int
    ) -> list[Notification]:
        stmt = select(Notification).where(Notification.recipient_id == recipient_id)
        if unread_only:
            stmt = stmt.where(Notification.is_read.is_(False))
        stmt = (
            stmt.order_by(Notification.created_at.desc(), Notification.id.desc())
            .limit(limit)
            .offset(offset)
        )
        return list(self.session.scalars(stmt))

    def count_unread(self, recipient_id: int) -> int:
        stmt = select(func.count(Notification.id)).where(
            Notification.recipient_id == recipient_id,
            Notification.is_read.is_(False),
        )
        return self.session.scalar(stmt) or 0

    def mark_all_read(self, recipient_id: int, now: datetime) -> int:
        stmt = (
            update(Notification)
            .where(
                Notification.recipient_id == recipient_id,
                Notification.is_read.is_(False),
            )
            .values(is_read=True, read_at=now)
            .execution_options(synchronize_session=False)
        )
        return self.session.execute(stmt).rowcount or 0
