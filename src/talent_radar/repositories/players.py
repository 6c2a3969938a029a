"""Data access helpers for players and profile views."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import distinct, func, select
from sqlalchemy.orm import Session

from talent_radar.models import Player, PlayerView

__all__ = ["PlayerRepository"]


class PlayerRepository:
    """Thin wrapper around database access for players and their views."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, player_id: int) -> Player | None:
        return self.session.get(Player, player_id)

    def list_trending(self, limit: int) -> list[Player]:
        stmt = (
            select(Player)
            .order_by(Player.trending_score.desc(), Player.id.asc())
            .limit(limit)
        )
        return list(self.session.scalars(stmt))

    def add_view(self, view: PlayerView) -> PlayerView:
        self.session.add(view)
        self.session.flush()
        return view

    def count_views(self, player_id: int, since: datetime | None = None) -> int:
        """Count views of a player, optionally only those at or after ``since``."""
        stmt = select(func.count(PlayerView.id)).where(PlayerView.player_id == player_id)
        if since is not None:
            stmt = stmt.where(PlayerView.viewed_at >= since)
        return self.session.scalar(stmt) or 0

    def count_unique_viewers(self, player_id: int) -> int:
        """Distinct signed-in users plus distinct addresses of anonymous viewers."""
        users = self.session.scalar(
            select(func.count(distinct(PlayerView.user_id))).where(
                PlayerView.player_id == player_id,
                PlayerView.user_id.is_not(None),
            )
        )
        addresses = self.session.scalar(
            select(func.count(distinct(PlayerView.ip_address))).where(
                PlayerView.player_id == player_id,
                PlayerView.user_id.is_(None),
                PlayerView.ip_address.is_not(None),
            )
        )
        return (users or 0) + (addresses or 0)
