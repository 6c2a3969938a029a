"""Player view tracking and the trending score derived from it."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import timedelta

from sqlalchemy.orm import Session

from talent_radar.core.exceptions import PlayerNotFoundError
from talent_radar.core.settings import settings
from talent_radar.db.time import utcnow
from talent_radar.db.unit_of_work import unit_of_work
from talent_radar.models import Player, PlayerView, User
from talent_radar.repositories import PlayerRepository

__all__ = [
    "ViewStatistics",
    "trending_score",
    "get_player",
    "record_view",
    "get_view_statistics",
    "get_trending_players",
]

logger = logging.getLogger(__name__)

WEEKLY_WEIGHT = 3.0
MONTHLY_WEIGHT = 1.5
TOTAL_WEIGHT = 0.1


@dataclass(frozen=True)
class ViewStatistics:
    player_id: int
    total_views: int
    unique_viewers: int
    views_last_24h: int
    views_last_7d: int
    views_last_30d: int


def trending_score(weekly: int, monthly: int, total: int) -> float:
    """Weighted view score favouring recent attention, rounded to two decimals."""
    return round(weekly * WEEKLY_WEIGHT + monthly * MONTHLY_WEIGHT + total * TOTAL_WEIGHT, 2)


def get_player(db: Session, player_id: int) -> Player:
    player = PlayerRepository(db).get(player_id)
    if player is None:
        raise PlayerNotFoundError(player_id)
    return player


def record_view(
    db: Session,
    player_id: int,
    user: User | None = None,
    ip_address: str | None = None,
    user_agent: str | None = None,
    referrer: str | None = None,
) -> Player:
    """Store one profile view and refresh the player's view counters."""
    repo = PlayerRepository(db)
    player = get_player(db, player_id)
    now = utcnow()
    with unit_of_work(db, "record player view"):
        repo.add_view(
            PlayerView(
                player_id=player_id,
                user_id=user.id if user is not None else None,
                ip_address=ip_address,
                user_agent=user_agent,
                referrer=referrer,
                viewed_at=now,
            )
        )
        player.total_views = repo.count_views(player_id)
        player.weekly_views = repo.count_views(
            player_id, since=now - timedelta(days=settings.trending_window_days)
        )
        player.monthly_views = repo.count_views(
            player_id, since=now - timedelta(days=settings.monthly_window_days)
        )
        player.trending_score = trending_score(
            player.weekly_views, player.monthly_views, player.total_views
        )
    logger.debug("Recorded view of player %s", player_id)
    return player


def get_view_statistics(db: Session, player_id: int) -> ViewStatistics:
    get_player(db, player_id)
    repo = PlayerRepository(db)
    now = utcnow()
    return ViewStatistics(
        player_id=player_id,
        total_views=repo.count_views(player_id),
        unique_viewers=repo.count_unique_viewers(player_id),
        views_last_24h=repo.count_views(player_id, since=now - timedelta(hours=24)),
        views_last_7d=repo.count_views(player_id, since=now - timedelta(days=7)),
        views_last_30d=repo.count_views(player_id, since=now - timedelta(days=30)),
    )


def get_trending_players(db: Session, limit: int = 10) -> list[Player]:
    return PlayerRepository(db).list_trending(limit)
