"""Data access helpers for rating categories and player ratings."""

from __future__ import annotations

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from talent_radar.models import PlayerRating, RatingCategory

__all__ = ["RatingRepository"]


class RatingRepository:
    """Thin wrapper around database access for ratings."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, rating_id: int) -> PlayerRating | None:
        return self.session.get(PlayerRating, rating_id)

    def get_category(self, category_id: int) -> RatingCategory | None:
        return self.session.get(RatingCategory, category_id)

    def list_categories(self) -> list[RatingCategory]:
        return list(self.session.scalars(select(RatingCategory).order_by(RatingCategory.id)))

    def find(self, player_id: int, user_id: int, category_id: int) -> PlayerRating | None:
        stmt = select(PlayerRating).where(
            PlayerRating.player_id == player_id,
            PlayerRating.user_id == user_id,
            PlayerRating.category_id == category_id,
        )
        return self.session.scalars(stmt).first()

    def has_rated_player(self, player_id: int, user_id: int) -> bool:
        stmt = select(PlayerRating.id).where(
            PlayerRating.player_id == player_id,
            PlayerRating.user_id == user_id,
        )
        return self.session.scalars(stmt).first() is not None

    def add(self, rating: PlayerRating) -> PlayerRating:
        self.session.add(rating)
        self.session.flush()
        return rating

    def averages_by_category(self, player_id: int) -> list[tuple[int, str, float, int]]:
        """Return ``(category_id, name, average, count)`` rows for a player."""
        stmt = (
            select(
                RatingCategory.id,
                RatingCategory.name,
                func.avg(PlayerRating.rating),
                func.count(PlayerRating.id),
            )
            .join(PlayerRating, PlayerRating.category_id == RatingCategory.id)
            .where(PlayerRating.player_id == player_id)
            .group_by(RatingCategory.id, RatingCategory.name)
            .order_by(RatingCategory.id)
        )
        return [(row[0], row[1], float(row[2]), int(row[3])) for row in self.session.execute(stmt)]

    def overall(self, player_id: int) -> tuple[float | None, int]:
        """Return the overall average and the number of ratings for a player."""
        stmt = select(func.avg(PlayerRating.rating), func.count(PlayerRating.id)).where(
            PlayerRating.player_id == player_id
        )
        average, count = self.session.execute(stmt).one()
        return (float(average) if average is not None else None), int(count)
