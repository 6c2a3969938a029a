"""Player ratings per category, with averages and summaries."""
from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlalchemy.orm import Session

from talent_radar.core.exceptions import (
    InvalidRequestError,
    InvalidStateError,
    PermissionDeniedError,
    PlayerNotFoundError,
    RatingCategoryNotFoundError,
    RatingNotFoundError,
)
from talent_radar.db.unit_of_work import unit_of_work
from talent_radar.models import PlayerRating, RatingCategory, User
from talent_radar.repositories import PlayerRepository, RatingRepository
from talent_radar.services.notifications import NotificationDispatcher

__all__ = [
    "MIN_RATING",
    "MAX_RATING",
    "CategoryAverage",
    "RatingSummary",
    "list_rating_categories",
    "save_rating",
    "update_rating",
    "get_average_ratings",
    "get_rating_summary",
]

logger = logging.getLogger(__name__)

MIN_RATING = 0.0
MAX_RATING = 10.0


@dataclass(frozen=True)
class CategoryAverage:
    category_id: int
    category_name: str
    average: float
    count: int


@dataclass(frozen=True)
class RatingSummary:
    player_id: int
    averages: list[CategoryAverage]
    overall_average: float | None
    rating_count: int


def _clean_value(value: float | None) -> float:
    if value is None:
        raise InvalidRequestError("Rating value is required")
    if not MIN_RATING <= value <= MAX_RATING:
        raise InvalidRequestError(f"Rating must be between {MIN_RATING:g} and {MAX_RATING:g}")
    return round(float(value), 1)


def list_rating_categories(db: Session) -> list[RatingCategory]:
    return RatingRepository(db).list_categories()


def save_rating(
    db: Session,
    player_id: int,
    user: User,
    category_id: int,
    value: float | None,
    notes: str | None = None,
) -> PlayerRating:
    """Create or replace the user's rating of a player in one category.

    Followers of the rater are notified the first time they rate the player.

    Raises:
        InvalidRequestError: If the value is missing or outside 0-10.
        PlayerNotFoundError: If the player does not exist.
        RatingCategoryNotFoundError: If the category does not exist.
    """
    cleaned = _clean_value(value)
    player = PlayerRepository(db).get(player_id)
    if player is None:
        raise PlayerNotFoundError(player_id)
    repo = RatingRepository(db)
    if repo.get_category(category_id) is None:
        raise RatingCategoryNotFoundError(category_id)

    first_for_player = not repo.has_rated_player(player_id, user.id)
    existing = repo.find(player_id, user.id, category_id)
    with unit_of_work(
        db,
        "save rating",
        on_conflict=lambda: InvalidStateError(
            f"A rating for player {player_id} was saved concurrently",
            details="Retry the request to update your rating",
        ),
    ):
        if existing is None:
            rating = repo.add(
                PlayerRating(
                    player_id=player_id,
                    user_id=user.id,
                    category_id=category_id,
                    rating=cleaned,
                    notes=notes,
                )
            )
        else:
            existing.rating = cleaned
            existing.notes = notes
            rating = existing
    logger.info(
        "User %s rated player %s %.1f in category %s", user.id, player_id, cleaned, category_id
    )

    if first_for_player:
        NotificationDispatcher(db).notify_followers_of_new_rating(player, user)
    return rating


def update_rating(
    db: Session, rating_id: int, user: User, value: float | None, notes: str | None = None
) -> PlayerRating:
    cleaned = _clean_value(value)
    rating = RatingRepository(db).get(rating_id)
    if rating is None:
        raise RatingNotFoundError(rating_id)
    if rating.user_id != user.id:
        raise PermissionDeniedError("You can only update your own ratings")
    with unit_of_work(db, "update rating"):
        rating.rating = cleaned
        if notes is not None:
            rating.notes = notes
    logger.info("User %s updated rating %s to %.1f", user.id, rating_id, cleaned)
    return rating


def get_average_ratings(db: Session, player_id: int) -> list[CategoryAverage]:
    """Average score per category for a player, rounded to one decimal."""
    if PlayerRepository(db).get(player_id) is None:
        raise PlayerNotFoundError(player_id)
    return [
        CategoryAverage(
            category_id=category_id,
            category_name=name,
            average=round(average, 1),
            count=count,
        )
        for category_id, name, average, count in RatingRepository(db).averages_by_category(
            player_id
        )
    ]


def get_rating_summary(db: Session, player_id: int) -> RatingSummary:
    averages = get_average_ratings(db, player_id)
    overall, count = RatingRepository(db).overall(player_id)
    return RatingSummary(
        player_id=player_id,
        averages=averages,
        overall_average=round(overall, 1) if overall is not None else None,
        rating_count=count,
    )
