"""Player rating endpoints."""

from fastapi import APIRouter, status

from talent_radar.api.v1.dependencies import CurrentUserDep, SessionDep
from talent_radar.schemas.ratings import (
    CategoryAverageResponse,
    RatingCategoryResponse,
    RatingCreate,
    RatingResponse,
    RatingSummaryResponse,
    RatingUpdate,
)
from talent_radar.services import ratings

router = APIRouter(tags=["ratings"])


@router.get("/rating-categories", response_model=list[RatingCategoryResponse])
async def list_rating_categories(db: SessionDep) -> list[RatingCategoryResponse]:
    items = ratings.list_rating_categories(db)
    return [RatingCategoryResponse.model_validate(item) for item in items]


@router.post(
    "/players/{player_id}/ratings",
    response_model=RatingResponse,
    status_code=status.HTTP_201_CREATED,
)
async def save_rating(
    player_id: int,
    payload: RatingCreate,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> RatingResponse:
    """Create or replace the caller's rating for one category."""
    rating = ratings.save_rating(
        db, player_id, current_user, payload.category_id, payload.rating, notes=payload.notes
    )
    return RatingResponse.model_validate(rating)


@router.get("/players/{player_id}/ratings", response_model=list[CategoryAverageResponse])
async def get_average_ratings(player_id: int, db: SessionDep) -> list[CategoryAverageResponse]:
    items = ratings.get_average_ratings(db, player_id)
    return [CategoryAverageResponse.model_validate(item) for item in items]


@router.get("/players/{player_id}/ratings/summary", response_model=RatingSummaryResponse)
async def get_rating_summary(player_id: int, db: SessionDep) -> RatingSummaryResponse:
    return RatingSummaryResponse.model_validate(ratings.get_rating_summary(db, player_id))


@router.put("/ratings/{rating_id}", response_model=RatingResponse)
async def update_rating(
    rating_id: int,
    payload: RatingUpdate,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> RatingResponse:
    rating = ratings.update_rating(
        db, rating_id, current_user, payload.rating, notes=payload.notes
    )
    return RatingResponse.model_validate(rating)
