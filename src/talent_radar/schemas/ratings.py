"""Player rating schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class RatingCategoryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: str | None


class RatingCreate(BaseModel):
    """Score for one category; the 0-10 range is enforced by the service."""

    category_id: int
    rating: float
    notes: str | None = Field(None, max_length=2000)


class RatingUpdate(BaseModel):
    rating: float
    notes: str | None = Field(None, max_length=2000)


class RatingResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    player_id: int
    user_id: int
    category_id: int
    rating: float
    notes: str | None
    updated_at: datetime


class CategoryAverageResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    category_id: int
    category_name: str
    average: float
    count: int


class RatingSummaryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    player_id: int
    averages: list[CategoryAverageResponse]
    overall_average: float | None
    rating_count: int
