"""Player and view analytics schemas."""

from pydantic import BaseModel, ConfigDict, Field


class PlayerResponse(BaseModel):
    """Schema for player information returned by the API."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    position: str | None = None
    nationality: str | None = None
    current_club: str | None = None
    total_views: int
    weekly_views: int
    monthly_views: int
    trending_score: float


class ViewCreate(BaseModel):
    referrer: str | None = Field(None, max_length=500)


class ViewStatisticsResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    player_id: int
    total_views: int
    unique_viewers: int
    views_last_24h: int
    views_last_7d: int
    views_last_30d: int
