"""Poll schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from talent_radar.models import PollType


class PollCreate(BaseModel):
    """Schema for creating a poll; option rules are enforced by the service."""

    question: str = Field(..., max_length=500)
    options: list[str] = Field(default_factory=list, max_length=20)
    poll_type: PollType = PollType.SINGLE_CHOICE
    description: str | None = Field(None, max_length=2000)
    is_anonymous: bool = False
    expires_at: datetime | None = None
    thread_id: int | None = None
    player_id: int | None = None


class PollVoteRequest(BaseModel):
    option_id: int


class PollOptionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    option_text: str
    display_order: int
    vote_count: int


class PollResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    author_id: int
    thread_id: int | None
    player_id: int | None
    question: str
    description: str | None
    poll_type: PollType
    is_anonymous: bool
    is_active: bool
    expires_at: datetime | None
    total_votes: int
    created_at: datetime
    options: list[PollOptionResponse]


class PollVoteResult(BaseModel):
    """Outcome of a poll vote; ``option_id`` is null once the vote was withdrawn."""

    poll_id: int
    option_id: int | None
    total_votes: int
    voted_option_ids: list[int]


class OptionResultResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    option_id: int
    option_text: str
    vote_count: int
    percentage: float


class PollResultsResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    poll_id: int
    question: str
    total_votes: int
    is_active: bool
    options: list[OptionResultResponse]
    winning_option_id: int | None


class MyPollVotes(BaseModel):
    option_ids: list[int]
