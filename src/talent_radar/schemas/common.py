"""Shared Pydantic schemas for common API elements."""
from __future__ import annotations

from pydantic import BaseModel, Field

from talent_radar.models import VoteType


class VoteRequest(BaseModel):
    """Reaction submitted for a comment or a reply."""

    vote_type: VoteType = Field(..., description="UPVOTE or DOWNVOTE")


class VoteResult(BaseModel):
    """Outcome of a reaction; ``vote_type`` is null once the vote was withdrawn."""

    subject_id: int
    vote_type: VoteType | None
    upvotes: int
    downvotes: int


class MyVote(BaseModel):
    vote_type: VoteType | None = None


class Removed(BaseModel):
    removed: int
