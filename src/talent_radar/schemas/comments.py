"""Player comment schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class CommentCreate(BaseModel):
    """Schema for posting a comment on a player."""

    content: str = Field(..., max_length=5000)
    parent_comment_id: int | None = Field(None, description="Comment being replied to")


class CommentUpdate(BaseModel):
    content: str = Field(..., max_length=5000)


class CommentFeature(BaseModel):
    featured: bool = True


class CommentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    player_id: int
    author_id: int
    parent_comment_id: int | None
    content: str
    upvotes: int
    downvotes: int
    is_featured: bool
    created_at: datetime
    updated_at: datetime
