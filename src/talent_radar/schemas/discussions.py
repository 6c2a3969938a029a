"""Discussion thread and reply schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from talent_radar.models import ThreadType


class CategoryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: str | None


class ThreadCreate(BaseModel):
    """Schema for opening a discussion thread.

    Title length is enforced by the service so blank and overlong titles
    are reported the same way.
    """

    title: str
    content: str = Field(..., max_length=20000)
    thread_type: ThreadType = ThreadType.GENERAL
    category_id: int | None = None
    player_id: int | None = None


class ThreadUpdate(BaseModel):
    title: str | None = None
    content: str | None = Field(None, max_length=20000)


class ThreadFeature(BaseModel):
    featured: bool = True


class ThreadResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    category_id: int | None
    author_id: int
    player_id: int | None
    title: str
    content: str
    thread_type: ThreadType
    is_pinned: bool
    is_locked: bool
    is_featured: bool
    view_count: int
    reply_count: int
    last_activity_at: datetime
    created_at: datetime


class ReplyCreate(BaseModel):
    content: str = Field(..., max_length=10000)
    parent_reply_id: int | None = None


class ReplyUpdate(BaseModel):
    content: str = Field(..., max_length=10000)


class ReplyResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    thread_id: int
    author_id: int
    parent_reply_id: int | None
    content: str
    upvotes: int
    downvotes: int
    created_at: datetime
    updated_at: datetime
