"""Notification schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict

from talent_radar.models import NotificationType


class NotificationResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    notification_type: NotificationType
    title: str
    message: str
    related_entity_type: str | None
    related_entity_id: int | None
    action_url: str | None
    triggered_by_id: int | None
    is_read: bool
    read_at: datetime | None
    created_at: datetime


class UnreadCount(BaseModel):
    unread: int


class MarkedRead(BaseModel):
    updated: int
