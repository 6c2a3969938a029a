"""Notification inbox endpoints for the signed-in user."""

from fastapi import APIRouter

from talent_radar.api.v1.dependencies import CurrentUserDep, LimitQuery, OffsetQuery, SessionDep
from talent_radar.core.settings import settings
from talent_radar.schemas.notifications import MarkedRead, NotificationResponse, UnreadCount
from talent_radar.services import notifications

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get("", response_model=list[NotificationResponse])
async def list_notifications(
    current_user: CurrentUserDep,
    db: SessionDep,
    unread_only: bool = False,
    limit: LimitQuery = settings.default_page_size,
    offset: OffsetQuery = 0,
) -> list[NotificationResponse]:
    items = notifications.list_notifications(
        db, current_user, unread_only=unread_only, limit=limit, offset=offset
    )
    return [NotificationResponse.model_validate(item) for item in items]


@router.get("/unread-count", response_model=UnreadCount)
async def get_unread_count(current_user: CurrentUserDep, db: SessionDep) -> UnreadCount:
    return UnreadCount(unread=notifications.unread_count(db, current_user))


@router.post("/read-all", response_model=MarkedRead)
async def mark_all_as_read(current_user: CurrentUserDep, db: SessionDep) -> MarkedRead:
    return MarkedRead(updated=notifications.mark_all_as_read(db, current_user))


@router.post("/{notification_id}/read", response_model=NotificationResponse)
async def mark_as_read(
    notification_id: int,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> NotificationResponse:
    notification = notifications.mark_as_read(db, notification_id, current_user)
    return NotificationResponse.model_validate(notification)
