# src/civic_pulse/api/v1/endpoints/notifications.py
"""Notification inbox endpoints."""

from fastapi import APIRouter, Query, status

from civic_pulse.api.v1.dependencies import CurrentUserDep, NotificationEmitterDep, SessionDep
from civic_pulse.schemas.notification import (
    BulkUpdateResponse,
    NotificationResponse,
    UnreadCountResponse,
)

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get("/", response_model=list[NotificationResponse])
async def get_user_notifications(
    current_user: CurrentUserDep,
    db: SessionDep,
    emitter: NotificationEmitterDep,
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
) -> list[NotificationResponse]:
    notifications = emitter.list_for(db, current_user.user_id, limit=limit, offset=offset)
    return [NotificationResponse.model_validate(item) for item in notifications]


@router.get("/unread-count", response_model=UnreadCountResponse)
async def get_unread_count(
    current_user: CurrentUserDep,
    db: SessionDep,
    emitter: NotificationEmitterDep,
) -> UnreadCountResponse:
    return UnreadCountResponse(count=emitter.unread_count(db, current_user.user_id))


@router.patch("/read-all", response_model=BulkUpdateResponse)
async def mark_all_as_read(
    current_user: CurrentUserDep,
    db: SessionDep,
    emitter: NotificationEmitterDep,
) -> BulkUpdateResponse:
    return BulkUpdateResponse(updated=emitter.mark_all_read(db, current_user.user_id))


@router.patch("/{notification_id}/read", response_model=NotificationResponse)
async def mark_as_read(
    notification_id: int,
    current_user: CurrentUserDep,
    db: SessionDep,
    emitter: NotificationEmitterDep,
) -> NotificationResponse:
    notification = emitter.mark_read(db, current_user.user_id, notification_id)
    return NotificationResponse.model_validate(notification)


@router.delete("/{notification_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_notification(
    notification_id: int,
    current_user: CurrentUserDep,
    db: SessionDep,
    emitter: NotificationEmitterDep,
) -> None:
    emitter.delete(db, current_user.user_id, notification_id)


@router.delete("/", response_model=BulkUpdateResponse)
async def delete_all_notifications(
    current_user: CurrentUserDep,
    db: SessionDep,
    emitter: NotificationEmitterDep,
) -> BulkUpdateResponse:
    return BulkUpdateResponse(updated=emitter.delete_all(db, current_user.user_id))
