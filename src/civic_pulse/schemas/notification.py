"""Notification Pydantic schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict


class NotificationResponse(BaseModel):
    notification_id: int
    user_id: int
    title: str
    message: str
    type: str
    related_entity_type: str | None = None
    related_entity_id: int | None = None
    is_read: bool
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class UnreadCountResponse(BaseModel):
    count: int


class BulkUpdateResponse(BaseModel):
    updated: int
