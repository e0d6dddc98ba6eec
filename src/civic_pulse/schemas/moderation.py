"""Moderation-related Pydantic schemas."""

from typing import Literal

from pydantic import BaseModel, Field

from civic_pulse.schemas.notification import NotificationResponse
from civic_pulse.schemas.review import ReviewResponse


class ReviewStatusUpdate(BaseModel):
    """Schema for an administrator moving a review to a new status."""

    status: Literal["pending", "approved", "flagged", "removed", "resolved"]
    moderation_note: str | None = Field(None, max_length=2000)


class ModerationOutcomeResponse(BaseModel):
    review: ReviewResponse
    previous_status: str
    flag_count: int
    moderation_note: str | None = None
    notification: NotificationResponse | None = None
