# src/civic_pulse/api/v1/endpoints/moderation.py
"""Moderation endpoints for officials and administrators."""

from __future__ import annotations

from fastapi import APIRouter

from civic_pulse.api.v1.dependencies import ModerationGateDep, ModeratorDep, SessionDep
from civic_pulse.schemas.moderation import ModerationOutcomeResponse, ReviewStatusUpdate
from civic_pulse.schemas.notification import NotificationResponse
from civic_pulse.schemas.review import ReviewResponse

router = APIRouter(prefix="/moderation", tags=["moderation"])


@router.patch("/reviews/{review_id}/status", response_model=ModerationOutcomeResponse)
async def update_review_status(
    review_id: int,
    payload: ReviewStatusUpdate,
    moderator: ModeratorDep,
    db: SessionDep,
    gate: ModerationGateDep,
) -> ModerationOutcomeResponse:
    """Apply a moderator decision to a review.

    Only edges of the moderation table are accepted; anything else is a 409.
    """
    outcome = gate.apply_admin_action(db, review_id, payload.status, note=payload.moderation_note)
    notification = None
    if outcome.notification is not None:
        notification = NotificationResponse.model_validate(outcome.notification)
    return ModerationOutcomeResponse(
        review=ReviewResponse.model_validate(outcome.review),
        previous_status=outcome.event.previous,
        flag_count=outcome.event.flag_count,
        moderation_note=outcome.event.note,
        notification=notification,
    )
