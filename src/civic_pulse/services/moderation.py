"""Moderation state machine for reviews.

A review moves between statuses only along the edges of ``TRANSITIONS``.
Edges tagged ``Trigger.FLAG_THRESHOLD`` are taken automatically when the
number of flag votes reaches the configured threshold; edges tagged
``Trigger.ADMIN`` are taken only by an explicit moderator action.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import StrEnum

from sqlalchemy import func, select, update
from sqlalchemy.orm import Session

from civic_pulse.core.settings import settings
from civic_pulse.db.time import utcnow
from civic_pulse.models import Author, Notification, Review, ReviewStatus, ReviewVote, VoteKind
from civic_pulse.services.errors import InvalidTransitionError, NotFoundError
from civic_pulse.services.notifications import (
    NotificationEmitter,
    NotificationTemplate,
    RelatedEntity,
)
from civic_pulse.services.transactions import run_in_transaction

logger = logging.getLogger(__name__)


class Trigger(StrEnum):
    FLAG_THRESHOLD = "flag_threshold"
    ADMIN = "admin"


TRANSITIONS: dict[tuple[ReviewStatus, ReviewStatus], Trigger] = {
    (ReviewStatus.APPROVED, ReviewStatus.FLAGGED): Trigger.FLAG_THRESHOLD,
    (ReviewStatus.RESOLVED, ReviewStatus.FLAGGED): Trigger.FLAG_THRESHOLD,
    (ReviewStatus.FLAGGED, ReviewStatus.APPROVED): Trigger.ADMIN,
    (ReviewStatus.FLAGGED, ReviewStatus.REMOVED): Trigger.ADMIN,
    (ReviewStatus.FLAGGED, ReviewStatus.RESOLVED): Trigger.ADMIN,
    # Publication decisions for reviews held back by the review directory.
    (ReviewStatus.PENDING, ReviewStatus.APPROVED): Trigger.ADMIN,
    (ReviewStatus.PENDING, ReviewStatus.REMOVED): Trigger.ADMIN,
}

AUTO_FLAGGABLE: frozenset[ReviewStatus] = frozenset(
    source
    for (source, target), trigger in TRANSITIONS.items()
    if target is ReviewStatus.FLAGGED and trigger is Trigger.FLAG_THRESHOLD
)

TERMINAL_STATES: frozenset[ReviewStatus] = frozenset(
    status for status in ReviewStatus if not any(source is status for source, _ in TRANSITIONS)
)

ANNOUNCEMENTS: dict[tuple[ReviewStatus, ReviewStatus], NotificationTemplate] = {
    (ReviewStatus.APPROVED, ReviewStatus.FLAGGED): NotificationTemplate.REVIEW_FLAGGED,
    (ReviewStatus.RESOLVED, ReviewStatus.FLAGGED): NotificationTemplate.REVIEW_FLAGGED,
    (ReviewStatus.FLAGGED, ReviewStatus.APPROVED): NotificationTemplate.REVIEW_APPROVED,
    (ReviewStatus.FLAGGED, ReviewStatus.REMOVED): NotificationTemplate.REVIEW_REMOVED,
    (ReviewStatus.FLAGGED, ReviewStatus.RESOLVED): NotificationTemplate.REVIEW_RESOLVED,
}


@dataclass(frozen=True)
class ModerationEvent:
    """A status change that has been written (and possibly committed)."""

    review_id: int
    author: Author
    previous: ReviewStatus
    current: ReviewStatus
    trigger: Trigger
    flag_count: int
    note: str | None = None


@dataclass
class ModerationOutcome:
    review: Review
    event: ModerationEvent
    notification: Notification | None


def count_flags(db: Session, review_id: int) -> int:
    """Count flag votes on a review from the ledger."""
    return db.execute(
        select(func.count(ReviewVote.vote_id)).where(
            ReviewVote.review_id == review_id,
            ReviewVote.vote_type == VoteKind.FLAG,
        )
    ).scalar_one()


def _compare_and_set_status(
    db: Session,
    review_id: int,
    expected: frozenset[ReviewStatus] | set[ReviewStatus],
    target: ReviewStatus,
) -> bool:
    """Move the review to ``target`` only if it is still in one of ``expected``.

    Returns:
        True for the single writer whose update matched the row.
    """
    result = db.execute(
        update(Review)
        .where(Review.review_id == review_id, Review.status.in_(sorted(expected)))
        .values(status=target, updated_at=utcnow())
        .execution_options(synchronize_session=False)
    )
    return result.rowcount == 1


class ModerationGate:
    """Service deciding review status transitions from flag activity and moderators."""

    def __init__(
        self,
        threshold: int | None = None,
        emitter: NotificationEmitter | None = None,
    ) -> None:
        self.threshold = threshold if threshold is not None else settings.flag_threshold
        self.emitter = emitter or NotificationEmitter()

    @staticmethod
    def allowed(current: ReviewStatus | str, target: ReviewStatus | str, trigger: Trigger) -> bool:
        """Return True if ``trigger`` may move a review from ``current`` to ``target``."""
        return TRANSITIONS.get((ReviewStatus(current), ReviewStatus(target))) is trigger

    def evaluate_flags(self, db: Session, review: Review) -> ModerationEvent | None:
        """Flag the review if its flag count has reached the threshold.

        Runs inside the caller's transaction and does not commit. Only the
        transaction that actually moves the review into ``flagged`` gets an
        event back, so the crossing is reported once.
        """
        flag_count = count_flags(db, review.review_id)
        if flag_count < self.threshold or ReviewStatus(review.status) not in AUTO_FLAGGABLE:
            return None

        previous = ReviewStatus(review.status)
        if not _compare_and_set_status(db, review.review_id, AUTO_FLAGGABLE, ReviewStatus.FLAGGED):
            return None
        db.refresh(review, attribute_names=["status", "updated_at"])

        logger.info(
            "Review %s flagged after %d flags (threshold %d)",
            review.review_id,
            flag_count,
            self.threshold,
        )
        return ModerationEvent(
            review_id=review.review_id,
            author=review.author,
            previous=previous,
            current=ReviewStatus.FLAGGED,
            trigger=Trigger.FLAG_THRESHOLD,
            flag_count=flag_count,
        )

    def apply_admin_action(
        self,
        db: Session,
        review_id: int,
        target: ReviewStatus | str,
        note: str | None = None,
    ) -> ModerationOutcome:
        """Move a review along an administrator edge and notify its author.

        Raises:
            NotFoundError: If the review does not exist.
            InvalidTransitionError: If the edge is not in the table, or the
                review changed status while the action was being applied.
        """
        target = ReviewStatus(target)

        def work() -> tuple[Review, ModerationEvent]:
            review = db.get(Review, review_id, with_for_update=True)
            if review is None:
                raise NotFoundError(f"Review {review_id} not found")

            current = ReviewStatus(review.status)
            if not self.allowed(current, target, Trigger.ADMIN):
                raise InvalidTransitionError(
                    f"Review {review_id} cannot move from {current} to {target}"
                )
            if not _compare_and_set_status(db, review_id, {current}, target):
                raise InvalidTransitionError(f"Review {review_id} changed status concurrently")
            db.refresh(review, attribute_names=["status", "updated_at"])

            event = ModerationEvent(
                review_id=review_id,
                author=review.author,
                previous=current,
                current=target,
                trigger=Trigger.ADMIN,
                flag_count=count_flags(db, review_id),
                note=note,
            )
            return review, event

        review, event = run_in_transaction(db, work, description=f"moderation of review {review_id}")
        logger.info(
            "Review %s moved from %s to %s by moderator", review_id, event.previous, event.current
        )
        notification = self.announce(db, event)
        return ModerationOutcome(review=review, event=event, notification=notification)

    def announce(self, db: Session, event: ModerationEvent) -> Notification | None:
        """Tell the author about a committed status change.

        Best effort: a failure here is logged and rolled back on its own and
        never affects the status change itself.
        """
        template = ANNOUNCEMENTS.get((event.previous, event.current))
        if template is None:
            return None
        try:
            return self.emitter.notify(
                db,
                event.author,
                template,
                RelatedEntity(kind="review", entity_id=event.review_id),
                note=event.note,
                flag_count=event.flag_count,
            )
        except Exception as err:
            db.rollback()
            logger.warning(
                "Could not deliver %s notification for review %s: %s",
                template.name,
                event.review_id,
                err,
                exc_info=True,
            )
            return None
