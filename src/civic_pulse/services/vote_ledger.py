"""Ledger of helpful / not helpful / flag votes on reviews."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlalchemy import delete, func, select
from sqlalchemy.orm import Session

from civic_pulse.core.settings import settings
from civic_pulse.models import Office, Review, ReviewStatus, ReviewVote, User, VoteKind
from civic_pulse.services.errors import NotFoundError, ReviewClosedError
from civic_pulse.services.moderation import (
    TERMINAL_STATES,
    ModerationEvent,
    ModerationGate,
    count_flags,
)
from civic_pulse.services.transactions import run_in_transaction

logger = logging.getLogger(__name__)


@dataclass
class VoteCastResult:
    """Outcome of a cast: the surviving ledger row and what it triggered."""

    vote: ReviewVote
    changed: bool
    moderation: ModerationEvent | None = None


@dataclass
class FlaggedReview:
    review: Review
    flag_count: int
    author_name: str | None
    office_name: str | None


class VoteLedger:
    """Records one vote per (voter, review) and feeds flag votes to moderation."""

    def __init__(self, gate: ModerationGate | None = None) -> None:
        self.gate = gate or ModerationGate()

    @staticmethod
    def find(db: Session, voter_id: int, review_id: int) -> ReviewVote | None:
        """Return the voter's current vote on a review, if any."""
        return db.execute(
            select(ReviewVote).where(
                ReviewVote.user_id == voter_id,
                ReviewVote.review_id == review_id,
            )
        ).scalar_one_or_none()

    def cast(self, db: Session, voter_id: int, review_id: int, kind: VoteKind | str) -> VoteCastResult:
        """Insert a vote, change its kind in place, or return it unchanged.

        A flag that changes the ledger is evaluated by the moderation gate in
        the same transaction. The resulting notification goes out after the
        commit and cannot undo it.

        Raises:
            NotFoundError: If the review does not exist.
            ReviewClosedError: If the review has been removed.
        """
        kind = VoteKind(kind)

        def work() -> VoteCastResult:
            # Flag voters on one review are serialized so each sees the others' flags.
            review = db.get(Review, review_id, with_for_update=kind is VoteKind.FLAG)
            if review is None:
                raise NotFoundError(f"Review {review_id} not found")
            if ReviewStatus(review.status) in TERMINAL_STATES:
                raise ReviewClosedError(f"Review {review_id} has been removed")

            vote = self.find(db, voter_id, review_id)
            if vote is not None and vote.vote_type == kind:
                return VoteCastResult(vote=vote, changed=False)

            if vote is None:
                vote = ReviewVote(user_id=voter_id, review_id=review_id, vote_type=kind)
                db.add(vote)
            else:
                vote.vote_type = kind
            db.flush()

            event = None
            if kind is VoteKind.FLAG:
                event = self.gate.evaluate_flags(db, review)
            return VoteCastResult(vote=vote, changed=True, moderation=event)

        result = run_in_transaction(db, work, description=f"vote on review {review_id}")
        if result.changed:
            logger.debug("User %s voted %s on review %s", voter_id, kind, review_id)
        if result.moderation is not None:
            self.gate.announce(db, result.moderation)
        return result

    @staticmethod
    def retract(db: Session, voter_id: int, review_id: int) -> bool:
        """Delete the voter's vote on a review.

        Returns:
            True if a vote was removed, False if there was none.

        Raises:
            NotFoundError: If the review does not exist.
        """

        def work() -> bool:
            if db.get(Review, review_id) is None:
                raise NotFoundError(f"Review {review_id} not found")
            result = db.execute(
                delete(ReviewVote).where(
                    ReviewVote.user_id == voter_id,
                    ReviewVote.review_id == review_id,
                )
            )
            return result.rowcount > 0

        return run_in_transaction(db, work, description=f"vote retraction on review {review_id}")

    @staticmethod
    def counts_for(db: Session, review_id: int) -> dict[VoteKind, int]:
        """Count the review's votes by kind, straight from the ledger."""
        counts = {kind: 0 for kind in VoteKind}
        rows = db.execute(
            select(ReviewVote.vote_type, func.count(ReviewVote.vote_id))
            .where(ReviewVote.review_id == review_id)
            .group_by(ReviewVote.vote_type)
        ).all()
        for vote_type, count in rows:
            counts[VoteKind(vote_type)] = count
        return counts

    @staticmethod
    def flag_count(db: Session, review_id: int) -> int:
        return count_flags(db, review_id)

    @staticmethod
    def flagged_reviews(
        db: Session,
        status: ReviewStatus | str | None = None,
        limit: int | None = None,
        offset: int = 0,
    ) -> list[FlaggedReview]:
        """List reviews carrying at least one flag, most flagged first.

        Args:
            db: Database session
            status: Only include reviews currently in this status
            limit: Page size, defaults to ``settings.default_page_size``
            offset: Number of rows to skip
        """
        flag_total = func.count(ReviewVote.vote_id).label("flag_count")
        stmt = (
            select(Review, flag_total, User.full_name, Office.name)
            .join(ReviewVote, ReviewVote.review_id == Review.review_id)
            .outerjoin(User, User.user_id == Review.user_id)
            .outerjoin(Office, Office.office_id == Review.office_id)
            .where(ReviewVote.vote_type == VoteKind.FLAG)
            .group_by(Review.review_id, User.full_name, Office.name)
            .order_by(flag_total.desc(), Review.review_id)
            .limit(limit or settings.default_page_size)
            .offset(offset)
        )
        if status is not None:
            stmt = stmt.where(Review.status == ReviewStatus(status))

        return [
            FlaggedReview(
                review=review,
                flag_count=count,
                author_name=author_name,
                office_name=office_name,
            )
            for review, count, author_name, office_name in db.execute(stmt).all()
        ]
