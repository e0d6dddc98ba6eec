# src/civic_pulse/api/v1/endpoints/votes.py
"""Review-vote endpoints for the Civic Pulse API."""

from typing import Literal

from fastapi import APIRouter, Query
from sqlalchemy.orm import Session

from civic_pulse.api.v1.dependencies import (
    CurrentUserDep,
    ModeratorDep,
    OptionalUserDep,
    SessionDep,
    StatsReporterDep,
    VoteLedgerDep,
)
from civic_pulse.core.settings import settings
from civic_pulse.models import Review, VoteKind
from civic_pulse.schemas.stats import ReviewVoteStatisticsResponse, UserReviewVoteStatsResponse
from civic_pulse.schemas.vote import (
    FlaggedReviewResponse,
    ReviewVoteCastResponse,
    ReviewVoteCounts,
    ReviewVoteCreate,
    ReviewVoteResponse,
    ReviewVoteRetractResponse,
    ReviewVoteSummary,
    VotedReviewResponse,
)
from civic_pulse.services.errors import NotFoundError
from civic_pulse.services.vote_ledger import VoteLedger

router = APIRouter(prefix="/votes", tags=["votes"])


def _counts(ledger: VoteLedger, db: Session, review_id: int) -> ReviewVoteCounts:
    counts = ledger.counts_for(db, review_id)
    return ReviewVoteCounts(**{kind.value: count for kind, count in counts.items()})


@router.post("/review/{review_id}", response_model=ReviewVoteCastResponse)
async def vote_on_review(
    review_id: int,
    vote_data: ReviewVoteCreate,
    current_user: CurrentUserDep,
    db: SessionDep,
    ledger: VoteLedgerDep,
) -> ReviewVoteCastResponse:
    """Cast, change or repeat a vote on a review."""
    result = ledger.cast(db, current_user.user_id, review_id, vote_data.vote_type)
    review = db.get(Review, review_id)
    return ReviewVoteCastResponse(
        vote=ReviewVoteResponse.model_validate(result.vote),
        counts=_counts(ledger, db, review_id),
        review_status=review.status if review else "",
    )


@router.delete("/review/{review_id}", response_model=ReviewVoteRetractResponse)
async def remove_vote(
    review_id: int,
    current_user: CurrentUserDep,
    db: SessionDep,
    ledger: VoteLedgerDep,
) -> ReviewVoteRetractResponse:
    """Retract the caller's vote; retracting a missing vote reports ``removed: false``."""
    removed = ledger.retract(db, current_user.user_id, review_id)
    return ReviewVoteRetractResponse(removed=removed, counts=_counts(ledger, db, review_id))


@router.get("/review/{review_id}", response_model=ReviewVoteSummary)
async def get_votes_by_review(
    review_id: int,
    current_user: OptionalUserDep,
    db: SessionDep,
    ledger: VoteLedgerDep,
) -> ReviewVoteSummary:
    """Public vote counts for a review, with the caller's vote when authenticated."""
    if db.get(Review, review_id) is None:
        raise NotFoundError(f"Review {review_id} not found")

    user_vote = None
    if current_user is not None:
        vote = ledger.find(db, current_user.user_id, review_id)
        if vote is not None:
            user_vote = ReviewVoteResponse.model_validate(vote)
    return ReviewVoteSummary(counts=_counts(ledger, db, review_id), user_vote=user_vote)


@router.get("/flagged", response_model=list[FlaggedReviewResponse])
async def get_flagged_reviews(
    moderator: ModeratorDep,
    db: SessionDep,
    ledger: VoteLedgerDep,
    review_status: Literal["pending", "approved", "flagged", "removed", "resolved"] | None = Query(
        None, alias="status"
    ),
    limit: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
    offset: int = Query(0, ge=0),
) -> list[FlaggedReviewResponse]:
    """Reviews with flag votes, most flagged first, for moderator triage."""
    flagged = ledger.flagged_reviews(db, status=review_status, limit=limit, offset=offset)
    return [FlaggedReviewResponse.model_validate(item) for item in flagged]


@router.get("/user/stats", response_model=UserReviewVoteStatsResponse)
async def get_user_vote_stats(
    current_user: CurrentUserDep,
    db: SessionDep,
    reporter: StatsReporterDep,
) -> UserReviewVoteStatsResponse:
    stats = reporter.user_review_vote_stats(db, current_user.user_id)
    return UserReviewVoteStatsResponse.model_validate(stats)


@router.get("/user/upvoted-reviews", response_model=list[VotedReviewResponse])
async def get_user_upvoted_reviews(
    moderator: ModeratorDep,
    db: SessionDep,
    reporter: StatsReporterDep,
) -> list[VotedReviewResponse]:
    reviews = reporter.reviews_voted_by(db, moderator, VoteKind.HELPFUL)
    return [VotedReviewResponse.model_validate(item) for item in reviews]


@router.get("/user/downvoted-reviews", response_model=list[VotedReviewResponse])
async def get_user_downvoted_reviews(
    moderator: ModeratorDep,
    db: SessionDep,
    reporter: StatsReporterDep,
) -> list[VotedReviewResponse]:
    reviews = reporter.reviews_voted_by(db, moderator, VoteKind.NOT_HELPFUL)
    return [VotedReviewResponse.model_validate(item) for item in reviews]


@router.get("/statistics", response_model=ReviewVoteStatisticsResponse)
async def get_vote_statistics(
    moderator: ModeratorDep,
    db: SessionDep,
    reporter: StatsReporterDep,
) -> ReviewVoteStatisticsResponse:
    """Platform-wide review vote totals and the most voted reviews."""
    return ReviewVoteStatisticsResponse.model_validate(reporter.review_vote_statistics(db))

