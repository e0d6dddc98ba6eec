"""Review-vote Pydantic schemas."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from civic_pulse.schemas.review import ReviewResponse


class ReviewVoteCreate(BaseModel):
    """Schema for casting a vote on a review."""

    vote_type: Literal["helpful", "not_helpful", "flag"] = Field(
        ..., description="helpful, not_helpful or flag"
    )


class ReviewVoteResponse(BaseModel):
    """A single review-vote ledger row."""

    vote_id: int
    user_id: int
    review_id: int
    vote_type: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ReviewVoteCounts(BaseModel):
    helpful: int = 0
    not_helpful: int = 0
    flag: int = 0


class ReviewVoteCastResponse(BaseModel):
    vote: ReviewVoteResponse
    counts: ReviewVoteCounts
    review_status: str


class ReviewVoteRetractResponse(BaseModel):
    removed: bool
    counts: ReviewVoteCounts


class ReviewVoteSummary(BaseModel):
    """Public vote counts for a review plus the caller's own vote, if known."""

    counts: ReviewVoteCounts
    user_vote: ReviewVoteResponse | None = None


class FlaggedReviewResponse(BaseModel):
    review: ReviewResponse
    flag_count: int
    author_name: str | None = None
    office_name: str | None = None

    model_config = ConfigDict(from_attributes=True)


class VotedReviewResponse(BaseModel):
    review: ReviewResponse
    office_name: str | None = None
    author_name: str | None = None
    voted_at: datetime

    model_config = ConfigDict(from_attributes=True)
