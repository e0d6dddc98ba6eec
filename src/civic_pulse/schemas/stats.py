"""Statistics Pydantic schemas."""

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict

from civic_pulse.schemas.office_vote import OfficeVoteCountsResponse


class VotedOfficeResponse(BaseModel):
    office_id: int
    office_name: str
    vote_type: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class UserOfficeVoteStatsResponse(BaseModel):
    upvotes: int
    downvotes: int
    total: int
    voted_offices: list[VotedOfficeResponse]

    model_config = ConfigDict(from_attributes=True)


class UserReviewVoteStatsResponse(BaseModel):
    helpful: int
    not_helpful: int
    flags: int

    model_config = ConfigDict(from_attributes=True)


class OfficeRankingResponse(BaseModel):
    office_id: int
    office_name: str
    counts: OfficeVoteCountsResponse

    model_config = ConfigDict(from_attributes=True)


class VoteTrendPointResponse(BaseModel):
    bucket: date
    upvotes: int
    downvotes: int
    total: int

    model_config = ConfigDict(from_attributes=True)


class MostVotedReviewResponse(BaseModel):
    review_id: int
    comment: str | None
    helpful_count: int
    not_helpful_count: int
    total_votes: int

    model_config = ConfigDict(from_attributes=True)


class ReviewVoteStatisticsResponse(BaseModel):
    total_helpful: int
    total_not_helpful: int
    total_flags: int
    most_voted_reviews: list[MostVotedReviewResponse]

    model_config = ConfigDict(from_attributes=True)
