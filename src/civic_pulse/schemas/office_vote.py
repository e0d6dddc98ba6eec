"""Office-vote Pydantic schemas."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class OfficeVoteCreate(BaseModel):
    """Schema for casting a vote on an office."""

    vote_type: Literal["upvote", "downvote"] = Field(..., description="upvote or downvote")


class OfficeVoteResponse(BaseModel):
    vote_id: int
    user_id: int
    office_id: int
    vote_type: str
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class OfficeVoteCountsResponse(BaseModel):
    """Cached counters of an office; ``ratio`` is the upvote percentage."""

    upvotes: int
    downvotes: int
    total: int
    ratio: int

    model_config = ConfigDict(from_attributes=True)


class OfficeVoteCastResponse(BaseModel):
    vote: OfficeVoteResponse
    counts: OfficeVoteCountsResponse


class OfficeVoteRetractResponse(BaseModel):
    removed: bool
    counts: OfficeVoteCountsResponse


class OfficeVoteSummary(BaseModel):
    counts: OfficeVoteCountsResponse
    user_vote: OfficeVoteResponse | None = None
