# src/civic_pulse/api/v1/endpoints/office_votes.py
"""Office-vote endpoints for the Civic Pulse API."""

from typing import Literal

from fastapi import APIRouter, Query

from civic_pulse.api.v1.dependencies import (
    CurrentUserDep,
    ModeratorDep,
    OfficeVoteLedgerDep,
    OptionalUserDep,
    SessionDep,
    StatsReporterDep,
)
from civic_pulse.schemas.office_vote import (
    OfficeVoteCastResponse,
    OfficeVoteCountsResponse,
    OfficeVoteCreate,
    OfficeVoteResponse,
    OfficeVoteRetractResponse,
    OfficeVoteSummary,
)
from civic_pulse.schemas.stats import (
    OfficeRankingResponse,
    UserOfficeVoteStatsResponse,
    VoteTrendPointResponse,
)

router = APIRouter(prefix="/office-votes", tags=["office-votes"])


@router.post("/office/{office_id}", response_model=OfficeVoteCastResponse)
async def vote_on_office(
    office_id: int,
    vote_data: OfficeVoteCreate,
    current_user: CurrentUserDep,
    db: SessionDep,
    ledger: OfficeVoteLedgerDep,
) -> OfficeVoteCastResponse:
    """Cast or switch a vote on an office and return the recomputed counters."""
    result = ledger.cast(db, current_user.user_id, office_id, vote_data.vote_type)
    return OfficeVoteCastResponse(
        vote=OfficeVoteResponse.model_validate(result.vote),
        counts=OfficeVoteCountsResponse.model_validate(result.counts),
    )


@router.delete("/office/{office_id}", response_model=OfficeVoteRetractResponse)
async def remove_office_vote(
    office_id: int,
    current_user: CurrentUserDep,
    db: SessionDep,
    ledger: OfficeVoteLedgerDep,
) -> OfficeVoteRetractResponse:
    result = ledger.retract(db, current_user.user_id, office_id)
    return OfficeVoteRetractResponse(
        removed=result.deleted,
        counts=OfficeVoteCountsResponse.model_validate(result.counts),
    )


@router.get("/office/{office_id}", response_model=OfficeVoteSummary)
async def get_votes_by_office(
    office_id: int,
    current_user: OptionalUserDep,
    db: SessionDep,
    ledger: OfficeVoteLedgerDep,
) -> OfficeVoteSummary:
    """Public counters for an office, with the caller's vote when authenticated."""
    counts = ledger.counts_for(db, office_id)
    user_vote = None
    if current_user is not None:
        vote = ledger.find(db, current_user.user_id, office_id)
        if vote is not None:
            user_vote = OfficeVoteResponse.model_validate(vote)
    return OfficeVoteSummary(
        counts=OfficeVoteCountsResponse.model_validate(counts),
        user_vote=user_vote,
    )


@router.get("/user/stats", response_model=UserOfficeVoteStatsResponse)
async def get_user_office_vote_stats(
    current_user: CurrentUserDep,
    db: SessionDep,
    reporter: StatsReporterDep,
) -> UserOfficeVoteStatsResponse:
    return UserOfficeVoteStatsResponse.model_validate(
        reporter.user_vote_stats(db, current_user.user_id)
    )


@router.get("/top", response_model=list[OfficeRankingResponse])
async def get_top_voted_offices(
    db: SessionDep,
    reporter: StatsReporterDep,
    limit: int = Query(10, ge=1, le=100),
    rank_by: Literal["upvote", "downvote", "total"] = Query("total", alias="type"),
) -> list[OfficeRankingResponse]:
    """Public office leaderboard ranked by cached counters."""
    rankings = reporter.top_offices(db, limit=limit, rank_by=rank_by)
    return [OfficeRankingResponse.model_validate(item) for item in rankings]


@router.get("/trends", response_model=list[VoteTrendPointResponse])
async def get_vote_trends(
    moderator: ModeratorDep,
    db: SessionDep,
    reporter: StatsReporterDep,
    office_id: int | None = Query(None),
    period: Literal["daily", "weekly", "monthly"] = Query("daily"),
    limit: int = Query(30, ge=1, le=366),
) -> list[VoteTrendPointResponse]:
    """Vote counts per day, week or month, oldest bucket first."""
    trends = reporter.vote_trends(db, office_id=office_id, period=period, limit=limit)
    return [VoteTrendPointResponse.model_validate(point) for point in trends]
