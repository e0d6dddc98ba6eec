"""Read-only vote statistics: totals, leaderboards and trends."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Literal

from sqlalchemy import case, func, literal_column, select
from sqlalchemy.orm import Session

from civic_pulse.core.settings import settings
from civic_pulse.models import (
    Office,
    OfficeVote,
    OfficeVoteKind,
    Review,
    ReviewStatus,
    ReviewVote,
    User,
    UserRole,
    VoteKind,
)
from civic_pulse.services.aggregates import OfficeVoteCounts

RankBy = Literal["upvote", "downvote", "total"]
Period = Literal["daily", "weekly", "monthly"]

_PG_TRUNC_UNITS = {"daily": "day", "weekly": "week", "monthly": "month"}


@dataclass
class VotedOffice:
    office_id: int
    office_name: str
    vote_type: str
    created_at: datetime


@dataclass
class UserOfficeVoteStats:
    upvotes: int = 0
    downvotes: int = 0
    voted_offices: list[VotedOffice] = field(default_factory=list)

    @property
    def total(self) -> int:
        return self.upvotes + self.downvotes


@dataclass
class UserReviewVoteStats:
    helpful: int = 0
    not_helpful: int = 0
    flags: int = 0


@dataclass
class OfficeRanking:
    office_id: int
    office_name: str
    counts: OfficeVoteCounts


@dataclass
class VoteTrendPoint:
    bucket: date
    upvotes: int
    downvotes: int

    @property
    def total(self) -> int:
        return self.upvotes + self.downvotes


@dataclass
class MostVotedReview:
    review_id: int
    comment: str | None
    helpful_count: int
    not_helpful_count: int
    total_votes: int


@dataclass
class ReviewVoteStatistics:
    total_helpful: int = 0
    total_not_helpful: int = 0
    total_flags: int = 0
    most_voted_reviews: list[MostVotedReview] = field(default_factory=list)


@dataclass
class VotedReview:
    review: Review
    office_name: str | None
    author_name: str | None
    voted_at: datetime


def _count_of(column, value):
    return func.coalesce(func.sum(case((column == value, 1), else_=0)), 0)


def _bucket_expression(dialect_name: str, period: Period, column):
    """Truncate ``column`` to the start of its day, ISO week or month."""
    if dialect_name == "postgresql":
        # Inlined so SELECT and GROUP BY render the identical expression.
        unit = literal_column(f"'{_PG_TRUNC_UNITS[period]}'")
        return func.date_trunc(unit, column)
    if dialect_name == "sqlite":
        if period == "daily":
            return func.date(column)
        if period == "weekly":
            # Next Sunday (or today), back six days: the Monday starting the week.
            return func.date(column, "weekday 0", "-6 days")
        return func.date(column, "start of month")
    raise ValueError(f"Vote trends are not supported on {dialect_name}")


def _as_date(value: object) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value)[:10])


class StatsReporter:
    """Aggregations over the vote ledgers and office counters. Never writes."""

    @staticmethod
    def user_vote_stats(db: Session, voter_id: int) -> UserOfficeVoteStats:
        """Office-vote totals for a user plus the offices they voted on, newest first."""
        row = db.execute(
            select(
                _count_of(OfficeVote.vote_type, OfficeVoteKind.UPVOTE).label("upvotes"),
                _count_of(OfficeVote.vote_type, OfficeVoteKind.DOWNVOTE).label("downvotes"),
            ).where(OfficeVote.user_id == voter_id)
        ).one()
        voted = db.execute(
            select(OfficeVote.office_id, Office.name, OfficeVote.vote_type, OfficeVote.created_at)
            .join(Office, Office.office_id == OfficeVote.office_id)
            .where(OfficeVote.user_id == voter_id)
            .order_by(OfficeVote.created_at.desc(), OfficeVote.vote_id.desc())
        ).all()
        return UserOfficeVoteStats(
            upvotes=int(row.upvotes),
            downvotes=int(row.downvotes),
            voted_offices=[
                VotedOffice(
                    office_id=office_id,
                    office_name=name,
                    vote_type=vote_type,
                    created_at=created_at,
                )
                for office_id, name, vote_type, created_at in voted
            ],
        )

    @staticmethod
    def user_review_vote_stats(db: Session, voter_id: int) -> UserReviewVoteStats:
        rows = db.execute(
            select(ReviewVote.vote_type, func.count(ReviewVote.vote_id))
            .where(ReviewVote.user_id == voter_id)
            .group_by(ReviewVote.vote_type)
        ).all()
        counts = {VoteKind(vote_type): count for vote_type, count in rows}
        return UserReviewVoteStats(
            helpful=counts.get(VoteKind.HELPFUL, 0),
            not_helpful=counts.get(VoteKind.NOT_HELPFUL, 0),
            flags=counts.get(VoteKind.FLAG, 0),
        )

    @staticmethod
    def top_offices(db: Session, limit: int = 10, rank_by: RankBy = "total") -> list[OfficeRanking]:
        """Rank offices by their cached counters; equal scores fall back to name order."""
        rank_columns = {
            "upvote": Office.upvote_count,
            "downvote": Office.downvote_count,
            "total": Office.upvote_count + Office.downvote_count,
        }
        if rank_by not in rank_columns:
            raise ValueError(f"Unknown ranking {rank_by!r}")

        offices = db.execute(
            select(Office)
            .order_by(rank_columns[rank_by].desc(), Office.name.asc(), Office.office_id.asc())
            .limit(limit)
        ).scalars()
        return [
            OfficeRanking(
                office_id=office.office_id,
                office_name=office.name,
                counts=OfficeVoteCounts.from_office(office),
            )
            for office in offices
        ]

    @staticmethod
    def vote_trends(
        db: Session,
        office_id: int | None = None,
        period: Period = "daily",
        limit: int = 30,
    ) -> list[VoteTrendPoint]:
        """Bucket office votes by creation time.

        Returns the ``limit`` most recent buckets, oldest first.
        """
        if period not in _PG_TRUNC_UNITS:
            raise ValueError(f"Unknown period {period!r}")

        bucket = _bucket_expression(db.get_bind().dialect.name, period, OfficeVote.created_at)
        stmt = select(
            bucket.label("bucket"),
            _count_of(OfficeVote.vote_type, OfficeVoteKind.UPVOTE).label("upvotes"),
            _count_of(OfficeVote.vote_type, OfficeVoteKind.DOWNVOTE).label("downvotes"),
        )
        if office_id is not None:
            stmt = stmt.where(OfficeVote.office_id == office_id)
        stmt = stmt.group_by(bucket).order_by(bucket.desc()).limit(limit)

        rows = db.execute(stmt).all()
        return [
            VoteTrendPoint(
                bucket=_as_date(row.bucket),
                upvotes=int(row.upvotes),
                downvotes=int(row.downvotes),
            )
            for row in reversed(rows)
        ]

    @staticmethod
    def review_vote_statistics(db: Session, top: int = 5) -> ReviewVoteStatistics:
        """Platform-wide review vote totals plus the most voted reviews."""
        totals = {
            VoteKind(vote_type): count
            for vote_type, count in db.execute(
                select(ReviewVote.vote_type, func.count(ReviewVote.vote_id)).group_by(
                    ReviewVote.vote_type
                )
            ).all()
        }
        total_votes = func.count(ReviewVote.vote_id).label("total_votes")
        rows = db.execute(
            select(
                Review.review_id,
                Review.comment,
                _count_of(ReviewVote.vote_type, VoteKind.HELPFUL).label("helpful_count"),
                _count_of(ReviewVote.vote_type, VoteKind.NOT_HELPFUL).label("not_helpful_count"),
                total_votes,
            )
            .join(ReviewVote, ReviewVote.review_id == Review.review_id)
            .group_by(Review.review_id, Review.comment)
            .order_by(total_votes.desc(), Review.review_id)
            .limit(top)
        ).all()
        return ReviewVoteStatistics(
            total_helpful=totals.get(VoteKind.HELPFUL, 0),
            total_not_helpful=totals.get(VoteKind.NOT_HELPFUL, 0),
            total_flags=totals.get(VoteKind.FLAG, 0),
            most_voted_reviews=[
                MostVotedReview(
                    review_id=row.review_id,
                    comment=row.comment,
                    helpful_count=int(row.helpful_count),
                    not_helpful_count=int(row.not_helpful_count),
                    total_votes=row.total_votes,
                )
                for row in rows
            ],
        )

    @staticmethod
    def reviews_voted_by(
        db: Session,
        user: User,
        kind: VoteKind | str,
        limit: int | None = None,
    ) -> list[VotedReview]:
        """Approved reviews the user voted on with ``kind``, most recent vote first.

        Officials only see reviews of the office they are assigned to.
        """
        kind = VoteKind(kind)
        stmt = (
            select(Review, Office.name, User.full_name, ReviewVote.created_at)
            .join(ReviewVote, ReviewVote.review_id == Review.review_id)
            .outerjoin(Office, Office.office_id == Review.office_id)
            .outerjoin(User, User.user_id == Review.user_id)
            .where(
                ReviewVote.user_id == user.user_id,
                ReviewVote.vote_type == kind,
                Review.status == ReviewStatus.APPROVED,
            )
            .order_by(ReviewVote.created_at.desc(), ReviewVote.vote_id.desc())
            .limit(limit or settings.default_page_size)
        )
        if user.role == UserRole.OFFICIAL and user.office_id is not None:
            stmt = stmt.where(Review.office_id == user.office_id)

        return [
            VotedReview(review=review, office_name=office_name, author_name=author_name, voted_at=voted_at)
            for review, office_name, author_name, voted_at in db.execute(stmt).all()
        ]
