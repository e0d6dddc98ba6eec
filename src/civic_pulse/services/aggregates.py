"""Maintenance of the denormalized office vote counters.

Counters are always recomputed from the office_vote ledger inside the
caller's transaction, never adjusted by deltas. A counter therefore equals
the ledger as of the last committed write, whatever happened before.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlalchemy import case, func, select, update
from sqlalchemy.orm import Session

from civic_pulse.models import Office, OfficeVote, OfficeVoteKind

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OfficeVoteCounts:
    """Up/down totals for one office."""

    upvotes: int
    downvotes: int

    @property
    def total(self) -> int:
        return self.upvotes + self.downvotes

    @property
    def ratio(self) -> int:
        """Percentage of upvotes, rounded; 0 when nobody voted."""
        if self.total == 0:
            return 0
        return round(self.upvotes * 100 / self.total)

    @classmethod
    def from_office(cls, office: Office) -> OfficeVoteCounts:
        return cls(upvotes=office.upvote_count or 0, downvotes=office.downvote_count or 0)


def _count_subquery(office_id_column, kind: OfficeVoteKind):
    return (
        select(func.count(OfficeVote.vote_id))
        .where(OfficeVote.office_id == office_id_column, OfficeVote.vote_type == kind)
        .scalar_subquery()
    )


def recompute_office_counters(db: Session, office_id: int) -> OfficeVoteCounts:
    """Rewrite the cached counters of one office from the ledger.

    Must run after the ledger write and before the commit of the same
    transaction. Pending ORM changes are flushed first so the aggregate sees
    them.
    """
    db.flush()
    db.execute(
        update(Office)
        .where(Office.office_id == office_id)
        .values(
            upvote_count=_count_subquery(Office.office_id, OfficeVoteKind.UPVOTE),
            downvote_count=_count_subquery(Office.office_id, OfficeVoteKind.DOWNVOTE),
        )
        .execution_options(synchronize_session=False)
    )
    row = db.execute(
        select(Office.upvote_count, Office.downvote_count).where(Office.office_id == office_id)
    ).one()

    # Keep any loaded Office instance in step with the row we just wrote.
    office = db.get(Office, office_id)
    if office is not None:
        db.refresh(office, attribute_names=["upvote_count", "downvote_count"])

    return OfficeVoteCounts(upvotes=row.upvote_count, downvotes=row.downvote_count)


def live_office_counts(db: Session, office_id: int) -> OfficeVoteCounts:
    """Count the ledger rows for an office without touching the cache."""
    row = db.execute(
        select(
            func.coalesce(
                func.sum(case((OfficeVote.vote_type == OfficeVoteKind.UPVOTE, 1), else_=0)), 0
            ).label("upvotes"),
            func.coalesce(
                func.sum(case((OfficeVote.vote_type == OfficeVoteKind.DOWNVOTE, 1), else_=0)), 0
            ).label("downvotes"),
        ).where(OfficeVote.office_id == office_id)
    ).one()
    return OfficeVoteCounts(upvotes=int(row.upvotes), downvotes=int(row.downvotes))


def recompute_all_office_counters(db: Session) -> int:
    """Repair every office whose cached counters disagree with the ledger.

    Returns:
        Number of offices that were corrected. The caller commits.
    """
    upvotes = _count_subquery(Office.office_id, OfficeVoteKind.UPVOTE)
    downvotes = _count_subquery(Office.office_id, OfficeVoteKind.DOWNVOTE)
    stale = db.execute(
        select(Office.office_id).where(
            (Office.upvote_count != upvotes) | (Office.downvote_count != downvotes)
        )
    ).scalars().all()

    for office_id in stale:
        counts = recompute_office_counters(db, office_id)
        logger.info(
            "Recomputed counters for office %s: up=%d down=%d",
            office_id,
            counts.upvotes,
            counts.downvotes,
        )
    return len(stale)
