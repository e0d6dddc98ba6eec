"""Ledger of up/down votes on offices and their cached counters."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from civic_pulse.db.time import utcnow
from civic_pulse.models import Office, OfficeVote, OfficeVoteKind
from civic_pulse.services.aggregates import OfficeVoteCounts, recompute_office_counters
from civic_pulse.services.errors import NotFoundError
from civic_pulse.services.transactions import run_in_transaction

logger = logging.getLogger(__name__)


@dataclass
class OfficeVoteResult:
    vote: OfficeVote
    counts: OfficeVoteCounts
    changed: bool


@dataclass
class OfficeRetractResult:
    deleted: bool
    counts: OfficeVoteCounts


def _lock_office(db: Session, office_id: int) -> Office:
    """Load the office with a row lock so writers on one office are serialized."""
    office = db.get(Office, office_id, with_for_update=True)
    if office is None:
        raise NotFoundError(f"Office {office_id} not found")
    return office


class OfficeVoteLedger:
    """Service keeping office votes and the office counters in one transaction."""

    @staticmethod
    def find(db: Session, voter_id: int, office_id: int) -> OfficeVote | None:
        return db.execute(
            select(OfficeVote).where(
                OfficeVote.user_id == voter_id,
                OfficeVote.office_id == office_id,
            )
        ).scalar_one_or_none()

    def cast(
        self,
        db: Session,
        voter_id: int,
        office_id: int,
        kind: OfficeVoteKind | str,
    ) -> OfficeVoteResult:
        """Record the voter's vote on an office and recompute its counters.

        Recasting the same kind returns the existing vote and leaves the
        counters alone. Switching kind updates the row in place; the counters
        are then recomputed from the ledger rather than adjusted.

        Raises:
            NotFoundError: If the office does not exist.
            TransactionFailure: If the store aborts the transaction.
        """
        kind = OfficeVoteKind(kind)

        def work() -> OfficeVoteResult:
            office = _lock_office(db, office_id)
            vote = self.find(db, voter_id, office_id)
            if vote is not None and vote.vote_type == kind:
                return OfficeVoteResult(
                    vote=vote, counts=OfficeVoteCounts.from_office(office), changed=False
                )

            if vote is None:
                now = utcnow()
                vote = OfficeVote(
                    user_id=voter_id,
                    office_id=office_id,
                    vote_type=kind,
                    created_at=now,
                    updated_at=now,
                )
                db.add(vote)
            else:
                vote.vote_type = kind
                vote.updated_at = utcnow()

            counts = recompute_office_counters(db, office_id)
            return OfficeVoteResult(vote=vote, counts=counts, changed=True)

        result = run_in_transaction(db, work, description=f"vote on office {office_id}")
        if result.changed:
            logger.debug(
                "User %s voted %s on office %s (up=%d down=%d)",
                voter_id,
                kind,
                office_id,
                result.counts.upvotes,
                result.counts.downvotes,
            )
        return result

    @staticmethod
    def retract(db: Session, voter_id: int, office_id: int) -> OfficeRetractResult:
        """Remove the voter's vote on an office; a missing vote is not an error.

        Raises:
            NotFoundError: If the office does not exist.
        """

        def work() -> OfficeRetractResult:
            office = _lock_office(db, office_id)
            result = db.execute(
                delete(OfficeVote).where(
                    OfficeVote.user_id == voter_id,
                    OfficeVote.office_id == office_id,
                )
            )
            if result.rowcount == 0:
                return OfficeRetractResult(deleted=False, counts=OfficeVoteCounts.from_office(office))
            counts = recompute_office_counters(db, office_id)
            return OfficeRetractResult(deleted=True, counts=counts)

        return run_in_transaction(db, work, description=f"vote retraction on office {office_id}")

    @staticmethod
    def counts_for(db: Session, office_id: int) -> OfficeVoteCounts:
        """Return the cached counters of an office.

        Raises:
            NotFoundError: If the office does not exist.
        """
        office = db.get(Office, office_id)
        if office is None:
            raise NotFoundError(f"Office {office_id} not found")
        return OfficeVoteCounts.from_office(office)
