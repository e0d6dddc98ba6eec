"""Commit/rollback discipline shared by the ledgers."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TypeVar

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from civic_pulse.services.errors import EngagementError, TransactionFailure, VoteConflictError

logger = logging.getLogger(__name__)

T = TypeVar("T")

# A unique violation on the first attempt means another voter's insert for the
# same pair committed first; the second attempt sees it and updates instead.
MAX_ATTEMPTS = 2

UNIQUE_VIOLATION_SQLSTATE = "23505"


def is_unique_violation(err: IntegrityError) -> bool:
    """Return True if ``err`` came from a unique constraint, not a foreign key or check."""
    orig = err.orig
    sqlstate = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    if sqlstate is not None:
        return sqlstate == UNIQUE_VIOLATION_SQLSTATE
    # sqlite3 reports "UNIQUE constraint failed: table.column".
    return "unique constraint" in str(orig).lower()


def run_in_transaction(db: Session, work: Callable[[], T], *, description: str) -> T:
    """Run ``work`` and commit it as one unit.

    Any failure rolls the whole unit back, so a ledger row is never committed
    without the aggregates computed alongside it.

    Args:
        db: Session whose current transaction ``work`` writes into.
        work: Callable performing the reads and writes; must not commit.
        description: Short label used in log lines and error messages.

    Raises:
        VoteConflictError: If the unique constraint still fails after a retry.
        TransactionFailure: If the store rejects the transaction.
        EngagementError: Re-raised unchanged from ``work`` after rollback.
    """
    for attempt in range(1, MAX_ATTEMPTS + 1):
        try:
            result = work()
            db.commit()
            return result
        except IntegrityError as err:
            db.rollback()
            if not is_unique_violation(err):
                logger.error("Integrity error during %s: %s", description, err, exc_info=True)
                raise TransactionFailure(f"Could not complete {description}") from err
            if attempt == MAX_ATTEMPTS:
                logger.error("Unique constraint still violated during %s: %s", description, err)
                raise VoteConflictError(f"Conflicting concurrent write during {description}") from err
            logger.warning("Concurrent write detected during %s; retrying", description)
        except EngagementError:
            db.rollback()
            raise
        except SQLAlchemyError as err:
            db.rollback()
            logger.error("Transaction failed during %s: %s", description, err, exc_info=True)
            raise TransactionFailure(f"Could not complete {description}") from err
        except Exception:
            db.rollback()
            raise

    raise AssertionError("unreachable")  # pragma: no cover
