"""Repair the cached office vote counters from the office_vote ledger."""
from __future__ import annotations

import argparse
import logging
import sys

from sqlalchemy.exc import SQLAlchemyError

from civic_pulse.core.logging_config import configure_logging
from civic_pulse.db.session import SessionLocal
from civic_pulse.services.aggregates import recompute_all_office_counters

logger = logging.getLogger("civic_pulse.scripts.recount")


def run_recount(dry_run: bool = False) -> int:
    """Recompute stale counters and return how many offices were corrected."""
    with SessionLocal() as db:
        try:
            corrected = recompute_all_office_counters(db)
            if dry_run:
                db.rollback()
            else:
                db.commit()
        except SQLAlchemyError:
            db.rollback()
            raise
    return corrected


def main() -> None:
    parser = argparse.ArgumentParser(description="Recompute office vote counters from the ledger")
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Report how many offices are out of step without writing anything.",
    )
    parser.add_argument("--log-level", default=None, help="Override LOG_LEVEL for this run")
    args = parser.parse_args()

    configure_logging(args.log_level)
    try:
        corrected = run_recount(dry_run=args.dry_run)
    except SQLAlchemyError as exc:
        logger.error("Recount failed: %s", exc)
        sys.exit(1)

    verb = "would correct" if args.dry_run else "corrected"
    print(f"[recount] {verb} {corrected} office(s)")


if __name__ == "__main__":
    main()
