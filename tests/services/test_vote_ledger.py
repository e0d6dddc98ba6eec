# tests/services/test_vote_ledger.py
"""Tests for the review vote ledger."""

import pytest
from sqlalchemy import func, select

from civic_pulse.models import ReviewStatus, ReviewVote, VoteKind
from civic_pulse.services.errors import (
    NotFoundError,
    ReviewClosedError,
    TransactionFailure,
    VoteConflictError,
)
from civic_pulse.services.vote_ledger import VoteLedger


def _vote_rows(db_session, review_id: int) -> int:
    return db_session.execute(
        select(func.count(ReviewVote.vote_id)).where(ReviewVote.review_id == review_id)
    ).scalar_one()


def test_cast_creates_single_vote(db_session, ledger, review, voter) -> None:
    result = ledger.cast(db_session, voter.user_id, review.review_id, VoteKind.HELPFUL)

    assert result.changed is True
    assert result.vote.vote_type == VoteKind.HELPFUL
    assert result.moderation is None
    assert _vote_rows(db_session, review.review_id) == 1


def test_recasting_same_kind_is_a_no_op(db_session, ledger, review, voter) -> None:
    first = ledger.cast(db_session, voter.user_id, review.review_id, "helpful")
    second = ledger.cast(db_session, voter.user_id, review.review_id, "helpful")

    assert second.changed is False
    assert second.vote.vote_id == first.vote.vote_id
    assert _vote_rows(db_session, review.review_id) == 1


def test_switching_kind_updates_in_place(db_session, ledger, review, voter) -> None:
    first = ledger.cast(db_session, voter.user_id, review.review_id, VoteKind.HELPFUL)
    second = ledger.cast(db_session, voter.user_id, review.review_id, VoteKind.NOT_HELPFUL)

    assert second.changed is True
    assert second.vote.vote_id == first.vote.vote_id
    counts = ledger.counts_for(db_session, review.review_id)
    assert counts == {VoteKind.HELPFUL: 0, VoteKind.NOT_HELPFUL: 1, VoteKind.FLAG: 0}


def test_retract_removes_vote(db_session, ledger, review, voter) -> None:
    ledger.cast(db_session, voter.user_id, review.review_id, VoteKind.FLAG)

    assert ledger.retract(db_session, voter.user_id, review.review_id) is True
    assert ledger.find(db_session, voter.user_id, review.review_id) is None
    assert ledger.retract(db_session, voter.user_id, review.review_id) is False


def test_cast_on_missing_review_raises(db_session, ledger, voter) -> None:
    with pytest.raises(NotFoundError):
        ledger.cast(db_session, voter.user_id, 99999, VoteKind.HELPFUL)


def test_retract_on_missing_review_raises(db_session, ledger, voter) -> None:
    with pytest.raises(NotFoundError):
        ledger.retract(db_session, voter.user_id, 99999)


def test_cast_on_removed_review_is_rejected(db_session, ledger, make_review, author, voter) -> None:
    removed = make_review(author, status=ReviewStatus.REMOVED)

    with pytest.raises(ReviewClosedError):
        ledger.cast(db_session, voter.user_id, removed.review_id, VoteKind.HELPFUL)
    assert _vote_rows(db_session, removed.review_id) == 0


def test_invalid_kind_is_rejected(db_session, ledger, review, voter) -> None:
    with pytest.raises(ValueError):
        ledger.cast(db_session, voter.user_id, review.review_id, "upvote")


def test_duplicate_insert_surfaces_as_conflict(
    db_session, ledger, review, voter, monkeypatch
) -> None:
    ledger.cast(db_session, voter.user_id, review.review_id, VoteKind.HELPFUL)

    # Pretend the existing row is invisible so both attempts try to insert.
    monkeypatch.setattr(VoteLedger, "find", staticmethod(lambda db, voter_id, review_id: None))

    with pytest.raises(VoteConflictError):
        ledger.cast(db_session, voter.user_id, review.review_id, VoteKind.NOT_HELPFUL)
    assert _vote_rows(db_session, review.review_id) == 1


def test_concurrent_first_insert_is_retried_as_update(
    db_session, ledger, review, voter, monkeypatch
) -> None:
    original = ledger.cast(db_session, voter.user_id, review.review_id, VoteKind.HELPFUL)
    original_id = original.vote.vote_id

    # The first lookup misses the row the other writer committed; the retry sees it.
    real_find = VoteLedger.find
    calls = []

    def _stale_then_real(db, voter_id, review_id):
        calls.append(review_id)
        if len(calls) == 1:
            return None
        return real_find(db, voter_id, review_id)

    monkeypatch.setattr(VoteLedger, "find", staticmethod(_stale_then_real))

    result = ledger.cast(db_session, voter.user_id, review.review_id, VoteKind.NOT_HELPFUL)

    assert len(calls) == 2
    assert result.changed is True
    assert result.vote.vote_id == original_id
    assert result.vote.vote_type == VoteKind.NOT_HELPFUL
    assert _vote_rows(db_session, review.review_id) == 1
    assert ledger.counts_for(db_session, review.review_id)[VoteKind.NOT_HELPFUL] == 1


def test_vote_from_unknown_account_is_not_a_conflict(db_session, ledger, review) -> None:
    with pytest.raises(TransactionFailure):
        ledger.cast(db_session, 987654, review.review_id, VoteKind.HELPFUL)
    assert _vote_rows(db_session, review.review_id) == 0


def test_counts_are_zero_filled(db_session, ledger, review) -> None:
    assert ledger.counts_for(db_session, review.review_id) == {
        VoteKind.HELPFUL: 0,
        VoteKind.NOT_HELPFUL: 0,
        VoteKind.FLAG: 0,
    }


def test_flagged_reviews_orders_by_flag_count(
    db_session, ledger, make_review, author, voters, office
) -> None:
    once = make_review(author, comment="flagged once")
    twice = make_review(None, comment="flagged twice")
    ledger.cast(db_session, voters[0].user_id, once.review_id, VoteKind.FLAG)
    ledger.cast(db_session, voters[0].user_id, twice.review_id, VoteKind.FLAG)
    ledger.cast(db_session, voters[1].user_id, twice.review_id, VoteKind.FLAG)
    ledger.cast(db_session, voters[2].user_id, once.review_id, VoteKind.HELPFUL)

    flagged = ledger.flagged_reviews(db_session)

    assert [(item.review.review_id, item.flag_count) for item in flagged] == [
        (twice.review_id, 2),
        (once.review_id, 1),
    ]
    assert flagged[0].author_name is None
    assert flagged[1].author_name == author.full_name
    assert flagged[1].office_name == office.name


def test_flagged_reviews_filters_by_status(db_session, ledger, review, voters) -> None:
    ledger.cast(db_session, voters[0].user_id, review.review_id, VoteKind.FLAG)

    assert ledger.flagged_reviews(db_session, status=ReviewStatus.FLAGGED) == []
    assert len(ledger.flagged_reviews(db_session, status="approved")) == 1
