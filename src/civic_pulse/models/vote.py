# src/civic_pulse/models/vote.py
"""Models capturing voting interactions on reviews."""

from __future__ import annotations

from datetime import datetime
from enum import StrEnum

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from civic_pulse.db.session import Base
from civic_pulse.db.time import utcnow


class VoteKind(StrEnum):
    HELPFUL = "helpful"
    NOT_HELPFUL = "not_helpful"
    FLAG = "flag"


class ReviewVote(Base):
    """Per-user vote on a review.

    Changing the kind of a vote mutates this row; a voter never owns two rows
    for the same review.
    """

    __tablename__ = "review_vote"
    __table_args__ = (
        UniqueConstraint("user_id", "review_id", name="uq_review_vote_user_review"),
        CheckConstraint(
            "vote_type IN ('helpful', 'not_helpful', 'flag')",
            name="ck_review_vote_type",
        ),
        Index("ix_review_vote_review_id_type", "review_id", "vote_type"),
    )

    vote_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("user_account.user_id", ondelete="CASCADE"),
        nullable=False,
    )
    review_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("review.review_id", ondelete="CASCADE"),
        nullable=False,
    )
    vote_type: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )

    review = relationship("Review", back_populates="votes")
