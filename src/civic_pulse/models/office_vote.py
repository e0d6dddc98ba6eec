# src/civic_pulse/models/office_vote.py
"""Models capturing up/down votes on offices."""

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
from sqlalchemy.orm import Mapped, mapped_column

from civic_pulse.db.session import Base
from civic_pulse.db.time import utcnow


class OfficeVoteKind(StrEnum):
    UPVOTE = "upvote"
    DOWNVOTE = "downvote"


class OfficeVote(Base):
    """Per-user vote on an office; the ledger behind the office counters."""

    __tablename__ = "office_vote"
    __table_args__ = (
        UniqueConstraint("user_id", "office_id", name="uq_office_vote_user_office"),
        CheckConstraint(
            "vote_type IN ('upvote', 'downvote')",
            name="ck_office_vote_type",
        ),
        Index("ix_office_vote_office_id_type", "office_id", "vote_type"),
        Index("ix_office_vote_created_at", "created_at"),
    )

    vote_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("user_account.user_id", ondelete="CASCADE"),
        nullable=False,
    )
    office_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("office.office_id", ondelete="CASCADE"),
        nullable=False,
    )
    vote_type: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
