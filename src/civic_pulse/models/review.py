# src/civic_pulse/models/review.py
"""SQLAlchemy model for citizen reviews of offices."""

from __future__ import annotations

from datetime import datetime
from enum import StrEnum

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Index, Integer, SmallInteger, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from civic_pulse.db.session import Base
from civic_pulse.db.time import utcnow
from civic_pulse.models.author import Anonymous, Author, Identified


class ReviewStatus(StrEnum):
    PENDING = "pending"
    APPROVED = "approved"
    FLAGGED = "flagged"
    REMOVED = "removed"
    RESOLVED = "resolved"


class Review(Base):
    """A rating and comment left on an office.

    ``status`` is owned by the moderation gate. The flag count is never stored
    here; it is recomputed from the vote ledger whenever it is needed.
    """

    __tablename__ = "review"
    __table_args__ = (
        CheckConstraint(
            "status IN ('pending', 'approved', 'flagged', 'removed', 'resolved')",
            name="ck_review_status",
        ),
        CheckConstraint("rating BETWEEN 1 AND 5", name="ck_review_rating"),
        Index("ix_review_office_id", "office_id"),
        Index("ix_review_status", "status"),
    )

    review_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    # NULL means the review was submitted without an account.
    user_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("user_account.user_id", ondelete="SET NULL"),
        nullable=True,
    )
    office_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("office.office_id", ondelete="CASCADE"),
        nullable=False,
    )
    rating: Mapped[int] = mapped_column(SmallInteger, nullable=False)
    comment: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(Text, nullable=False, default=ReviewStatus.APPROVED)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow
    )

    votes = relationship(
        "ReviewVote",
        back_populates="review",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    @property
    def author(self) -> Author:
        """Return who wrote the review as a tagged variant."""
        if self.user_id is None:
            return Anonymous()
        return Identified(self.user_id)
