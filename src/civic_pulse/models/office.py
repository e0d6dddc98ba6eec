# src/civic_pulse/models/office.py
"""SQLAlchemy model for government offices."""

from sqlalchemy import CheckConstraint, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from civic_pulse.db.session import Base


class Office(Base):
    """A government office citizens can review and vote on.

    ``upvote_count`` and ``downvote_count`` are a cache of the office_vote
    ledger. Only the aggregate maintainer writes them.
    """

    __tablename__ = "office"
    __table_args__ = (
        CheckConstraint("upvote_count >= 0", name="ck_office_upvote_count"),
        CheckConstraint("downvote_count >= 0", name="ck_office_downvote_count"),
    )

    office_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    # kebele, woreda, municipal, regional or federal; owned by the office directory.
    office_type: Mapped[str] = mapped_column(Text, nullable=False, default="municipal")
    address: Mapped[str | None] = mapped_column(Text, nullable=True)

    upvote_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    downvote_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
