# src/civic_pulse/models/user.py
"""SQLAlchemy model for platform accounts."""

from __future__ import annotations

from enum import StrEnum

from sqlalchemy import CheckConstraint, ForeignKey, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from civic_pulse.db.session import Base


class UserRole(StrEnum):
    CITIZEN = "citizen"
    OFFICIAL = "official"
    ADMIN = "admin"


class User(Base):
    """Account identity supplied by the authentication collaborator.

    Officials may be attached to the office they work for; that scoping is
    used by the voted-review listings.
    """

    __tablename__ = "user_account"
    __table_args__ = (
        CheckConstraint(
            "role IN ('citizen', 'official', 'admin')",
            name="ck_user_account_role",
        ),
    )

    user_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    full_name: Mapped[str] = mapped_column(Text, nullable=False)
    email: Mapped[str] = mapped_column(Text, nullable=False, unique=True)
    role: Mapped[str] = mapped_column(Text, nullable=False, default=UserRole.CITIZEN)
    office_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("office.office_id", ondelete="SET NULL"),
        nullable=True,
    )

    @property
    def is_moderator(self) -> bool:
        """Return True for roles allowed to administer flagged reviews."""
        return self.role in (UserRole.OFFICIAL, UserRole.ADMIN)
