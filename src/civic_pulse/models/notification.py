# src/civic_pulse/models/notification.py
"""Inbox messages delivered to users after moderation events."""

from __future__ import annotations

from datetime import datetime
from enum import StrEnum

from sqlalchemy import Boolean, CheckConstraint, DateTime, ForeignKey, Index, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from civic_pulse.db.session import Base
from civic_pulse.db.time import utcnow


class NotificationType(StrEnum):
    INFO = "info"
    WARNING = "warning"
    SUCCESS = "success"
    ERROR = "error"


class Notification(Base):
    """A message owned by its recipient.

    ``related_entity_type``/``related_entity_id`` is a navigation hint only;
    there is deliberately no foreign key behind it.
    """

    __tablename__ = "notification"
    __table_args__ = (
        CheckConstraint(
            "type IN ('info', 'warning', 'success', 'error')",
            name="ck_notification_type",
        ),
        Index("ix_notification_user_id_is_read", "user_id", "is_read"),
    )

    notification_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("user_account.user_id", ondelete="CASCADE"),
        nullable=False,
    )
    title: Mapped[str] = mapped_column(Text, nullable=False)
    message: Mapped[str] = mapped_column(Text, nullable=False)
    type: Mapped[str] = mapped_column(Text, nullable=False, default=NotificationType.INFO)
    related_entity_type: Mapped[str | None] = mapped_column(Text, nullable=True)
    related_entity_id: Mapped[int | None] = mapped_column(Integer, nullable=True)
    is_read: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
