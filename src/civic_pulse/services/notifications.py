"""Notification emitter and inbox operations."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

from sqlalchemy import delete, func, select, update
from sqlalchemy.orm import Session

from civic_pulse.core.settings import settings
from civic_pulse.models import Anonymous, Author, Identified, Notification, NotificationType
from civic_pulse.services.errors import NotFoundError, PermissionDeniedError

logger = logging.getLogger(__name__)


class NotificationTemplate(Enum):
    """Title, message and severity for each moderation announcement."""

    REVIEW_FLAGGED = (
        "Your review has been flagged",
        "Your review has been flagged by {flag_count} users and is under moderation. "
        "The review may be removed if it violates our community guidelines.",
        NotificationType.WARNING,
    )
    REVIEW_APPROVED = (
        "Your flagged review has been approved",
        "After review, your flagged comment has been approved and will remain visible.",
        NotificationType.SUCCESS,
    )
    REVIEW_REMOVED = (
        "Your review has been removed",
        "Your review has been removed for violating our community guidelines.",
        NotificationType.ERROR,
    )
    REVIEW_RESOLVED = (
        "Your flagged review has been resolved",
        "The flags on your review have been resolved and the review will remain visible.",
        NotificationType.SUCCESS,
    )

    def __init__(self, title: str, message: str, severity: NotificationType) -> None:
        self.title = title
        self.message = message
        self.severity = severity

    def render(self, **context: object) -> str:
        return self.message.format(**context)


@dataclass(frozen=True)
class RelatedEntity:
    """Weak back-link from a notification to the thing it is about."""

    kind: str
    entity_id: int


class NotificationEmitter:
    """Creates notifications for content authors and serves their inbox."""

    def notify(
        self,
        db: Session,
        recipient: Author,
        template: NotificationTemplate,
        related: RelatedEntity | None = None,
        note: str | None = None,
        **context: object,
    ) -> Notification | None:
        """Persist a notification for ``recipient``.

        Anonymous authors have no inbox; for them this returns None and
        writes nothing. A moderator ``note`` is appended to the rendered message.
        """
        match recipient:
            case Anonymous():
                logger.debug("Skipping %s notification: author is anonymous", template.name)
                return None
            case Identified(user_id=user_id):
                message = template.render(**context)
                if note:
                    message = f"{message}\n\nModerator note: {note}"
                notification = Notification(
                    user_id=user_id,
                    title=template.title,
                    message=message,
                    type=template.severity,
                    related_entity_type=related.kind if related else None,
                    related_entity_id=related.entity_id if related else None,
                    is_read=False,
                )
                db.add(notification)
                db.commit()
                db.refresh(notification)
                logger.info(
                    "Sent %s notification %s to user %s",
                    template.name,
                    notification.notification_id,
                    user_id,
                )
                return notification
        raise TypeError(f"Unsupported recipient {recipient!r}")

    @staticmethod
    def list_for(
        db: Session,
        user_id: int,
        limit: int | None = None,
        offset: int = 0,
    ) -> list[Notification]:
        """Return a user's notifications, newest first."""
        return list(
            db.execute(
                select(Notification)
                .where(Notification.user_id == user_id)
                .order_by(Notification.created_at.desc(), Notification.notification_id.desc())
                .limit(limit or settings.default_page_size)
                .offset(offset)
            ).scalars()
        )

    @staticmethod
    def unread_count(db: Session, user_id: int) -> int:
        return db.execute(
            select(func.count(Notification.notification_id)).where(
                Notification.user_id == user_id,
                Notification.is_read.is_(False),
            )
        ).scalar_one()

    @staticmethod
    def _owned(db: Session, user_id: int, notification_id: int) -> Notification:
        notification = db.get(Notification, notification_id)
        if notification is None:
            raise NotFoundError(f"Notification {notification_id} not found")
        if notification.user_id != user_id:
            raise PermissionDeniedError("Notification belongs to another user")
        return notification

    def mark_read(self, db: Session, user_id: int, notification_id: int) -> Notification:
        notification = self._owned(db, user_id, notification_id)
        notification.is_read = True
        db.commit()
        db.refresh(notification)
        return notification

    @staticmethod
    def mark_all_read(db: Session, user_id: int) -> int:
        """Mark every unread notification of the user as read; return how many changed."""
        result = db.execute(
            update(Notification)
            .where(Notification.user_id == user_id, Notification.is_read.is_(False))
            .values(is_read=True)
            .execution_options(synchronize_session=False)
        )
        db.commit()
        return result.rowcount

    def delete(self, db: Session, user_id: int, notification_id: int) -> None:
        notification = self._owned(db, user_id, notification_id)
        db.delete(notification)
        db.commit()

    @staticmethod
    def delete_all(db: Session, user_id: int) -> int:
        result = db.execute(delete(Notification).where(Notification.user_id == user_id))
        db.commit()
        return result.rowcount
