# src/civic_pulse/models/__init__.py
"""SQLAlchemy models for the Civic Pulse application."""

from .author import Anonymous, Author, Identified
from .notification import Notification, NotificationType
from .office import Office
from .office_vote import OfficeVote, OfficeVoteKind
from .review import Review, ReviewStatus
from .user import User, UserRole
from .vote import ReviewVote, VoteKind

__all__ = [
    "Anonymous", "Author", "Identified",
    "Notification", "NotificationType",
    "Office",
    "OfficeVote", "OfficeVoteKind",
    "Review", "ReviewStatus",
    "User", "UserRole",
    "ReviewVote", "VoteKind",
]
