# src/civic_pulse/schemas/__init__.py
"""
Pydantic schemas for API request/response models.

These schemas define the structure of API data for serialization and validation.
"""

from .moderation import ModerationOutcomeResponse, ReviewStatusUpdate
from .notification import NotificationResponse, UnreadCountResponse
from .office_vote import OfficeVoteCastResponse, OfficeVoteCreate, OfficeVoteSummary
from .review import ReviewResponse
from .vote import ReviewVoteCastResponse, ReviewVoteCreate, ReviewVoteSummary

__all__ = [
    "ModerationOutcomeResponse", "ReviewStatusUpdate",
    "NotificationResponse", "UnreadCountResponse",
    "OfficeVoteCastResponse", "OfficeVoteCreate", "OfficeVoteSummary",
    "ReviewResponse",
    "ReviewVoteCastResponse", "ReviewVoteCreate", "ReviewVoteSummary",
]
