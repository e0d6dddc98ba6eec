# src/civic_pulse/api/v1/__init__.py
"""Version 1 API endpoints."""

from .endpoints import (
    moderation_router,
    notifications_router,
    office_votes_router,
    votes_router,
)

__all__ = [
    "votes_router",
    "office_votes_router",
    "moderation_router",
    "notifications_router",
]
