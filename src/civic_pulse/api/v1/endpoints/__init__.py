# src/civic_pulse/api/v1/endpoints/__init__.py
"""API endpoint modules for version 1."""

from .moderation import router as moderation_router
from .notifications import router as notifications_router
from .office_votes import router as office_votes_router
from .votes import router as votes_router

__all__ = [
    "votes_router",
    "office_votes_router",
    "moderation_router",
    "notifications_router",
]
