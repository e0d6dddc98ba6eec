# src/civic_pulse/services/__init__.py
"""Business logic services for the Civic Pulse application."""

from .moderation import ModerationGate
from .notifications import NotificationEmitter
from .office_vote_ledger import OfficeVoteLedger
from .stats import StatsReporter
from .vote_ledger import VoteLedger

__all__ = [
    "ModerationGate",
    "NotificationEmitter",
    "OfficeVoteLedger",
    "StatsReporter",
    "VoteLedger",
]
