"""Exceptions raised by the engagement services.

The API layer maps each class onto an HTTP status; services never build
HTTP responses themselves.
"""


class EngagementError(RuntimeError):
    """Base exception for vote, moderation and notification failures."""

    status_code = 500


class NotFoundError(EngagementError):
    """Raised when the referenced review, office or notification does not exist."""

    status_code = 404


class PermissionDeniedError(EngagementError):
    """Raised when a caller acts on a resource it does not own."""

    status_code = 403


class VoteConflictError(EngagementError):
    """Raised when a write would leave two votes for one (voter, target) pair.

    The upsert path retries once on a unique violation, so seeing this means a
    caller bypassed the ledger or the store is misbehaving.
    """

    status_code = 409


class InvalidTransitionError(EngagementError):
    """Raised when a review status change is not an edge of the moderation table."""

    status_code = 409


class ReviewClosedError(EngagementError):
    """Raised when a vote targets a review that has been removed."""

    status_code = 409


class TransactionFailure(EngagementError):
    """Raised when the store rejects or aborts a ledger transaction.

    The transaction has been rolled back; nothing was written.
    """

    status_code = 503
