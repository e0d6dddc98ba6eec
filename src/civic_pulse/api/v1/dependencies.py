"""Shared API dependencies for authentication and common functionality."""

from typing import Annotated

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError
from sqlalchemy.orm import Session

from civic_pulse.core.security import decode_subject
from civic_pulse.db.session import get_db
from civic_pulse.models import User
from civic_pulse.services import (
    ModerationGate,
    NotificationEmitter,
    OfficeVoteLedger,
    StatsReporter,
    VoteLedger,
)

# HTTP Bearer scheme for JWT authentication
bearer_scheme = HTTPBearer()
optional_bearer_scheme = HTTPBearer(auto_error=False)

# Type alias for database session dependency
SessionDep = Annotated[Session, Depends(get_db)]


def _user_from_token(token: str, db: Session) -> User:
    try:
        user_id = decode_subject(token)
    except (JWTError, ValueError) as err:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
        ) from err

    user = db.get(User, user_id)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found",
        )
    return user


def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials, Depends(bearer_scheme)],
    db: SessionDep,
) -> User:
    """Get the current authenticated user from JWT token.

    Args:
        credentials: HTTP Bearer token credentials
        db: Database session

    Returns:
        User object for the authenticated user

    Raises:
        HTTPException: If token is invalid or user not found
    """
    return _user_from_token(credentials.credentials, db)


def get_optional_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(optional_bearer_scheme)],
    db: SessionDep,
) -> User | None:
    """Return the caller if a bearer token was supplied, otherwise None."""
    if credentials is None:
        return None
    return _user_from_token(credentials.credentials, db)


def get_moderator(current_user: Annotated[User, Depends(get_current_user)]) -> User:
    """Require an official or administrator."""
    if not current_user.is_moderator:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Officials or administrators only",
        )
    return current_user


# Service singletons; overridable in tests through app.dependency_overrides.
_moderation_gate = ModerationGate()
_vote_ledger = VoteLedger(gate=_moderation_gate)
_office_vote_ledger = OfficeVoteLedger()
_notification_emitter = _moderation_gate.emitter
_stats_reporter = StatsReporter()


def get_vote_ledger() -> VoteLedger:
    return _vote_ledger


def get_office_vote_ledger() -> OfficeVoteLedger:
    return _office_vote_ledger


def get_moderation_gate() -> ModerationGate:
    return _moderation_gate


def get_notification_emitter() -> NotificationEmitter:
    return _notification_emitter


def get_stats_reporter() -> StatsReporter:
    return _stats_reporter


# Type aliases for dependencies
CurrentUserDep = Annotated[User, Depends(get_current_user)]
OptionalUserDep = Annotated[User | None, Depends(get_optional_user)]
ModeratorDep = Annotated[User, Depends(get_moderator)]
VoteLedgerDep = Annotated[VoteLedger, Depends(get_vote_ledger)]
OfficeVoteLedgerDep = Annotated[OfficeVoteLedger, Depends(get_office_vote_ledger)]
ModerationGateDep = Annotated[ModerationGate, Depends(get_moderation_gate)]
NotificationEmitterDep = Annotated[NotificationEmitter, Depends(get_notification_emitter)]
StatsReporterDep = Annotated[StatsReporter, Depends(get_stats_reporter)]
