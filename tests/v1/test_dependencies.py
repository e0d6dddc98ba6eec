# tests/v1/test_dependencies.py
"""Tests for API dependencies module."""

from datetime import UTC, datetime, timedelta

import pytest
from fastapi import HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials
from jose import JWTError, jwt

from civic_pulse.api.v1.dependencies import get_current_user, get_moderator, get_optional_user
from civic_pulse.core.security import create_access_token, decode_subject
from civic_pulse.core.settings import settings


def _credentials(token: str) -> HTTPAuthorizationCredentials:
    return HTTPAuthorizationCredentials(scheme="Bearer", credentials=token)


class TestDecodeSubject:
    """Test the bearer token helpers."""

    def test_round_trip(self):
        assert decode_subject(create_access_token(42)) == 42

    def test_missing_subject(self):
        token = jwt.encode({"role": "citizen"}, settings.secret_key, algorithm=settings.jwt_algorithm)
        with pytest.raises(ValueError):
            decode_subject(token)

    def test_expired_token(self):
        token = jwt.encode(
            {"sub": "1", "exp": datetime.now(UTC) - timedelta(minutes=1)},
            settings.secret_key,
            algorithm=settings.jwt_algorithm,
        )
        with pytest.raises(JWTError):
            decode_subject(token)


class TestGetCurrentUser:
    """Test the get_current_user dependency function."""

    def test_known_user(self, db_session, voter):
        user = get_current_user(_credentials(create_access_token(voter.user_id)), db_session)
        assert user.user_id == voter.user_id

    def test_unknown_user(self, db_session):
        with pytest.raises(HTTPException) as exc_info:
            get_current_user(_credentials(create_access_token(987654)), db_session)
        assert exc_info.value.status_code == status.HTTP_401_UNAUTHORIZED

    def test_wrong_signature(self, db_session, voter):
        token = jwt.encode({"sub": str(voter.user_id)}, "another-secret", algorithm="HS256")
        with pytest.raises(HTTPException) as exc_info:
            get_current_user(_credentials(token), db_session)
        assert exc_info.value.detail == "Could not validate credentials"


class TestOptionalUserAndModerator:
    def test_no_credentials_is_anonymous(self, db_session):
        assert get_optional_user(None, db_session) is None

    def test_citizen_is_not_a_moderator(self, voter):
        with pytest.raises(HTTPException) as exc_info:
            get_moderator(voter)
        assert exc_info.value.status_code == status.HTTP_403_FORBIDDEN

    def test_official_and_admin_are_moderators(self, official, admin):
        assert get_moderator(official) is official
        assert get_moderator(admin) is admin
