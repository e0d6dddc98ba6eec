# tests/conftest.py
from __future__ import annotations

from collections.abc import Callable, Generator, Iterator
from itertools import count

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from civic_pulse.core.security import create_access_token
from civic_pulse.db.session import Base, enable_sqlite_foreign_keys
from civic_pulse.db.session import get_db as app_get_session
from civic_pulse.main import app as fastapi_app
from civic_pulse.models import Office, Review, ReviewStatus, User, UserRole
from civic_pulse.services import ModerationGate, NotificationEmitter, OfficeVoteLedger, VoteLedger

TEST_DB_URL = "sqlite://"

_EMAIL_COUNTER = count(1)


@pytest.fixture(scope="session")
def engine() -> Generator[Engine, None, None]:
    engine = create_engine(
        TEST_DB_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    enable_sqlite_foreign_keys(engine)
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture()
def db_session(engine: Engine) -> Iterator[Session]:
    SessionLocal = sessionmaker(
        bind=engine,
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,
    )
    session = SessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()

        # Services commit for real; wipe every table so each test starts empty.
        with engine.begin() as cleanup_conn:
            for table in reversed(Base.metadata.sorted_tables):
                cleanup_conn.execute(table.delete())


@pytest.fixture(scope="session")
def app() -> FastAPI:
    return fastapi_app


@pytest.fixture(autouse=True)
def override_session_dependency(app: FastAPI, db_session: Session) -> Iterator[None]:
    def _get_session_override() -> Generator[Session, None, None]:
        yield db_session

    app.dependency_overrides[app_get_session] = _get_session_override
    try:
        yield
    finally:
        app.dependency_overrides.pop(app_get_session, None)


@pytest.fixture()
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app, base_url="http://test") as test_client:
        yield test_client


@pytest.fixture()
def make_user(db_session: Session) -> Callable[..., User]:
    """Return a factory persisting users with unique e-mail addresses."""

    def _make_user(
        full_name: str = "Test Citizen",
        role: UserRole = UserRole.CITIZEN,
        office_id: int | None = None,
    ) -> User:
        user = User(
            full_name=full_name,
            email=f"user{next(_EMAIL_COUNTER)}@example.org",
            role=role,
            office_id=office_id,
        )
        db_session.add(user)
        db_session.commit()
        return user

    return _make_user


@pytest.fixture()
def office(db_session: Session) -> Office:
    """Create a default office with empty counters."""
    office = Office(name="Addis Ketema Revenue Office", office_type="woreda")
    db_session.add(office)
    db_session.commit()
    return office


@pytest.fixture()
def author(make_user: Callable[..., User]) -> User:
    return make_user("Review Author")


@pytest.fixture()
def voter(make_user: Callable[..., User]) -> User:
    return make_user("First Voter")


@pytest.fixture()
def voters(make_user: Callable[..., User]) -> list[User]:
    """Five distinct citizens, enough to cross the flag threshold twice over."""
    return [make_user(f"Voter {index}") for index in range(5)]


@pytest.fixture()
def official(make_user: Callable[..., User], office: Office) -> User:
    return make_user("Office Official", role=UserRole.OFFICIAL, office_id=office.office_id)


@pytest.fixture()
def admin(make_user: Callable[..., User]) -> User:
    return make_user("Platform Admin", role=UserRole.ADMIN)


@pytest.fixture()
def make_review(db_session: Session, office: Office) -> Callable[..., Review]:
    def _make_review(
        user: User | None,
        status: ReviewStatus = ReviewStatus.APPROVED,
        rating: int = 2,
        comment: str = "Queue took four hours",
        office_id: int | None = None,
    ) -> Review:
        review = Review(
            user_id=user.user_id if user is not None else None,
            office_id=office_id or office.office_id,
            rating=rating,
            comment=comment,
            status=status,
        )
        db_session.add(review)
        db_session.commit()
        return review

    return _make_review


@pytest.fixture()
def review(make_review: Callable[..., Review], author: User) -> Review:
    return make_review(author)


@pytest.fixture()
def anonymous_review(make_review: Callable[..., Review]) -> Review:
    return make_review(None, comment="Submitted without an account")


@pytest.fixture()
def auth_headers() -> Callable[[User], dict[str, str]]:
    """Return a helper building bearer headers for any persisted user."""

    def _headers(user: User) -> dict[str, str]:
        token = create_access_token(user.user_id)
        return {"Authorization": f"Bearer {token}"}

    return _headers


@pytest.fixture()
def gate() -> ModerationGate:
    return ModerationGate(threshold=3, emitter=NotificationEmitter())


@pytest.fixture()
def ledger(gate: ModerationGate) -> VoteLedger:
    return VoteLedger(gate=gate)


@pytest.fixture()
def office_ledger() -> OfficeVoteLedger:
    return OfficeVoteLedger()
