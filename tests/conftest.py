'''
Pytest configuration for the FastAPI application.

This file sets up fixtures for:
1. Forcing the application into TEST_MODE before any code is imported.
2. Providing a fresh SQLite database (and session) for every test.
3. Providing a FastAPI TestClient for endpoint testing.
4. Providing instances of all service classes, pre-injected with the test db session.
'''

import os
from typing import AsyncGenerator

import pytest

from tests.constants import TEST_SECRET_KEY, TEST_VOTING_PASSWORD, TEST_TODAY, TEST_VOTER, TEST_OTHER_VOTER

# --- Test environment (must happen before the app is imported) ---
os.environ["TEST_MODE"] = "True"
os.environ["SCHEDULER_ENABLED"] = "False"
os.environ["SECRET_KEY"] = TEST_SECRET_KEY
os.environ["VOTING_PASSWORD"] = TEST_VOTING_PASSWORD

# --- FastAPI & Testing Imports ---
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker, AsyncEngine

# --- Application Imports ---
from src.session_voting_backend.main import app
from src.session_voting_backend.common.config import settings
from src.session_voting_backend.database import models as db_models
from src.session_voting_backend.services.security import JWTHandler
from src.session_voting_backend.services.week_service import WeekService
from src.session_voting_backend.services.vote_service import VoteService
from src.session_voting_backend.services.results_service import ResultsService


@pytest.fixture(scope="session")
def anyio_backend():
    """
    Override the default 'anyio_backend' fixture.
    1. Forces the backend to 'asyncio' (solves 'trio' error).
    2. Promotes the scope to 'session' (solves 'ScopeMismatch').
    """
    return "asyncio"


# --- 1. API Client Fixture ---

@pytest.fixture(scope="function")
def client(tmp_path, monkeypatch) -> TestClient:
    """
    Runs the real app lifespan against a brand-new SQLite file, so every
    API test starts from an empty database and requests commit normally.
    """
    assert settings.TEST_MODE is True, \
        "TEST_MODE was not set to True! Check your .env file or environment."

    monkeypatch.setattr(
        settings, "DATABASE_URL_TEST", f"sqlite+aiosqlite:///{tmp_path / 'api_test.db'}"
    )

    # This 'with' block runs the app's startup lifespan,
    # which creates the engine, session factory and tables.
    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


def auth_headers_for_voter(voter_name: str = TEST_VOTER) -> dict[str, str]:
    """Helper to create auth headers for a given voter."""
    token = JWTHandler.create_access_token(subject=voter_name)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture(scope="function")
def voter_headers() -> dict[str, str]:
    return auth_headers_for_voter(TEST_VOTER)


@pytest.fixture(scope="function")
def other_voter_headers() -> dict[str, str]:
    return auth_headers_for_voter(TEST_OTHER_VOTER)


# --- 2. Database Fixtures (For Service Tests) ---

@pytest.fixture(scope="function")
async def db_engine(tmp_path) -> AsyncGenerator[AsyncEngine, None]:
    """A private SQLite database with all tables created."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'service_test.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(db_models.Base.metadata.create_all)
    try:
        yield engine
    finally:
        await engine.dispose()


@pytest.fixture(scope="function")
def session_factory(db_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        bind=db_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


@pytest.fixture(scope="function")
async def db_session(session_factory: async_sessionmaker[AsyncSession]) -> AsyncGenerator[AsyncSession, None]:
    """
    Provides a single session for service-level tests.
    Whatever the test did is rolled back afterwards.
    """
    session = session_factory()
    try:
        yield session
    finally:
        await session.rollback()
        await session.close()


# --- 3. SERVICE FIXTURES ---

@pytest.fixture(scope="function")
def week_service(db_session: AsyncSession) -> WeekService:
    return WeekService(db=db_session)

@pytest.fixture(scope="function")
def vote_service(db_session: AsyncSession, week_service: WeekService) -> VoteService:
    return VoteService(db=db_session, week_service=week_service)

@pytest.fixture(scope="function")
def results_service(week_service: WeekService, vote_service: VoteService) -> ResultsService:
    return ResultsService(week_service=week_service, vote_service=vote_service)

@pytest.fixture(scope="function")
def results_service_sync() -> ResultsService:
    """
    Lightweight instance for the pure assembly helpers,
    which never touch the database.
    """
    return ResultsService(week_service=None, vote_service=None)


# --- 4. DATA FIXTURES ---

@pytest.fixture(scope="function")
async def active_week(week_service: WeekService) -> db_models.VotingWeeks:
    """The active week created on TEST_TODAY, with its nine slots."""
    week = await week_service.create_new_week(today=TEST_TODAY)
    assert week.active is True
    assert len(week.time_slots) == 9, "Expected 9 generated slots for a fresh week."
    return week
