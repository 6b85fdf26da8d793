"""
pytest fixtures shared by the test modules.

The app runs against tests.fakes.FakeSupabase instead of a live project, so
every test starts with an empty comments table and two signed-in users:

- token "token-u1" -> user "U1" (Reader One)
- token "token-u2" -> user "U2" (Reader Two)
"""

# Settings are read at import time of app.main, so the env must be set first.
import os

os.environ.setdefault("SUPABASE_URL", "http://localhost:54321")
os.environ.setdefault("SUPABASE_SERVICE_ROLE_KEY", "test-service-role-key")

from collections.abc import Generator

import pytest
from fastapi.testclient import TestClient

from app.config import Settings
from app.main import create_app
from app.repositories.comments import CommentRepository
from app.services.ratings import RatingAggregator
from tests.fakes import FakeSupabase


@pytest.fixture
def supabase() -> FakeSupabase:
    fake = FakeSupabase()
    fake.add_user("token-u1", "U1", name="Reader One", email="one@example.com")
    fake.add_user("token-u2", "U2", name="Reader Two", email="two@example.com")
    return fake


@pytest.fixture
def settings() -> Settings:
    return Settings(
        SUPABASE_URL="http://localhost:54321",
        SUPABASE_SERVICE_ROLE_KEY="test-service-role-key",
        LOG_LEVEL="DEBUG",
    )


@pytest.fixture
def client(settings: Settings, supabase: FakeSupabase) -> Generator[TestClient, None, None]:
    app = create_app(settings=settings, supabase=supabase)
    # Entering the context runs the lifespan, which attaches the client.
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def repository(supabase: FakeSupabase) -> CommentRepository:
    return CommentRepository(supabase)


@pytest.fixture
def aggregator(repository: CommentRepository) -> RatingAggregator:
    return RatingAggregator(repository)


@pytest.fixture
def u1_headers() -> dict:
    return {"Authorization": "Bearer token-u1"}


@pytest.fixture
def u2_headers() -> dict:
    return {"Authorization": "Bearer token-u2"}
