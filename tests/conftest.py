"""Shared fixtures and utilities for tests."""

import os
from datetime import timedelta

import pytest
from fastapi.testclient import TestClient

from core.config import Settings
from core.identity import JWTIdentityProvider
from core.utils.datetime import now
from database.engine import Database

RECRUITER_ID = "recruiter-1"
OTHER_RECRUITER_ID = "recruiter-2"
CANDIDATE_ID = "candidate-1"
OTHER_CANDIDATE_ID = "candidate-2"
JWT_SECRET = "test-jwt-secret-key-min-32-chars-long-for-security"


@pytest.fixture(scope="session", autouse=True)
def setup_test_env():
    """Set up test environment variables before running tests."""
    os.environ.setdefault("APP_ENV", "test")
    os.environ.setdefault("JWT_SECRET_KEY", JWT_SECRET)
    os.environ.setdefault("JSON_LOGS", "false")


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        app_env="test",
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'marketplace.db'}",
        jwt_secret_key=JWT_SECRET,
        jwt_audience="authenticated",
        resume_storage_backend="local",
        resume_storage_path=str(tmp_path / "resumes"),
        resume_public_base_url="http://files.test/resumes",
        resume_max_bytes=64 * 1024,
        request_timeout_seconds=5,
    )


@pytest.fixture
def identity_provider(settings) -> JWTIdentityProvider:
    return JWTIdentityProvider(
        secret=settings.jwt_secret_key,
        algorithm=settings.jwt_algorithm,
        audience=settings.jwt_audience,
    )


@pytest.fixture
def app(settings, identity_provider):
    from api.main import create_app

    return create_app(settings=settings, identity_provider=identity_provider)


@pytest.fixture
def client(app):
    """Test client with the lifespan running (tables created)."""
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def auth_headers(identity_provider):
    """Factory: bearer headers for a user id."""

    def _headers(user_id: str, email: str | None = None, expires_in: timedelta = timedelta(hours=1)):
        token = identity_provider.issue_token(user_id, email=email, expires_in=expires_in)
        return {"Authorization": f"Bearer {token}"}

    return _headers


@pytest.fixture
def recruiter_headers(auth_headers):
    return auth_headers(RECRUITER_ID, "recruiter@acme.example.com")


@pytest.fixture
def other_recruiter_headers(auth_headers):
    return auth_headers(OTHER_RECRUITER_ID, "other@globex.example.com")


@pytest.fixture
def candidate_headers(auth_headers):
    return auth_headers(CANDIDATE_ID, "candidate@example.com")


@pytest.fixture
def job_payload():
    return {
        "title": "Backend Engineer",
        "company": "Acme",
        "location": "Remote",
        "description": "Build APIs",
        "salary_range": "$120k-$150k",
    }


@pytest.fixture
def create_job(client, recruiter_headers, job_payload):
    """Factory: post a job as the default recruiter and return its JSON."""

    def _create(headers=None, **overrides):
        body = {**job_payload, **overrides}
        response = client.post("/api/v1/jobs", json=body, headers=headers or recruiter_headers)
        assert response.status_code == 201, response.text
        return response.json()

    return _create


@pytest.fixture
def deadline_in():
    """Factory: ISO timestamp `days` from now."""

    def _deadline(days: float) -> str:
        return (now() + timedelta(days=days)).isoformat()

    return _deadline


@pytest.fixture
async def database(tmp_path):
    """A migrated database for service-level tests."""
    db = Database(f"sqlite+aiosqlite:///{tmp_path / 'services.db'}")
    await db.init()
    yield db
    await db.close()


@pytest.fixture
async def db_session(database):
    async with database.sessionmaker() as session:
        yield session
