"""
Pytest configuration and shared fixtures.
"""

import pytest
from typing import Dict, Any

from fastapi.testclient import TestClient

from jobboard.api import create_app
from jobboard.database import get_session_factory, init_database
from jobboard.job_service import JobService
from jobboard.skill_service import SkillService
from jobboard.user_service import UserService
from storage.repositories import JobRepository, SkillRepository, UserRepository


class UntouchableRepository:
    """Repository stand-in that fails the test if any method is used."""

    def __getattr__(self, name):
        raise AssertionError(f"repository.{name} must not be called")


@pytest.fixture
def db_url(tmp_path) -> str:
    return f"sqlite:///{tmp_path / 'test.db'}"


@pytest.fixture
def sessions(db_url):
    """Session factory over a fresh SQLite file."""
    engine = init_database(db_url, retries=0)
    yield get_session_factory(engine)
    engine.dispose()


@pytest.fixture
def job_repo(sessions) -> JobRepository:
    return JobRepository(sessions)


@pytest.fixture
def user_repo(sessions) -> UserRepository:
    return UserRepository(sessions)


@pytest.fixture
def skill_repo(sessions) -> SkillRepository:
    return SkillRepository(sessions)


@pytest.fixture
def job_service(job_repo) -> JobService:
    return JobService(job_repo)


@pytest.fixture
def user_service(user_repo) -> UserService:
    return UserService(user_repo)


@pytest.fixture
def skill_service(skill_repo) -> SkillService:
    return SkillService(skill_repo)


@pytest.fixture
def client(sessions) -> TestClient:
    return TestClient(create_app(session_factory=sessions))


@pytest.fixture
def valid_job() -> Dict[str, Any]:
    """Valid job payload, service-layer (snake_case) keys."""
    return {
        "title": "Senior Backend Engineer",
        "company": "Acme Corp",
        "url": "https://boards.greenhouse.io/acme/jobs/12345",
        "seniority_level": "Senior",
        "field": "Backend",
        "employment_type": "Full-time",
        "workplace_type": "Remote",
        "office_location": "Sao Paulo, BR",
        "is_brazilian_friendly": {"is_friendly": True, "reason": "Remote"},
    }


@pytest.fixture
def job_body() -> Dict[str, Any]:
    """Same job as sent over HTTP (camelCase keys)."""
    return {
        "title": "Senior Backend Engineer",
        "company": "Acme Corp",
        "url": "https://boards.greenhouse.io/acme/jobs/12345",
        "seniorityLevel": "Senior",
        "field": "Backend",
        "employmentType": "Full-time",
        "workplaceType": "Remote",
        "officeLocation": "Sao Paulo, BR",
        "isBrazilianFriendly": {"isFriendly": True, "reason": "Remote"},
    }


@pytest.fixture
def invalid_job() -> Dict[str, Any]:
    """Job missing required fields."""
    return {
        "company": "acme",
        # Missing title, url, seniority_level, field
        "workplace_type": "Remote",
    }


@pytest.fixture
def untouchable_repo() -> UntouchableRepository:
    return UntouchableRepository()
