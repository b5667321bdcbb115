"""
Pytest configuration and shared fixtures.
"""

import pytest
from datetime import datetime, timedelta
from typing import Any, Dict, List

from jobboard.database import init_database, get_session
from jobboard.models import Company, JobPosting
from jobboard.repositories import JobRepository, ProfileRepository


@pytest.fixture
def db_path(tmp_path):
    """Initialized SQLite database path."""
    path = tmp_path / "test.db"
    init_database(path)
    return path


@pytest.fixture
def db_session(db_path):
    """Session on a fresh database."""
    session = get_session(db_path)
    yield session
    session.close()


@pytest.fixture
def profile_repo(db_session) -> ProfileRepository:
    return ProfileRepository(db_session)


@pytest.fixture
def job_repo(db_session) -> JobRepository:
    return JobRepository(db_session)


@pytest.fixture
def candidate_profile_data() -> Dict[str, Any]:
    """Valid candidate profile record."""
    return {
        "user_id": "user_123",
        "full_name": "Ada Lovelace",
        "location": "London",
        "bio": "Analytical engine enthusiast.",
        "linkedin_url": "https://www.linkedin.com/in/ada",
        "github_url": "",
        "skills": ["React", "SQL"],
        "experiences": [],
        "role": "candidate",
    }


@pytest.fixture
def job_records() -> List[Dict[str, Any]]:
    """Three postings scoring 2, 0 and 1 against ["react", "sql"]."""
    base = datetime(2024, 1, 1, 9, 0, 0)
    return [
        {
            "id": "job-fullstack",
            "title": "Full Stack Developer",
            "requirements": "React, Node.js, SQL",
            "location": "Remote",
            "company": {"name": "Acme", "logo_url": "https://cdn.example.com/acme.png"},
            "created_at": base,
        },
        {
            "id": "job-backend",
            "title": "Backend Engineer",
            "requirements": "Java, Spring",
            "company": {"name": "Beta", "logo_url": None},
            "created_at": base + timedelta(minutes=1),
        },
        {
            "id": "job-dba",
            "title": "Database Administrator",
            "requirements": "SQL database admin",
            "company": {"name": "Acme"},
            "created_at": base + timedelta(minutes=2),
        },
    ]


@pytest.fixture
def catalog(job_records) -> List[JobPosting]:
    return [JobPosting.from_record(r) for r in job_records]


@pytest.fixture
def make_posting():
    """Factory for JobPosting records with only the scoring fields set."""
    def _make(job_id: str, requirements=None, company: str = "Acme") -> JobPosting:
        return JobPosting(
            id=job_id,
            title=f"Job {job_id}",
            requirements=requirements,
            company=Company(name=company),
        )
    return _make
