"""
Tests for get_recommendations and its result type.
"""

import pytest
from sqlalchemy.exc import OperationalError

from jobboard.errors import JobStoreError, ProfileStoreError
from jobboard import recommendations
from jobboard.models import CandidateProfile
from jobboard.recommendations import (
    EMPTY_CATALOG,
    PROFILE_NOT_FOUND,
    RecommendationResult,
    RecommendationStatus,
    get_recommendations,
)


class FakeProfiles:
    def __init__(self, profiles=None, error=None):
        self.profiles = profiles or {}
        self.error = error
        self.calls = []

    def fetch_candidate_profile(self, user_id):
        self.calls.append(user_id)
        if self.error:
            raise self.error
        return self.profiles.get(user_id)


class FakeJobs:
    def __init__(self, catalog=None, error=None):
        self.catalog = catalog
        self.error = error
        self.calls = 0

    def fetch_job_catalog(self):
        self.calls += 1
        if self.error:
            raise self.error
        return self.catalog


@pytest.fixture
def candidate():
    return CandidateProfile(user_id="user_123", skills=("react", "sql"))


class TestGetRecommendations:
    """Test the recommendation outcomes."""

    def test_ranked_results(self, candidate, catalog):
        result = get_recommendations(
            "user_123",
            FakeProfiles({"user_123": candidate}),
            FakeJobs(catalog),
        )

        assert result.status is RecommendationStatus.OK
        assert result.found
        assert [item.score for item in result] == [2, 1, 0]
        assert len(result) == 3

    def test_profile_not_found(self, catalog):
        jobs = FakeJobs(catalog)
        result = get_recommendations("nobody", FakeProfiles(), jobs)

        assert result.status is RecommendationStatus.NO_DATA
        assert result.reason == PROFILE_NOT_FOUND
        assert not result.found
        assert jobs.calls == 0

    def test_empty_catalog_is_no_data(self):
        """Skills ["react", "node"] with no jobs gives no result, not an empty list."""
        profile = CandidateProfile(user_id="u1", skills=("react", "node"))
        result = get_recommendations("u1", FakeProfiles({"u1": profile}), FakeJobs([]))

        assert result.status is RecommendationStatus.NO_DATA
        assert result.reason == EMPTY_CATALOG
        assert result.items == []

    def test_missing_catalog_is_no_data(self, candidate):
        result = get_recommendations(
            "user_123", FakeProfiles({"user_123": candidate}), FakeJobs(None)
        )
        assert result.reason == EMPTY_CATALOG

    def test_profile_fetch_error(self, catalog):
        result = get_recommendations(
            "user_123",
            FakeProfiles(error=ProfileStoreError("Error fetching profile")),
            FakeJobs(catalog),
        )

        assert result.status is RecommendationStatus.FETCH_ERROR
        assert result.error == "Error fetching profile"
        assert not result.found

    def test_catalog_fetch_error(self, candidate):
        result = get_recommendations(
            "user_123",
            FakeProfiles({"user_123": candidate}),
            FakeJobs(error=JobStoreError("Error fetching jobs")),
        )
        assert result.status is RecommendationStatus.FETCH_ERROR

    def test_raw_database_error_is_fetch_error(self, candidate):
        error = OperationalError("SELECT 1", {}, Exception("database is locked"))
        result = get_recommendations(
            "user_123", FakeProfiles({"user_123": candidate}), FakeJobs(error=error)
        )
        assert result.status is RecommendationStatus.FETCH_ERROR

    def test_unexpected_store_exception_is_fetch_error(self, candidate):
        result = get_recommendations(
            "user_123",
            FakeProfiles({"user_123": candidate}),
            FakeJobs(error=ConnectionError("job store unreachable")),
        )

        assert result.status is RecommendationStatus.FETCH_ERROR
        assert result.error == "job store unreachable"
        assert list(result) == []

    def test_malformed_profile_record_is_fetch_error(self, catalog):
        profiles = FakeProfiles(error=TypeError("skills must be a list"))
        result = get_recommendations("u1", profiles, FakeJobs(catalog))
        assert result.status is RecommendationStatus.FETCH_ERROR

    def test_profile_without_skills(self, catalog):
        profile = CandidateProfile(user_id="u1")
        result = get_recommendations("u1", FakeProfiles({"u1": profile}), FakeJobs(catalog))

        assert result.found
        assert [item.score for item in result] == [0, 0, 0]
        assert [item.id for item in result] == [p.id for p in catalog]

    def test_limit(self, candidate, catalog):
        result = get_recommendations(
            "user_123", FakeProfiles({"user_123": candidate}), FakeJobs(catalog), limit=1
        )
        assert [item.id for item in result] == ["job-fullstack"]

    def test_invalid_limit(self, candidate, catalog):
        with pytest.raises(ValueError):
            get_recommendations(
                "user_123", FakeProfiles({"user_123": candidate}), FakeJobs(catalog), limit=0
            )

    def test_metrics_recorded(self, candidate, catalog):
        logger = recommendations.logger
        before = dict(logger.metrics)

        get_recommendations("user_123", FakeProfiles({"user_123": candidate}), FakeJobs(catalog))
        get_recommendations("ghost", FakeProfiles(), FakeJobs(catalog))
        get_recommendations("user_123", FakeProfiles(error=ProfileStoreError("x")), FakeJobs(catalog))

        assert logger.metrics["recommendations_requested"] == before["recommendations_requested"] + 3
        assert logger.metrics["recommendations_served"] == before["recommendations_served"] + 1
        assert logger.metrics["recommendations_no_data"] == before["recommendations_no_data"] + 1
        assert logger.metrics["fetch_errors"] == before["fetch_errors"] + 1


class TestWithRepositories:
    """End-to-end through the SQLAlchemy stores."""

    def test_recommendations_from_database(
        self, profile_repo, job_repo, candidate_profile_data, job_records
    ):
        profile_repo.create_profile(candidate_profile_data)
        for record in job_records:
            job_repo.add_job(record)

        result = get_recommendations("user_123", profile_repo, job_repo)

        assert result.found
        assert [item.id for item in result] == ["job-fullstack", "job-dba", "job-backend"]
        top = result.items[0].to_dict()
        assert top["score"] == 2
        assert top["company"] == {"name": "Acme", "logo_url": "https://cdn.example.com/acme.png"}

    def test_no_jobs_in_database(self, profile_repo, job_repo, candidate_profile_data):
        profile_repo.create_profile(candidate_profile_data)
        result = get_recommendations("user_123", profile_repo, job_repo)
        assert result.reason == EMPTY_CATALOG


class TestRecommendationResult:
    """Test the result constructors."""

    def test_constructors(self):
        assert RecommendationResult.ok([]).status is RecommendationStatus.OK
        assert RecommendationResult.no_data(PROFILE_NOT_FOUND).reason == PROFILE_NOT_FOUND
        assert RecommendationResult.fetch_error("boom").error == "boom"
