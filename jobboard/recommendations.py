"""
Job recommendations for a candidate.

get_recommendations() fetches the candidate profile and the job catalog
through the given stores, ranks the catalog, and reports the outcome as a
RecommendationResult. Missing data and store failures never raise here:
recommendations are best-effort and must not break the caller's flow.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, List, Optional, Protocol, Sequence

from .config import DEFAULT_RECOMMENDATION_LIMIT
from .logger import get_logger
from .models import CandidateProfile, JobPosting, ScoredJobPosting
from .scorer import rank_postings

logger = get_logger()

PROFILE_NOT_FOUND = "profile_not_found"
EMPTY_CATALOG = "empty_catalog"


class ProfileSource(Protocol):
    def fetch_candidate_profile(self, user_id: str) -> Optional[CandidateProfile]:
        ...


class JobCatalogSource(Protocol):
    def fetch_job_catalog(self) -> Sequence[JobPosting]:
        ...


class RecommendationStatus(Enum):
    OK = "ok"
    NO_DATA = "no_data"
    FETCH_ERROR = "fetch_error"


@dataclass(frozen=True)
class RecommendationResult:
    """Outcome of one recommendation request."""
    status: RecommendationStatus
    items: List[ScoredJobPosting] = field(default_factory=list)
    reason: Optional[str] = None
    error: Optional[str] = None

    @classmethod
    def ok(cls, items: List[ScoredJobPosting]) -> "RecommendationResult":
        return cls(status=RecommendationStatus.OK, items=list(items))

    @classmethod
    def no_data(cls, reason: str) -> "RecommendationResult":
        return cls(status=RecommendationStatus.NO_DATA, reason=reason)

    @classmethod
    def fetch_error(cls, error: str) -> "RecommendationResult":
        return cls(status=RecommendationStatus.FETCH_ERROR, error=error)

    @property
    def found(self) -> bool:
        return self.status is RecommendationStatus.OK

    def __iter__(self) -> Iterator[ScoredJobPosting]:
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)


def get_recommendations(
    user_id: str,
    profiles: ProfileSource,
    jobs: JobCatalogSource,
    limit: int = DEFAULT_RECOMMENDATION_LIMIT,
) -> RecommendationResult:
    """
    Recommend the best-matching job postings for a user.

    Args:
        user_id: Candidate user id
        profiles: Store providing fetch_candidate_profile()
        jobs: Store providing fetch_job_catalog()
        limit: Maximum number of postings to return (>= 1)

    Returns:
        RecommendationResult: OK with up to `limit` scored postings,
        NO_DATA when the profile or catalog is missing, FETCH_ERROR when a
        store failed.

    Raises:
        ValueError: If limit is less than 1
    """
    if limit < 1:
        raise ValueError(f"limit must be at least 1, got {limit}")

    logger.record_recommendation_request()

    try:
        profile = profiles.fetch_candidate_profile(user_id)
        if profile is None:
            logger.record_no_data()
            logger.info("No profile for recommendations", user_id=user_id)
            return RecommendationResult.no_data(PROFILE_NOT_FOUND)

        catalog = jobs.fetch_job_catalog()
    except Exception as e:
        logger.record_fetch_error(type(e).__name__)
        logger.error("Recommendation fetch failed", user_id=user_id, error=str(e))
        return RecommendationResult.fetch_error(str(e))

    if not catalog:
        logger.record_no_data()
        logger.info("Job catalog empty", user_id=user_id)
        return RecommendationResult.no_data(EMPTY_CATALOG)

    ranked = rank_postings(profile.skills, catalog, limit=limit)
    logger.record_recommendation_served()
    logger.debug(
        "Recommendations ranked",
        user_id=user_id,
        catalog_size=len(catalog),
        scores=[s.score for s in ranked],
    )
    return RecommendationResult.ok(ranked)
