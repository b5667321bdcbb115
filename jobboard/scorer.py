"""
Skill-overlap scoring for job recommendations.

A posting's score is the number of distinct candidate skills that appear
as tokens in its requirements text. Given identical inputs the ranking is
always identical; inputs are never modified.
"""

from typing import Iterable, List, Optional, Sequence

from .config import DEFAULT_RECOMMENDATION_LIMIT
from .models import JobPosting, ScoredJobPosting
from .normalize import distinct_skills, tokenize_requirements


def score_posting(skills: Optional[Iterable[str]], requirements: Optional[str]) -> int:
    """
    Count distinct skills present in the requirements token set.

    Args:
        skills: Candidate skills (case-insensitive), may be None
        requirements: Free-text requirements, may be None

    Returns:
        Non-negative score; 0 when either side is missing
    """
    tokens = tokenize_requirements(requirements)
    if not tokens:
        return 0
    return sum(1 for skill in distinct_skills(skills) if skill in tokens)


def score_catalog(
    skills: Optional[Iterable[str]],
    catalog: Sequence[JobPosting],
) -> List[ScoredJobPosting]:
    """Score every posting, keeping catalog order."""
    # skills may be a one-shot iterable
    skill_list = distinct_skills(skills)
    return [
        ScoredJobPosting(posting=job, score=score_posting(skill_list, job.requirements))
        for job in catalog
    ]


def rank_postings(
    skills: Optional[Iterable[str]],
    catalog: Optional[Sequence[JobPosting]],
    limit: int = DEFAULT_RECOMMENDATION_LIMIT,
) -> List[ScoredJobPosting]:
    """
    Rank a catalog by score and keep the top `limit` postings.

    Equal scores keep their catalog order. Zero-score postings still fill
    the remaining slots when fewer than `limit` postings match.

    Raises:
        ValueError: If limit is less than 1
    """
    if limit < 1:
        raise ValueError(f"limit must be at least 1, got {limit}")
    if not catalog:
        return []
    scored = score_catalog(skills, catalog)
    # sorted() is stable, which gives the catalog-order tie-break
    ranked = sorted(scored, key=lambda s: s.score, reverse=True)
    return ranked[:limit]
