"""Data stores backing profiles and the job catalog."""

from .jobs import JobRepository
from .profiles import ProfileRepository

__all__ = ["JobRepository", "ProfileRepository"]
