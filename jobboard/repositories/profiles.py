"""
Profiles Repository.

Responsibilities:
- CRUD operations for the profiles table.
- Transaction-safe writes (rollback on failure).
- Typed CandidateProfile reads for recommendations.

Non-Responsibilities:
- No field validation beyond known columns (see schema.validate_profile).
- No scoring.
"""

from datetime import datetime
from typing import Any, Dict, Optional

from sqlalchemy.exc import SQLAlchemyError

from ..database import Profile
from ..errors import ProfileStoreError
from ..logger import get_logger
from ..models import CandidateProfile

logger = get_logger()

PROFILE_COLUMNS = [c.name for c in Profile.__table__.columns]
_TIMESTAMP_COLUMNS = ("created_at", "updated_at")


def profile_to_dict(profile: Profile) -> Dict[str, Any]:
    return {name: getattr(profile, name) for name in PROFILE_COLUMNS}


def _coerce_timestamp(value: Any) -> Any:
    if isinstance(value, str):
        return datetime.fromisoformat(value)
    return value


def _check_columns(data: Dict[str, Any]) -> None:
    unknown = sorted(set(data) - set(PROFILE_COLUMNS))
    if unknown:
        raise ValueError(f"Unknown profile field(s): {', '.join(unknown)}")


class ProfileRepository:
    """Profile store bound to one SQLAlchemy session."""

    def __init__(self, session):
        self.session = session

    def _find(self, user_id: str) -> Optional[Profile]:
        return self.session.get(Profile, user_id)

    def _apply(self, profile: Profile, data: Dict[str, Any]) -> None:
        for key, value in data.items():
            if key == "user_id":
                continue
            if key in _TIMESTAMP_COLUMNS:
                value = _coerce_timestamp(value)
            setattr(profile, key, value)
        profile.updated_at = datetime.now()

    def check_profile_exists(self, user_id: str) -> bool:
        """Return True if a profile row exists for user_id."""
        try:
            return self._find(user_id) is not None
        except SQLAlchemyError as e:
            logger.error("Error checking profile", user_id=user_id, error=str(e))
            raise ProfileStoreError("Error checking profile") from e

    def get_profile(self, user_id: str) -> Optional[Dict[str, Any]]:
        """
        Fetch a full profile record.

        Returns:
            Profile as a dict, or None if no profile exists

        Raises:
            ProfileStoreError: On database failure
        """
        try:
            profile = self._find(user_id)
        except SQLAlchemyError as e:
            logger.error("Error fetching profile", user_id=user_id, error=str(e))
            raise ProfileStoreError("Error fetching profile") from e
        return profile_to_dict(profile) if profile is not None else None

    def create_profile(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Insert a new profile. Fails if one already exists for data["user_id"].

        Raises:
            ValueError: On unknown fields or missing user_id
            ProfileStoreError: On database failure or duplicate profile
        """
        _check_columns(data)
        if not data.get("user_id"):
            raise ValueError("Missing required field: user_id")

        profile = Profile(user_id=data["user_id"])
        self._apply(profile, data)
        try:
            self.session.add(profile)
            self.session.commit()
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.error("Error creating profile", user_id=data["user_id"], error=str(e))
            raise ProfileStoreError("Error creating profile") from e

        logger.info("Profile created", user_id=profile.user_id)
        return profile_to_dict(profile)

    def upsert_profile(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Insert a profile or overwrite the given fields of an existing one.

        Raises:
            ValueError: On unknown fields or missing user_id
            ProfileStoreError: On database failure
        """
        _check_columns(data)
        if not data.get("user_id"):
            raise ValueError("Missing required field: user_id")

        try:
            profile = self._find(data["user_id"])
            if profile is None:
                profile = Profile(user_id=data["user_id"])
                self.session.add(profile)
            self._apply(profile, data)
            self.session.commit()
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.error("Error saving profile", user_id=data["user_id"], error=str(e))
            raise ProfileStoreError("Error saving profile") from e

        return profile_to_dict(profile)

    def update_profile(self, user_id: str, updates: Dict[str, Any]) -> Dict[str, Any]:
        """
        Update specific fields of an existing profile.

        Raises:
            ValueError: On unknown fields
            ProfileStoreError: If the profile does not exist or the write fails
        """
        _check_columns(updates)
        try:
            profile = self._find(user_id)
            if profile is None:
                raise ProfileStoreError("Error updating profile: profile not found")
            self._apply(profile, updates)
            self.session.commit()
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.error("Error updating profile", user_id=user_id, error=str(e))
            raise ProfileStoreError("Error updating profile") from e

        return profile_to_dict(profile)

    def fetch_candidate_profile(self, user_id: str) -> Optional[CandidateProfile]:
        """Skills view of a profile for recommendations; None if not found."""
        record = self.get_profile(user_id)
        if record is None:
            return None
        return CandidateProfile.from_record(record)
