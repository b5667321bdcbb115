"""
Typed records for the recommendation path.

Store records are plain dicts; these dataclasses give the scorer a
fixed shape with optional fields spelled out.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Optional, Tuple


@dataclass(frozen=True)
class Company:
    """Company embedded in a job posting."""
    name: str
    logo_url: Optional[str] = None

    @classmethod
    def from_record(cls, record: Optional[Dict[str, Any]]) -> Optional["Company"]:
        if not record or not record.get("name"):
            return None
        return cls(name=record["name"], logo_url=record.get("logo_url"))

    def to_dict(self) -> dict:
        return {"name": self.name, "logo_url": self.logo_url}


@dataclass(frozen=True)
class CandidateProfile:
    """The part of a profile the scorer reads."""
    user_id: str
    skills: Tuple[str, ...] = ()

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "CandidateProfile":
        skills = record.get("skills") or ()
        if not isinstance(skills, (list, tuple)):
            skills = ()
        return cls(user_id=record["user_id"], skills=tuple(skills))


@dataclass(frozen=True)
class JobPosting:
    """A job listing as seen by the scorer."""
    id: str
    title: str
    requirements: Optional[str] = None
    description: Optional[str] = None
    location: Optional[str] = None
    company: Optional[Company] = None
    is_open: bool = True
    created_at: Optional[datetime] = None

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "JobPosting":
        return cls(
            id=str(record["id"]),
            title=record.get("title") or "",
            requirements=record.get("requirements"),
            description=record.get("description"),
            location=record.get("location"),
            company=Company.from_record(record.get("company")),
            is_open=record.get("is_open", True),
            created_at=record.get("created_at"),
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "requirements": self.requirements,
            "description": self.description,
            "location": self.location,
            "company": self.company.to_dict() if self.company else None,
            "is_open": self.is_open,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }


@dataclass(frozen=True)
class ScoredJobPosting:
    """A posting paired with its relevance score for one request."""
    posting: JobPosting
    score: int = field(default=0)

    @property
    def id(self) -> str:
        return self.posting.id

    def to_dict(self) -> dict:
        data = self.posting.to_dict()
        data["score"] = self.score
        return data
