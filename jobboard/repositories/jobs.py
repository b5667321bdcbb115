"""
Jobs Repository.

Responsibilities:
- Read and write the jobs and companies tables.
- Return the catalog in a stable order (created_at, then id).

Non-Responsibilities:
- No scoring or ranking.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import joinedload

from ..database import Company, Job
from ..errors import JobStoreError
from ..logger import get_logger
from ..models import JobPosting
from ..schema import validate_job

logger = get_logger()


def _parse_created_at(value: Any) -> datetime:
    if not value:
        return datetime.now()
    if isinstance(value, str):
        return datetime.fromisoformat(value)
    return value


def job_to_dict(job: Job) -> Dict[str, Any]:
    company = None
    if job.company is not None:
        company = {"name": job.company.name, "logo_url": job.company.logo_url}
    return {
        "id": job.id,
        "title": job.title,
        "description": job.description,
        "location": job.location,
        "requirements": job.requirements,
        "recruiter_id": job.recruiter_id,
        "is_open": job.is_open,
        "created_at": job.created_at,
        "company": company,
    }


class JobRepository:
    """Job catalog store bound to one SQLAlchemy session."""

    def __init__(self, session):
        self.session = session

    def _query(self):
        return (
            self.session.query(Job)
            .options(joinedload(Job.company))
            .order_by(Job.created_at, Job.id)
        )

    def list_jobs(self) -> List[Dict[str, Any]]:
        """All jobs with their company embedded as {name, logo_url}."""
        try:
            return [job_to_dict(job) for job in self._query().all()]
        except SQLAlchemyError as e:
            logger.error("Error fetching jobs", error=str(e))
            raise JobStoreError("Error fetching jobs") from e

    def get_job(self, job_id: str) -> Optional[Dict[str, Any]]:
        try:
            job = self._query().filter(Job.id == job_id).first()
        except SQLAlchemyError as e:
            logger.error("Error fetching job", job_id=job_id, error=str(e))
            raise JobStoreError("Error fetching job") from e
        return job_to_dict(job) if job is not None else None

    def _get_or_create_company(self, name: str, logo_url: Optional[str]) -> Company:
        company = self.session.query(Company).filter_by(name=name).first()
        if company is None:
            company = Company(name=name, logo_url=logo_url)
            self.session.add(company)
        elif logo_url and not company.logo_url:
            company.logo_url = logo_url
        return company

    def add_job(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Add a job posting to the catalog.

        Args:
            data: Job fields; optional "company" is {name, logo_url}

        Raises:
            ValueError: If the record fails validation
            JobStoreError: On database failure (including duplicate id)
        """
        errors = validate_job(data)
        if errors:
            raise ValueError("; ".join(errors))

        try:
            job = Job(
                id=data["id"],
                title=data["title"],
                description=data.get("description"),
                location=data.get("location"),
                requirements=data.get("requirements"),
                recruiter_id=data.get("recruiter_id"),
                is_open=data.get("is_open", True),
                created_at=_parse_created_at(data.get("created_at")),
            )
            company = data.get("company")
            if company:
                job.company = self._get_or_create_company(company["name"], company.get("logo_url"))
            self.session.add(job)
            self.session.commit()
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.error("Error saving job", job_id=data["id"], error=str(e))
            raise JobStoreError("Error saving job") from e

        logger.info("Job added", job_id=job.id, title=job.title)
        return job_to_dict(job)

    def fetch_job_catalog(self) -> List[JobPosting]:
        """The full catalog as typed postings, in catalog order."""
        return [JobPosting.from_record(record) for record in self.list_jobs()]
