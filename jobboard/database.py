"""
Database schema and connection management.

Uses SQLite with SQLAlchemy for profiles, companies and jobs.
"""

from datetime import datetime
from pathlib import Path

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    create_engine,
)
from sqlalchemy.orm import declarative_base, relationship, sessionmaker

Base = declarative_base()


class Profile(Base):
    """Candidate or recruiter profile, keyed by the identity provider's user id."""

    __tablename__ = "profiles"

    user_id = Column(String, primary_key=True)
    full_name = Column(String)
    alternative_email = Column(String)
    location = Column(String)
    phone = Column(String)
    bio = Column(Text)
    preference = Column(String)
    linkedin_url = Column(String)
    github_url = Column(String)
    portfolio_url = Column(String)
    skills = Column(JSON, nullable=False, default=list)
    academics = Column(JSON, nullable=False, default=list)
    certifications = Column(JSON, nullable=False, default=list)
    experiences = Column(JSON, nullable=False, default=list)
    portfolio_items = Column(JSON, nullable=False, default=list)
    resume_url = Column(String)
    profile_pic_url = Column(String)
    role = Column(String)  # candidate, recruiter
    created_at = Column(DateTime, nullable=False, default=datetime.now)
    updated_at = Column(DateTime, nullable=False, default=datetime.now, onupdate=datetime.now)


class Company(Base):
    """Hiring company."""

    __tablename__ = "companies"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String, nullable=False, unique=True)
    logo_url = Column(String)

    jobs = relationship("Job", back_populates="company")


class Job(Base):
    """Job posting model."""

    __tablename__ = "jobs"

    id = Column(String, primary_key=True)
    title = Column(String, nullable=False)
    description = Column(Text)
    location = Column(String)
    requirements = Column(Text)
    company_id = Column(Integer, ForeignKey("companies.id"))
    recruiter_id = Column(String)
    is_open = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, nullable=False, default=datetime.now)

    company = relationship("Company", back_populates="jobs")


def init_database(db_path: Path) -> None:
    """
    Initialize database and create tables.

    Args:
        db_path: Path to SQLite database file
    """
    db_path.parent.mkdir(parents=True, exist_ok=True)
    engine = create_engine(f"sqlite:///{db_path}")
    Base.metadata.create_all(engine)


def get_session(db_path: Path):
    """
    Get database session.

    Args:
        db_path: Path to SQLite database file

    Returns:
        SQLAlchemy session
    """
    engine = create_engine(f"sqlite:///{db_path}")
    Session = sessionmaker(bind=engine)
    return Session()
