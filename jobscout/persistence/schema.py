"""Database schema definition and ORM models.

Timestamps are stored as ISO 8601 UTC strings (``YYYY-MM-DDTHH:MM:SS.ffffffZ``)
so they sort lexicographically; list fields are stored as JSON text.
"""

import json
import logging
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import Boolean, Column, Float, Index, Integer, String, Text, inspect
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base

from jobscout.domain.models import CanonicalJob, Company, JobStatus, Priority, ProviderType
from jobscout.utils.timestamps import ensure_utc

logger = logging.getLogger(__name__)

Base = declarative_base()

TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%S.%fZ"


class JobModel(Base):
    """ORM model for the ``jobs`` table."""

    __tablename__ = "jobs"

    job_id = Column(String(64), primary_key=True, nullable=False)

    company = Column(String(255), nullable=False)
    title = Column(Text, nullable=False)
    url = Column(Text, nullable=False)
    description = Column(Text, nullable=False, default="")
    requirements = Column(Text, nullable=False, default="")
    tech_stack = Column(Text, nullable=False, default="[]")
    location = Column(String(255), nullable=False, default="Not specified")
    remote = Column(Boolean, nullable=False, default=False)

    status = Column(String(20), nullable=False, default=JobStatus.NEW.value)
    status_before_expiry = Column(String(20), nullable=True)
    priority = Column(String(10), nullable=False, default=Priority.MEDIUM.value)
    alignment_score = Column(Float, nullable=True)
    strong_matches = Column(Text, nullable=False, default="[]")
    gaps = Column(Text, nullable=False, default="[]")
    notes = Column(Text, nullable=True)

    found_at = Column(String(50), nullable=False)
    last_updated = Column(String(50), nullable=False)
    last_seen_at = Column(String(50), nullable=False)
    expired_at = Column(String(50), nullable=True)
    expiry_check_count = Column(Integer, nullable=False, default=0)

    __table_args__ = (
        Index("idx_jobs_company", "company"),
        Index("idx_jobs_status", "status"),
        Index("idx_jobs_found_at", "found_at"),
    )

    def to_domain(self) -> CanonicalJob:
        return CanonicalJob(
            job_id=self.job_id,
            company=self.company,
            title=self.title,
            url=self.url,
            description=self.description or "",
            requirements=self.requirements or "",
            tech_stack=_load_list(self.tech_stack),
            location=self.location or "Not specified",
            remote=bool(self.remote),
            status=JobStatus(self.status),
            priority=Priority(self.priority),
            alignment_score=self.alignment_score,
            strong_matches=_load_list(self.strong_matches),
            gaps=_load_list(self.gaps),
            notes=self.notes,
            found_at=_parse_datetime(self.found_at),
            last_updated=_parse_datetime(self.last_updated),
            last_seen_at=_parse_datetime(self.last_seen_at),
            expired_at=_parse_datetime(self.expired_at),
            expiry_check_count=self.expiry_check_count or 0,
        )

    @classmethod
    def from_domain(cls, job: CanonicalJob) -> "JobModel":
        return cls(
            job_id=job.job_id,
            company=job.company,
            title=job.title,
            url=job.url,
            description=job.description,
            requirements=job.requirements,
            tech_stack=_dump_list(job.tech_stack),
            location=job.location,
            remote=job.remote,
            status=JobStatus(job.status).value,
            priority=Priority(job.priority).value,
            alignment_score=job.alignment_score,
            strong_matches=_dump_list(job.strong_matches),
            gaps=_dump_list(job.gaps),
            notes=job.notes,
            found_at=_format_datetime(job.found_at),
            last_updated=_format_datetime(job.last_updated),
            last_seen_at=_format_datetime(job.last_seen_at),
            expired_at=_format_datetime(job.expired_at),
            expiry_check_count=job.expiry_check_count,
        )


class CompanyModel(Base):
    """ORM model for the ``companies`` table, keyed by company name."""

    __tablename__ = "companies"

    name = Column(String(255), primary_key=True, nullable=False)
    careers_url = Column(Text, nullable=False, default="")
    provider = Column(String(50), nullable=False)
    greenhouse_id = Column(String(255), nullable=True)
    lever_id = Column(String(255), nullable=True)
    workday_id = Column(String(255), nullable=True)
    workday_site = Column(String(255), nullable=False, default="External_Career")
    ashby_id = Column(String(255), nullable=True)
    smartrecruiters_id = Column(String(255), nullable=True)
    active = Column(Boolean, nullable=False, default=True)

    def to_domain(self) -> Company:
        return Company(
            name=self.name,
            careers_url=self.careers_url or "",
            provider=ProviderType(self.provider),
            greenhouse_id=self.greenhouse_id,
            lever_id=self.lever_id,
            workday_id=self.workday_id,
            workday_site=self.workday_site or "External_Career",
            ashby_id=self.ashby_id,
            smartrecruiters_id=self.smartrecruiters_id,
            active=bool(self.active),
        )

    def apply(self, company: Company) -> None:
        """Copy every field from ``company`` onto this row."""
        self.careers_url = company.careers_url
        self.provider = ProviderType(company.provider).value
        self.greenhouse_id = company.greenhouse_id
        self.lever_id = company.lever_id
        self.workday_id = company.workday_id
        self.workday_site = company.workday_site
        self.ashby_id = company.ashby_id
        self.smartrecruiters_id = company.smartrecruiters_id
        self.active = company.active

    @classmethod
    def from_domain(cls, company: Company) -> "CompanyModel":
        model = cls(name=company.name)
        model.apply(company)
        return model


def _dump_list(values: Optional[List[str]]) -> str:
    return json.dumps(list(values or []), ensure_ascii=False)


def _load_list(raw: Optional[str]) -> List[str]:
    if not raw:
        return []
    try:
        value = json.loads(raw)
    except ValueError:
        logger.warning("Discarding malformed list column value: %r", raw)
        return []
    return [str(item) for item in value] if isinstance(value, list) else []


def _format_datetime(dt: Optional[datetime]) -> Optional[str]:
    """Format a datetime as a sortable ISO 8601 UTC string."""
    dt = ensure_utc(dt)
    return dt.strftime(TIMESTAMP_FORMAT) if dt else None


def _parse_datetime(dt_str: Optional[str]) -> Optional[datetime]:
    if not dt_str:
        return None
    dt_str = dt_str.rstrip("Z")
    try:
        dt = datetime.strptime(dt_str, "%Y-%m-%dT%H:%M:%S.%f")
    except ValueError:
        dt = datetime.strptime(dt_str, "%Y-%m-%dT%H:%M:%S")
    return dt.replace(tzinfo=timezone.utc)


def create_schema(engine: Engine) -> None:
    """Create all tables and indexes if they don't exist (idempotent)."""
    try:
        Base.metadata.create_all(engine, checkfirst=True)
    except Exception as e:
        logger.error(f"Failed to create database schema: {e}", exc_info=True)
        raise
    logger.info(
        f"Database schema ready. Tables: {', '.join(inspect(engine).get_table_names())}"
    )
