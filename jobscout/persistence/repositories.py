"""Data access layer (repositories) for persistence operations.

Repositories wrap a SQLAlchemy session, return domain models rather than ORM
rows, and translate SQLAlchemy failures into :class:`PersistenceError`.
Transactions are owned by the caller (see ``get_session``).
"""

import logging
from datetime import datetime
from typing import Iterable, List, Optional

from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from jobscout.domain.models import (
    CanonicalJob,
    Company,
    JobFilters,
    JobStatus,
    Priority,
    ScrapedJob,
)
from jobscout.utils.timestamps import utc_now

from .exceptions import DataIntegrityError, JobNotFoundError, PersistenceError
from .schema import CompanyModel, JobModel, _dump_list, _format_datetime

logger = logging.getLogger(__name__)

# Statuses that expiry only parks; a resighting puts them back.
WORKFLOW_STATUSES = frozenset(
    status.value
    for status in (
        JobStatus.REVIEWED,
        JobStatus.APPLIED,
        JobStatus.INTERVIEW,
        JobStatus.REJECTED,
        JobStatus.ARCHIVED,
    )
)


class JobRepository:
    """Repository for canonical job records."""

    def __init__(self, session: Session):
        self.session = session

    def get_by_id(self, job_id: str) -> Optional[CanonicalJob]:
        """Retrieve a job by identity, or None."""
        try:
            job_model = self.session.get(JobModel, job_id)
        except SQLAlchemyError as e:
            logger.error(f"Error retrieving job {job_id}: {e}", exc_info=True)
            raise PersistenceError(f"Failed to retrieve job: {e}") from e
        return job_model.to_domain() if job_model else None

    def add_job(self, job: ScrapedJob, found_at: Optional[datetime] = None) -> CanonicalJob:
        """Insert a first sighting as a ``new`` job with priority ``medium``.

        Raises:
            DataIntegrityError: If the identity is already stored
            PersistenceError: If database error occurs
        """
        now = found_at or utc_now()
        canonical = CanonicalJob(
            **job.model_dump(),
            status=JobStatus.NEW,
            priority=Priority.MEDIUM,
            found_at=now,
            last_updated=now,
            last_seen_at=now,
            expiry_check_count=0,
        )
        try:
            job_model = JobModel.from_domain(canonical)
            self.session.add(job_model)
            self.session.flush()
        except IntegrityError as e:
            logger.error(f"Integrity error adding job {job.job_id}: {e}", exc_info=True)
            raise DataIntegrityError(f"Job {job.job_id} already exists: {e}") from e
        except SQLAlchemyError as e:
            logger.error(f"Error adding job {job.job_id}: {e}", exc_info=True)
            raise PersistenceError(f"Failed to add job: {e}") from e
        return job_model.to_domain()

    def mark_seen(
        self,
        job_id: str,
        seen_at: Optional[datetime] = None,
        posting: Optional[ScrapedJob] = None,
    ) -> CanonicalJob:
        """Record a resighting.

        Resets the miss counter and ``last_seen_at``. ``new`` becomes ``seen``.
        An ``expired`` job is revived to the workflow status it had when it
        expired (``applied``, ``interview``, ...) or to ``seen``; workflow
        statuses set by the user are otherwise kept. When ``posting`` is
        given its content fields (url, description, requirements, tech stack,
        location, remote) replace the stored ones. Priority, notes and
        scoring are never touched.

        Raises:
            JobNotFoundError: If the job does not exist
        """
        now = _format_datetime(seen_at or utc_now())
        try:
            job_model = self.session.get(JobModel, job_id)
            if job_model is None:
                raise JobNotFoundError(job_id)

            job_model.expiry_check_count = 0
            job_model.last_seen_at = now
            job_model.last_updated = now
            if job_model.status == JobStatus.EXPIRED.value:
                previous = job_model.status_before_expiry
                job_model.status = (
                    previous if previous in WORKFLOW_STATUSES else JobStatus.SEEN.value
                )
                job_model.status_before_expiry = None
                job_model.expired_at = None
            elif job_model.status == JobStatus.NEW.value:
                job_model.status = JobStatus.SEEN.value

            if posting is not None:
                job_model.url = posting.url
                job_model.description = posting.description
                job_model.requirements = posting.requirements
                job_model.tech_stack = _dump_list(posting.tech_stack)
                job_model.location = posting.location
                job_model.remote = posting.remote

            self.session.flush()
        except JobNotFoundError:
            raise
        except SQLAlchemyError as e:
            logger.error(f"Error marking job {job_id} as seen: {e}", exc_info=True)
            raise PersistenceError(f"Failed to mark job as seen: {e}") from e
        return job_model.to_domain()

    def get_all_for_expiry_check(
        self, companies: Optional[Iterable[str]] = None
    ) -> List[CanonicalJob]:
        """Non-expired jobs, optionally restricted to the given company names."""
        try:
            stmt = select(JobModel).where(JobModel.status != JobStatus.EXPIRED.value)
            if companies is not None:
                stmt = stmt.where(JobModel.company.in_(list(companies)))
            rows = self.session.execute(stmt.order_by(JobModel.found_at.asc())).scalars().all()
        except SQLAlchemyError as e:
            logger.error(f"Error loading jobs for expiry check: {e}", exc_info=True)
            raise PersistenceError(f"Failed to load jobs for expiry check: {e}") from e
        return [row.to_domain() for row in rows]

    def increment_expiry_check_count(self, job_id: str) -> int:
        """Add one missed pass to a job and return the new count.

        Raises:
            JobNotFoundError: If the job does not exist
        """
        try:
            job_model = self.session.get(JobModel, job_id)
            if job_model is None:
                raise JobNotFoundError(job_id)
            job_model.expiry_check_count = (job_model.expiry_check_count or 0) + 1
            self.session.flush()
        except JobNotFoundError:
            raise
        except SQLAlchemyError as e:
            logger.error(f"Error incrementing expiry count for {job_id}: {e}", exc_info=True)
            raise PersistenceError(f"Failed to increment expiry count: {e}") from e
        return job_model.expiry_check_count

    def detect_expired_jobs(
        self, threshold: int, expired_at: Optional[datetime] = None
    ) -> List[str]:
        """Expire every non-expired job whose miss counter reached ``threshold``.

        Returns:
            Identities of the jobs expired by this call
        """
        now = _format_datetime(expired_at or utc_now())
        try:
            job_ids = list(
                self.session.execute(
                    select(JobModel.job_id).where(
                        JobModel.status != JobStatus.EXPIRED.value,
                        JobModel.expiry_check_count >= threshold,
                    )
                ).scalars()
            )
            if job_ids:
                self.session.execute(
                    update(JobModel)
                    .where(JobModel.job_id.in_(job_ids))
                    .values(
                        status_before_expiry=JobModel.status,
                        status=JobStatus.EXPIRED.value,
                        expired_at=now,
                        last_updated=now,
                    )
                )
                self.session.flush()
        except SQLAlchemyError as e:
            logger.error(f"Error detecting expired jobs: {e}", exc_info=True)
            raise PersistenceError(f"Failed to detect expired jobs: {e}") from e
        return job_ids

    def get_jobs(self, filters: Optional[JobFilters] = None) -> List[CanonicalJob]:
        """List jobs matching ``filters``, newest first."""
        filters = filters or JobFilters()
        stmt = select(JobModel)
        if filters.status is not None:
            stmt = stmt.where(JobModel.status == JobStatus(filters.status).value)
        elif not filters.include_expired:
            stmt = stmt.where(JobModel.status != JobStatus.EXPIRED.value)
        if filters.priority is not None:
            stmt = stmt.where(JobModel.priority == Priority(filters.priority).value)
        if filters.companies:
            names = [name.lower() for name in filters.companies]
            stmt = stmt.where(func.lower(JobModel.company).in_(names))
        if filters.min_alignment is not None:
            stmt = stmt.where(JobModel.alignment_score >= filters.min_alignment)
        if filters.remote is not None:
            stmt = stmt.where(JobModel.remote == filters.remote)
        stmt = stmt.order_by(JobModel.found_at.desc(), JobModel.job_id)
        if filters.limit:
            stmt = stmt.limit(filters.limit)

        try:
            rows = self.session.execute(stmt).scalars().all()
        except SQLAlchemyError as e:
            logger.error(f"Error listing jobs: {e}", exc_info=True)
            raise PersistenceError(f"Failed to list jobs: {e}") from e
        return [row.to_domain() for row in rows]

    def update_alignment_score(
        self,
        job_id: str,
        score: float,
        strong_matches: Iterable[str] = (),
        gaps: Iterable[str] = (),
    ) -> None:
        self._update(
            job_id,
            alignment_score=score,
            strong_matches=_dump_list(list(strong_matches)),
            gaps=_dump_list(list(gaps)),
        )

    def update_status(self, job_id: str, status: JobStatus) -> None:
        """Set a workflow status. Moving out of ``expired`` clears ``expired_at``."""
        status = JobStatus(status)
        values = {"status": status.value, "status_before_expiry": None}
        if status == JobStatus.EXPIRED:
            values["expired_at"] = _format_datetime(utc_now())
        else:
            values["expired_at"] = None
        self._update(job_id, **values)

    def update_priority(self, job_id: str, priority: Priority) -> None:
        self._update(job_id, priority=Priority(priority).value)

    def update_notes(self, job_id: str, notes: Optional[str]) -> None:
        self._update(job_id, notes=notes)

    def _update(self, job_id: str, **values) -> None:
        values["last_updated"] = _format_datetime(utc_now())
        try:
            result = self.session.execute(
                update(JobModel).where(JobModel.job_id == job_id).values(**values)
            )
            self.session.flush()
        except SQLAlchemyError as e:
            logger.error(f"Error updating job {job_id}: {e}", exc_info=True)
            raise PersistenceError(f"Failed to update job: {e}") from e
        if result.rowcount == 0:
            raise JobNotFoundError(job_id)


class CompanyRepository:
    """Repository for watched companies."""

    def __init__(self, session: Session):
        self.session = session

    def get_all(self) -> List[Company]:
        try:
            rows = self.session.execute(select(CompanyModel).order_by(CompanyModel.name)).scalars()
            return [row.to_domain() for row in rows]
        except SQLAlchemyError as e:
            logger.error(f"Error retrieving companies: {e}", exc_info=True)
            raise PersistenceError(f"Failed to retrieve companies: {e}") from e

    def get_by_name(self, name: str) -> Optional[Company]:
        """Case-insensitive lookup by company name."""
        try:
            row = self.session.execute(
                select(CompanyModel).where(func.lower(CompanyModel.name) == name.strip().lower())
            ).scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error(f"Error retrieving company {name}: {e}", exc_info=True)
            raise PersistenceError(f"Failed to retrieve company: {e}") from e
        return row.to_domain() if row else None

    def upsert(self, company: Company) -> Company:
        try:
            existing = self.session.get(CompanyModel, company.name)
            if existing:
                existing.apply(company)
                row = existing
            else:
                row = CompanyModel.from_domain(company)
                self.session.add(row)
            self.session.flush()
        except IntegrityError as e:
            raise DataIntegrityError(f"Failed to upsert company {company.name}: {e}") from e
        except SQLAlchemyError as e:
            logger.error(f"Error upserting company {company.name}: {e}", exc_info=True)
            raise PersistenceError(f"Failed to upsert company: {e}") from e
        return row.to_domain()

    def sync(self, companies: Iterable[Company]) -> List[Company]:
        """Make the stored companies mirror ``companies``.

        Companies no longer listed are deactivated rather than deleted so their
        jobs keep a valid company reference.
        """
        companies = list(companies)
        synced = [self.upsert(company) for company in companies]
        listed = {company.name for company in companies}
        try:
            self.session.execute(
                update(CompanyModel)
                .where(CompanyModel.name.not_in(listed) if listed else CompanyModel.name.is_not(None))
                .values(active=False)
            )
            self.session.flush()
        except SQLAlchemyError as e:
            logger.error(f"Error deactivating removed companies: {e}", exc_info=True)
            raise PersistenceError(f"Failed to sync companies: {e}") from e
        logger.info(
            "Companies synced",
            extra={"event": "companies.synced", "count": len(synced)},
        )
        return synced
