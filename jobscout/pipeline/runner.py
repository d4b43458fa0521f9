"""Search pass orchestration: aggregate, dedup, then expiry bookkeeping."""

import threading
from typing import Iterable, List, Optional
from uuid import uuid4

from jobscout.config.models import AppConfig
from jobscout.domain.models import CanonicalJob
from jobscout.logging import get_logger, log_context
from jobscout.persistence.database import get_session
from jobscout.persistence.repositories import CompanyRepository, JobRepository
from jobscout.utils.timestamps import utc_now

from .aggregator import Aggregator
from .models import AggregationResult, PipelineRunResult

logger = get_logger(__name__, component="pipeline")


class SearchPipeline:
    """
    Runs one search pass over the watched companies.

    A pass scrapes every eligible company (see :class:`Aggregator`), then in
    a single transaction inserts first sightings, marks resighted jobs as
    seen, counts a miss for every other stored job (only the selected
    companies' jobs when the pass is filtered by name) and finally expires
    jobs whose miss counter reached the threshold. Passes do not overlap: a
    pass requested while another is running is skipped.
    """

    def __init__(self, app_config: AppConfig, aggregator: Optional[Aggregator] = None):
        self.app_config = app_config
        self.aggregator = aggregator or Aggregator(app_config.advanced)
        self._lock = threading.Lock()

    def run_once(self, companies: Optional[Iterable[str]] = None) -> PipelineRunResult:
        """
        Execute one pass.

        Args:
            companies: Optional company names to restrict the pass to

        Returns:
            PipelineRunResult whose ``new_jobs`` lists the jobs inserted by this pass
        """
        run_started_at = utc_now()
        run_id = uuid4().hex

        if not self._lock.acquire(blocking=False):
            with log_context(run_id=run_id):
                logger.warning(
                    "Search pass skipped: previous pass still in progress",
                    extra={"event": "pipeline.run.skipped", "reason": "lock_held"},
                )
            return PipelineRunResult(
                run_id=run_id,
                run_started_at=run_started_at,
                run_finished_at=utc_now(),
                skipped=True,
            )

        try:
            with log_context(run_id=run_id):
                logger.info("Search pass started", extra={"event": "pipeline.run.started"})

                with get_session() as session:
                    watched = CompanyRepository(session).get_all()
                aggregation = self.aggregator.collect(
                    watched, names=list(companies) if companies is not None else None
                )

                result = PipelineRunResult(
                    run_id=run_id,
                    run_started_at=run_started_at,
                    run_finished_at=run_started_at,
                    company_stats=aggregation.company_stats,
                    scraped_count=len(aggregation.jobs),
                )
                with get_session() as session:
                    scope = None if companies is None else aggregation.selected_companies
                    self._reconcile(JobRepository(session), aggregation, result, scope)
                result.run_finished_at = utc_now()

                logger.info(
                    "Search pass completed",
                    extra={
                        "event": "pipeline.run.completed",
                        "duration_ms": int(result.total_duration_seconds * 1000),
                        "scraped": result.scraped_count,
                        "new": len(result.new_jobs),
                        "seen": result.seen_count,
                        "missed": result.missed_count,
                        "expired": len(result.expired_job_ids),
                        "had_errors": result.had_errors,
                    },
                )
                return result
        finally:
            self._lock.release()

    def _reconcile(
        self,
        repo: JobRepository,
        aggregation: AggregationResult,
        result: PipelineRunResult,
        scope: Optional[List[str]] = None,
    ) -> None:
        """Apply dedup, miss counting and expiry, in that order.

        ``scope`` limits miss counting to those company names; ``None``
        counts a miss for every stored job that was not sighted.
        """
        now = utc_now()
        seen_ids = set()
        new_jobs: List[CanonicalJob] = []

        for job in aggregation.jobs:
            if job.job_id in seen_ids:
                continue
            seen_ids.add(job.job_id)
            if repo.get_by_id(job.job_id) is None:
                new_jobs.append(repo.add_job(job, found_at=now))
            else:
                repo.mark_seen(job.job_id, seen_at=now, posting=job)
                result.seen_count += 1

        for job in repo.get_all_for_expiry_check(scope):
            if job.job_id not in seen_ids:
                repo.increment_expiry_check_count(job.job_id)
                result.missed_count += 1

        threshold = self.app_config.expiry.threshold
        expired_ids = repo.detect_expired_jobs(threshold, expired_at=now)
        if expired_ids:
            logger.info(
                f"Expired {len(expired_ids)} jobs",
                extra={"event": "pipeline.jobs.expired", "count": len(expired_ids), "threshold": threshold},
            )

        result.new_jobs = new_jobs
        result.expired_job_ids = expired_ids
