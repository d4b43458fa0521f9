"""Periodic search passes on an APScheduler background thread."""

import threading
from datetime import datetime, timezone
from typing import Callable, Optional

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.interval import IntervalTrigger

from jobscout.config.duration import humanize_seconds
from jobscout.logging import get_logger

logger = get_logger(__name__, component="scheduler")

JOB_ID = "jobscout-search"


class SchedulerService:
    """
    Calls ``pass_callable`` every ``interval_seconds`` on a background thread.

    The main thread stays free to wait on ``shutdown_event`` and handle
    signals. Only one pass runs at a time; a delayed run is coalesced.
    """

    def __init__(
        self,
        pass_callable: Callable[[], object],
        interval_seconds: int,
        shutdown_event: Optional[threading.Event] = None,
        run_immediately: bool = True,
    ):
        self.pass_callable = pass_callable
        self.interval_seconds = interval_seconds
        self.shutdown_event = shutdown_event
        self.run_immediately = run_immediately

        self.scheduler = BackgroundScheduler(
            job_defaults={
                "max_instances": 1,
                "coalesce": True,
                "misfire_grace_time": interval_seconds,
            },
            timezone=timezone.utc,
        )

    def start(self) -> None:
        """Register the search job and start the background thread."""
        if self.scheduler.running:
            logger.warning("Scheduler already running", extra={"event": "scheduler.already_running"})
            return
        next_run = datetime.now(timezone.utc) if self.run_immediately else None
        job_kwargs = {"next_run_time": next_run} if next_run else {}
        self.scheduler.add_job(
            func=self._run_pass,
            trigger=IntervalTrigger(seconds=self.interval_seconds, timezone=timezone.utc),
            id=JOB_ID,
            name="jobscout search pass",
            replace_existing=True,
            **job_kwargs,
        )
        self.scheduler.start()

        logger.info(
            f"Scheduler started, searching every {humanize_seconds(self.interval_seconds)}",
            extra={
                "event": "scheduler.started",
                "interval_seconds": self.interval_seconds,
                "run_immediately": self.run_immediately,
            },
        )

    def _run_pass(self) -> None:
        try:
            self.pass_callable()
        except Exception as e:
            # keep the schedule alive; the next tick is the retry
            logger.error(
                f"Scheduled search pass failed: {e}",
                exc_info=True,
                extra={"event": "scheduler.pass_failed", "error_type": type(e).__name__},
            )

    def shutdown(self, wait: bool = False) -> None:
        logger.info(
            "Shutting down scheduler",
            extra={"event": "scheduler.stopping", "wait_for_jobs": wait},
        )
        if self.scheduler.running:
            self.scheduler.shutdown(wait=wait)
        if self.shutdown_event:
            self.shutdown_event.set()
        logger.info("Scheduler shutdown complete", extra={"event": "scheduler.stopped"})

    def trigger_now(self) -> None:
        """Run a pass synchronously in the calling thread."""
        logger.info("Triggering immediate search pass", extra={"event": "scheduler.trigger_now"})
        self._run_pass()

    def is_running(self) -> bool:
        return self.scheduler.running

    def get_next_run_time(self) -> Optional[datetime]:
        job = self.scheduler.get_job(JOB_ID)
        return job.next_run_time if job else None
