"""Periodic execution of search passes."""

from .service import JOB_ID, SchedulerService

__all__ = [
    "JOB_ID",
    "SchedulerService",
]
