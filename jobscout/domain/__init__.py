"""Domain models for jobscout."""

from .models import (
    CanonicalJob,
    Company,
    JobFilters,
    JobStatus,
    Priority,
    ProviderType,
    ScrapedJob,
)

__all__ = [
    "CanonicalJob",
    "Company",
    "JobFilters",
    "JobStatus",
    "Priority",
    "ProviderType",
    "ScrapedJob",
]
