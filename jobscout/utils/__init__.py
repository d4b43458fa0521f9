"""Utility functions for identity hashing and time handling."""

from .hashing import compute_job_id
from .timestamps import ensure_utc, utc_now

__all__ = [
    "compute_job_id",
    "utc_now",
    "ensure_utc",
]
