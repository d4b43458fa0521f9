"""Deterministic job identity hashing.

A job's identity is derived from its company and title only. Two postings from
the same company with the same title collapse into one job, and a posting
that moves to a new URL keeps its identity.
"""

import hashlib
import re

_WHITESPACE = re.compile(r"\s+")


def _normalize_text(text: str) -> str:
    """Case-fold, trim and collapse internal whitespace."""
    return _WHITESPACE.sub(" ", (text or "").casefold().strip())


def compute_job_id(company: str, title: str) -> str:
    """Compute the stable identity of a job posting.

    Args:
        company: Company display name
        title: Job title as published

    Returns:
        64-character hexadecimal SHA-256 digest of ``company|title``

    Example:
        >>> compute_job_id("Linear", "Senior Engineer") == compute_job_id(" linear ", "SENIOR  engineer")
        True
    """
    composite = f"{_normalize_text(company)}|{_normalize_text(title)}"
    return hashlib.sha256(composite.encode("utf-8")).hexdigest()
