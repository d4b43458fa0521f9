"""Non-fatal configuration checks."""

import warnings
from typing import Any, Dict, List

# Providers and the company field each one needs.
_REQUIRED_IDENTIFIERS = {
    "greenhouse": "greenhouse_id",
    "lever": "lever_id",
    "workday": "workday_id",
    "ashby": "ashby_id",
    "smartrecruiters": "smartrecruiters_id",
}


def check_for_warnings(config_dict: Dict[str, Any]) -> List[str]:
    """
    Check configuration for potential issues and return warnings.

    Args:
        config_dict: Raw configuration dictionary

    Returns:
        List of warning messages
    """
    warning_messages = []

    companies = config_dict.get("companies") or []
    if not companies:
        warning_messages.append("No companies configured; search passes will find nothing")

    for company in companies:
        if not isinstance(company, dict):
            continue
        name = company.get("name", "Unknown")
        provider = str(company.get("provider", "")).lower()

        if not company.get("active", True):
            warning_messages.append(f"Company '{name}' is inactive and will be skipped")
            continue
        if provider == "custom":
            warning_messages.append(
                f"Company '{name}' uses the custom provider and is never scraped"
            )
            continue

        field = _REQUIRED_IDENTIFIERS.get(provider)
        if field and not str(company.get(field) or "").strip():
            warning_messages.append(
                f"Company '{name}' has provider '{provider}' but no {field}; it will be skipped"
            )

    advanced = config_dict.get("advanced") or {}
    if isinstance(advanced, dict):
        max_jobs = advanced.get("max_jobs_per_company", 1000)
        if isinstance(max_jobs, int) and max_jobs > 5000:
            warning_messages.append(
                f"Large max_jobs_per_company ({max_jobs}) may cause performance issues"
            )

    return warning_messages


def emit_warnings(warning_messages: List[str]) -> None:
    """Emit warning messages using Python's warnings module."""
    for message in warning_messages:
        warnings.warn(message, UserWarning, stacklevel=2)
