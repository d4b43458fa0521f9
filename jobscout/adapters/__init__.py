"""ATS adapters.

One adapter per provider, all built on :class:`BaseAdapter`:

    from jobscout.adapters import get_adapter
    adapter = get_adapter(company, advanced_config)
    jobs = adapter.scrape()   # never raises; [] on failure
"""

from .ashby import AshbyAdapter
from .base import BaseAdapter, clean_html, extract_requirements, is_remote
from .custom import CustomAdapter
from .exceptions import (
    AdapterConfigurationError,
    AdapterError,
    AdapterHTTPError,
    AdapterResponseError,
    AdapterTimeoutError,
)
from .factory import ADAPTERS, get_adapter
from .greenhouse import GreenhouseAdapter
from .lever import LeverAdapter
from .smartrecruiters import SmartRecruitersAdapter
from .workday import WorkdayAdapter

__all__ = [
    "ADAPTERS",
    "BaseAdapter",
    "get_adapter",
    "clean_html",
    "extract_requirements",
    "is_remote",
    "GreenhouseAdapter",
    "LeverAdapter",
    "WorkdayAdapter",
    "AshbyAdapter",
    "SmartRecruitersAdapter",
    "CustomAdapter",
    "AdapterError",
    "AdapterHTTPError",
    "AdapterTimeoutError",
    "AdapterResponseError",
    "AdapterConfigurationError",
]
