"""Adapter for manually tracked companies."""

from typing import List

from jobscout.domain.models import ScrapedJob

from .base import BaseAdapter


class CustomAdapter(BaseAdapter):
    """Companies with ``provider: custom`` are maintained by hand and never fetched."""

    ADAPTER_NAME = "custom"

    def fetch_jobs(self) -> List[ScrapedJob]:
        return []
