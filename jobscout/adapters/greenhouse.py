"""Greenhouse ATS adapter implementation."""

from typing import Any, Dict, List

from jobscout.domain.models import ScrapedJob
from jobscout.logging import get_logger

from .base import BaseAdapter, clean_html
from .exceptions import AdapterResponseError

logger = get_logger(__name__, component="adapter")


class GreenhouseAdapter(BaseAdapter):
    """Adapter for the Greenhouse public job board API.

    API Details:
        Endpoint: https://boards-api.greenhouse.io/v1/boards/{greenhouse_id}/jobs?content=true
        Method: GET
        Authentication: None (public)
        Response: JSON object with a 'jobs' array; 'content' holds escaped HTML
    """

    ADAPTER_NAME = "greenhouse"
    API_BASE_URL = "https://boards-api.greenhouse.io/v1/boards"

    def fetch_jobs(self) -> List[ScrapedJob]:
        url = f"{self.API_BASE_URL}/{self.identifier}/jobs"
        logger.info(
            "Fetching jobs from Greenhouse",
            extra={"event": "adapter.fetch.started", "url": url},
        )

        response = self._make_request(url, params={"content": "true"})
        if not isinstance(response, dict):
            raise AdapterResponseError(
                f"Expected JSON object response, got {type(response).__name__}"
            )
        jobs_data = response.get("jobs", [])
        if not isinstance(jobs_data, list):
            raise AdapterResponseError(
                f"Expected 'jobs' field to be array, got {type(jobs_data).__name__}"
            )
        return self._transform_all(jobs_data, self._transform_job)

    def _transform_job(self, job: Dict[str, Any]) -> ScrapedJob:
        location = (job.get("location") or {}).get("name")
        return self._build_job(
            title=job["title"],
            url=job["absolute_url"],
            description=clean_html(job.get("content")),
            location=location,
        )
