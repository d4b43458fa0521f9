"""Lever ATS adapter implementation."""

from typing import Any, Dict, List, Optional

from jobscout.domain.models import ScrapedJob
from jobscout.logging import get_logger

from .base import REQUIREMENTS_MAX_LENGTH, BaseAdapter, clean_html
from .exceptions import AdapterResponseError

logger = get_logger(__name__, component="adapter")


class LeverAdapter(BaseAdapter):
    """Adapter for the Lever postings API.

    API Details:
        Endpoint: https://api.lever.co/v0/postings/{lever_id}?mode=json
        Method: GET
        Authentication: None (public)
        Response: JSON array of posting objects (not wrapped in object)

    A posting's body is split across ``description``, ``descriptionPlain`` and
    the headed ``lists`` sections; all of them are combined.
    """

    ADAPTER_NAME = "lever"
    API_BASE_URL = "https://api.lever.co/v0/postings"

    def fetch_jobs(self) -> List[ScrapedJob]:
        url = f"{self.API_BASE_URL}/{self.identifier}"
        logger.info(
            "Fetching jobs from Lever",
            extra={"event": "adapter.fetch.started", "url": url},
        )

        response = self._make_request(url, params={"mode": "json"})
        if isinstance(response, list):
            jobs_data = response
        elif isinstance(response, dict):
            jobs_data = response.get("postings", [])
        else:
            raise AdapterResponseError(
                f"Expected JSON array or object, got {type(response).__name__}"
            )
        return self._transform_all(jobs_data, self._transform_job)

    def _transform_job(self, job: Dict[str, Any]) -> ScrapedJob:
        sections = job.get("lists") or []
        parts = [clean_html(job.get("description")), (job.get("descriptionPlain") or "").strip()]
        for section in sections:
            parts.append(clean_html(section.get("text")))
            parts.append(clean_html(section.get("content")))
        description = "\n\n".join(part for part in parts if part)

        return self._build_job(
            title=job["text"],
            url=job.get("hostedUrl") or job["applyUrl"],
            description=description,
            requirements=self._requirements_section(sections),
            location=self._location(job.get("categories") or {}),
        )

    @staticmethod
    def _requirements_section(sections: List[Dict[str, Any]]) -> Optional[str]:
        """Content of the first list headed 'requirements', or None to fall back to the regex."""
        for section in sections:
            if "requirements" in (section.get("text") or "").lower():
                content = clean_html(section.get("content"))
                if content:
                    return content[:REQUIREMENTS_MAX_LENGTH]
        return None

    @staticmethod
    def _location(categories: Dict[str, Any]) -> Optional[str]:
        location = categories.get("location")
        if location:
            return location
        all_locations = categories.get("allLocations") or []
        if isinstance(all_locations, list):
            return ", ".join(str(loc) for loc in all_locations if loc) or None
        return str(all_locations)
