"""SmartRecruiters ATS adapter implementation."""

from typing import Any, Dict, List, Optional

from jobscout.domain.models import ScrapedJob
from jobscout.logging import get_logger

from .base import BaseAdapter, clean_html
from .exceptions import AdapterResponseError

logger = get_logger(__name__, component="adapter")


class SmartRecruitersAdapter(BaseAdapter):
    """Adapter for the SmartRecruiters public postings API.

    API Details:
        Endpoint: https://api.smartrecruiters.com/v1/companies/{smartrecruiters_id}/postings
        Method: GET
        Authentication: None (public)
        Response: JSON object with a 'content' array
    """

    ADAPTER_NAME = "smartrecruiters"
    API_BASE_URL = "https://api.smartrecruiters.com/v1/companies"
    CAREERS_BASE_URL = "https://careers.smartrecruiters.com"

    def fetch_jobs(self) -> List[ScrapedJob]:
        url = f"{self.API_BASE_URL}/{self.identifier}/postings"
        logger.info(
            "Fetching jobs from SmartRecruiters",
            extra={"event": "adapter.fetch.started", "url": url},
        )

        response = self._make_request(url)
        if not isinstance(response, dict):
            raise AdapterResponseError(
                f"Expected JSON object response, got {type(response).__name__}"
            )
        return self._transform_all(response.get("content") or [], self._transform_job)

    def _transform_job(self, posting: Dict[str, Any]) -> Optional[ScrapedJob]:
        title = (posting.get("name") or posting.get("title") or "").strip()
        if not title:
            return None

        location = posting.get("location") or {}
        place = ", ".join(
            str(location[key]) for key in ("city", "region", "country") if location.get(key)
        )
        if location.get("remote") and not place:
            place = "Remote"

        sections = ((posting.get("jobAd") or {}).get("sections")) or {}
        description = "\n\n".join(
            clean_html(section.get("text"))
            for section in sections.values()
            if isinstance(section, dict) and section.get("text")
        ) or title

        return self._build_job(
            title=title,
            url=f"{self.CAREERS_BASE_URL}/{self.identifier}/{posting['id']}",
            description=description,
            location=place,
        )
