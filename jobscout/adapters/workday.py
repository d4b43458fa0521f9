"""Workday ATS adapter implementation."""

from typing import Any, Dict, List

from jobscout.domain.models import ScrapedJob
from jobscout.logging import get_logger

from .base import BaseAdapter
from .exceptions import AdapterResponseError

logger = get_logger(__name__, component="adapter")


class WorkdayAdapter(BaseAdapter):
    """Adapter for Workday career sites (CXS JSON endpoint).

    API Details:
        Endpoint: https://{workday_id}.wd5.myworkdayjobs.com/wday/cxs/{workday_id}/{workday_site}/jobs
        Method: POST with {"appliedFacets": {}, "limit": 20, "offset": n, "searchText": ""}
        Authentication: None (public)
        Response: JSON object with 'jobPostings' and 'total'

    The listing endpoint has no job body; ``bulletFields`` are used as the
    description, falling back to the title.
    """

    ADAPTER_NAME = "workday"
    PAGE_SIZE = 20
    MAX_PAGES = 100

    @property
    def host(self) -> str:
        return f"https://{self.identifier}.wd5.myworkdayjobs.com"

    def fetch_jobs(self) -> List[ScrapedJob]:
        url = f"{self.host}/wday/cxs/{self.identifier}/{self.company.workday_site}/jobs"
        logger.info(
            "Fetching jobs from Workday",
            extra={"event": "adapter.fetch.started", "url": url},
        )

        postings: List[Dict[str, Any]] = []
        offset = 0
        previous_paths = None
        for _ in range(self.MAX_PAGES):
            response = self._make_request(
                url,
                method="POST",
                json_data={
                    "appliedFacets": {},
                    "limit": self.PAGE_SIZE,
                    "offset": offset,
                    "searchText": "",
                },
            )
            if not isinstance(response, dict):
                raise AdapterResponseError(
                    f"Expected JSON object response, got {type(response).__name__}"
                )
            page = response.get("jobPostings") or []
            paths = [posting.get("externalPath") for posting in page if isinstance(posting, dict)]
            if page and paths == previous_paths:
                logger.warning(
                    "Workday returned the same page twice, stopping pagination",
                    extra={"event": "adapter.workday.repeated_page", "offset": offset},
                )
                break
            previous_paths = paths
            postings.extend(page)
            offset += len(page)

            total = response.get("total")
            if len(page) < self.PAGE_SIZE:
                break
            if isinstance(total, int) and offset >= total:
                break
            if self.max_jobs > 0 and len(postings) >= self.max_jobs:
                break
        else:
            logger.warning(
                f"Workday pagination stopped after {self.MAX_PAGES} pages",
                extra={"event": "adapter.workday.page_limit", "fetched": len(postings)},
            )

        return self._transform_all(postings, self._transform_job)

    def _transform_job(self, posting: Dict[str, Any]) -> ScrapedJob:
        title = posting["title"]
        bullets = [str(field) for field in posting.get("bulletFields") or [] if field]
        return self._build_job(
            title=title,
            url=f"{self.host}{posting['externalPath']}",
            description="\n".join(bullets) or title,
            location=posting.get("locationsText"),
        )
