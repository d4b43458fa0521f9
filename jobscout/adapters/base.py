"""Base adapter class with shared functionality for all ATS adapters.

An adapter is bound to one company. ``fetch_jobs`` talks to the ATS and may
raise; ``scrape`` is what the aggregator calls and never raises.
"""

import html
import logging
import re
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

import requests

from jobscout.domain.models import Company, ScrapedJob
from jobscout.logging import get_logger, log_context
from jobscout.matching import SkillExtractor, default_skill_extractor
from jobscout.matching.text import normalize_text
from jobscout.utils.hashing import compute_job_id

from .exceptions import (
    AdapterConfigurationError,
    AdapterError,
    AdapterHTTPError,
    AdapterResponseError,
    AdapterTimeoutError,
)

logger = get_logger(__name__, component="adapter")

REQUIREMENTS_PATTERN = re.compile(
    r"(?:requirements|qualifications|what we're looking for)[\s\S]{0,1000}",
    re.IGNORECASE,
)
REQUIREMENTS_MAX_LENGTH = 500

REMOTE_KEYWORDS = (
    "remote",
    "work from home",
    "wfh",
    "distributed team",
    "anywhere",
    "telecommute",
    "home based",
)
_REMOTE_PATTERN = re.compile(
    r"\b(?:" + "|".join(re.escape(keyword) for keyword in REMOTE_KEYWORDS) + r")\b"
)


class BaseAdapter(ABC):
    """Base class for all ATS adapters.

    Attributes:
        company: The company whose board is read
        timeout: HTTP request timeout in seconds
        user_agent: User-Agent header for HTTP requests
        max_jobs: Maximum postings returned per company (0 = unlimited)
    """

    ADAPTER_NAME = "base"

    def __init__(
        self,
        company: Company,
        timeout: int = 30,
        user_agent: str = "jobscout/1.0",
        max_jobs: int = 1000,
        skill_extractor: Optional[SkillExtractor] = None,
    ) -> None:
        """
        Raises:
            AdapterConfigurationError: If timeout is outside 5-300 or user_agent is empty
        """
        if not 5 <= timeout <= 300:
            raise AdapterConfigurationError(
                f"Timeout must be between 5 and 300 seconds, got: {timeout}"
            )
        if not user_agent or not user_agent.strip():
            raise AdapterConfigurationError("user_agent cannot be empty")

        self.company = company
        self.timeout = timeout
        self.user_agent = user_agent.strip()
        self.max_jobs = max_jobs
        self.skill_extractor = skill_extractor or default_skill_extractor()

        self.last_error: Optional[str] = None

        self._session = requests.Session()
        self._session.headers.update({"User-Agent": self.user_agent})

    @property
    def identifier(self) -> Optional[str]:
        return self.company.provider_identifier()

    @abstractmethod
    def fetch_jobs(self) -> List[ScrapedJob]:
        """Fetch and parse the company's postings.

        Raises:
            AdapterError: On HTTP, timeout or parsing failures
        """

    def scrape(self) -> List[ScrapedJob]:
        """Fetch postings, returning ``[]`` instead of raising on any failure."""
        with log_context(company=self.company.name, provider=self.ADAPTER_NAME):
            self.last_error = None
            try:
                jobs = self.fetch_jobs()
            except AdapterError as e:
                self.last_error = str(e)
                logger.warning(
                    f"Scraping {self.company.name} failed: {e}",
                    extra={
                        "event": "adapter.scrape.failed",
                        "error_type": type(e).__name__,
                    },
                )
                return []
            except Exception as e:
                self.last_error = str(e)
                logger.error(
                    f"Unexpected error scraping {self.company.name}: {e}",
                    exc_info=True,
                    extra={
                        "event": "adapter.scrape.failed",
                        "error_type": type(e).__name__,
                    },
                )
                return []

            jobs = self._truncate_jobs(jobs)
            logger.info(
                f"Scraped {len(jobs)} jobs from {self.company.name}",
                extra={"event": "adapter.scrape.completed", "count": len(jobs)},
            )
            return jobs

    def _send(
        self,
        url: str,
        method: str = "GET",
        params: Optional[Dict[str, str]] = None,
        json_data: Optional[Dict[str, Any]] = None,
    ) -> requests.Response:
        """Issue a request and map transport failures to adapter exceptions.

        Raises:
            AdapterHTTPError: On 4xx/5xx status or connection failure
            AdapterTimeoutError: On request timeout
        """
        logger.debug(
            f"HTTP {method} request to {url}",
            extra={"event": "adapter.fetch.request", "method": method, "url": url},
        )
        try:
            response = self._session.request(
                method=method,
                url=url,
                params=params,
                json=json_data,
                timeout=self.timeout,
            )
        except requests.exceptions.Timeout as e:
            raise AdapterTimeoutError(
                f"Request to {url} timed out after {self.timeout} seconds", url=url
            ) from e
        except requests.exceptions.RequestException as e:
            raise AdapterHTTPError(f"Request to {url} failed: {e}", status_code=0, url=url) from e

        if response.status_code >= 400:
            log_level = logging.WARNING if response.status_code >= 500 else logging.ERROR
            logger.log(
                log_level,
                f"HTTP {response.status_code} error from {url}",
                extra={
                    "event": "adapter.fetch.error",
                    "status_code": response.status_code,
                    "url": url,
                },
            )
            raise AdapterHTTPError(
                f"HTTP {response.status_code}: {response.reason}",
                status_code=response.status_code,
                url=url,
            )
        return response

    def _make_request(
        self,
        url: str,
        method: str = "GET",
        params: Optional[Dict[str, str]] = None,
        json_data: Optional[Dict[str, Any]] = None,
    ) -> Any:
        """Request ``url`` and return the decoded JSON body.

        Raises:
            AdapterResponseError: If the body is not JSON
        """
        response = self._send(url, method=method, params=params, json_data=json_data)
        try:
            return response.json()
        except ValueError as e:
            raise AdapterResponseError(f"Failed to parse JSON response from {url}: {e}") from e

    def _fetch_html(self, url: str) -> str:
        return self._send(url).text

    def _transform_all(self, items: List[Any], transform) -> List[ScrapedJob]:
        """Apply ``transform`` to each raw posting, skipping ones that fail to parse."""
        jobs = []
        for item in items:
            try:
                job = transform(item)
            except (KeyError, ValueError, TypeError, AttributeError) as e:
                logger.warning(
                    f"Failed to transform {self.ADAPTER_NAME} job",
                    extra={"event": "adapter.transform.skipped", "error": str(e)},
                )
                continue
            if job is not None:
                jobs.append(job)
        return jobs

    def _truncate_jobs(self, jobs: List[ScrapedJob]) -> List[ScrapedJob]:
        if self.max_jobs > 0 and len(jobs) > self.max_jobs:
            logger.warning(
                "Truncating jobs to max_jobs limit",
                extra={"total": len(jobs), "max": self.max_jobs},
            )
            return jobs[: self.max_jobs]
        return jobs

    def _build_job(
        self,
        title: str,
        url: str,
        description: str = "",
        requirements: Optional[str] = None,
        location: Optional[str] = None,
    ) -> ScrapedJob:
        """Assemble a ScrapedJob, deriving identity, requirements, remote flag and stack.

        Raises:
            ValueError: If title or url is blank
        """
        title = (title or "").strip()
        if not title:
            raise ValueError("Job title is empty")
        if requirements is None:
            requirements = extract_requirements(description)
        location = (location or "").strip() or "Not specified"
        searchable = " ".join((title, description, location))
        return ScrapedJob(
            job_id=compute_job_id(self.company.name, title),
            company=self.company.name,
            title=title,
            url=url,
            description=description,
            requirements=requirements,
            tech_stack=self.skill_extractor.tech_stack(f"{title} {description}"),
            location=location,
            remote=is_remote(searchable),
        )


def clean_html(html_text: Optional[str]) -> str:
    """Decode entities, drop tags and normalise whitespace, keeping paragraph breaks."""
    if not html_text:
        return ""

    text = html.unescape(html_text)
    text = re.sub(r"<br\s*/?>", "\n", text, flags=re.IGNORECASE)
    text = re.sub(r"</(?:p|li|h[1-6]|div)>", "\n", text, flags=re.IGNORECASE)
    text = re.sub(r"<[^>]+>", " ", text)
    # entities can be double-encoded in ATS payloads
    text = html.unescape(text)
    text = re.sub(r"[ \t\xa0]+", " ", text)
    text = re.sub(r" *\n *", "\n", text)
    text = re.sub(r"\n{3,}", "\n\n", text)
    return text.strip()


def extract_requirements(description: str) -> str:
    """Requirements section of a description, else its first 500 characters."""
    if not description:
        return ""
    match = REQUIREMENTS_PATTERN.search(description)
    if match:
        return match.group(0)[:REQUIREMENTS_MAX_LENGTH].strip()
    return description[:REQUIREMENTS_MAX_LENGTH].strip()


def is_remote(text: str) -> bool:
    return bool(_REMOTE_PATTERN.search(normalize_text(text)))
