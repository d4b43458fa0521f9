"""Ashby ATS adapter implementation."""

from typing import List, Optional
from urllib.parse import urljoin

from bs4 import BeautifulSoup, Tag

from jobscout.domain.models import ScrapedJob
from jobscout.logging import get_logger

from .base import BaseAdapter

logger = get_logger(__name__, component="adapter")

TITLE_SELECTORS = ('[data-testid="job-title"]', ".job-title", "h3")
LOCATION_SELECTORS = ('[data-testid="job-location"]', ".job-location")


class AshbyAdapter(BaseAdapter):
    """Adapter for Ashby hosted job boards.

    Ashby has no public listing API for arbitrary boards, so the board page
    at https://jobs.ashbyhq.com/{ashby_id} is parsed. Cards carrying a
    ``data-job-id`` attribute are preferred; when none exist every link with
    text is treated as a posting.
    """

    ADAPTER_NAME = "ashby"
    BOARD_BASE_URL = "https://jobs.ashbyhq.com"

    @property
    def board_url(self) -> str:
        return f"{self.BOARD_BASE_URL}/{self.identifier}"

    def fetch_jobs(self) -> List[ScrapedJob]:
        logger.info(
            "Fetching jobs from Ashby",
            extra={"event": "adapter.fetch.started", "url": self.board_url},
        )
        soup = BeautifulSoup(self._fetch_html(self.board_url), "lxml")

        cards = soup.select("[data-job-id]")
        if cards:
            return self._transform_all(cards, self._transform_card)

        logger.debug(
            "No job cards found on Ashby board, falling back to links",
            extra={"event": "adapter.ashby.fallback"},
        )
        links = [a for a in soup.select('a[href*="/"]') if a.get_text(strip=True)]
        return self._transform_all(links, self._transform_link)

    def _transform_card(self, card: Tag) -> Optional[ScrapedJob]:
        title = _first_text(card, TITLE_SELECTORS)
        if not title:
            return None
        description = _first_text(card, (".job-description",)) or title
        return self._build_job(
            title=title,
            url=f"{self.board_url}/{card['data-job-id']}",
            description=description,
            location=_first_text(card, LOCATION_SELECTORS),
        )

    def _transform_link(self, link: Tag) -> ScrapedJob:
        title = link.get_text(" ", strip=True)
        return self._build_job(
            title=title,
            url=urljoin(f"{self.board_url}/", link["href"]),
            description=title,
            requirements="",
        )


def _first_text(node: Tag, selectors) -> Optional[str]:
    for selector in selectors:
        match = node.select_one(selector)
        if match is not None:
            text = match.get_text(" ", strip=True)
            if text:
                return text
    return None
