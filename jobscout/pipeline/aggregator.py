"""Concurrent fan-out of adapters over the watched companies."""

import time
from concurrent.futures import ThreadPoolExecutor
from typing import Iterable, List, Optional, Tuple

from jobscout.adapters.base import BaseAdapter
from jobscout.adapters.factory import get_adapter
from jobscout.config.models import AdvancedConfig
from jobscout.domain.models import Company, ProviderType, ScrapedJob
from jobscout.logging import bind_context, get_logger
from jobscout.matching import SkillExtractor

from .models import AggregationResult, CompanyRunStats

logger = get_logger(__name__, component="aggregator")


class Aggregator:
    """Runs every eligible company's adapter on a thread pool and joins the results.

    Adapters share nothing, so they run in parallel; :meth:`collect` returns
    only after every one of them has finished, which is what lets the caller
    treat the result as the complete set of postings seen in the pass.
    """

    def __init__(
        self,
        advanced_config: Optional[AdvancedConfig] = None,
        skill_extractor: Optional[SkillExtractor] = None,
    ):
        self.advanced_config = advanced_config or AdvancedConfig()
        self.skill_extractor = skill_extractor

    def collect(
        self, companies: Iterable[Company], names: Optional[Iterable[str]] = None
    ) -> AggregationResult:
        """Scrape ``companies`` (optionally only those in ``names``).

        Inactive and custom companies are never scraped. Names are matched
        case-insensitively; unknown names are reported and ignored.
        """
        selected = self._select(list(companies), names)

        planned: List[Tuple[Company, BaseAdapter]] = []
        skipped: List[CompanyRunStats] = []
        for company in selected:
            adapter = get_adapter(company, self.advanced_config, self.skill_extractor)
            if adapter is None:
                skipped.append(
                    CompanyRunStats(
                        company=company.name,
                        provider=ProviderType(company.provider).value,
                        attempted=False,
                    )
                )
                continue
            planned.append((company, adapter))

        logger.info(
            f"Scraping {len(planned)} companies",
            extra={
                "event": "aggregator.started",
                "company_count": len(planned),
                "skipped_count": len(skipped),
                "max_workers": self.advanced_config.max_workers,
            },
        )

        result = AggregationResult(company_stats=list(skipped))
        if not planned:
            return result

        with ThreadPoolExecutor(
            max_workers=self.advanced_config.max_workers,
            thread_name_prefix="jobscout-scrape",
        ) as executor:
            futures = [
                executor.submit(bind_context(_timed_scrape), adapter) for _, adapter in planned
            ]
            # leaving the block joins every worker
        outcomes = [future.result() for future in futures]

        for (company, adapter), (jobs, duration) in zip(planned, outcomes):
            result.jobs.extend(jobs)
            result.company_stats.append(
                CompanyRunStats(
                    company=company.name,
                    provider=adapter.ADAPTER_NAME,
                    fetched_count=len(jobs),
                    duration_seconds=duration,
                    error_message=adapter.last_error,
                )
            )

        logger.info(
            f"Collected {len(result.jobs)} jobs",
            extra={
                "event": "aggregator.completed",
                "job_count": len(result.jobs),
                "failed_companies": sum(1 for s in result.company_stats if s.had_errors),
            },
        )
        return result

    def _select(self, companies: List[Company], names: Optional[Iterable[str]]) -> List[Company]:
        if names is None:
            return [c for c in companies if _is_scrapable(c)]

        by_name = {company.name.lower(): company for company in companies}
        selected: List[Company] = []
        for name in names:
            company = by_name.get(name.strip().lower())
            if company is None:
                logger.warning(
                    f"Company not found: {name}",
                    extra={"event": "aggregator.company_unknown", "requested": name},
                )
                continue
            if not _is_scrapable(company):
                logger.warning(
                    f"Company {company.name} has no scraper configured "
                    f"(provider: {ProviderType(company.provider).value}, active: {company.active})",
                    extra={"event": "aggregator.company_not_scrapable", "requested": name},
                )
                continue
            if company not in selected:
                selected.append(company)
        return selected


def _is_scrapable(company: Company) -> bool:
    return company.active and company.provider != ProviderType.CUSTOM


def _timed_scrape(adapter: BaseAdapter) -> Tuple[List[ScrapedJob], float]:
    started = time.monotonic()
    jobs = adapter.scrape()
    return jobs, time.monotonic() - started
