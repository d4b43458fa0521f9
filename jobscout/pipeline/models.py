"""Data models for pipeline execution tracking and reporting."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from jobscout.domain.models import CanonicalJob, ScrapedJob


@dataclass
class CompanyRunStats:
    """
    Outcome of one company's scrape within a pass.

    Attributes:
        company: Company name
        provider: ATS provider the company uses
        fetched_count: Postings returned by the adapter
        duration_seconds: Wall time spent in the adapter
        attempted: Whether an adapter ran (False when the company was skipped)
        error_message: Failure reported by the adapter, if any
    """

    company: str
    provider: str
    fetched_count: int = 0
    duration_seconds: float = 0.0
    attempted: bool = True
    error_message: Optional[str] = None

    @property
    def had_errors(self) -> bool:
        return self.error_message is not None


@dataclass
class AggregationResult:
    """All postings collected in one pass, in company order."""

    jobs: List[ScrapedJob] = field(default_factory=list)
    company_stats: List[CompanyRunStats] = field(default_factory=list)

    @property
    def selected_companies(self) -> List[str]:
        return [stats.company for stats in self.company_stats]

    @property
    def attempted_companies(self) -> List[str]:
        return [stats.company for stats in self.company_stats if stats.attempted]


@dataclass
class PipelineRunResult:
    """
    Aggregate results from one search pass.

    Attributes:
        run_id: Identifier shared by every log line of the pass
        run_started_at: UTC timestamp when the pass began
        run_finished_at: UTC timestamp when the pass completed
        company_stats: Per-company scrape statistics
        scraped_count: Postings collected before dedup
        new_jobs: Jobs inserted for the first time in this pass
        seen_count: Known jobs resighted in this pass
        missed_count: Known jobs whose miss counter was incremented
        expired_job_ids: Jobs that crossed the expiry threshold in this pass
        skipped: Whether the pass was skipped because another one was running
    """

    run_id: str
    run_started_at: datetime
    run_finished_at: datetime
    company_stats: List[CompanyRunStats] = field(default_factory=list)
    scraped_count: int = 0
    new_jobs: List[CanonicalJob] = field(default_factory=list)
    seen_count: int = 0
    missed_count: int = 0
    expired_job_ids: List[str] = field(default_factory=list)
    skipped: bool = False

    @property
    def total_duration_seconds(self) -> float:
        return (self.run_finished_at - self.run_started_at).total_seconds()

    @property
    def had_errors(self) -> bool:
        return any(stats.had_errors for stats in self.company_stats)
