"""Public entry point for running searches and scoring jobs.

:class:`JobResearchService` is the surface a UI or API layer talks to. It
assumes :func:`jobscout.persistence.init_database` has been called.
"""

from typing import Iterable, List, Optional, Sequence

from jobscout.config.models import AppConfig
from jobscout.domain.models import CanonicalJob, Company, JobFilters
from jobscout.logging import get_logger
from jobscout.matching import (
    AlignmentResult,
    DomainMatcher,
    JobFitAnalyzer,
    JobFitResult,
    RoleLevelAnalysis,
    RoleLevelAnalyzer,
    SkillExtraction,
    SkillExtractor,
    default_domain_matcher,
    default_role_level_analyzer,
    default_skill_extractor,
)
from jobscout.persistence import (
    CompanyRepository,
    JobNotFoundError,
    JobRepository,
    get_session,
)
from jobscout.pipeline import Aggregator, SearchPipeline

logger = get_logger(__name__, component="service")


class JobResearchService:
    """Runs search passes, lists stored jobs and produces deterministic scores."""

    def __init__(
        self,
        app_config: Optional[AppConfig] = None,
        pipeline: Optional[SearchPipeline] = None,
        skill_extractor: Optional[SkillExtractor] = None,
        domain_matcher: Optional[DomainMatcher] = None,
        role_level_analyzer: Optional[RoleLevelAnalyzer] = None,
    ):
        self.app_config = app_config or AppConfig()
        self.skill_extractor = skill_extractor or default_skill_extractor()
        self.domain_matcher = domain_matcher or default_domain_matcher()
        self.role_level_analyzer = role_level_analyzer or default_role_level_analyzer()
        self.pipeline = pipeline or SearchPipeline(
            self.app_config,
            Aggregator(self.app_config.advanced, self.skill_extractor),
        )
        self.fit_analyzer = JobFitAnalyzer(self.skill_extractor, self.domain_matcher)

    def sync_companies(self, companies: Optional[Iterable[Company]] = None) -> List[Company]:
        """Store the configured companies (defaults to those in ``app_config``)."""
        if companies is None:
            companies = self.app_config.get_companies()
        with get_session() as session:
            return CompanyRepository(session).sync(companies)

    def search_new_jobs(self, companies: Optional[Iterable[str]] = None) -> List[CanonicalJob]:
        """Run one search pass and return the jobs it inserted.

        A pass requested while another is running is skipped and returns ``[]``.
        """
        return self.pipeline.run_once(companies).new_jobs

    def get_jobs(self, filters: Optional[JobFilters] = None) -> List[CanonicalJob]:
        with get_session() as session:
            return JobRepository(session).get_jobs(filters)

    def detect_job_domains(self, title: str, description: str) -> List[str]:
        return self.domain_matcher.detect_job_domains(title, description)

    def match_domains(
        self, cv_text: str, user_domains: Sequence[str], job_domains: Sequence[str]
    ) -> AlignmentResult:
        return self.domain_matcher.match_user_domains(cv_text, user_domains, job_domains)

    def extract_skills(self, text: str) -> SkillExtraction:
        return self.skill_extractor.extract(text)

    def analyze_role_level(self, title: str, description: str, cv_text: str) -> RoleLevelAnalysis:
        return self.role_level_analyzer.analyze(title, description, cv_text)

    def analyze_job_fit(
        self, job_id: str, cv_text: str, user_domains: Sequence[str] = ()
    ) -> JobFitResult:
        """Score a stored job against a CV and save the score on the job.

        Raises:
            JobNotFoundError: If ``job_id`` is not stored
        """
        with get_session() as session:
            repo = JobRepository(session)
            job = repo.get_by_id(job_id)
            if job is None:
                raise JobNotFoundError(job_id)

            result = self.fit_analyzer.analyze(job, cv_text, user_domains)
            repo.update_alignment_score(
                job_id,
                result.alignment_score,
                strong_matches=result.strong_matches,
                gaps=result.gaps,
            )

        logger.info(
            f"Scored job {job_id}: {result.alignment_score}",
            extra={
                "event": "service.job_fit.scored",
                "job_id": job_id,
                "score": result.alignment_score,
                "recommendation": result.recommendation,
            },
        )
        return result
