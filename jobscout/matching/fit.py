"""Deterministic job fit scoring.

The score blends skill coverage (share of the posting's skills that also
appear in the CV) with domain alignment when the candidate has declared
domains:

    score = round(0.7 * coverage + 0.3 * domain_score)

Postings with almost no text score 0, and postings whose domains are mostly
outside the candidate's experience are capped at 35.
"""

from typing import List, Optional, Sequence

from ..domain.models import CanonicalJob
from .domains import DomainMatcher, KeywordDomainMatcher, round_half_up
from .models import AlignmentResult, JobFitResult
from .skills import SkillExtractor

MIN_DETAIL_CHARS = 20
MISMATCH_CAP = 35
SKILL_WEIGHT = 0.7
DOMAIN_WEIGHT = 0.3
HIGH_THRESHOLD = 70
MEDIUM_THRESHOLD = 50
MAX_STRONG_MATCHES = 10
MAX_GAPS = 5

INSUFFICIENT_REASONING = (
    "Job posting has insufficient information (no description or requirements). "
    "Cannot accurately assess fit. Please check the company careers page directly "
    "for full job details."
)


class JobFitAnalyzer:
    """Scores a CV against a stored job using skills and domains."""

    def __init__(
        self,
        skill_extractor: Optional[SkillExtractor] = None,
        domain_matcher: Optional[DomainMatcher] = None,
    ):
        self.skill_extractor = skill_extractor or SkillExtractor()
        self.domain_matcher = domain_matcher or KeywordDomainMatcher()

    def analyze(
        self,
        job: CanonicalJob,
        cv_text: str,
        user_domain_ids: Sequence[str] = (),
    ) -> JobFitResult:
        if not _has_detail(job.description) and not _has_detail(job.requirements):
            return JobFitResult(
                alignment_score=0,
                gaps=[
                    "Job posting lacks detailed description and requirements",
                    "Cannot perform accurate alignment analysis",
                ],
                recommendation="low",
                reasoning=INSUFFICIENT_REASONING,
            )

        domain_match = self._domain_match(job, cv_text, user_domain_ids)

        strong_matches: List[str] = []
        gaps: List[str] = []
        if domain_match is not None:
            resolve = self.domain_matcher.domain_names
            if domain_match.matched_domains:
                strong_matches.append(
                    f"Domain match: {', '.join(resolve(domain_match.matched_domains))}"
                )
            if domain_match.transferable_domains:
                strong_matches.append(
                    f"Transferable: {', '.join(resolve(domain_match.transferable_domains))}"
                )
            gaps.extend(
                f"Missing: {name} experience"
                for name in resolve(domain_match.mismatched_domains)
            )

            total = len(domain_match.job_domains) or 1
            mismatch_ratio = len(domain_match.mismatched_domains) / total
            if mismatch_ratio > 0.5 and not domain_match.matched_domains:
                return JobFitResult(
                    alignment_score=min(domain_match.alignment_score, MISMATCH_CAP),
                    strong_matches=strong_matches[:MAX_STRONG_MATCHES],
                    gaps=gaps[:MAX_GAPS],
                    recommendation="low",
                    reasoning=domain_match.reasoning,
                    domain_match=domain_match,
                )

        job_skills = self.skill_extractor.extract(
            f"{job.title} {job.description} {job.requirements}"
        ).skills
        cv_skills = set(self.skill_extractor.extract(cv_text or "").skills)
        matched_skills = [skill for skill in job_skills if skill in cv_skills]
        strong_matches.extend(matched_skills)
        gaps.extend(skill for skill in job_skills if skill not in cv_skills)

        coverage = len(matched_skills) / len(job_skills) * 100 if job_skills else 0.0
        if domain_match is not None:
            score = round_half_up(
                SKILL_WEIGHT * coverage + DOMAIN_WEIGHT * domain_match.alignment_score
            )
        else:
            score = round_half_up(coverage)
        score = max(0, min(100, score))

        recommendation, reasoning = _recommendation(score)
        if domain_match is not None and domain_match.reasoning:
            reasoning = f"{domain_match.reasoning} {reasoning}"

        return JobFitResult(
            alignment_score=score,
            strong_matches=strong_matches[:MAX_STRONG_MATCHES],
            gaps=gaps[:MAX_GAPS],
            recommendation=recommendation,
            reasoning=reasoning,
            domain_match=domain_match,
        )

    def _domain_match(
        self, job: CanonicalJob, cv_text: str, user_domain_ids: Sequence[str]
    ) -> Optional[AlignmentResult]:
        if not user_domain_ids:
            return None
        job_domains = self.domain_matcher.detect_job_domains(job.title, job.description)
        if not job_domains:
            return None
        return self.domain_matcher.match_user_domains(cv_text, user_domain_ids, job_domains)


def _has_detail(text: Optional[str]) -> bool:
    return bool(text) and len(text.strip()) > MIN_DETAIL_CHARS


def _recommendation(score: int):
    if score >= HIGH_THRESHOLD:
        return "high", (
            f"Strong alignment ({score}%). Your experience closely matches requirements. "
            "This is a good fit!"
        )
    if score >= MEDIUM_THRESHOLD:
        return "medium", (
            f"Moderate alignment ({score}%) with some gaps. "
            "Consider emphasizing transferable skills in your application."
        )
    if score >= 30:
        return "low", (
            f"Limited alignment ({score}%). Significant gaps in key requirements."
        )
    return "low", (
        f"Very low alignment ({score}%). This role asks for experience the CV does not show."
    )
