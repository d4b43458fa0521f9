"""Domain detection and candidate/job domain alignment.

Detection counts distinct keyword hits per registry domain in normalized text;
alignment classifies every job domain as matched, transferable or mismatched
for a candidate and turns the mix into a 0-100 score:

    score = min(100, round(matched * 100 + transferable * 60 + mismatched * 20))

where each term is the share of job domains in that class.
"""

import math
from abc import ABC, abstractmethod
from typing import List, Optional, Sequence

from .catalog import DomainRegistry, default_domain_registry
from .models import AlignmentResult
from .text import matching_phrases, normalize_text

NEUTRAL_SCORE = 70
NEUTRAL_REASONING = (
    "No specific domain requirements detected. General role that may suit various backgrounds."
)

MATCH_WEIGHT = 100
TRANSFERABLE_WEIGHT = 60
MISMATCH_WEIGHT = 20


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


class DomainMatcher(ABC):
    """Interface for detecting job domains and scoring candidate alignment."""

    @abstractmethod
    def detect_job_domains(self, title: str, description: str) -> List[str]:
        """Return ids of the domains a posting belongs to, in registry order."""

    @abstractmethod
    def match_user_domains(
        self,
        cv_text: str,
        user_domain_ids: Sequence[str],
        job_domain_ids: Sequence[str],
    ) -> AlignmentResult:
        """Score how well the candidate's domains cover the job's domains."""

    @abstractmethod
    def domain_names(self, domain_ids: Sequence[str]) -> List[str]:
        """Display names for known ids; unknown ids are dropped."""


class KeywordDomainMatcher(DomainMatcher):
    """Keyword-count implementation backed by a :class:`DomainRegistry`."""

    def __init__(self, registry: Optional[DomainRegistry] = None):
        self.registry = registry or default_domain_registry()

    def domain_names(self, domain_ids: Sequence[str]) -> List[str]:
        return self.registry.names(domain_ids)

    def detect_job_domains(self, title: str, description: str) -> List[str]:
        text = normalize_text(f"{title or ''} {description or ''}")
        return [
            domain.id
            for domain in self.registry
            if len(matching_phrases(text, domain.keywords)) >= domain.required_count
        ]

    def detect_cv_domains(self, cv_text: str) -> List[str]:
        """Domains whose CV keywords reach the domain's threshold in ``cv_text``."""
        text = normalize_text(cv_text)
        return [
            domain.id
            for domain in self.registry
            if len(matching_phrases(text, domain.cv_keywords)) >= domain.required_count
        ]

    def match_user_domains(
        self,
        cv_text: str,
        user_domain_ids: Sequence[str],
        job_domain_ids: Sequence[str],
    ) -> AlignmentResult:
        """Classify each job domain against the candidate's domains.

        When ``user_domain_ids`` is empty the candidate's domains are detected
        from ``cv_text``. Job domain ids missing from the registry are ignored.
        """
        user_ids = list(user_domain_ids) or self.detect_cv_domains(cv_text or "")
        job_ids = [domain_id for domain_id in job_domain_ids if domain_id in self.registry]

        if not job_ids:
            return AlignmentResult(
                user_domains=user_ids,
                user_domain_names=self.registry.names(user_ids),
                is_match=True,
                alignment_score=NEUTRAL_SCORE,
                reasoning=NEUTRAL_REASONING,
            )

        matched: List[str] = []
        transferable: List[str] = []
        mismatched: List[str] = []
        for job_id in job_ids:
            if job_id in user_ids:
                matched.append(job_id)
            elif any(
                self.registry.is_transferable(user_id, job_id)
                or self.registry.is_transferable(job_id, user_id)
                for user_id in user_ids
            ):
                transferable.append(job_id)
            else:
                mismatched.append(job_id)

        total = len(job_ids)
        raw = (
            len(matched) / total * MATCH_WEIGHT
            + len(transferable) / total * TRANSFERABLE_WEIGHT
            + len(mismatched) / total * MISMATCH_WEIGHT
        )

        return AlignmentResult(
            job_domains=job_ids,
            job_domain_names=self.registry.names(job_ids),
            user_domains=user_ids,
            user_domain_names=self.registry.names(user_ids),
            is_match=bool(matched or transferable),
            matched_domains=matched,
            transferable_domains=transferable,
            mismatched_domains=mismatched,
            alignment_score=min(100, round_half_up(raw)),
            reasoning=self._reasoning(matched, transferable, mismatched, user_ids),
        )

    def _reasoning(
        self,
        matched: List[str],
        transferable: List[str],
        mismatched: List[str],
        user_ids: List[str],
    ) -> str:
        names = self.registry.names
        if matched and not transferable and not mismatched:
            return (
                f"Perfect domain match! Your {' and '.join(names(matched))} expertise "
                "aligns exactly with this role's requirements."
            )

        reasons = []
        if matched:
            reasons.append(f"Your {', '.join(names(matched))} experience matches the core requirements")
        if transferable:
            reasons.append(f"Transferable skills: {', '.join(names(transferable))}")
        if mismatched:
            if not matched and not transferable:
                user_names = ", ".join(names(user_ids)) or "other areas"
                reasons.append(
                    f"Significant domain mismatch: This role requires {', '.join(names(mismatched))} "
                    f"experience, but your expertise is in {user_names}"
                )
            else:
                reasons.append(
                    f"Gap in {', '.join(names(mismatched))} - consider highlighting "
                    "transferable skills in your application"
                )
        return ". ".join(reasons)
