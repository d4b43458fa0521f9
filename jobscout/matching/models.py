"""Result types produced by the matching engine."""

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class SkillExtraction:
    """Skills found in a piece of text.

    Attributes:
        skills: Canonical skill names, sorted
        categories: Category name -> skills found in that category (discovery order)
        confidence: ``high`` (>= 10 skills), ``medium`` (>= 5) or ``low``
    """

    skills: List[str] = field(default_factory=list)
    categories: Dict[str, List[str]] = field(default_factory=dict)
    confidence: str = "low"


@dataclass
class AlignmentResult:
    """Outcome of comparing a candidate's domains with a job's domains.

    Attributes:
        job_domains: Domain ids detected in the posting
        user_domains: Domain ids the candidate claims
        is_match: True when at least one job domain is covered directly
        matched_domains: Job domains the candidate has
        transferable_domains: Job domains reachable through a transfer edge
        mismatched_domains: Job domains with neither direct nor transferable coverage
        alignment_score: 0-100
        reasoning: Human-readable explanation
    """

    job_domains: List[str] = field(default_factory=list)
    job_domain_names: List[str] = field(default_factory=list)
    user_domains: List[str] = field(default_factory=list)
    user_domain_names: List[str] = field(default_factory=list)
    is_match: bool = False
    matched_domains: List[str] = field(default_factory=list)
    transferable_domains: List[str] = field(default_factory=list)
    mismatched_domains: List[str] = field(default_factory=list)
    alignment_score: int = 0
    reasoning: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class LevelDetection:
    """A seniority level read from text and how it was found.

    ``source`` is ``pattern``, ``years`` or ``default``.
    """

    level: str
    rank: int
    confidence: str
    source: str
    matched: Optional[str] = None


@dataclass
class RoleLevelAnalysis:
    job_level: LevelDetection
    candidate_level: LevelDetection
    difference: int
    progression: str
    is_large_step: bool
    growth_score: int
    description: str
    recommendation: str

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class JobFitResult:
    """Deterministic fit of a CV against one job.

    Attributes:
        alignment_score: 0-100
        strong_matches: Job skills and domains present in the CV
        gaps: Job skills and domains missing from the CV
        recommendation: ``high``, ``medium`` or ``low``
        reasoning: Sentence explaining the score
        domain_match: Domain alignment used for the score, when domains were supplied
    """

    alignment_score: int
    strong_matches: List[str] = field(default_factory=list)
    gaps: List[str] = field(default_factory=list)
    recommendation: str = "low"
    reasoning: str = ""
    domain_match: Optional[AlignmentResult] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class SimilarityResult:
    similarity: float
    score: float
    interpretation: str
