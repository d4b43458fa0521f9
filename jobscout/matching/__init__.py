"""Skill, domain and seniority analysis of job postings and CVs.

The module-level helpers use matchers built on the packaged catalogs; build
:class:`SkillExtractor`, :class:`KeywordDomainMatcher` or
:class:`RoleLevelAnalyzer` directly to inject other catalogs.
"""

from functools import lru_cache
from typing import List, Sequence

from .catalog import (
    Domain,
    DomainRegistry,
    RoleLevelPattern,
    RoleLevelRules,
    SkillDictionary,
    SkillEntry,
    default_domain_registry,
    default_role_level_rules,
    default_skill_dictionary,
    load_domain_registry,
    load_role_level_rules,
    load_skill_dictionary,
)
from .domains import DomainMatcher, KeywordDomainMatcher
from .fit import JobFitAnalyzer
from .models import (
    AlignmentResult,
    JobFitResult,
    LevelDetection,
    RoleLevelAnalysis,
    SimilarityResult,
    SkillExtraction,
)
from .role_level import RoleLevelAnalyzer
from .similarity import VectorLengthError, cosine_similarity, similarity_score
from .skills import SkillExtractor
from .text import contains_phrase, normalize_text


@lru_cache(maxsize=None)
def default_domain_matcher() -> KeywordDomainMatcher:
    return KeywordDomainMatcher(default_domain_registry())


@lru_cache(maxsize=None)
def default_skill_extractor() -> SkillExtractor:
    return SkillExtractor(default_skill_dictionary())


@lru_cache(maxsize=None)
def default_role_level_analyzer() -> RoleLevelAnalyzer:
    return RoleLevelAnalyzer(default_role_level_rules())


def detect_job_domains(title: str, description: str) -> List[str]:
    return default_domain_matcher().detect_job_domains(title, description)


def match_domains(
    cv_text: str, user_domains: Sequence[str], job_domains: Sequence[str]
) -> AlignmentResult:
    return default_domain_matcher().match_user_domains(cv_text, user_domains, job_domains)


def extract_skills(text: str) -> SkillExtraction:
    return default_skill_extractor().extract(text)


def analyze_role_level(title: str, description: str, cv_text: str) -> RoleLevelAnalysis:
    return default_role_level_analyzer().analyze(title, description, cv_text)


__all__ = [
    "AlignmentResult",
    "Domain",
    "DomainMatcher",
    "DomainRegistry",
    "JobFitAnalyzer",
    "JobFitResult",
    "KeywordDomainMatcher",
    "LevelDetection",
    "RoleLevelAnalysis",
    "RoleLevelAnalyzer",
    "RoleLevelPattern",
    "RoleLevelRules",
    "SimilarityResult",
    "SkillDictionary",
    "SkillEntry",
    "SkillExtraction",
    "SkillExtractor",
    "VectorLengthError",
    "analyze_role_level",
    "contains_phrase",
    "cosine_similarity",
    "default_domain_matcher",
    "default_domain_registry",
    "default_role_level_analyzer",
    "default_role_level_rules",
    "default_skill_dictionary",
    "default_skill_extractor",
    "detect_job_domains",
    "extract_skills",
    "load_domain_registry",
    "load_role_level_rules",
    "load_skill_dictionary",
    "match_domains",
    "normalize_text",
    "similarity_score",
]
