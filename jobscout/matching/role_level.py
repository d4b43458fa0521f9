"""Seniority extraction and career-progression scoring."""

import re
from typing import Optional

from .catalog import RoleLevelRules, default_role_level_rules
from .models import LevelDetection, RoleLevelAnalysis
from .text import contains_phrase, normalize_text

DEFAULT_LEVEL = "mid"
CANDIDATE_PREFIX_CHARS = 500

YEARS_PATTERN = re.compile(
    r"(\d+)\+?\s*(?:-\s*\d+\s*)?years?(?:\s+of)?\s+"
    r"(?:relevant\s+|professional\s+|industry\s+)?experience",
    re.IGNORECASE,
)
CURRENT_ROLE_PATTERN = re.compile(r"\bcurrent(?:ly)?\s+(?:role|position|title)\b", re.IGNORECASE)
PRESENT_DATED_PATTERN = re.compile(
    r"\d{4}\s*(?:-|–|—|to)\s*(?:present|current|now)\b", re.IGNORECASE
)

# (progression, growth score, description, recommendation)
_PROGRESSIONS = {
    "large_step_up": (
        "step_up",
        95,
        "This role is a significant step up from your current {candidate} level to {job}.",
        "Strong growth opportunity. Lead with the scope and impact that show you already "
        "operate above your title.",
    ),
    "step_up": (
        "step_up",
        85,
        "This role is one level above your current {candidate} level ({job}).",
        "Good growth move. Highlight achievements that demonstrate readiness for the next level.",
    ),
    "lateral": (
        "lateral",
        60,
        "This role matches your current {candidate} level.",
        "Lateral move. Focus on what the role adds in domain, scope or team rather than seniority.",
    ),
    "step_down": (
        "step_down",
        30,
        "This role is one level below your current {candidate} level ({job}).",
        "Consider whether the role offers other benefits; expect questions about the step back.",
    ),
    "significant_step_down": (
        "significant_step_down",
        10,
        "This role is well below your current {candidate} level ({job}).",
        "Likely a poor fit for career growth unless you are deliberately changing track.",
    ),
}


class RoleLevelAnalyzer:
    """Reads seniority from postings and CVs using ordered :class:`RoleLevelRules`."""

    def __init__(self, rules: Optional[RoleLevelRules] = None):
        self.rules = rules or default_role_level_rules()

    def extract_level(self, text: str, headline: bool = True) -> LevelDetection:
        """Detect a level in ``text``.

        Pattern rules are tried most senior first; the first match wins with
        high confidence. Otherwise an "N years of experience" mention maps to a
        level with low confidence, else the result is ``mid`` with low
        confidence. ``headline=False`` skips title-only patterns.
        """
        normalized = normalize_text(text)
        for rule in self.rules:
            patterns = rule.patterns + (rule.title_patterns if headline else ())
            for pattern in patterns:
                if contains_phrase(normalized, pattern):
                    return LevelDetection(rule.level, rule.rank, "high", "pattern", pattern)

        years = self._years_of_experience(text)
        if years is not None:
            for rule in self.rules:
                if rule.accepts_years(years):
                    return LevelDetection(rule.level, rule.rank, "low", "years", f"{years} years")

        return LevelDetection(DEFAULT_LEVEL, self.rules.rank(DEFAULT_LEVEL), "low", "default")

    def extract_job_level(self, title: str, description: str = "") -> LevelDetection:
        """The title decides when it names a level; the description is the fallback."""
        from_title = self.extract_level(title or "")
        if from_title.source == "pattern":
            return from_title
        return self.extract_level(f"{title or ''}\n{description or ''}", headline=False)

    def extract_candidate_level(self, cv_text: str) -> LevelDetection:
        return self.extract_level(candidate_headline(cv_text))

    def analyze(self, title: str, description: str, cv_text: str) -> RoleLevelAnalysis:
        job = self.extract_job_level(title, description)
        candidate = self.extract_candidate_level(cv_text)
        difference = job.rank - candidate.rank

        if difference >= 2:
            key = "large_step_up"
        elif difference == 1:
            key = "step_up"
        elif difference == 0:
            key = "lateral"
        elif difference == -1:
            key = "step_down"
        else:
            key = "significant_step_down"

        progression, score, description_tpl, recommendation = _PROGRESSIONS[key]
        return RoleLevelAnalysis(
            job_level=job,
            candidate_level=candidate,
            difference=difference,
            progression=progression,
            is_large_step=key == "large_step_up",
            growth_score=score,
            description=description_tpl.format(candidate=candidate.level, job=job.level),
            recommendation=recommendation,
        )

    @staticmethod
    def _years_of_experience(text: str) -> Optional[int]:
        match = YEARS_PATTERN.search(text or "")
        return int(match.group(1)) if match else None


def candidate_headline(cv_text: str) -> str:
    """The part of a CV that describes the candidate's current position.

    Uses the line announcing the current role (or dated "... - Present" together
    with the line before it); falls back to the first 500 characters.
    """
    if not cv_text:
        return ""
    lines = [line.strip() for line in cv_text.splitlines() if line.strip()]
    for index, line in enumerate(lines):
        if CURRENT_ROLE_PATTERN.search(line):
            return line
        if PRESENT_DATED_PATTERN.search(line):
            previous = lines[index - 1] if index > 0 else ""
            return f"{previous}\n{line}".strip()
    return cv_text[:CANDIDATE_PREFIX_CHARS]
