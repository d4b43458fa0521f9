"""Dictionary-driven skill extraction."""

from typing import Dict, List, Optional

from .catalog import SkillDictionary, default_skill_dictionary
from .models import SkillExtraction
from .text import contains_phrase, normalize_text

HIGH_CONFIDENCE_MIN = 10
MEDIUM_CONFIDENCE_MIN = 5


class SkillExtractor:
    """Finds canonical skills in free text using a :class:`SkillDictionary`."""

    def __init__(self, dictionary: Optional[SkillDictionary] = None):
        self.dictionary = dictionary or default_skill_dictionary()

    def extract(self, text: str) -> SkillExtraction:
        normalized = normalize_text(text)
        found: List[str] = []
        categories: Dict[str, List[str]] = {}

        for entry in self.dictionary:
            # first matching synonym is enough
            if any(contains_phrase(normalized, synonym) for synonym in entry.synonyms):
                found.append(entry.name)
                categories.setdefault(entry.category, []).append(entry.name)

        return SkillExtraction(
            skills=sorted(found),
            categories=categories,
            confidence=confidence_for(len(found)),
        )

    def tech_stack(self, text: str) -> List[str]:
        """Skills from technical categories only, in dictionary order."""
        extraction = self.extract(text)
        stack: List[str] = []
        for category in self.dictionary.technical_categories:
            stack.extend(extraction.categories.get(category, []))
        return stack


def confidence_for(skill_count: int) -> str:
    if skill_count >= HIGH_CONFIDENCE_MIN:
        return "high"
    if skill_count >= MEDIUM_CONFIDENCE_MIN:
        return "medium"
    return "low"
