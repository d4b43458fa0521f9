"""Text normalization and phrase matching shared by every extractor.

Both sides of a comparison go through :func:`normalize_text`, so a keyword such
as ``"node.js"`` becomes ``"node js"`` and matches ``"Node.js"``, ``"NODE-JS"``
and ``"node js"`` alike.
"""

import re
from functools import lru_cache
from typing import Iterable, List, Pattern

_NON_WORD = re.compile(r"[^\w\s]")
_WHITESPACE = re.compile(r"\s+")


def normalize_text(text: str) -> str:
    """Lowercase, replace punctuation with spaces and collapse whitespace."""
    if not text:
        return ""
    lowered = _NON_WORD.sub(" ", text.lower())
    return _WHITESPACE.sub(" ", lowered).strip()


@lru_cache(maxsize=4096)
def _phrase_pattern(keyword: str) -> Pattern[str]:
    return re.compile(r"\b" + re.escape(normalize_text(keyword)) + r"\b")


def contains_phrase(normalized_text: str, keyword: str) -> bool:
    """Return True if ``keyword`` occurs in ``normalized_text`` on word boundaries.

    ``normalized_text`` must already be normalized; ``keyword`` is normalized
    here. Keywords that normalize to nothing (e.g. ``"++"``) never match.
    """
    if not normalized_text or not normalize_text(keyword):
        return False
    return _phrase_pattern(keyword).search(normalized_text) is not None


def matching_phrases(normalized_text: str, keywords: Iterable[str]) -> List[str]:
    """Return the keywords found in the text, in keyword order, without duplicates.

    Keywords that normalize to the same phrase (``"mid-level"`` and
    ``"mid level"``) count once.
    """
    found = []
    seen = set()
    for keyword in keywords:
        key = normalize_text(keyword)
        if key in seen:
            continue
        if contains_phrase(normalized_text, keyword):
            seen.add(key)
            found.append(keyword)
    return found
