"""Cosine similarity for embedding-based scoring."""

import math
from typing import Sequence

from .models import SimilarityResult

_BANDS = (
    (80, "Very high similarity - strong alignment"),
    (65, "High similarity - good alignment"),
    (50, "Moderate similarity - some alignment"),
    (35, "Low similarity - limited alignment"),
)
_LOWEST_BAND = "Very low similarity - poor alignment"


class VectorLengthError(ValueError):
    """Raised when two vectors of different dimensions are compared."""

    def __init__(self, left: int, right: int):
        self.left = left
        self.right = right
        super().__init__(f"Vectors must have the same length (got {left} and {right})")


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """Cosine of the angle between ``a`` and ``b``.

    Returns 0.0 when either vector has zero magnitude.

    Raises:
        VectorLengthError: If the vectors differ in length
    """
    if len(a) != len(b):
        raise VectorLengthError(len(a), len(b))
    dot = sum(x * y for x, y in zip(a, b))
    norm_a = math.sqrt(sum(x * x for x in a))
    norm_b = math.sqrt(sum(y * y for y in b))
    denominator = norm_a * norm_b
    if denominator == 0:
        return 0.0
    return dot / denominator


def similarity_score(a: Sequence[float], b: Sequence[float]) -> SimilarityResult:
    """Cosine similarity scaled to 0-100 with a textual band."""
    similarity = cosine_similarity(a, b)
    score = max(0.0, min(100.0, similarity * 100))
    interpretation = next((text for floor, text in _BANDS if score >= floor), _LOWEST_BAND)
    return SimilarityResult(similarity=similarity, score=score, interpretation=interpretation)
