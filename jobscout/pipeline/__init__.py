"""Search passes: concurrent scraping, dedup and expiry tracking."""

from .aggregator import Aggregator
from .models import AggregationResult, CompanyRunStats, PipelineRunResult
from .runner import SearchPipeline

__all__ = [
    "Aggregator",
    "AggregationResult",
    "CompanyRunStats",
    "PipelineRunResult",
    "SearchPipeline",
]
