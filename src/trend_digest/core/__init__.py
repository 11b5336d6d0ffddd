"""Core domain layer."""

from trend_digest.core.cache import CacheEntry, ResultCache
from trend_digest.core.entities import (
    AggregationResult,
    CacheLookup,
    CacheState,
    Record,
    SourceBatch,
    SourceKind,
)
from trend_digest.core.errors import AggregationError, SourceError
from trend_digest.core.interfaces import RecordSource, ReportRenderer
from trend_digest.core.rules import (
    OTHER_LABEL,
    Categorizer,
    CategoryRule,
    RelevanceFilter,
    rank,
)

__all__ = [
    "Record",
    "SourceKind",
    "SourceBatch",
    "AggregationResult",
    "CacheState",
    "CacheLookup",
    "CacheEntry",
    "ResultCache",
    "SourceError",
    "AggregationError",
    "RecordSource",
    "ReportRenderer",
    "RelevanceFilter",
    "Categorizer",
    "CategoryRule",
    "OTHER_LABEL",
    "rank",
]
