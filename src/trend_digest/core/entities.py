"""Core domain entities."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping, Optional


class SourceKind(str, Enum):
    """Content source identifier."""

    HACKERNEWS = "hackernews"
    GITHUB = "github"


@dataclass(frozen=True)
class Record:
    """Source-agnostic item shape used throughout the pipeline."""

    id: str
    title: Optional[str]
    url: Optional[str] = None
    body: Optional[str] = None
    engagement_primary: int = 0
    engagement_secondary: int = 0
    author: Optional[str] = None
    tags: tuple[str, ...] = ()
    source_created_at: Optional[datetime] = None
    metadata: Mapping[str, str] = field(default_factory=dict, compare=False)
    # Name used for keyword matching when the display title carries extra parts
    match_title: Optional[str] = field(default=None, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "metadata", MappingProxyType(dict(self.metadata)))
        if self.engagement_primary < 0:
            raise ValueError("Primary engagement cannot be negative")
        if self.engagement_secondary < 0:
            raise ValueError("Secondary engagement cannot be negative")

    @property
    def engagement(self) -> int:
        """Combined popularity signal used for ranking."""
        return self.engagement_primary + self.engagement_secondary

    def searchable_text(self, include_tags: bool = False) -> str:
        """Lower-cased text used for keyword matching."""
        parts = [self.match_title or self.title or "", self.body or ""]
        if include_tags:
            parts.extend(self.tags)
        return " ".join(parts).lower()

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "url": self.url,
            "body": self.body,
            "engagement_primary": self.engagement_primary,
            "engagement_secondary": self.engagement_secondary,
            "author": self.author,
            "tags": list(self.tags),
            "source_created_at": self.source_created_at.isoformat() if self.source_created_at else None,
            "metadata": dict(self.metadata),
        }


@dataclass(frozen=True)
class SourceBatch:
    """Normalized records returned by one source fetch."""

    records: tuple[Record, ...]
    fetched_count: int
    used_fallback: bool = False


@dataclass(frozen=True)
class AggregationResult:
    """Output of one pipeline run. Superseded by the next run, never mutated."""

    source: SourceKind
    total_fetched: int
    total_relevant: int
    categorized: Mapping[str, tuple[Record, ...]]
    ranked: tuple[Record, ...]
    generated_at: datetime
    used_fallback: bool = False

    def __post_init__(self) -> None:
        # Buckets are read-only
        frozen = {label: tuple(records) for label, records in self.categorized.items()}
        object.__setattr__(self, "categorized", MappingProxyType(frozen))

    @property
    def category_count(self) -> int:
        return len(self.categorized)

    @property
    def category_labels(self) -> list[str]:
        return list(self.categorized.keys())

    def summary(self) -> dict[str, Any]:
        """Counts and category labels, without records."""
        return {
            "total_fetched": self.total_fetched,
            "total_relevant": self.total_relevant,
            "categories": self.category_count,
            "category_labels": self.category_labels,
            "generated_at": self.generated_at.isoformat(),
            "used_fallback": self.used_fallback,
        }

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"source": self.source.value}
        data.update(self.summary())
        data["categorized"] = {
            label: [record.to_dict() for record in records]
            for label, records in self.categorized.items()
        }
        data["ranked"] = [record.to_dict() for record in self.ranked]
        return data


class CacheState(str, Enum):
    """Lifecycle state of a per-source cache entry."""

    EMPTY = "empty"
    FRESH = "fresh"
    STALE = "stale"


@dataclass(frozen=True)
class CacheLookup:
    """Aggregation result plus cache metadata."""

    result: AggregationResult
    cached: bool
    age_seconds: int
