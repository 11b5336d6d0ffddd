"""Relevance filtering, categorization and ranking rules."""

from dataclasses import dataclass
from typing import Iterable, Optional

from trend_digest.core.entities import Record

OTHER_LABEL = "Other"


def contains_keyword(text: str, keywords: Iterable[str]) -> bool:
    """
    Check if any keyword occurs in text.

    Args:
        text: Text to search (matched case-insensitively)
        keywords: Keywords to look for as plain substrings

    Returns:
        True if at least one keyword is found
    """
    text = text.lower()
    return any(keyword.lower() in text for keyword in keywords if keyword)


@dataclass(frozen=True)
class RelevanceFilter:
    """Keyword-or-engagement relevance predicate for one source."""

    keywords: tuple[str, ...] = ()
    min_primary: Optional[int] = None
    min_secondary: Optional[int] = None
    require_url: bool = False
    require_body: bool = False

    def is_relevant(self, record: Record) -> bool:
        """Return True if record has its display fields and passes a signal."""
        if not record.title:
            return False
        if self.require_url and not record.url:
            return False
        if self.require_body and not record.body:
            return False

        if contains_keyword(record.searchable_text(include_tags=True), self.keywords):
            return True

        return self._has_engagement(record)

    def apply(self, records: Iterable[Record]) -> list[Record]:
        """Keep relevant records, preserving order."""
        return [record for record in records if self.is_relevant(record)]

    def _has_engagement(self, record: Record) -> bool:
        # Thresholds are exclusive
        if self.min_primary is not None and record.engagement_primary > self.min_primary:
            return True
        if self.min_secondary is not None and record.engagement_secondary > self.min_secondary:
            return True
        return False


@dataclass(frozen=True)
class CategoryRule:
    """Label assigned when any of its keywords occurs in a record."""

    label: str
    keywords: tuple[str, ...]

    def matches(self, text: str) -> bool:
        return contains_keyword(text, self.keywords)


@dataclass(frozen=True)
class Categorizer:
    """First-match classification over an ordered list of rules."""

    rules: tuple[CategoryRule, ...]
    fallback: str = OTHER_LABEL

    def categorize(self, record: Record) -> str:
        """Return the label of the first matching rule, or the fallback."""
        text = record.searchable_text()
        for rule in self.rules:
            if rule.matches(text):
                return rule.label
        return self.fallback

    @property
    def labels(self) -> list[str]:
        return [rule.label for rule in self.rules] + [self.fallback]

    def bucket(self, records: Iterable[Record]) -> dict[str, list[Record]]:
        """Group records by label. Empty buckets are omitted, label order kept."""
        buckets: dict[str, list[Record]] = {label: [] for label in self.labels}
        for record in records:
            buckets[self.categorize(record)].append(record)
        return {label: items for label, items in buckets.items() if items}

    @classmethod
    def from_config(cls, categories: list[dict], fallback: str = OTHER_LABEL) -> "Categorizer":
        """Build from ``[{"label": ..., "keywords": [...]}, ...]`` entries."""
        rules = tuple(
            CategoryRule(label=entry["label"], keywords=tuple(entry.get("keywords", [])))
            for entry in categories
        )
        return cls(rules=rules, fallback=fallback)


def rank(records: Iterable[Record]) -> list[Record]:
    """Sort by combined engagement, highest first. Ties keep input order."""
    return sorted(records, key=lambda record: record.engagement, reverse=True)
