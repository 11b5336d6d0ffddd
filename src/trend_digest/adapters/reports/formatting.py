"""Shared formatting helpers and per-source report styles."""

from dataclasses import dataclass
from typing import Optional
from urllib.parse import urlsplit

from trend_digest.core import Record, SourceKind

AUTHOR_PLACEHOLDER = "anonymous"
NO_LINK = "no link"


@dataclass(frozen=True)
class ReportStyle:
    """Source-specific wording of a report."""

    heading: str
    emoji: str
    item_noun: str
    primary_label: str
    primary_emoji: str
    secondary_label: str
    secondary_emoji: str
    source_label: str
    empty_notice: str
    show_body: bool = False


STYLES: dict[SourceKind, ReportStyle] = {
    SourceKind.HACKERNEWS: ReportStyle(
        heading="Hacker News Digest",
        emoji="🤖",
        item_noun="stories",
        primary_label="points",
        primary_emoji="👍",
        secondary_label="comments",
        secondary_emoji="💬",
        source_label="Hacker News API",
        empty_notice="No content collected today",
    ),
    SourceKind.GITHUB: ReportStyle(
        heading="GitHub Trending Report",
        emoji="🐙",
        item_noun="repositories",
        primary_label="stars",
        primary_emoji="⭐",
        secondary_label="forks",
        secondary_emoji="🍴",
        source_label="GitHub API",
        empty_notice="No trending repositories collected today",
        show_body=True,
    ),
}


def truncate(text: Optional[str], limit: int) -> str:
    """Hard cut at ``limit`` characters with an ellipsis."""
    text = text or ""
    if len(text) > limit:
        return text[:limit] + "..."
    return text


def link_host(url: Optional[str]) -> Optional[str]:
    """Host part of url, or None if it is missing or cannot be parsed."""
    if not url:
        return None
    try:
        host = urlsplit(url).hostname
    except ValueError:
        return None
    return host or None


def author_of(record: Record) -> str:
    return record.author or AUTHOR_PLACEHOLDER
