"""Source adapters for fetching records."""

from trend_digest.adapters.sources.github_source import GitHubSource
from trend_digest.adapters.sources.hackernews_source import HackerNewsSource
from trend_digest.adapters.sources.throttle import RequestThrottle

__all__ = ["GitHubSource", "HackerNewsSource", "RequestThrottle"]
