"""GitHub source for trending repositories by language."""

import calendar
from datetime import date, datetime, timedelta, timezone
from typing import Callable, Optional

import httpx

from trend_digest.adapters.sources.throttle import RequestThrottle
from trend_digest.core import Record, RecordSource, SourceBatch, SourceKind

RECENCY_WINDOWS = ("daily", "weekly", "monthly")

# Served when every search query fails
FALLBACK_REPOSITORIES: tuple[dict, ...] = (
    {
        "id": 1,
        "name": "react",
        "full_name": "facebook/react",
        "description": "A declarative, efficient, and flexible JavaScript library for building user interfaces.",
        "html_url": "https://github.com/facebook/react",
        "stargazers_count": 215000,
        "forks_count": 45000,
        "language": "JavaScript",
        "owner": {"login": "facebook"},
        "topics": ["react", "javascript", "frontend", "ui"],
    },
    {
        "id": 2,
        "name": "vue",
        "full_name": "vuejs/vue",
        "description": "Vue.js is a progressive, incrementally-adoptable JavaScript framework for building UI on the web.",
        "html_url": "https://github.com/vuejs/vue",
        "stargazers_count": 205000,
        "forks_count": 34000,
        "language": "JavaScript",
        "owner": {"login": "vuejs"},
        "topics": ["vue", "javascript", "frontend", "framework"],
    },
    {
        "id": 3,
        "name": "tensorflow",
        "full_name": "tensorflow/tensorflow",
        "description": "An Open Source Machine Learning Framework for Everyone",
        "html_url": "https://github.com/tensorflow/tensorflow",
        "stargazers_count": 180000,
        "forks_count": 89000,
        "language": "C++",
        "owner": {"login": "tensorflow"},
        "topics": ["tensorflow", "machine-learning", "deep-learning", "ai"],
    },
)


def window_start(today: date, since: str) -> date:
    """First day of the recency window ending today."""
    if since == "daily":
        return today - timedelta(days=1)
    if since == "weekly":
        return today - timedelta(days=7)
    if since == "monthly":
        year, month = (today.year, today.month - 1) if today.month > 1 else (today.year - 1, 12)
        day = min(today.day, calendar.monthrange(year, month)[1])
        return date(year, month, day)
    raise ValueError(f"Unknown recency window: {since!r}")


def _today_utc() -> date:
    return datetime.now(timezone.utc).date()


class GitHubSource(RecordSource):
    """Search recently created GitHub repositories, one query per language."""

    kind = SourceKind.GITHUB
    emoji = "🐙"
    name = "GitHub Trending"

    def __init__(
        self,
        token: Optional[str] = None,
        languages: Optional[list[str]] = None,
        since: str = "daily",
        per_query_limit: int = 30,
        min_query_stars: int = 100,
        api_base: str = "https://api.github.com",
        throttle: Optional[RequestThrottle] = None,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        today: Callable[[], date] = _today_utc,
    ) -> None:
        if since not in RECENCY_WINDOWS:
            raise ValueError(f"since must be one of {RECENCY_WINDOWS}, got {since!r}")
        self.token = token
        self.languages = languages if languages is not None else ["javascript", "python", "java"]
        self.since = since
        self.per_query_limit = per_query_limit
        self.min_query_stars = min_query_stars
        self.api_base = api_base.rstrip("/")
        self.throttle = throttle or RequestThrottle(interval=1.0)
        self.timeout = timeout
        self.transport = transport
        self._today = today

    @property
    def default_limit(self) -> int:
        return len(self.languages) * self.per_query_limit

    async def fetch_batch(self, limit: int) -> SourceBatch:
        """Run one search per language; fall back to sample data if all fail."""
        seen_ids: set[str] = set()
        records: list[Record] = []
        fetched = 0
        succeeded = 0

        search_since = window_start(self._today(), self.since)
        print(f"  └─ Window: created after {search_since.isoformat()} ({self.since})")
        print(f"  └─ Queries: {len(self.languages)} languages")

        self.throttle.reset()
        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            headers = self._get_headers()

            for language in self.languages:
                await self.throttle.wait()

                repos = await self._search_language(client, headers, language, search_since)
                if repos is None:
                    continue
                succeeded += 1
                fetched += len(repos)

                for repo in repos:
                    record = self._create_record(repo)
                    if record is not None and record.id not in seen_ids:
                        seen_ids.add(record.id)
                        records.append(record)

        if self.languages and succeeded == 0:
            return self.fallback_batch()

        print(f"  └─ Unique repositories: {len(records)}")
        return SourceBatch(records=tuple(records[:limit]), fetched_count=fetched)

    def fallback_batch(self) -> SourceBatch:
        """Built-in sample used when every search query fails."""
        print("  └─ ⚠️  All GitHub queries failed, using built-in sample data")
        records = [self._create_record(repo) for repo in FALLBACK_REPOSITORIES]
        usable = tuple(record for record in records if record is not None)
        return SourceBatch(records=usable, fetched_count=len(FALLBACK_REPOSITORIES), used_fallback=True)

    def build_query(self, language: str, since: date) -> str:
        return f"stars:>{self.min_query_stars} language:{language} created:>{since.isoformat()}"

    async def _search_language(
        self,
        client: httpx.AsyncClient,
        headers: dict[str, str],
        language: str,
        since: date,
    ) -> Optional[list[dict]]:
        """Execute one search query. Returns None if the query failed."""
        query = self.build_query(language, since)

        try:
            response = await client.get(
                f"{self.api_base}/search/repositories",
                headers=headers,
                params={
                    "q": query,
                    "sort": "stars",
                    "order": "desc",
                    "per_page": self.per_query_limit,
                },
            )
        except httpx.HTTPError as e:
            print(f"  └─ ⚠️  {language}: request failed: {e}")
            return None

        if response.status_code != 200:
            print(f"  └─ ⚠️  GitHub API error: {response.status_code} for {language}")
            if response.status_code in (403, 429):
                print("      Rate limit exceeded or authentication required")
            return None

        try:
            data = response.json()
        except ValueError as e:
            print(f"  └─ ⚠️  {language}: invalid JSON: {e}")
            return None

        if not isinstance(data, dict):
            print(f"  └─ ⚠️  {language}: unexpected payload")
            return None

        repos = [repo for repo in data.get("items") or [] if isinstance(repo, dict)]
        print(f"  └─ {language}: {len(repos)} repos (total: {data.get('total_count', 0)})")
        return repos

    def _create_record(self, repo: dict) -> Optional[Record]:
        """Normalize a search result item."""
        try:
            created_at = None
            created_at_str = repo.get("created_at")
            if created_at_str:
                created_at = datetime.fromisoformat(created_at_str.replace("Z", "+00:00"))

            owner = repo.get("owner") or {}

            return Record(
                id=str(repo["id"]),
                title=repo.get("full_name") or repo.get("name"),
                url=repo.get("html_url") or None,
                body=repo.get("description") or None,
                engagement_primary=int(repo.get("stargazers_count") or 0),
                engagement_secondary=int(repo.get("forks_count") or 0),
                author=owner.get("login") or None,
                match_title=repo.get("name") or None,
                tags=tuple(repo.get("topics") or ()),
                source_created_at=created_at,
                metadata={
                    "name": repo.get("name") or "",
                    "language": repo.get("language") or "",
                    "updated_at": repo.get("updated_at") or "",
                },
            )
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            print(f"      ⚠️  Could not normalize {repo.get('full_name', '?')}: {e}")
            return None

    def _get_headers(self) -> dict[str, str]:
        """Get headers for GitHub API requests."""
        headers = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
            "User-Agent": "trend-digest",
        }

        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"

        return headers
