"""Tests for the GitHub source."""

from datetime import date
from typing import Optional

import httpx
import pytest

from trend_digest.adapters.sources import GitHubSource, RequestThrottle
from trend_digest.adapters.sources.github_source import FALLBACK_REPOSITORIES, window_start
from trend_digest.config import GitHubConfig
from trend_digest.core import Categorizer, RelevanceFilter, SourceKind


class SleepRecorder:
    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)


def repo(repo_id: int, language: str = "Python", **fields) -> dict:
    data = {
        "id": repo_id,
        "name": f"repo{repo_id}",
        "full_name": f"owner/repo{repo_id}",
        "description": f"Repository number {repo_id}",
        "html_url": f"https://github.com/owner/repo{repo_id}",
        "stargazers_count": 150,
        "forks_count": 12,
        "language": language,
        "owner": {"login": "owner"},
        "topics": ["cli"],
        "created_at": "2026-10-18T08:00:00Z",
        "updated_at": "2026-10-19T08:00:00Z",
    }
    data.update(fields)
    return data


def make_source(responses: dict, queries: Optional[list] = None, **kwargs) -> GitHubSource:
    """Source whose search endpoint answers per language.

    ``responses`` maps language to a list of repos or an HTTP status code.
    """

    def handler(request: httpx.Request) -> httpx.Response:
        query = request.url.params["q"]
        if queries is not None:
            queries.append(query)
        language = query.split("language:")[1].split()[0]
        answer = responses[language]
        if isinstance(answer, int):
            return httpx.Response(answer, json={"message": "API rate limit exceeded"})
        return httpx.Response(200, json={"total_count": len(answer), "items": answer})

    kwargs.setdefault("throttle", RequestThrottle(interval=1.0, sleep=SleepRecorder()))
    return GitHubSource(
        api_base="https://api.github.test",
        transport=httpx.MockTransport(handler),
        today=lambda: date(2026, 10, 19),
        **kwargs,
    )


def test_window_start() -> None:
    today = date(2026, 3, 31)
    assert window_start(today, "daily") == date(2026, 3, 30)
    assert window_start(today, "weekly") == date(2026, 3, 24)
    # Clamped to the last day of February
    assert window_start(today, "monthly") == date(2026, 2, 28)
    assert window_start(date(2026, 1, 15), "monthly") == date(2025, 12, 15)


def test_unknown_window_rejected() -> None:
    with pytest.raises(ValueError, match="since must be one of"):
        GitHubSource(since="yearly")


@pytest.mark.asyncio
async def test_fetch_batch_one_query_per_language() -> None:
    """Test query string, pacing and normalization."""
    queries: list[str] = []
    sleep = SleepRecorder()
    source = make_source(
        {"javascript": [repo(1, "JavaScript")], "python": [repo(2)], "java": [repo(3, "Java")]},
        queries,
        throttle=RequestThrottle(interval=1.0, sleep=sleep),
    )

    batch = await source.fetch_batch(limit=90)

    assert source.kind == SourceKind.GITHUB
    assert queries == [
        "stars:>100 language:javascript created:>2026-10-18",
        "stars:>100 language:python created:>2026-10-18",
        "stars:>100 language:java created:>2026-10-18",
    ]
    # Sequential queries with a delay between each pair
    assert sleep.delays == [1.0, 1.0]
    assert batch.fetched_count == 3
    assert not batch.used_fallback

    record = batch.records[1]
    assert record.id == "2"
    assert record.title == "owner/repo2"
    assert record.body == "Repository number 2"
    assert record.url == "https://github.com/owner/repo2"
    assert record.engagement_primary == 150
    assert record.engagement_secondary == 12
    assert record.author == "owner"
    assert record.tags == ("cli",)
    assert record.metadata["language"] == "Python"
    assert record.source_created_at is not None


@pytest.mark.asyncio
async def test_failed_language_is_skipped() -> None:
    """One failing query does not fail the batch or trigger the fallback."""
    source = make_source({"javascript": 403, "python": [repo(2)], "java": [repo(3)]})

    batch = await source.fetch_batch(limit=90)

    assert [r.id for r in batch.records] == ["2", "3"]
    assert not batch.used_fallback


@pytest.mark.asyncio
async def test_all_queries_failing_uses_fallback() -> None:
    """Rate limiting on every query returns the built-in sample."""
    source = make_source({"javascript": 403, "python": 429, "java": 500})

    batch = await source.fetch_batch(limit=90)

    assert batch.used_fallback
    assert batch.fetched_count == len(FALLBACK_REPOSITORIES)
    assert [r.title for r in batch.records] == [
        "facebook/react",
        "vuejs/vue",
        "tensorflow/tensorflow",
    ]


@pytest.mark.asyncio
async def test_network_errors_use_fallback() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("no route to host", request=request)

    source = GitHubSource(
        languages=["python"],
        transport=httpx.MockTransport(handler),
        throttle=RequestThrottle(interval=0),
    )

    batch = await source.fetch_batch(limit=30)

    assert batch.used_fallback
    assert len(batch.records) == 3


@pytest.mark.asyncio
async def test_empty_results_are_not_a_failure() -> None:
    """Successful queries with no matches give an empty, non-fallback batch."""
    source = make_source({"javascript": [], "python": [], "java": []})

    batch = await source.fetch_batch(limit=90)

    assert batch.records == ()
    assert batch.fetched_count == 0
    assert not batch.used_fallback


@pytest.mark.asyncio
async def test_duplicates_and_malformed_items_dropped() -> None:
    """Records are unique by id; broken items are skipped individually."""
    broken = {"name": "no-id"}
    source = make_source({"javascript": [repo(1), broken], "python": [repo(1), repo(2)], "java": []})

    batch = await source.fetch_batch(limit=90)

    assert [r.id for r in batch.records] == ["1", "2"]


@pytest.mark.asyncio
async def test_batch_truncated_to_limit() -> None:
    source = make_source({"javascript": [repo(1), repo(2)], "python": [repo(3)], "java": [repo(4)]})

    batch = await source.fetch_batch(limit=2)

    assert [r.id for r in batch.records] == ["1", "2"]


@pytest.mark.asyncio
async def test_authorization_header_with_token() -> None:
    seen_headers: list[httpx.Headers] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen_headers.append(request.headers)
        return httpx.Response(200, json={"total_count": 0, "items": []})

    source = GitHubSource(
        token="secret",
        languages=["go"],
        transport=httpx.MockTransport(handler),
        throttle=RequestThrottle(interval=0),
    )

    await source.fetch_batch(limit=30)

    assert seen_headers[0]["Authorization"] == "Bearer secret"
    assert seen_headers[0]["Accept"] == "application/vnd.github+json"


def test_default_limit() -> None:
    source = GitHubSource(languages=["go", "rust"], per_query_limit=10)
    assert source.default_limit == 20


@pytest.mark.asyncio
async def test_owner_login_not_used_for_matching() -> None:
    """Keywords match the repository name and description, not the owner."""
    config = GitHubConfig()
    heroicons = repo(
        7,
        name="heroicons",
        full_name="tailwindlabs/heroicons",
        description="Beautiful hand-crafted SVG icons",
        stargazers_count=120,
        owner={"login": "tailwindlabs"},
        topics=[],
    )
    source = make_source({"javascript": [heroicons], "python": [], "java": []})
    relevance_filter = RelevanceFilter(
        keywords=tuple(config.keywords),
        min_primary=config.min_stars,
        require_body=True,
    )
    categorizer = Categorizer.from_config(config.categories)

    batch = await source.fetch_batch(limit=90)
    record = batch.records[0]

    assert record.title == "tailwindlabs/heroicons"
    assert not relevance_filter.is_relevant(record)
    assert categorizer.categorize(record) == "Other"
