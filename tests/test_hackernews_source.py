"""Tests for the Hacker News source."""

from typing import Optional

import httpx
import pytest

from trend_digest.adapters.sources import HackerNewsSource
from trend_digest.core import SourceError, SourceKind

BASE_URL = "https://hn.test/v0"


def make_source(items: dict, top_ids: list, requested: Optional[list] = None) -> HackerNewsSource:
    """Source backed by an in-memory API.

    ``items`` maps id to payload; an ``int`` payload is returned as that HTTP status.
    """

    def handler(request: httpx.Request) -> httpx.Response:
        path = request.url.path
        if requested is not None:
            requested.append(path)
        if path == "/v0/topstories.json":
            return httpx.Response(200, json=top_ids)

        item_id = int(path.rsplit("/", 1)[-1].removesuffix(".json"))
        payload = items.get(item_id)
        if isinstance(payload, int):
            return httpx.Response(payload)
        if payload is None:
            return httpx.Response(200, content=b"null")
        return httpx.Response(200, json=payload)

    return HackerNewsSource(base_url=BASE_URL, transport=httpx.MockTransport(handler))


def story(item_id: int, **fields) -> dict:
    data = {
        "id": item_id,
        "type": "story",
        "title": f"Story {item_id}",
        "url": f"https://example.com/{item_id}",
        "score": 10,
        "descendants": 2,
        "by": "alice",
        "time": 1700000000,
    }
    data.update(fields)
    return data


@pytest.mark.asyncio
async def test_fetch_batch_normalizes_stories() -> None:
    """Test mapping of raw fields to records."""
    source = make_source({1: story(1, score=120, descendants=45, text="Body text")}, [1])

    batch = await source.fetch_batch(limit=10)

    assert source.kind == SourceKind.HACKERNEWS
    assert batch.fetched_count == 1
    assert not batch.used_fallback
    record = batch.records[0]
    assert record.id == "1"
    assert record.title == "Story 1"
    assert record.body == "Body text"
    assert record.url == "https://example.com/1"
    assert record.engagement_primary == 120
    assert record.engagement_secondary == 45
    assert record.author == "alice"
    assert record.tags == ()
    assert record.source_created_at is not None
    assert record.source_created_at.year == 2023


@pytest.mark.asyncio
async def test_fetch_batch_skips_bad_items() -> None:
    """Deleted, dead, failed, empty and untitled items are skipped, not fatal."""
    items = {
        1: story(1),
        2: story(2, deleted=True),
        3: 500,
        4: None,
        5: story(5, title=None),
        6: story(6, dead=True),
    }
    source = make_source(items, [1, 2, 3, 4, 5, 6])

    batch = await source.fetch_batch(limit=10)

    assert [r.id for r in batch.records] == ["1"]
    # Retrieved payloads count even when normalization drops them
    assert batch.fetched_count == 4


@pytest.mark.asyncio
async def test_deleted_and_dead_items_are_logged(capsys) -> None:
    source = make_source({2: story(2, deleted=True), 6: story(6, dead=True)}, [2, 6])

    batch = await source.fetch_batch(limit=10)

    out = capsys.readouterr().out
    assert batch.records == ()
    assert "Story 2: deleted/dead" in out
    assert "Story 6: deleted/dead" in out


@pytest.mark.asyncio
async def test_fetch_batch_respects_limit() -> None:
    """Only the first ``limit`` ids are fetched, in listing order."""
    requested: list[str] = []
    items = {i: story(i) for i in range(1, 6)}
    source = make_source(items, [5, 4, 3, 2, 1], requested)

    batch = await source.fetch_batch(limit=2)

    assert [r.id for r in batch.records] == ["5", "4"]
    assert requested == ["/v0/topstories.json", "/v0/item/5.json", "/v0/item/4.json"]


@pytest.mark.asyncio
async def test_missing_optional_fields() -> None:
    """Stories without url, author or counts still normalize."""
    raw = {"id": 7, "title": "Ask HN: Anything?", "type": "story"}
    source = make_source({7: raw}, [7])

    batch = await source.fetch_batch(limit=1)

    record = batch.records[0]
    assert record.url is None
    assert record.author is None
    assert record.engagement == 0


@pytest.mark.asyncio
async def test_listing_failure_raises() -> None:
    """A failed listing call fails the whole batch."""

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(503)

    source = HackerNewsSource(base_url=BASE_URL, transport=httpx.MockTransport(handler))

    with pytest.raises(SourceError, match="HTTP 503"):
        await source.fetch_batch(limit=5)


@pytest.mark.asyncio
async def test_listing_network_error_raises() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    source = HackerNewsSource(base_url=BASE_URL, transport=httpx.MockTransport(handler))

    with pytest.raises(SourceError, match="connection refused"):
        await source.fetch_batch(limit=5)


@pytest.mark.asyncio
async def test_item_network_error_is_skipped() -> None:
    """A transport error on one detail request drops only that item."""

    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/v0/topstories.json":
            return httpx.Response(200, json=[1, 2])
        if request.url.path == "/v0/item/1.json":
            raise httpx.ReadTimeout("timed out", request=request)
        return httpx.Response(200, json=story(2))

    source = HackerNewsSource(base_url=BASE_URL, transport=httpx.MockTransport(handler))

    batch = await source.fetch_batch(limit=5)

    assert [r.id for r in batch.records] == ["2"]
    assert batch.fetched_count == 1
