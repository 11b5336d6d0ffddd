"""Hacker News top stories source."""

from datetime import datetime, timezone
from typing import Any, Optional

import httpx

from trend_digest.core import Record, RecordSource, SourceBatch, SourceError, SourceKind


class HackerNewsSource(RecordSource):
    """Fetch top stories: list identifiers, then each item one at a time."""

    kind = SourceKind.HACKERNEWS
    emoji = "🤖"
    name = "Hacker News"

    def __init__(
        self,
        base_url: str = "https://hacker-news.firebaseio.com/v0",
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.transport = transport

    async def fetch_batch(self, limit: int) -> SourceBatch:
        """Fetch up to ``limit`` top stories.

        Raises:
            SourceError: If the top stories listing cannot be retrieved
        """
        records: list[Record] = []
        fetched = 0

        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            story_ids = await self._fetch_top_ids(client, limit)
            print(f"  └─ Top stories: {len(story_ids)} ids")

            # One request at a time
            for story_id in story_ids:
                raw = await self._fetch_item(client, story_id)
                if raw is None:
                    continue
                fetched += 1

                record = self._create_record(raw)
                if record is not None:
                    records.append(record)

        print(f"  └─ Retrieved {fetched} stories, {len(records)} usable")
        return SourceBatch(records=tuple(records), fetched_count=fetched)

    async def _fetch_top_ids(self, client: httpx.AsyncClient, limit: int) -> list[Any]:
        """Fetch the ranked identifier listing."""
        try:
            response = await client.get(f"{self.base_url}/topstories.json")
        except httpx.HTTPError as e:
            raise SourceError(f"Failed to get top stories: {e}") from e

        if response.status_code != 200:
            raise SourceError(f"Failed to get top stories: HTTP {response.status_code}")

        try:
            story_ids = response.json()
        except ValueError as e:
            raise SourceError(f"Invalid top stories payload: {e}") from e

        if not isinstance(story_ids, list):
            raise SourceError("Invalid top stories payload: expected a list")

        return story_ids[:limit]

    async def _fetch_item(self, client: httpx.AsyncClient, story_id: Any) -> Optional[dict]:
        """Fetch one item's detail. Returns None on any failure."""
        try:
            response = await client.get(f"{self.base_url}/item/{story_id}.json")
            if response.status_code != 200:
                print(f"      ⚠️  Story {story_id}: HTTP {response.status_code}")
                return None

            data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            print(f"      ⚠️  Failed to get story {story_id}: {e}")
            return None

        if not isinstance(data, dict):
            print(f"      ⚠️  Story {story_id}: empty payload")
            return None

        return data

    def _create_record(self, story: dict) -> Optional[Record]:
        """Normalize a story payload. Deleted, dead and untitled stories are dropped."""
        if story.get("deleted") or story.get("dead"):
            print(f"      ⚠️  Story {story.get('id', '?')}: deleted/dead")
            return None

        if not story.get("title"):
            print(f"      ⚠️  Story {story.get('id', '?')}: missing title")
            return None

        try:
            created_at = None
            if story.get("time") is not None:
                created_at = datetime.fromtimestamp(int(story["time"]), tz=timezone.utc)

            return Record(
                id=str(story["id"]),
                title=story["title"],
                url=story.get("url") or None,
                body=story.get("text") or None,
                engagement_primary=int(story.get("score") or 0),
                engagement_secondary=int(story.get("descendants") or 0),
                author=story.get("by") or None,
                source_created_at=created_at,
                metadata={"type": str(story.get("type", ""))},
            )
        except (KeyError, TypeError, ValueError) as e:
            print(f"      ⚠️  Could not normalize story {story.get('id', '?')}: {e}")
            return None
