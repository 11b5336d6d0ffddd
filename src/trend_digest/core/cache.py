"""In-memory TTL cache holding the latest aggregation result per source."""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Awaitable, Callable, Optional

from trend_digest.core.entities import (
    AggregationResult,
    CacheLookup,
    CacheState,
    SourceKind,
)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class CacheEntry:
    """Live aggregation result for one source."""

    result: AggregationResult

    @property
    def produced_at(self) -> datetime:
        return self.result.generated_at


class ResultCache:
    """Hold at most one result per source with a fixed freshness window.

    Entries are replaced as whole values and never updated field by field,
    so concurrent readers see either the previous or the new result.
    Concurrent misses are not coalesced: each may trigger its own refresh.
    """

    def __init__(
        self,
        ttl: timedelta = timedelta(minutes=30),
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.ttl = ttl
        self._clock = clock
        self._entries: dict[SourceKind, CacheEntry] = {}

    def get(self, source: SourceKind) -> Optional[CacheEntry]:
        """Return current entry regardless of freshness."""
        return self._entries.get(source)

    def put(self, source: SourceKind, result: AggregationResult) -> None:
        """Replace the entry for source."""
        self._entries[source] = CacheEntry(result=result)

    def age_seconds(self, source: SourceKind) -> Optional[int]:
        """Whole seconds since the held result was produced."""
        entry = self.get(source)
        if entry is None:
            return None
        elapsed = self._clock() - entry.produced_at
        return max(int(elapsed.total_seconds()), 0)

    def state(self, source: SourceKind) -> CacheState:
        """Return EMPTY, FRESH or STALE for source."""
        entry = self.get(source)
        if entry is None:
            return CacheState.EMPTY
        if self._clock() - entry.produced_at >= self.ttl:
            return CacheState.STALE
        return CacheState.FRESH

    async def get_or_refresh(
        self,
        source: SourceKind,
        refresh: Callable[[], Awaitable[AggregationResult]],
    ) -> CacheLookup:
        """Serve a fresh entry or run ``refresh`` and store its result.

        A failing refresh propagates to this caller only and leaves the
        existing entry untouched.
        """
        entry = self.get(source)
        if entry is not None and self.state(source) is CacheState.FRESH:
            age = self.age_seconds(source) or 0
            print(f"  └─ 💾 {source.value}: cached result ({age}s old)")
            return CacheLookup(result=entry.result, cached=True, age_seconds=age)

        print(f"  └─ 🔄 {source.value}: cache {self.state(source).value}, refreshing")
        result = await refresh()
        self.put(source, result)
        return CacheLookup(result=result, cached=False, age_seconds=0)

    def stats(self) -> dict[str, dict]:
        """Per-source cache status."""
        stats: dict[str, dict] = {}
        for source in SourceKind:
            entry = self.get(source)
            stats[source.value] = {
                "has_cache": entry is not None,
                "state": self.state(source).value,
                "last_update": entry.produced_at.isoformat() if entry else None,
                "age_seconds": self.age_seconds(source),
            }
        return stats
