"""Core interfaces for adapters."""

from abc import ABC, abstractmethod

from trend_digest.core.entities import AggregationResult, SourceBatch, SourceKind


class RecordSource(ABC):
    """Interface for fetching normalized records from one content provider."""

    kind: SourceKind
    name: str = ""
    emoji: str = "🔍"

    @abstractmethod
    async def fetch_batch(self, limit: int) -> SourceBatch:
        """Fetch up to ``limit`` records.

        Individual item failures are skipped, never raised.
        """
        pass


class ReportRenderer(ABC):
    """Interface for turning an aggregation result into a report."""

    @abstractmethod
    def render(self, result: AggregationResult) -> str:
        """Render result as a report string."""
        pass
