"""Business logic use cases."""

from datetime import datetime
from typing import Any, Callable, Optional

from trend_digest.core import (
    AggregationError,
    AggregationResult,
    CacheLookup,
    Categorizer,
    RecordSource,
    RelevanceFilter,
    ReportRenderer,
    ResultCache,
    SourceKind,
    rank,
)
from trend_digest.core.cache import utc_now


class AggregationService:
    """Run fetch → filter → categorize → rank for one source."""

    def __init__(
        self,
        source: RecordSource,
        relevance_filter: RelevanceFilter,
        categorizer: Categorizer,
        batch_limit: int = 50,
        display_cap: int = 20,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.source = source
        self.relevance_filter = relevance_filter
        self.categorizer = categorizer
        self.batch_limit = batch_limit
        self.display_cap = display_cap
        self._clock = clock

    @property
    def kind(self) -> SourceKind:
        return self.source.kind

    async def run(self) -> AggregationResult:
        """Execute one pipeline run.

        Returns an empty-but-valid result when nothing passes the filter.

        Raises:
            AggregationError: If the source could not produce a batch
        """
        emoji = getattr(self.source, "emoji", "🔍")
        name = getattr(self.source, "name", self.source.__class__.__name__)
        print(f"\n{emoji} Aggregating: {name}")

        try:
            batch = await self.source.fetch_batch(self.batch_limit)
        except Exception as e:
            print(f"  └─ ❌ Error: {e}")
            raise AggregationError(self.kind.value, e) from e

        relevant = self.relevance_filter.apply(batch.records)
        categorized = self.categorizer.bucket(relevant)
        ranked = rank(relevant)[: self.display_cap]

        print(f"  └─ Fetched: {batch.fetched_count}, relevant: {len(relevant)}, categories: {len(categorized)}")
        if batch.used_fallback:
            print("  └─ ⚠️  Result built from fallback data")

        return AggregationResult(
            source=self.kind,
            total_fetched=batch.fetched_count,
            total_relevant=len(relevant),
            categorized=categorized,
            ranked=tuple(ranked),
            generated_at=self._clock(),
            used_fallback=batch.used_fallback,
        )


class DigestService:
    """Serve cached or fresh results and reports for every source."""

    def __init__(
        self,
        pipelines: dict[SourceKind, AggregationService],
        cache: ResultCache,
        text_renderer: ReportRenderer,
        html_renderer: ReportRenderer,
    ) -> None:
        self.pipelines = pipelines
        self.cache = cache
        self.text_renderer = text_renderer
        self.html_renderer = html_renderer

    def _pipeline(self, source: SourceKind) -> AggregationService:
        try:
            return self.pipelines[source]
        except KeyError:
            raise ValueError(f"No pipeline configured for source: {source.value}") from None

    async def get_result(self, source: SourceKind) -> CacheLookup:
        """Return the cached result while fresh, otherwise run the pipeline."""
        pipeline = self._pipeline(source)
        return await self.cache.get_or_refresh(source, pipeline.run)

    async def trigger_refresh(self, source: SourceKind) -> AggregationResult:
        """Run the pipeline regardless of freshness and replace the cache entry."""
        result = await self._pipeline(source).run()
        self.cache.put(source, result)
        return result

    async def render_text(self, source: SourceKind) -> str:
        lookup = await self.get_result(source)
        return self.text_renderer.render(lookup.result)

    async def render_html(self, source: SourceKind) -> str:
        lookup = await self.get_result(source)
        return self.html_renderer.render(lookup.result)

    async def render_combined_text(self) -> str:
        """Both text reports under one heading."""
        reports = [await self.render_text(source) for source in self.pipelines]
        return "📊 Tech Content Digest\n\n" + "\n\n".join(reports)

    async def combined_summary(self) -> dict[str, Any]:
        """Merge per-source counts and category labels. No cross-source ranking."""
        summaries: dict[str, Any] = {}
        all_labels: list[str] = []
        total_items = 0

        for source in self.pipelines:
            result = (await self.get_result(source)).result
            summaries[source.value] = result.summary()
            all_labels.extend(result.category_labels)
            total_items += result.total_relevant

        summaries["combined"] = {
            "total_items": total_items,
            "items_by_source": {
                name: summary["total_relevant"] for name, summary in summaries.items()
            },
            "all_categories": all_labels,
            "generated_at": utc_now().isoformat(),
        }
        return summaries

    def cache_stats(self) -> dict[str, dict]:
        return self.cache.stats()

    # Request-path wrappers: always return a structured payload, never raise

    async def latest_payload(self, source: SourceKind) -> dict[str, Any]:
        try:
            lookup = await self.get_result(source)
        except Exception as e:
            return self._error_payload("Failed to get data", e, source)

        payload = lookup.result.to_dict()
        payload.update({"success": True, "cached": lookup.cached, "age_seconds": lookup.age_seconds})
        return payload

    async def refresh_payload(self, source: SourceKind) -> dict[str, Any]:
        try:
            result = await self.trigger_refresh(source)
        except Exception as e:
            return self._error_payload("Aggregation failed", e, source)

        return {"success": True, "source": source.value, "result": result.summary()}

    async def text_payload(self, source: SourceKind) -> dict[str, Any]:
        try:
            message = await self.render_text(source)
        except Exception as e:
            return self._error_payload("Failed to render message", e, source)

        return {
            "success": True,
            "source": source.value,
            "format": "text",
            "message": message,
            "length": len(message),
        }

    async def combined_payload(self) -> dict[str, Any]:
        try:
            data = await self.combined_summary()
        except Exception as e:
            return self._error_payload("Failed to get combined data", e)

        return {"success": True, "data": data}

    @staticmethod
    def _error_payload(
        error: str, exc: Exception, source: Optional[SourceKind] = None
    ) -> dict[str, Any]:
        print(f"❌ {error}: {exc}")
        payload: dict[str, Any] = {"success": False, "error": error, "message": str(exc)}
        if source is not None:
            payload["source"] = source.value
        return payload
