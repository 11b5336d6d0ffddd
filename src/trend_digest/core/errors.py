"""Domain errors."""


class SourceError(Exception):
    """Raised when a source cannot produce a batch at all."""


class AggregationError(Exception):
    """Raised when a pipeline run fails."""

    def __init__(self, source: str, cause: Exception) -> None:
        super().__init__(f"Aggregation failed for {source}: {cause}")
        self.source = source
        self.cause = cause
