"""Chat-message text report."""

from typing import Optional

from trend_digest.adapters.reports.formatting import (
    STYLES,
    ReportStyle,
    author_of,
    link_host,
    truncate,
)
from trend_digest.core import AggregationResult, Record, ReportRenderer


class TextReportRenderer(ReportRenderer):
    """Render results as markdown-flavoured chat message text."""

    def __init__(
        self,
        items_per_category: int = 3,
        title_limit: int = 60,
        style: Optional[ReportStyle] = None,
    ) -> None:
        self.items_per_category = items_per_category
        self.title_limit = title_limit
        self.style = style

    def render(self, result: AggregationResult) -> str:
        style = self.style or STYLES[result.source]
        date_str = result.generated_at.strftime("%Y-%m-%d")

        lines = [
            f"{style.emoji} {style.heading} ({date_str})",
            f"{result.total_relevant} relevant {style.item_noun}",
            "",
        ]

        if result.total_relevant == 0:
            lines.append(f"⚠️ {style.empty_notice}")
            return "\n".join(lines) + "\n"

        if result.used_fallback:
            lines.extend([f"⚠️ {style.source_label} unavailable, showing sample data", ""])

        for label, records in result.categorized.items():
            lines.append(f"🏷️ {label} ({len(records)})")
            for index, record in enumerate(records[: self.items_per_category], 1):
                lines.extend(self._format_record(index, record, style))
            lines.append("")

        lines.extend([
            "📈 Statistics",
            f"• Total fetched: {result.total_fetched}",
            f"• Relevant: {result.total_relevant}",
            f"• Categories: {result.category_count}",
            f"• Source: {style.source_label}",
        ])

        return "\n".join(lines) + "\n"

    def _format_record(self, index: int, record: Record, style: ReportStyle) -> list[str]:
        """Format single record."""
        lines = [f"{index}. {truncate(record.title, self.title_limit)}"]

        if style.show_body and record.body:
            lines.append(f"   {truncate(record.body, self.title_limit)}")

        lines.append(
            f"   {style.primary_emoji} {record.engagement_primary} {style.primary_label}"
            f"   {style.secondary_emoji} {record.engagement_secondary} {style.secondary_label}"
            f"   👤 {author_of(record)}"
        )

        host = link_host(record.url)
        if host:
            lines.append(f"   🔗 {host}")
            lines.append(f"   📖 [Open]({record.url})")

        lines.append("")
        return lines
