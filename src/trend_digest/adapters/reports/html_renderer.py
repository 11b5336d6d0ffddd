"""HTML report fragment."""

from typing import Any, Optional

from jinja2 import BaseLoader, Environment

from trend_digest.adapters.reports.formatting import (
    NO_LINK,
    STYLES,
    ReportStyle,
    author_of,
    link_host,
    truncate,
)
from trend_digest.core import AggregationResult, Record, ReportRenderer

REPORT_TEMPLATE = """\
<div class="report {{ source }}-report">
  <div class="header">
    <h1>{{ style.emoji }} {{ style.heading }}</h1>
    <p class="date">{{ date }} - {{ total_relevant }} relevant {{ style.item_noun }}</p>
    <p class="update-time">Updated: {{ updated }}</p>
  </div>
{% if not sections %}
  <div class="empty">⚠️ {{ style.empty_notice }}</div>
{% else %}
{% if used_fallback %}
  <div class="notice">⚠️ {{ style.source_label }} unavailable, showing sample data</div>
{% endif %}
{% for section in sections %}
  <div class="category">
    <h2>🏷️ {{ section.label }} <span class="count">({{ section.count }})</span></h2>
{% for item in section["items"] %}
    <div class="item">
      <div class="item-header">
        <span class="rank">{{ loop.index }}.</span>
        <h3 class="title">{{ item.title }}</h3>
      </div>
{% if item.body %}
      <p class="desc">{{ item.body }}</p>
{% endif %}
      <div class="item-meta">
        <span class="primary">{{ style.primary_emoji }} {{ item.primary }} {{ style.primary_label }}</span>
        <span class="secondary">{{ style.secondary_emoji }} {{ item.secondary }} {{ style.secondary_label }}</span>
        <span class="author">👤 {{ item.author }}</span>
        <span class="domain">🔗 {{ item.host or no_link }}</span>
      </div>
{% if item.host %}
      <a href="{{ item.url }}" target="_blank" class="read-link">📖 Open</a>
{% endif %}
    </div>
{% endfor %}
  </div>
{% endfor %}
  <div class="stats">
    <h3>📈 Statistics</h3>
    <div class="stats-grid">
{% for value, label in stats %}
      <div class="stat">
        <div class="stat-value">{{ value }}</div>
        <div class="stat-label">{{ label }}</div>
      </div>
{% endfor %}
    </div>
  </div>
{% endif %}
</div>"""

_env = Environment(loader=BaseLoader(), autoescape=True, trim_blocks=True, lstrip_blocks=True)


class HtmlReportRenderer(ReportRenderer):
    """Render results as an HTML ``div.report`` fragment."""

    def __init__(
        self,
        items_per_category: int = 5,
        title_limit: int = 80,
        style: Optional[ReportStyle] = None,
    ) -> None:
        self.items_per_category = items_per_category
        self.title_limit = title_limit
        self.style = style
        self.template = _env.from_string(REPORT_TEMPLATE)

    def render(self, result: AggregationResult) -> str:
        style = self.style or STYLES[result.source]

        sections: list[dict[str, Any]] = []
        if result.total_relevant > 0:
            sections = [
                {
                    "label": label,
                    "count": len(records),
                    "items": [
                        self._item_context(record, style)
                        for record in records[: self.items_per_category]
                    ],
                }
                for label, records in result.categorized.items()
            ]

        return self.template.render(
            source=result.source.value,
            style=style,
            date=result.generated_at.strftime("%Y-%m-%d"),
            updated=result.generated_at.strftime("%Y-%m-%d %H:%M UTC"),
            total_relevant=result.total_relevant,
            used_fallback=result.used_fallback,
            sections=sections,
            no_link=NO_LINK,
            stats=[
                (result.total_fetched, "Total fetched"),
                (result.total_relevant, "Relevant"),
                (result.category_count, "Categories"),
                (style.source_label, "Source"),
            ],
        )

    def _item_context(self, record: Record, style: ReportStyle) -> dict[str, Any]:
        """Display values for one record. Escaping is left to the template."""
        return {
            "title": truncate(record.title, self.title_limit),
            "body": truncate(record.body, 100) if style.show_body else "",
            "primary": record.engagement_primary,
            "secondary": record.engagement_secondary,
            "author": author_of(record),
            "host": link_host(record.url),
            "url": record.url,
        }
