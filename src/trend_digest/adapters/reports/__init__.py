"""Report renderers."""

from trend_digest.adapters.reports.formatting import STYLES, ReportStyle, link_host, truncate
from trend_digest.adapters.reports.html_renderer import HtmlReportRenderer
from trend_digest.adapters.reports.text_renderer import TextReportRenderer

__all__ = [
    "HtmlReportRenderer",
    "TextReportRenderer",
    "ReportStyle",
    "STYLES",
    "link_host",
    "truncate",
]
