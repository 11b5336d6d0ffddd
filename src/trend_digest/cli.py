"""CLI entry point for trend digest."""

import asyncio
import json
from pathlib import Path
from typing import Optional

import typer

from trend_digest.adapters.reports import HtmlReportRenderer, TextReportRenderer
from trend_digest.adapters.sources import GitHubSource, HackerNewsSource, RequestThrottle
from trend_digest.config import Settings, get_settings
from trend_digest.core import Categorizer, RelevanceFilter, ResultCache, SourceKind
from trend_digest.use_cases import AggregationService, DigestService

cli = typer.Typer(help="Hacker News and GitHub trend digests.", no_args_is_help=True)

ConfigOption = typer.Option(Path("config.yaml"), "--config", "-c", help="Path to YAML config")


def build_service(settings: Settings) -> DigestService:
    """Wire sources, rules, cache and renderers from settings."""
    hn = settings.hackernews
    gh = settings.github

    hn_pipeline = AggregationService(
        source=HackerNewsSource(base_url=hn.base_url),
        relevance_filter=RelevanceFilter(
            keywords=tuple(hn.keywords),
            min_primary=hn.min_score,
            min_secondary=hn.min_comments,
            require_url=True,
        ),
        categorizer=Categorizer.from_config(hn.categories),
        batch_limit=hn.batch_limit,
        display_cap=settings.reports.display_cap,
    )

    gh_pipeline = AggregationService(
        source=GitHubSource(
            token=settings.github_token,
            languages=gh.languages,
            since=gh.since,
            per_query_limit=gh.per_query_limit,
            min_query_stars=gh.min_query_stars,
            api_base=gh.api_base,
            throttle=RequestThrottle(interval=gh.request_delay),
        ),
        relevance_filter=RelevanceFilter(
            keywords=tuple(gh.keywords),
            min_primary=gh.min_stars,
            require_body=True,
        ),
        categorizer=Categorizer.from_config(gh.categories),
        batch_limit=settings.github_batch_limit,
        display_cap=settings.reports.display_cap,
    )

    return DigestService(
        pipelines={SourceKind.HACKERNEWS: hn_pipeline, SourceKind.GITHUB: gh_pipeline},
        cache=ResultCache(ttl=settings.cache_ttl),
        text_renderer=TextReportRenderer(
            items_per_category=settings.reports.text_items_per_category,
            title_limit=settings.reports.text_title_limit,
        ),
        html_renderer=HtmlReportRenderer(
            items_per_category=settings.reports.html_items_per_category,
            title_limit=settings.reports.html_title_limit,
        ),
    )


def _write_output(content: str, output: Optional[Path]) -> None:
    if output is None:
        typer.echo(content)
        return
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(content, encoding="utf-8")
    print(f"✓ Report saved to {output}")


@cli.command()
def report(
    source: SourceKind = typer.Argument(..., help="Source to report on"),
    format: str = typer.Option("text", "--format", "-f", help="text or html"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write report to file"),
    config: Path = ConfigOption,
) -> None:
    """Render a report for one source."""
    if format not in ("text", "html"):
        raise typer.BadParameter("format must be 'text' or 'html'", param_hint="--format")

    service = build_service(get_settings(config))
    render = service.render_text if format == "text" else service.render_html

    try:
        content = asyncio.run(render(source))
    except Exception as e:
        print(f"❌ Report failed: {e}")
        raise typer.Exit(code=1)

    _write_output(content, output)


@cli.command()
def digest(
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write digest to file"),
    config: Path = ConfigOption,
) -> None:
    """Combined text digest of all sources."""
    service = build_service(get_settings(config))

    try:
        content = asyncio.run(service.render_combined_text())
    except Exception as e:
        print(f"❌ Digest failed: {e}")
        raise typer.Exit(code=1)

    _write_output(content, output)


@cli.command()
def summary(config: Path = ConfigOption) -> None:
    """Print combined per-source counts as JSON."""
    service = build_service(get_settings(config))
    payload = asyncio.run(service.combined_payload())
    typer.echo(json.dumps(payload, indent=2, ensure_ascii=False))
    if not payload["success"]:
        raise typer.Exit(code=1)


@cli.command()
def refresh(
    source: SourceKind = typer.Argument(..., help="Source to refresh"),
    config: Path = ConfigOption,
) -> None:
    """Force a new aggregation run and print its counts as JSON."""
    service = build_service(get_settings(config))
    payload = asyncio.run(service.refresh_payload(source))
    typer.echo(json.dumps(payload, indent=2, ensure_ascii=False))
    if not payload["success"]:
        raise typer.Exit(code=1)


def app() -> None:
    """CLI entry point."""
    cli()


if __name__ == "__main__":
    app()
