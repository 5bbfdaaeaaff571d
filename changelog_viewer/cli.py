"""
Command-line interface for the changelog viewer.

Uses Typer to load a changelog JSON from a URL or path, apply search, tag,
version and date filters, and print or write the resulting view. Supports
loading .env files and a YAML config.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import NoReturn

import typer
from dotenv import load_dotenv
from rich.console import Console

from .config import AppConfig, load_config
from .core.aggregates import collect_tags, collect_versions
from .core.dates import coerce_bound
from .core.lookup import entry_view, find_change
from .core.types import ChangelogDocument, DateRange
from .core.view_state import ChangelogView, FilterState, derive_view, toggle_expanded
from .errors import ChangelogError
from .fetch.loader import load_changelog
from .navigation import PAGE_CHANGE, PAGE_ENTRY, NavigationState, parse_link, share_link
from .output.console import render_change, render_changelog, render_entry
from .output.renderer import render_html, render_json, render_markdown
from .utils.logging import log_event, setup_logging

app = typer.Typer(add_completion=False, help="View, search and filter chlog changelog files.")
console = Console()
logger = logging.getLogger("changelog_viewer.cli")

OUTPUT_FORMATS = ("text", "html", "markdown", "json")


def _setup(config: Path | None, log_level: str | None, output: Path | None = None) -> AppConfig:
    load_dotenv()
    cfg = load_config(str(config) if config else None)
    if log_level:
        cfg.logging.level = log_level
    setup_logging(cfg.logging, output.parent if output else None)
    return cfg


def _load(source: str, cfg: AppConfig) -> ChangelogDocument:
    try:
        return load_changelog(source, cfg.fetch, check_dates=cfg.filter.check_dates)
    except ChangelogError as exc:
        _fail(exc)


def _fail(exc: ChangelogError) -> NoReturn:
    logger.error(exc.detail)
    console.print(f"[red]{exc.user_message}[/red]")
    raise typer.Exit(code=1)


def _filters(
    search: str,
    tags: list[str] | None,
    version: str,
    date_from: str | None,
    date_to: str | None,
) -> FilterState:
    state = FilterState(search_query=search, selected_version=version)
    for tag in tags or []:
        state = state.add_tag(tag)
    start = coerce_bound(date_from)
    end = coerce_bound(date_to)
    if date_from and start is None:
        console.print(f"[yellow]Ignoring unparsable --from date: {date_from}[/yellow]")
    if date_to and end is None:
        console.print(f"[yellow]Ignoring unparsable --to date: {date_to}[/yellow]")
    return state.with_date_range(DateRange(start=start, end=end))


def _emit(
    view: ChangelogView,
    cfg: AppConfig,
    output_format: str,
    output: Path | None,
) -> None:
    if output_format == "text":
        render_changelog(
            console,
            view,
            expand_all=cfg.filter.expand_unfiltered and not view.filters_active,
            commit_length=cfg.output.commit_length,
        )
        return

    if output is None:
        raise typer.BadParameter(f"--output is required for format {output_format!r}")
    output.parent.mkdir(parents=True, exist_ok=True)
    if output_format == "html":
        render_html(
            view,
            output,
            expand_all=cfg.filter.expand_unfiltered and not view.filters_active,
            commit_length=cfg.output.commit_length,
        )
    elif output_format == "markdown":
        render_markdown(view, output, commit_length=cfg.output.commit_length)
    else:
        render_json(view, output)
    console.print(f"Changelog written: {output}")


@app.command()
def show(
    source: str = typer.Argument(..., help="URL or path of the changelog JSON."),
    search: str = typer.Option("", "--search", "-s", help="Free-text search."),
    tag: list[str] | None = typer.Option(None, "--tag", "-t", help="Required tag (repeatable)."),
    version: str = typer.Option("", "--version", "-v", help="Only this version ('all' for every)."),
    date_from: str | None = typer.Option(None, "--from", help="Earliest entry date (ISO 8601)."),
    date_to: str | None = typer.Option(None, "--to", help="Latest entry date (ISO 8601)."),
    expand: list[str] | None = typer.Option(
        None, "--expand", "-e", help="Toggle a version open or closed (repeatable)."
    ),
    output_format: str | None = typer.Option(
        None, "--format", "-f", help="Output format: text, html, markdown or json."
    ),
    output: Path | None = typer.Option(None, "--output", "-o", help="Output file for non-text formats."),
    config: Path | None = typer.Option(None, "--config", "-c", exists=True),
    log_level: str | None = typer.Option(None, "--log-level", help="Logging level."),
):
    """Show the changelog filtered by search text, tags, version and date range.

    Args:
        source: URL or local path of the changelog JSON
        search: Text matched against titles, descriptions, impact, commits and tags
        tag: Tags that every shown change must carry
        version: Restrict to one version
        date_from: Inclusive lower date bound
        date_to: Inclusive upper date bound
        expand: Versions to toggle after the filters are applied
        output_format: text, html, markdown or json
        output: Destination file for html, markdown and json
        config: Optional path to YAML config file
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
    """
    cfg = _setup(config, log_level, output)
    fmt = output_format or cfg.output.format
    if fmt not in OUTPUT_FORMATS:
        raise typer.BadParameter(f"unknown format {fmt!r}; choose from {', '.join(OUTPUT_FORMATS)}")

    document = _load(source, cfg)
    view = derive_view(document, _filters(search, tag, version, date_from, date_to))
    if expand:
        expanded = view.expanded
        for item in expand:
            expanded = toggle_expanded(expanded, item)
        view.expanded = expanded
    log_event(
        logger,
        "Filtered changelog",
        source=source,
        matched=len(view.entries),
        total=len(document.entries),
    )
    _emit(view, cfg, fmt, output)


@app.command()
def entry(
    source: str = typer.Argument(..., help="URL or path of the changelog JSON."),
    version: str = typer.Argument(..., help="Version to show."),
    search: str = typer.Option("", "--search", "-s"),
    tag: list[str] | None = typer.Option(None, "--tag", "-t"),
    config: Path | None = typer.Option(None, "--config", "-c", exists=True),
    log_level: str | None = typer.Option(None, "--log-level"),
):
    """Show a single version with its own search and tag filters."""
    cfg = _setup(config, log_level)
    document = _load(source, cfg)
    try:
        page = entry_view(document, version, search, tuple(dict.fromkeys(tag or [])))
    except ChangelogError as exc:
        _fail(exc)
    render_entry(console, page, document.repository, cfg.output.commit_length)


@app.command()
def change(
    source: str = typer.Argument(..., help="URL or path of the changelog JSON."),
    version: str = typer.Argument(..., help="Version containing the change."),
    change_id: str = typer.Argument(..., help="Change id."),
    config: Path | None = typer.Option(None, "--config", "-c", exists=True),
    log_level: str | None = typer.Option(None, "--log-level"),
):
    """Show a single change."""
    cfg = _setup(config, log_level)
    document = _load(source, cfg)
    try:
        found_entry, found_change = find_change(document, version, change_id)
    except ChangelogError as exc:
        _fail(exc)
    render_change(
        console,
        found_entry,
        found_change,
        document.repository,
        cfg.output.commit_length,
        cfg.output.title_max_chars,
    )


@app.command()
def tags(
    source: str = typer.Argument(..., help="URL or path of the changelog JSON."),
    config: Path | None = typer.Option(None, "--config", "-c", exists=True),
):
    """List every tag used in the changelog, sorted."""
    cfg = _setup(config, None)
    for name in collect_tags(_load(source, cfg)):
        console.print(name)


@app.command()
def versions(
    source: str = typer.Argument(..., help="URL or path of the changelog JSON."),
    config: Path | None = typer.Option(None, "--config", "-c", exists=True),
):
    """List versions in document order."""
    cfg = _setup(config, None)
    for name in collect_versions(_load(source, cfg)):
        console.print(name)


@app.command()
def link(
    source: str = typer.Argument(..., help="URL or path of the changelog JSON."),
    version: str | None = typer.Option(None, "--page-version", help="Link to this version's page."),
    change_id: str | None = typer.Option(None, "--id", help="Link to this change (needs --page-version)."),
    search: str = typer.Option("", "--search", "-s"),
    tag: list[str] | None = typer.Option(None, "--tag", "-t"),
    filter_version: str = typer.Option("", "--version", "-v"),
    date_from: str | None = typer.Option(None, "--from"),
    date_to: str | None = typer.Option(None, "--to"),
    base_url: str | None = typer.Option(None, "--base-url", help="Viewer URL to prefix."),
    config: Path | None = typer.Option(None, "--config", "-c", exists=True),
):
    """Print a shareable link for a page and filter set."""
    cfg = _setup(config, None)
    state = NavigationState(
        src=source,
        version=version,
        change_id=change_id,
        filters=_filters(search, tag, filter_version, date_from, date_to),
    )
    typer.echo(share_link(base_url if base_url is not None else cfg.output.base_url, state))


@app.command(name="open")
def open_link(
    url: str = typer.Argument(..., help="Shareable link to open."),
    config: Path | None = typer.Option(None, "--config", "-c", exists=True),
    log_level: str | None = typer.Option(None, "--log-level"),
):
    """Open a shareable link on the page it points to."""
    cfg = _setup(config, log_level)
    state = parse_link(url)
    if not state.src:
        raise typer.BadParameter("link has no src parameter")
    document = _load(state.src, cfg)
    filters = state.filters
    try:
        if state.page == PAGE_CHANGE:
            found_entry, found_change = find_change(document, state.version or "", state.change_id or "")
            render_change(
                console,
                found_entry,
                found_change,
                document.repository,
                cfg.output.commit_length,
                cfg.output.title_max_chars,
            )
        elif state.page == PAGE_ENTRY:
            page = entry_view(document, state.version or "", filters.search_query, filters.selected_tags)
            render_entry(console, page, document.repository, cfg.output.commit_length)
        else:
            render_changelog(console, derive_view(document, filters), commit_length=cfg.output.commit_length)
    except ChangelogError as exc:
        _fail(exc)


if __name__ == "__main__":
    app()
