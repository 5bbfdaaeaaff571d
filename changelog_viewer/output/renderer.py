"""
Report rendering for HTML, Markdown and JSON output.

This module writes the filtered changelog view to a file. HTML uses a
Jinja2 template; Markdown is built line by line; JSON reproduces the input
schema (wrapped form) restricted to the filtered entries and changes.
"""

from __future__ import annotations

from dataclasses import asdict
from datetime import datetime, timezone
import json
from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, select_autoescape

from ..core.dates import coerce_bound, format_bound, format_date
from ..core.filters import ALL_VERSIONS
from ..core.view_state import ChangelogView
from .formatting import commit_url, pluralize_changes, short_commit, slugify


def _environment() -> Environment:
    env = Environment(
        loader=FileSystemLoader(str(Path(__file__).parent / "templates")),
        autoescape=select_autoescape(["html"]),
    )
    env.filters["format_date"] = format_date
    env.filters["short_commit"] = short_commit
    return env


def render_html(
    view: ChangelogView,
    output_path: Path,
    title: str | None = None,
    expand_all: bool = False,
    commit_length: int = 7,
) -> None:
    """Render the changelog view as an HTML page.

    Entries that are expanded in the view (or all of them, with expand_all)
    are rendered as open <details> elements.

    Args:
        view: Derived changelog view
        output_path: Path where the HTML file will be written
        title: Page title; defaults to the document title or "Changelog"
        expand_all: Open every entry regardless of the expansion map
        commit_length: Characters of each commit hash to show
    """
    template = _environment().get_template("changelog.html")
    repository = view.document.repository

    used_ids: dict[str, int] = {}
    entries = []
    for item in view.entries:
        # Versions may repeat; suffix duplicate anchors
        base_id = slugify(item.version)
        count = used_ids.get(base_id, 0)
        used_ids[base_id] = count + 1
        entries.append(
            {
                "id": f"{base_id}-{count + 1}" if count else base_id,
                "entry": item.entry,
                "open": expand_all or view.is_expanded(item.version),
                "count_label": pluralize_changes(len(item.changes)),
                "changes": [
                    {
                        "change": change,
                        "commits": [
                            {
                                "label": short_commit(commit, commit_length),
                                "url": commit_url(repository, commit),
                            }
                            for commit in change.commits
                        ],
                    }
                    for change in item.changes
                ],
            }
        )

    html = template.render(
        title=title or view.document.title or "Changelog",
        description=view.document.description,
        generated_at=datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M UTC"),
        filters=_filter_summary(view),
        tags=view.tags,
        selected_tags=list(view.filters.selected_tags),
        entries=entries,
        total=len(view.entries),
    )
    output_path.write_text(html, encoding="utf-8")


def render_markdown(
    view: ChangelogView,
    output_path: Path,
    title: str | None = None,
    commit_length: int = 7,
) -> None:
    """Render the filtered changelog as Markdown, one section per version."""
    repository = view.document.repository
    lines = [f"# {title or view.document.title or 'Changelog'}", ""]
    if view.document.description:
        lines.extend([view.document.description, ""])
    for label, value in _filter_summary(view):
        lines.append(f"- {label}: {value}")
    if view.filters_active:
        lines.append("")

    if not view.entries:
        lines.append("No changelog entries match your filters.")
    for item in view.entries:
        entry = item.entry
        lines.append(f"## Version {entry.version}")
        lines.append("")
        lines.append(f"{format_date(entry.date)} · {entry.from_ref} → {entry.to_ref}")
        lines.append("")
        for change in item.changes:
            lines.append(f"### {change.title}")
            if change.tags:
                lines.append(f"- Tags: {', '.join(change.tags)}")
            if change.commits:
                rendered = []
                for commit in change.commits:
                    url = commit_url(repository, commit)
                    label = f"`{short_commit(commit, commit_length)}`"
                    rendered.append(f"[{label}]({url})" if url else label)
                lines.append(f"- Commits: {' '.join(rendered)}")
            if change.impact:
                lines.append(f"- Impact: {change.impact}")
            if change.description:
                lines.append("")
                lines.append(change.description)
            lines.append("")

    output_path.write_text("\n".join(lines), encoding="utf-8")


def render_json(view: ChangelogView, output_path: Path) -> None:
    """Write the filtered document in the wrapped changelog schema."""
    output_path.write_text(
        json.dumps(to_payload(view), ensure_ascii=False, indent=2),
        encoding="utf-8",
    )


def to_payload(view: ChangelogView) -> dict[str, Any]:
    document = view.document
    return {
        "title": document.title,
        "description": document.description,
        "repository": document.repository,
        "entries": [
            {
                "version": item.entry.version,
                "date": item.entry.date,
                "from_ref": item.entry.from_ref,
                "to_ref": item.entry.to_ref,
                "changes": [asdict(change) for change in item.changes],
            }
            for item in view.entries
        ],
    }


def _filter_summary(view: ChangelogView) -> list[tuple[str, str]]:
    filters = view.filters
    summary: list[tuple[str, str]] = []
    if filters.search_query:
        summary.append(("Search", filters.search_query))
    if filters.selected_tags:
        summary.append(("Tags", ", ".join(filters.selected_tags)))
    if view.filters_active and filters.selected_version not in ("", ALL_VERSIONS):
        summary.append(("Version", filters.selected_version))
    if filters.date_range is not None:
        start = format_bound(coerce_bound(filters.date_range.start))
        end = format_bound(coerce_bound(filters.date_range.end))
        summary.append(("Dates", f"{start or '…'} - {end or '…'}"))
    return summary
