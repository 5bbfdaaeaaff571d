"""
Terminal rendering with rich.

Mirrors the three pages of the viewer: the filtered changelog, one version,
and one change. Collapsed entries show only their header line.
"""

from __future__ import annotations

from rich.console import Console, Group
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from ..core.dates import format_date
from ..core.lookup import EntryView
from ..core.types import ChangelogChange, ChangelogEntry
from ..core.view_state import ChangelogView
from .formatting import commit_url, pluralize_changes, short_commit, truncate_string


def changes_table(
    changes: list[ChangelogChange],
    repository: str = "",
    commit_length: int = 7,
) -> Table:
    table = Table(show_edge=False, expand=True)
    table.add_column("Commits", style="cyan", no_wrap=True)
    table.add_column("Id", style="dim", no_wrap=True)
    table.add_column("Title")
    table.add_column("Tags", style="magenta")
    for change in changes:
        commits = Text()
        for commit in change.commits:
            label = short_commit(commit, commit_length)
            url = commit_url(repository, commit)
            commits.append(label + " ", style=f"link {url}" if url else None)
        table.add_row(commits, Text(change.id), Text(change.title), Text(", ".join(change.tags)))
    return table


def render_changelog(
    console: Console,
    view: ChangelogView,
    expand_all: bool = False,
    commit_length: int = 7,
) -> None:
    """Print the filtered changelog, one panel per surviving version."""
    document = view.document
    console.print(Text(document.title or "Changelog", style="bold"))
    if document.description:
        console.print(Text(document.description, style="dim"))
    if view.tags:
        tags = Text("Tags: ", style="dim")
        for tag in view.tags:
            style = "reverse" if tag in view.filters.selected_tags else ""
            tags.append(f" {tag} ", style=style)
            tags.append(" ")
        console.print(tags)

    if view.is_empty:
        console.print()
        console.print("No changelog entries match your filters.", style="yellow")
        return

    for item in view.entries:
        entry = item.entry
        subtitle = (
            f"{pluralize_changes(len(item.changes))} · {entry.from_ref} → {entry.to_ref}"
        )
        body = (
            changes_table(item.changes, document.repository, commit_length)
            if expand_all or view.is_expanded(entry.version)
            else Text("(collapsed)", style="dim")
        )
        console.print(
            Panel(
                body,
                title=Text(f"Version {entry.version} · {format_date(entry.date)}"),
                title_align="left",
                subtitle=Text(subtitle),
                subtitle_align="right",
            )
        )


def render_entry(
    console: Console,
    view: EntryView,
    repository: str = "",
    commit_length: int = 7,
) -> None:
    entry = view.entry
    console.print(Text(f"Changelog › Version {entry.version}", style="dim"))
    console.print(Text(f"Version {entry.version}", style="bold"))
    console.print(Text(format_date(entry.date)))
    console.print(
        Text(f"{len(entry.changes)} changes · {entry.from_ref} → {entry.to_ref}", style="dim")
    )
    if view.tags:
        console.print(Text("Tags: " + ", ".join(view.tags), style="magenta"))
    console.print(changes_table(view.changes, repository, commit_length))


def render_change(
    console: Console,
    entry: ChangelogEntry,
    change: ChangelogChange,
    repository: str = "",
    commit_length: int = 7,
    title_max_chars: int = 50,
) -> None:
    crumbs = f"Changelog › Version {entry.version} › {truncate_string(change.title, title_max_chars)}"
    console.print(Text(crumbs, style="dim"))
    parts: list = [Text(change.title, style="bold")]
    if change.tags:
        parts.append(Text(", ".join(change.tags), style="magenta"))
    parts.append(Text(format_date(entry.date), style="dim"))
    if change.description:
        parts.append(Text(change.description))
    if change.impact:
        parts.append(Text(f"Impact: {change.impact}", style="italic"))
    if change.commits:
        commits = Text()
        for commit in change.commits:
            url = commit_url(repository, commit)
            commits.append(short_commit(commit, commit_length) + " ", style=f"cyan link {url}" if url else "cyan")
        parts.append(commits)
    console.print(Panel(Group(*parts), title=Text(change.id), title_align="left"))
