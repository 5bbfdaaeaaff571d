import json
from pathlib import Path

from rich.console import Console

from changelog_viewer.core.lookup import entry_view, find_change
from changelog_viewer.core.types import ChangelogChange, ChangelogDocument, ChangelogEntry
from changelog_viewer.core.view_state import FilterState, derive_view
from changelog_viewer.output.console import render_change, render_changelog, render_entry
from changelog_viewer.output.formatting import commit_url, pluralize_changes, short_commit, truncate_string
from changelog_viewer.output.renderer import render_html, render_json, render_markdown


def _document() -> ChangelogDocument:
    return ChangelogDocument(
        title="Demo <Project>",
        description="Release notes",
        repository="https://github.com/owner/demo",
        entries=[
            ChangelogEntry(
                version="1.1.0",
                date="2024-02-01",
                from_ref="v1.0.0",
                to_ref="v1.1.0",
                changes=[
                    ChangelogChange(
                        id="a",
                        title="Add <script>alert(1)</script> search",
                        description="Full text search",
                        impact="Everyone",
                        commits=["0123456789abcdef"],
                        tags=["feat"],
                    )
                ],
            ),
            ChangelogEntry(
                version="1.0.0",
                date="2024-01-05",
                from_ref="v0.9.0",
                to_ref="v1.0.0",
                changes=[ChangelogChange(id="b", title="Fix crash", tags=["fix"])],
            ),
        ],
    )


def test_formatting_helpers():
    assert short_commit("0123456789abcdef") == "0123456"
    assert truncate_string("x" * 60) == "x" * 50 + "..."
    assert truncate_string("short") == "short"
    assert pluralize_changes(1) == "1 change"
    assert pluralize_changes(2) == "2 changes"


def test_commit_url_for_hosted_repositories():
    assert commit_url("https://github.com/owner/demo", "abc") == "https://github.com/owner/demo/commit/abc"
    assert commit_url("https://gitlab.com/group/demo.git", "abc") == "https://gitlab.com/group/demo/-/commit/abc"
    assert commit_url("https://example.com/owner/demo", "abc") is None
    assert commit_url("", "abc") is None
    assert commit_url("https://github.com/owner", "abc") is None


def test_render_html_escapes_and_links_commits(tmp_path: Path):
    output_path = tmp_path / "changelog.html"
    view = derive_view(_document(), FilterState(selected_tags=("feat",)))

    render_html(view, output_path)
    html = output_path.read_text(encoding="utf-8")

    assert "Demo &lt;Project&gt;" in html
    assert "&lt;script&gt;alert(1)&lt;/script&gt;" in html
    assert 'href="https://github.com/owner/demo/commit/0123456789abcdef"' in html
    assert "<code>0123456</code>" in html
    assert "February 1, 2024" in html
    assert '<details id="1-1-0" open>' in html
    assert "Fix crash" not in html


def test_render_html_collapsed_without_filters(tmp_path: Path):
    output_path = tmp_path / "changelog.html"

    render_html(derive_view(_document(), FilterState()), output_path)
    html = output_path.read_text(encoding="utf-8")

    assert '<details id="1-1-0">' in html
    assert '<details id="1-0-0">' in html


def test_render_html_empty_result(tmp_path: Path):
    output_path = tmp_path / "changelog.html"

    render_html(derive_view(_document(), FilterState(search_query="nothing")), output_path)

    assert "No changelog entries match your filters." in output_path.read_text(encoding="utf-8")


def test_render_markdown(tmp_path: Path):
    output_path = tmp_path / "changelog.md"

    render_markdown(derive_view(_document(), FilterState(search_query="crash")), output_path)
    text = output_path.read_text(encoding="utf-8")

    assert text.startswith("# Demo <Project>")
    assert "- Search: crash" in text
    assert "## Version 1.0.0" in text
    assert "January 5, 2024" in text
    assert "## Version 1.1.0" not in text


def test_render_json_keeps_input_schema(tmp_path: Path):
    output_path = tmp_path / "changelog.json"

    render_json(derive_view(_document(), FilterState(selected_version="1.0.0")), output_path)
    payload = json.loads(output_path.read_text(encoding="utf-8"))

    assert payload["repository"] == "https://github.com/owner/demo"
    assert [e["version"] for e in payload["entries"]] == ["1.0.0"]
    assert payload["entries"][0]["changes"][0] == {
        "id": "b",
        "title": "Fix crash",
        "description": "",
        "impact": "",
        "commits": [],
        "tags": ["fix"],
    }


def test_console_renderers():
    console = Console(record=True, width=120)
    document = _document()

    render_changelog(console, derive_view(document, FilterState(selected_tags=("fix",))))
    render_entry(console, entry_view(document, "1.1.0"), document.repository)
    entry, change = find_change(document, "1.1.0", "a")
    render_change(console, entry, change, document.repository)
    text = console.export_text()

    assert "Version 1.0.0" in text
    assert "Fix crash" in text
    assert "Changelog › Version 1.1.0" in text
    assert "Impact: Everyone" in text
    assert "0123456" in text


def test_console_shows_empty_message():
    console = Console(record=True, width=120)

    render_changelog(console, derive_view(_document(), FilterState(search_query="zzz")))

    assert "No changelog entries match your filters." in console.export_text()


def test_render_markdown_uses_commit_length(tmp_path: Path):
    output_path = tmp_path / "changelog.md"

    render_markdown(derive_view(_document(), FilterState()), output_path, commit_length=10)
    text = output_path.read_text(encoding="utf-8")

    assert "[`0123456789`](https://github.com/owner/demo/commit/0123456789abcdef)" in text
