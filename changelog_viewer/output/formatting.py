"""Small presentation helpers shared by the console and file renderers."""

from __future__ import annotations

from urllib.parse import urlparse

# Hosts whose commit pages live at <repo>/commit/<sha> (GitLab uses /-/commit/).
_COMMIT_PATHS = {
    "github.com": "commit",
    "gitlab.com": "-/commit",
    "bitbucket.org": "commits",
}


def short_commit(commit: str, length: int = 7) -> str:
    return commit[:length]


def truncate_string(value: str, max_chars: int = 50) -> str:
    """Cut a string to max_chars characters, ending with "..." when shortened."""
    if len(value) <= max_chars:
        return value
    return value[:max_chars].rstrip() + "..."


def commit_url(repository: str, commit: str) -> str | None:
    """Link a commit to its page on a recognized hosted repository.

    Examples:
        >>> commit_url("https://github.com/owner/repo", "3f2c1ab")
        "https://github.com/owner/repo/commit/3f2c1ab"
        >>> commit_url("", "3f2c1ab") is None
        True
    """
    if not repository or not commit:
        return None
    parsed = urlparse(repository.strip())
    if parsed.scheme not in ("http", "https"):
        return None
    segment = _COMMIT_PATHS.get(parsed.netloc.lower().removeprefix("www."))
    if segment is None:
        return None
    path = parsed.path.rstrip("/").removesuffix(".git")
    if path.count("/") < 2:
        return None
    return f"{parsed.scheme}://{parsed.netloc}{path}/{segment}/{commit}"


def pluralize_changes(count: int) -> str:
    return f"{count} change{'s' if count != 1 else ''}"


def slugify(value: str) -> str:
    """Convert a version or title to an HTML anchor id."""
    lowered = value.strip().lower()
    cleaned = []
    last_dash = False
    for ch in lowered:
        if ch.isalnum():
            cleaned.append(ch)
            last_dash = False
        else:
            if not last_dash:
                cleaned.append("-")
                last_dash = True
    slug = "".join(cleaned).strip("-")
    return slug or "entry"
