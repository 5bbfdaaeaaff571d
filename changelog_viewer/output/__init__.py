"""
Output generation.

Renders changelog views to the terminal (rich) or to HTML, Markdown and
JSON files.
"""

from .console import render_change, render_changelog, render_entry
from .renderer import render_html, render_json, render_markdown, to_payload

__all__ = [
    "render_change",
    "render_changelog",
    "render_entry",
    "render_html",
    "render_json",
    "render_markdown",
    "to_payload",
]
