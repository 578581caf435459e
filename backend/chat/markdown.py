"""Markdown rendering for chat bubbles."""

from __future__ import annotations

from functools import lru_cache

from markdown_it import MarkdownIt


@lru_cache(maxsize=1)
def _parser() -> MarkdownIt:
    return MarkdownIt("commonmark", {"linkify": False}).enable("table")


def render_markdown(text: str) -> str:
    """Render the full markdown ``text`` to HTML."""

    if not text:
        return ""
    return _parser().render(text)
