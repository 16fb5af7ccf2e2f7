"""HTML snippets rendered with `unsafe_allow_html`; user text is always escaped."""

from __future__ import annotations

import html


def header_html(title: str, subtitle: str) -> str:
    return (f"<h1 class='neon-title'>{html.escape(title)}</h1>"
            f"<div class='neon-sub'>{html.escape(subtitle)}</div>")


def tip_html(notes: str) -> str:
    return f"<p class='tip'>{html.escape(notes)}</p>"
