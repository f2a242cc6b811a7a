"""Markdown to display HTML.

Generated contracts are markdown-flavoured plain text. ``render`` converts
them to sanitised HTML for the preview pane; the source text is never
touched, so switching back to the editor shows exactly what was there.
"""

from __future__ import annotations

import bleach
import markdown

MARKDOWN_EXTENSIONS = ["extra", "sane_lists"]

ALLOWED_TAGS = [
    "a", "abbr", "b", "blockquote", "br", "code", "dd", "del", "div", "dl", "dt",
    "em", "h1", "h2", "h3", "h4", "h5", "h6", "hr", "i", "li", "ol", "p", "pre",
    "span", "strong", "sub", "sup", "table", "tbody", "td", "th", "thead", "tr", "u", "ul",
]
ALLOWED_ATTRS = {
    "a": ["href", "title"],
    "abbr": ["title"],
    "td": ["align"],
    "th": ["align"],
}
ALLOWED_PROTOCOLS = ["http", "https", "mailto"]


def render(content: str) -> str:
    """Render contract text for display.

    Deterministic: the same content always yields the same HTML.
    """
    if not content:
        return ""
    html = markdown.markdown(content, extensions=MARKDOWN_EXTENSIONS, output_format="html")
    return bleach.clean(
        html,
        tags=ALLOWED_TAGS,
        attributes=ALLOWED_ATTRS,
        protocols=ALLOWED_PROTOCOLS,
        strip=True,
    )
