"""Rendering of chat message markup for HTML views."""

import html
import re

_BOLD = re.compile(r"\*\*(.*?)\*\*")


def render_message_html(content: str) -> str:
    """Convert ``**bold**`` markup and line breaks to HTML.

    Content is escaped first, so assistant output cannot inject markup.
    """
    escaped = html.escape(content, quote=False)
    escaped = _BOLD.sub(r"<strong>\1</strong>", escaped)
    return escaped.replace("\r\n", "\n").replace("\n", "<br />")
