"""Markdown-to-HTML rendering with syntax-highlighted code blocks.

Fenced blocks are tidied before conversion: fences indented by up to three
spaces are pulled to the margin, and rustdoc-style labels such as
``rust,no_run`` are cut back to the language name. Each highlighted block in
the output is tagged with ``data-language`` so themes can label it.
"""

from __future__ import annotations

import re
from html import escape

from markdown import Markdown
from pygments.formatters.html import HtmlFormatter

from pagewright._constants import DEFAULT_PYGMENTS_STYLE

HIGHLIGHT_CLASS = "codehilite"
FENCE_LINE = re.compile(
    r"^[ ]{0,3}(?P<fence>`{3,}|~{3,})(?P<language>[A-Za-z0-9_+#.-]*)(?P<rest>.*)$"
)
HIGHLIGHT_OPEN_TAG = re.compile(rf'<div class="{HIGHLIGHT_CLASS}">')


def normalize_fences(text: str) -> tuple[str, list[str]]:
    """Return ``text`` with tidied fence lines and the language of each block.

    Blocks without a language are reported as ``"text"``.
    """
    lines = text.splitlines(keepends=True)
    languages: list[str] = []
    open_fence: str | None = None
    for index, line in enumerate(lines):
        body = line.rstrip("\r\n")
        match = FENCE_LINE.match(body)
        if match is None:
            continue
        fence, language, rest = match.group("fence", "language", "rest")
        ending = line[len(body) :]
        if open_fence is None:
            open_fence = fence
            languages.append(language or "text")
            if rest.startswith(","):
                rest = ""
            lines[index] = f"{fence}{language}{rest}{ending}"
        elif fence[0] == open_fence[0] and len(fence) >= len(open_fence) and not (
            language or rest.strip()
        ):
            open_fence = None
            lines[index] = f"{fence}{ending}"
    return "".join(lines), languages


class HtmlContentRenderer:
    """Render page-body markdown into an HTML fragment.

    One ``Markdown`` instance is built up front and reset between documents,
    so a renderer must not be shared by concurrent callers.
    """

    def __init__(
        self, pygments_style: str = DEFAULT_PYGMENTS_STYLE, *, raw_html: bool = True
    ) -> None:
        """Build the markdown converter.

        Parameters
        ----------
        pygments_style : str, optional
            Pygments style used for highlighting and for :attr:`stylesheet`.
        raw_html : bool, optional
            When ``False``, raw HTML in page bodies is escaped and shown as
            text instead of passing through.
        """
        self.pygments_style = pygments_style
        self.raw_html = raw_html
        self._md = Markdown(
            extensions=["fenced_code", "codehilite", "tables", "sane_lists"],
            extension_configs={
                "codehilite": {
                    "css_class": HIGHLIGHT_CLASS,
                    "guess_lang": False,
                    "linenums": False,
                    "pygments_style": pygments_style,
                }
            },
        )
        if not raw_html:
            self._md.preprocessors.deregister("html_block")
            self._md.inlinePatterns.deregister("html")

    @property
    def stylesheet(self) -> str:
        """Return the CSS rules for highlighted code blocks."""
        formatter = HtmlFormatter(style=self.pygments_style, cssclass=HIGHLIGHT_CLASS)
        return formatter.get_style_defs(f".{HIGHLIGHT_CLASS}")

    def markdown(self, text: str) -> str:
        """Convert ``text`` to HTML; blank input yields an empty fragment."""
        source, languages = normalize_fences(text)
        if not source.strip():
            return ""
        try:
            html = self._md.convert(source)
        finally:
            self._md.reset()
        if not languages:
            return html
        remaining = iter(languages)
        return HIGHLIGHT_OPEN_TAG.sub(
            lambda _match: (
                f'<div class="{HIGHLIGHT_CLASS}" '
                f'data-language="{escape(next(remaining, "text"), quote=True)}">'
            ),
            html,
        )


__all__ = ["HtmlContentRenderer", "normalize_fences"]
