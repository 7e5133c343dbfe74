"""HTML line renderer.

Turns one line plus its final tokens into HTML-safe markup. Gap text
(between tokens and after the last one) is escaped and copied verbatim;
each token is escaped and wrapped in a span colored by its style tag.
Template tokens (property access) re-wrap only their captured identifier.

Thread Safety:
HtmlLineRenderer holds only immutable state (a pattern table and an
optional config). render() keeps its output buffer local, so one instance
can be shared across threads.

"""

import html
from collections.abc import Iterator, Sequence

from linemark.config import AnnotateConfig, get_annotate_config
from linemark.patterns import PatternTable, default_pattern_table
from linemark.resolver import highlight_tokens
from linemark.tokens import CandidateToken


def html_escape(s: str) -> str:
    """Escape &, <, >, " and ' for element content and attribute values."""
    return html.escape(s, quote=True)


def segments(
    line: str, tokens: Sequence[CandidateToken]
) -> Iterator[tuple[str, CandidateToken | None]]:
    """Split a line into gap and token pieces, in order.

    Gap pieces carry None. Joining every piece's text gives back ``line``
    exactly, provided ``tokens`` is a resolved (non-overlapping, sorted)
    sequence for that line.
    """
    last_end = 0
    for token in tokens:
        if token.start > last_end:
            yield line[last_end : token.start], None
        yield line[token.start : token.end], token
        last_end = token.end
    if last_end < len(line):
        yield line[last_end:], None


def span_attributes(token: CandidateToken, config: AnnotateConfig) -> str:
    """Attribute string (with leading space) for a token span."""
    color = config.color_for(token.style, token.category.value)
    style = f' style="color:{html_escape(color)}"'
    if config.class_prefix:
        cls = html_escape(f"{config.class_prefix}-{token.category.value}")
        return f' class="{cls}"{style}'
    return style


class HtmlLineRenderer:
    """Render source lines to inline-styled HTML.

    Usage:
        >>> renderer = HtmlLineRenderer()
        >>> renderer.render("let x = 1;")
        '<span style="color:#569cd6">let</span> <span ...'

    """

    __slots__ = ("_table", "_config")

    def __init__(
        self,
        table: PatternTable | None = None,
        *,
        config: AnnotateConfig | None = None,
    ) -> None:
        """Initialize renderer.

        Args:
            table: Pattern table used when tokens are not supplied
            config: Fixed config; when None the context config is read per call
        """
        self._table = table or default_pattern_table()
        self._config = config

    @property
    def table(self) -> PatternTable:
        return self._table

    def tokens(self, line: str) -> list[CandidateToken]:
        """Final tokens for a line under this renderer's table."""
        return highlight_tokens(line, self._table)

    def render(self, line: str, tokens: Sequence[CandidateToken] | None = None) -> str:
        """Render one line.

        Args:
            line: Source line without its newline
            tokens: Final tokens for the line (computed when omitted)

        Returns:
            HTML markup for the line
        """
        config = self._config or get_annotate_config()
        if tokens is None:
            tokens = self.tokens(line)

        parts: list[str] = []
        for text, token in segments(line, tokens):
            if token is None:
                parts.append(html_escape(text))
            elif token.template is not None:
                parts.append(
                    token.template.format(
                        attrs=span_attributes(token, config),
                        text=html_escape(token.group or ""),
                    )
                )
            else:
                parts.append(f"<span{span_attributes(token, config)}>{html_escape(text)}</span>")
        return "".join(parts)


def render_line(
    line: str,
    tokens: Sequence[CandidateToken] | None = None,
    *,
    table: PatternTable | None = None,
    config: AnnotateConfig | None = None,
) -> str:
    """Render one line with a throwaway HtmlLineRenderer."""
    return HtmlLineRenderer(table, config=config).render(line, tokens)
