"""Whole-buffer annotation.

Ties the per-line pipeline (tokenize, resolve, render) to the buffer-level
state: brace pairs, fold flags, tooltip flags and the error index.

SourceBuffer splits the text and computes brace pairs once; a new buffer is
created whenever the text changes. Fold and tooltip state belong to the
caller and are passed in on each annotate() call.

Line keys: fold and tooltip state use the 0-based line index, the error
index uses the parser's 1-based line number (index + 1).

Example:
    buffer = SourceBuffer("fn foo() {\\n  let x = 1;\\n}")
    state = FoldState()
    state.toggle(0)
    for line in annotate(buffer, fold_state=state):
        if not line.hidden:
            print(line.number, line.html)

"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from functools import cached_property

from linemark.config import AnnotateConfig, get_annotate_config
from linemark.folding import (
    BracePair,
    FoldState,
    TooltipState,
    fold_anchors,
    hidden_lines,
    match_braces,
)
from linemark.patterns import PatternTable
from linemark.problems import ErrorIndex, ProblemEntry
from linemark.renderers.html import HtmlLineRenderer
from linemark.utils.logger import get_logger

logger = get_logger(__name__)


class SourceBuffer:
    """Immutable source text with cached buffer-level structure.

    The config is bound when the buffer is created (the context config
    when none is given), so the cached brace pairs do not depend on which
    config context is active when they are first read.
    """

    def __init__(self, text: str, *, config: AnnotateConfig | None = None) -> None:
        self.text = text
        self.config = config if config is not None else get_annotate_config()
        self.lines: tuple[str, ...] = tuple(text.split("\n"))

    @cached_property
    def brace_pairs(self) -> tuple[BracePair, ...]:
        pairs = tuple(
            match_braces(
                self.lines,
                open_char=self.config.fold_open,
                close_char=self.config.fold_close,
            )
        )
        logger.debug("Matched %d brace pair(s) over %d line(s)", len(pairs), len(self.lines))
        return pairs

    @cached_property
    def anchors(self) -> dict[int, BracePair]:
        return fold_anchors(self.brace_pairs)

    def is_fold_anchor(self, index: int) -> bool:
        return index in self.anchors

    def with_config(self, config: AnnotateConfig) -> SourceBuffer:
        """This buffer under ``config``; self when the fold characters match."""
        if (config.fold_open, config.fold_close) == (self.config.fold_open, self.config.fold_close):
            return self
        return SourceBuffer(self.text, config=config)

    def __len__(self) -> int:
        return len(self.lines)

    def __repr__(self) -> str:
        return f"SourceBuffer({len(self.lines)} lines, {len(self.brace_pairs)} folds)"


@dataclass(frozen=True, slots=True)
class AnnotatedLine:
    """Everything a viewer needs to draw one line.

    Attributes:
        index: 0-based line index
        html: Rendered markup
        has_error: The error index has an entry for this line
        problem: First problem entry for this line, if any
        is_fold_anchor: The line opens a fold region
        collapsed: The region anchored here is collapsed
        hidden: The line is inside a collapsed region
        tooltip_visible: The problem tooltip is pinned open

    """

    index: int
    html: str
    has_error: bool = False
    problem: ProblemEntry | None = None
    is_fold_anchor: bool = False
    collapsed: bool = False
    hidden: bool = False
    tooltip_visible: bool = False

    @property
    def number(self) -> int:
        """1-based line number, as used by the error index."""
        return self.index + 1


def annotate(
    buffer: SourceBuffer | str,
    error_index: ErrorIndex | None = None,
    fold_state: FoldState | None = None,
    tooltips: TooltipState | None = None,
    *,
    table: PatternTable | None = None,
    config: AnnotateConfig | None = None,
) -> list[AnnotatedLine]:
    """Annotate every line of a buffer.

    Rendering and brace matching share one config: ``config`` when given
    (a prebuilt buffer with other fold characters is rebound to it),
    otherwise the buffer's own.

    Hidden lines are still rendered and returned with ``hidden=True`` so the
    caller decides how to elide them; see visible_lines().
    """
    return list(iter_annotated(buffer, error_index, fold_state, tooltips, table=table, config=config))


def iter_annotated(
    buffer: SourceBuffer | str,
    error_index: ErrorIndex | None = None,
    fold_state: FoldState | None = None,
    tooltips: TooltipState | None = None,
    *,
    table: PatternTable | None = None,
    config: AnnotateConfig | None = None,
) -> Iterator[AnnotatedLine]:
    """Lazy form of annotate()."""
    if isinstance(buffer, str):
        buffer = SourceBuffer(buffer, config=config)
    elif config is not None:
        buffer = buffer.with_config(config)
    if config is None:
        config = buffer.config
    errors = error_index or ErrorIndex()
    folds = fold_state or FoldState()
    tips = tooltips or TooltipState()
    renderer = HtmlLineRenderer(table, config=config)

    hidden = hidden_lines(buffer.brace_pairs, folds)
    for index, line in enumerate(buffer.lines):
        number = index + 1
        anchor = buffer.is_fold_anchor(index)
        yield AnnotatedLine(
            index=index,
            html=renderer.render(line),
            has_error=errors.has_error_on_line(number),
            problem=errors.first_error_on_line(number),
            is_fold_anchor=anchor,
            collapsed=anchor and folds.is_collapsed(index),
            hidden=index in hidden,
            tooltip_visible=tips.is_visible(index),
        )


def visible_lines(lines: list[AnnotatedLine]) -> list[AnnotatedLine]:
    """Drop lines folded away by a collapsed region."""
    return [line for line in lines if not line.hidden]
