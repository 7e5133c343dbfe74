"""Brace matching and fold state.

``match_braces`` pairs opening and closing brace lines with a stack in one
pass over the buffer. Each resulting BracePair is a fold region anchored at
its start line. FoldState holds the user's collapse flags per anchor and
``hidden_lines`` turns pairs plus flags into the set of lines to suppress.

Line numbers in this module are 0-based indices into the split buffer.

Brace matching is a rendering aid, not a validator: closers with nothing on
the stack are dropped and openers still on the stack at the end are never
paired. Neither case raises.

Thread Safety:
``match_braces`` and ``hidden_lines`` are pure functions. FoldState and
TooltipState are mutable and meant to have a single writer (the UI action
that toggles them); they are not locked.

"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field

from linemark.config import get_annotate_config
from linemark.utils.logger import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class BracePair:
    """A fold region: the line holding an opener and the line closing it.

    Attributes:
        start: Line index of the opening brace (the fold anchor)
        end: Line index of the matching closing brace, always > start

    """

    start: int
    end: int

    def encloses(self, line: int) -> bool:
        """True if ``line`` is folded away when this region collapses."""
        return self.start < line <= self.end


def match_braces(
    source: str | Sequence[str],
    *,
    open_char: str | None = None,
    close_char: str | None = None,
) -> list[BracePair]:
    """Pair brace lines across the whole buffer.

    Per line, the push happens before the pop: a line containing an opener
    pushes its own index, and then, if it also contains a closer, pops the
    top of the stack. A line holding both (``} else {``, ``{ a }``) therefore
    pops its own index; that self pair encloses nothing and is not recorded,
    and the enclosing opener stays on the stack.

    Only presence per line counts, not the number of braces on it.

    Args:
        source: Whole buffer, or the buffer already split into lines
        open_char: Opening character (defaults to the configured fold_open)
        close_char: Closing character (defaults to the configured fold_close)

    Returns:
        Pairs in the order their closing lines were reached
    """
    if open_char is None or close_char is None:
        config = get_annotate_config()
        open_char = open_char or config.fold_open
        close_char = close_char or config.fold_close

    lines = source.split("\n") if isinstance(source, str) else source

    stack: list[int] = []
    pairs: list[BracePair] = []
    for index, line in enumerate(lines):
        if open_char in line:
            stack.append(index)
        if close_char in line:
            if not stack:
                logger.debug("Unmatched %r on line %d ignored", close_char, index)
                continue
            start = stack.pop()
            if start < index:
                pairs.append(BracePair(start, index))

    if stack:
        logger.debug("%d unmatched %r line(s) left open", len(stack), open_char)
    return pairs


def fold_anchors(pairs: Iterable[BracePair]) -> dict[int, BracePair]:
    """Map each anchor line to its region.

    Every opener is popped at most once, so anchors are unique.
    """
    return {pair.start: pair for pair in pairs}


@dataclass(slots=True)
class FoldState:
    """Collapse flags keyed by fold anchor line.

    Absent means expanded. Flags of nested anchors are kept as they are when
    an ancestor collapses, so expanding the ancestor restores exactly the
    previous view.

    Usage:
        >>> state = FoldState()
        >>> state.toggle(0)
        True
        >>> state.is_collapsed(0)
        True

    """

    collapsed: dict[int, bool] = field(default_factory=dict)

    def is_collapsed(self, line: int) -> bool:
        return self.collapsed.get(line, False)

    def set_collapsed(self, line: int, flag: bool) -> None:
        self.collapsed[line] = flag

    def toggle(self, line: int) -> bool:
        """Flip the flag for ``line`` and return the new value."""
        flag = not self.is_collapsed(line)
        self.collapsed[line] = flag
        return flag

    def expand_all(self) -> None:
        self.collapsed.clear()

    def collapsed_lines(self) -> frozenset[int]:
        """Anchors currently collapsed."""
        return frozenset(line for line, flag in self.collapsed.items() if flag)


def hidden_lines(pairs: Iterable[BracePair], state: FoldState) -> frozenset[int]:
    """Lines suppressed by the current fold state.

    Line ``i`` is hidden iff some pair with ``start < i <= end`` has a
    collapsed anchor. Inner regions lie inside outer ones, so collapsing an
    outer anchor hides every nested line whatever its own flag says.
    """
    hidden: set[int] = set()
    for pair in pairs:
        if state.is_collapsed(pair.start):
            hidden.update(range(pair.start + 1, pair.end + 1))
    return frozenset(hidden)


def is_hidden(line: int, pairs: Iterable[BracePair], state: FoldState) -> bool:
    """Single-line form of hidden_lines."""
    return any(pair.encloses(line) and state.is_collapsed(pair.start) for pair in pairs)


@dataclass(slots=True)
class TooltipState:
    """Lines whose problem tooltip is pinned open."""

    visible: set[int] = field(default_factory=set)

    def is_visible(self, line: int) -> bool:
        return line in self.visible

    def toggle(self, line: int) -> bool:
        """Flip visibility for ``line`` and return the new value."""
        if line in self.visible:
            self.visible.discard(line)
            return False
        self.visible.add(line)
        return True

    def clear(self) -> None:
        self.visible.clear()
