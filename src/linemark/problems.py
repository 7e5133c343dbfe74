"""Problem tree nodes and the line-keyed error index.

The parser reports problems inside its AST: any node may carry an ``error``
message, and a dedicated error-node type exists as well. The error index is
the pre-order projection of those nodes into ``ProblemEntry`` records,
queried per line for gutter marks and tooltips.

Line and column numbers here are 1-based as reported by the parser, with 0
meaning "not reported".

Thread Safety:
ProblemNode, ProblemEntry and ErrorIndex are frozen (immutable) and safe to
share across threads.

"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from typing import Any

# Node type the parser emits for a syntax error placeholder.
ERROR_NODE_TYPE = 19


@dataclass(frozen=True, slots=True)
class ProblemNode:
    """One node of the parser's AST feed.

    Only ``error``, ``line``, ``column`` and ``children`` matter to the
    index; the rest is carried for callers that display the tree.

    """

    type: int | str | None = None
    name: str | None = None
    value: Any = None
    line: int = 0
    column: int = 0
    error: str | None = None
    children: tuple[ProblemNode, ...] = ()

    @property
    def is_error_node(self) -> bool:
        return self.type == ERROR_NODE_TYPE

    @property
    def has_error(self) -> bool:
        return bool(self.error)

    def walk(self) -> Iterator[ProblemNode]:
        """Yield this node, then every descendant, pre-order."""
        stack: list[ProblemNode] = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))


@dataclass(frozen=True, slots=True)
class ProblemEntry:
    """A parser problem pinned to a source position.

    Attributes:
        message: Problem description
        line: Line number (1-indexed, 0 if unknown)
        column: Column number (1-indexed, 0 if unknown)

    """

    message: str
    line: int = 0
    column: int = 0

    def __str__(self) -> str:
        """Format like "2:3: bad token"."""
        return f"{self.line}:{self.column}: {self.message}"


class ErrorIndex:
    """Ordered problem entries with per-line lookup.

    Entries keep tree pre-order. Only the first entry for a line can be
    retrieved by line; later entries on the same line remain reachable by
    iterating.

    """

    __slots__ = ("_entries", "_first_by_line")

    def __init__(self, entries: tuple[ProblemEntry, ...] = ()) -> None:
        self._entries = entries
        first: dict[int, ProblemEntry] = {}
        for entry in entries:
            first.setdefault(entry.line, entry)
        self._first_by_line = first

    @property
    def entries(self) -> tuple[ProblemEntry, ...]:
        return self._entries

    def has_error_on_line(self, line: int) -> bool:
        return line in self._first_by_line

    def first_error_on_line(self, line: int) -> ProblemEntry | None:
        return self._first_by_line.get(line)

    def lines(self) -> frozenset[int]:
        """Line numbers with at least one entry."""
        return frozenset(self._first_by_line)

    def __iter__(self) -> Iterator[ProblemEntry]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __bool__(self) -> bool:
        return bool(self._entries)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ErrorIndex):
            return NotImplemented
        return self._entries == other._entries

    def __hash__(self) -> int:
        return hash(self._entries)

    def __repr__(self) -> str:
        return f"ErrorIndex({list(self._entries)!r})"


def build_error_index(tree: ProblemNode | Mapping[str, Any] | None) -> ErrorIndex:
    """Collect every error-bearing node, pre-order.

    Error nodes (``ERROR_NODE_TYPE``) and ordinary nodes with an ``error``
    field produce the same entry shape; nodes without a message add
    nothing, whatever their type.

    Args:
        tree: Root node, a raw decoded JSON mapping, or None

    Returns:
        ErrorIndex (empty for None or an undecodable root)
    """
    if tree is None:
        return ErrorIndex()
    if not isinstance(tree, ProblemNode):
        from linemark.serialization import node_from_dict

        decoded = node_from_dict(tree)
        if decoded is None:
            return ErrorIndex()
        tree = decoded

    entries = tuple(
        ProblemEntry(message=node.error, line=node.line, column=node.column)
        for node in tree.walk()
        if node.error
    )
    return ErrorIndex(entries)


__all__ = [
    "ERROR_NODE_TYPE",
    "ErrorIndex",
    "ProblemEntry",
    "ProblemNode",
    "build_error_index",
]
