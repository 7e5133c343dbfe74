"""Feed decoding: parser AST JSON to ProblemNode trees, and back.

The AST feed is produced by another program and may be partial. Decoding
is best-effort:

- a node that is not a JSON object is dropped,
- ``children`` that is not a list is treated as empty,
- ``line`` / ``column`` that are not integers (or integer strings) become 0,
- an empty or null ``error`` means no error; other values are stringified.

Only a payload that is not JSON at all raises (FeedError).

Example:
    from linemark.serialization import node_from_json
    from linemark.problems import build_error_index

    tree = node_from_json(payload, source="ast-results.json")
    index = build_error_index(tree)

Thread Safety:
    All functions are pure — safe to call from any thread.

"""

import json
from collections.abc import Iterator
from dataclasses import fields
from typing import Any

from linemark.errors import FeedError
from linemark.problems import ErrorIndex, ProblemEntry, ProblemNode
from linemark.utils.logger import get_logger

logger = get_logger(__name__)


def _coerce_position(value: Any) -> int:
    """Best-effort int for line/column fields; 0 when absent or unusable."""
    if value is None or isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return value
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0


def _coerce_error(value: Any) -> str | None:
    if not value:
        return None
    return value if isinstance(value, str) else str(value)


def _raw_children(data: dict[str, Any]) -> list[Any]:
    raw_children = data.get("children")
    if isinstance(raw_children, list):
        return raw_children
    if raw_children is not None:
        logger.debug("Ignoring non-list children of type %s", type(raw_children).__name__)
    return []


def _build_node(data: dict[str, Any], children: list[ProblemNode]) -> ProblemNode:
    name = data.get("name")
    return ProblemNode(
        type=data.get("type"),
        name=name if name is None else str(name),
        value=data.get("value"),
        line=_coerce_position(data.get("line")),
        column=_coerce_position(data.get("column")),
        error=_coerce_error(data.get("error")),
        children=tuple(children),
    )


def node_from_dict(data: Any) -> ProblemNode | None:
    """Decode one feed node and its subtree.

    Uses an explicit stack, so tree depth is not bounded by the
    interpreter's recursion limit.

    Args:
        data: Decoded JSON value for the node

    Returns:
        ProblemNode, or None when ``data`` is not a JSON object
    """
    if not isinstance(data, dict):
        logger.debug("Skipping non-object feed node of type %s", type(data).__name__)
        return None

    # Frame: (raw node, iterator over its raw children, decoded children)
    stack: list[tuple[dict[str, Any], Iterator[Any], list[ProblemNode]]] = [
        (data, iter(_raw_children(data)), [])
    ]
    while True:
        raw, pending, built = stack[-1]
        for child in pending:
            if isinstance(child, dict):
                stack.append((child, iter(_raw_children(child)), []))
                break
            logger.debug("Skipping non-object feed node of type %s", type(child).__name__)
        else:
            stack.pop()
            node = _build_node(raw, built)
            if not stack:
                return node
            stack[-1][2].append(node)


def node_from_json(payload: str | bytes, *, source: str | None = None) -> ProblemNode | None:
    """Decode a JSON feed document into a ProblemNode tree.

    Args:
        payload: JSON text
        source: Feed name used in error messages

    Returns:
        Root node, or None if the top-level value is not an object

    Raises:
        FeedError: If ``payload`` is not valid JSON
    """
    try:
        raw = json.loads(payload)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise FeedError(f"invalid JSON: {e}", source=source) from e
    return node_from_dict(raw)


def _fields_to_dict(node: ProblemNode) -> dict[str, Any]:
    result: dict[str, Any] = {}
    for f in fields(node):
        if f.name == "children":
            continue
        value = getattr(node, f.name)
        if value is not None:
            result[f.name] = value
    return result


def node_to_dict(node: ProblemNode) -> dict[str, Any]:
    """Encode a node in the feed's own shape (omitting empty fields)."""
    root = _fields_to_dict(node)
    stack = [(node, root)]
    while stack:
        current, encoded = stack.pop()
        if not current.children:
            continue
        children: list[dict[str, Any]] = []
        encoded["children"] = children
        for child in current.children:
            child_dict = _fields_to_dict(child)
            children.append(child_dict)
            stack.append((child, child_dict))
    return root


def entry_to_dict(entry: ProblemEntry) -> dict[str, Any]:
    return {"message": entry.message, "line": entry.line, "column": entry.column}


def index_to_dicts(index: ErrorIndex) -> list[dict[str, Any]]:
    """Problem entries as plain dicts, in index order."""
    return [entry_to_dict(entry) for entry in index]


def index_to_json(index: ErrorIndex, *, indent: int | None = None) -> str:
    """Serialize an error index to JSON (sorted keys, deterministic)."""
    return json.dumps(index_to_dicts(index), sort_keys=True, indent=indent)
