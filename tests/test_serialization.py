"""Tests for feed decoding."""

from __future__ import annotations

import json

import pytest

from linemark.errors import FeedError, LinemarkError
from linemark.problems import ErrorIndex, ProblemEntry, ProblemNode, build_error_index
from linemark.serialization import (
    entry_to_dict,
    index_to_dicts,
    index_to_json,
    node_from_dict,
    node_from_json,
    node_to_dict,
)


class TestNodeFromDict:
    def test_full_node(self) -> None:
        node = node_from_dict(
            {"type": 3, "name": "x", "value": 1, "line": 4, "column": 2, "error": "e"}
        )
        assert node == ProblemNode(type=3, name="x", value=1, line=4, column=2, error="e")

    def test_non_object(self) -> None:
        assert node_from_dict("node") is None
        assert node_from_dict(None) is None

    def test_non_list_children(self) -> None:
        node = node_from_dict({"children": {"error": "hidden"}})
        assert node is not None
        assert node.children == ()

    def test_position_coercion(self) -> None:
        node = node_from_dict({"line": "7", "column": "x"})
        assert node is not None
        assert (node.line, node.column) == (7, 0)

    def test_bool_position_is_zero(self) -> None:
        node = node_from_dict({"line": True})
        assert node is not None
        assert node.line == 0

    def test_error_values(self) -> None:
        assert node_from_dict({"error": ""}).error is None  # type: ignore[union-attr]
        assert node_from_dict({"error": None}).error is None  # type: ignore[union-attr]
        assert node_from_dict({"error": {"code": 1}}).error == "{'code': 1}"  # type: ignore[union-attr]

    def test_sibling_order_kept(self) -> None:
        node = node_from_dict(
            {"children": [{"name": "a", "children": [{"name": "b"}, 3]}, {"name": "c"}]}
        )
        assert node is not None
        assert [n.name for n in node.walk()] == [None, "a", "b", "c"]

    def test_deep_tree(self) -> None:
        data: dict = {"name": "leaf"}
        for level in range(3000):
            data = {"name": str(level), "children": [data]}
        node = node_from_dict(data)
        assert node is not None
        names = [n.name for n in node.walk()]
        assert len(names) == 3001
        assert names[0] == "2999"
        assert names[-1] == "leaf"


class TestNodeFromJson:
    def test_decodes_tree(self) -> None:
        payload = json.dumps({"children": [{"type": 19, "error": "bad token", "line": 2, "column": 3}]})
        index = build_error_index(node_from_json(payload))
        assert list(index) == [ProblemEntry("bad token", 2, 3)]

    def test_top_level_array(self) -> None:
        assert node_from_json("[]") is None

    def test_invalid_json(self) -> None:
        with pytest.raises(FeedError, match="ast-results.json") as exc_info:
            node_from_json("{nope", source="ast-results.json")
        assert isinstance(exc_info.value, LinemarkError)
        assert exc_info.value.source == "ast-results.json"


class TestEncoding:
    def test_node_to_dict_omits_empty(self) -> None:
        node = ProblemNode(type=1, line=2, children=(ProblemNode(error="e"),))
        assert node_to_dict(node) == {
            "type": 1,
            "line": 2,
            "column": 0,
            "children": [{"line": 0, "column": 0, "error": "e"}],
        }

    def test_node_to_dict_deep_tree(self) -> None:
        node = ProblemNode(error="leaf")
        for level in range(3000):
            node = ProblemNode(line=level, children=(node,))
        encoded = node_to_dict(node)
        depth = 0
        while "children" in encoded:
            (encoded,) = encoded["children"]
            depth += 1
        assert depth == 3000
        assert encoded == {"line": 0, "column": 0, "error": "leaf"}

    def test_entry_to_dict(self) -> None:
        assert entry_to_dict(ProblemEntry("m", 1, 2)) == {"message": "m", "line": 1, "column": 2}

    def test_index_to_json(self) -> None:
        index = ErrorIndex((ProblemEntry("m", 1, 2),))
        assert index_to_dicts(index) == [{"message": "m", "line": 1, "column": 2}]
        assert index_to_json(index) == '[{"column": 2, "line": 1, "message": "m"}]'
