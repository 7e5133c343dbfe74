"""Tests for the problem tree and error index."""

from __future__ import annotations

from linemark.problems import (
    ERROR_NODE_TYPE,
    ErrorIndex,
    ProblemEntry,
    ProblemNode,
    build_error_index,
)


class TestBuildErrorIndex:
    def test_error_node_child(self) -> None:
        tree = {
            "error": None,
            "children": [{"type": 19, "error": "bad token", "line": 2, "column": 3}],
        }
        index = build_error_index(tree)
        assert list(index) == [ProblemEntry(message="bad token", line=2, column=3)]
        assert index.has_error_on_line(2) is True
        assert index.has_error_on_line(1) is False

    def test_pre_order(self) -> None:
        tree = ProblemNode(
            error="root",
            children=(
                ProblemNode(error="a", children=(ProblemNode(error="b"),)),
                ProblemNode(error="c"),
            ),
        )
        assert [entry.message for entry in build_error_index(tree)] == ["root", "a", "b", "c"]

    def test_any_type_with_error_counts(self) -> None:
        tree = ProblemNode(
            type=1,
            children=(
                ProblemNode(type=ERROR_NODE_TYPE, error="sentinel", line=1),
                ProblemNode(type=7, error="ordinary", line=1),
                ProblemNode(type=ERROR_NODE_TYPE),
            ),
        )
        index = build_error_index(tree)
        assert [entry.message for entry in index] == ["sentinel", "ordinary"]

    def test_missing_positions_default_to_zero(self) -> None:
        index = build_error_index({"error": "oops"})
        assert index.entries == (ProblemEntry("oops", 0, 0),)

    def test_none_and_non_object_roots(self) -> None:
        assert len(build_error_index(None)) == 0
        assert len(build_error_index([1, 2])) == 0  # type: ignore[arg-type]

    def test_non_object_children_skipped(self) -> None:
        tree = {"children": [1, "x", None, {"error": "e", "line": 4}]}
        index = build_error_index(tree)
        assert list(index) == [ProblemEntry("e", 4, 0)]

    def test_deeply_nested_feed(self) -> None:
        tree: dict = {"error": "leaf", "line": 7, "column": 1}
        for level in range(3000):
            tree = {"type": 1, "line": level, "children": [tree]}
        index = build_error_index(tree)
        assert list(index) == [ProblemEntry("leaf", 7, 1)]


class TestErrorIndex:
    def _index(self) -> ErrorIndex:
        return ErrorIndex(
            (
                ProblemEntry("first", 3, 1),
                ProblemEntry("second", 3, 9),
                ProblemEntry("other", 5, 2),
            )
        )

    def test_first_error_on_line(self) -> None:
        index = self._index()
        assert index.first_error_on_line(3) == ProblemEntry("first", 3, 1)
        assert index.first_error_on_line(4) is None

    def test_later_duplicates_still_iterable(self) -> None:
        assert [entry.message for entry in self._index()] == ["first", "second", "other"]

    def test_lines(self) -> None:
        assert self._index().lines() == frozenset({3, 5})

    def test_len_and_bool(self) -> None:
        assert len(self._index()) == 3
        assert not ErrorIndex()

    def test_equality(self) -> None:
        assert self._index() == self._index()
        assert self._index() != ErrorIndex()


class TestProblemNode:
    def test_walk_pre_order(self) -> None:
        tree = ProblemNode(
            name="r",
            children=(ProblemNode(name="a", children=(ProblemNode(name="b"),)), ProblemNode(name="c")),
        )
        assert [node.name for node in tree.walk()] == ["r", "a", "b", "c"]

    def test_flags(self) -> None:
        node = ProblemNode(type=ERROR_NODE_TYPE, error="x")
        assert node.is_error_node
        assert node.has_error
        assert not ProblemNode(error="").has_error

    def test_entry_str(self) -> None:
        assert str(ProblemEntry("bad token", 2, 3)) == "2:3: bad token"
