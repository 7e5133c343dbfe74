"""Tests for whole-buffer annotation."""

from __future__ import annotations

from linemark.config import AnnotateConfig, annotate_config_context
from linemark.document import AnnotatedLine, SourceBuffer, annotate, iter_annotated, visible_lines
from linemark.folding import BracePair, FoldState, TooltipState
from linemark.problems import build_error_index

SOURCE = "fn foo() {\n  let x = 1;\n}"


class TestSourceBuffer:
    def test_lines_and_pairs(self) -> None:
        buffer = SourceBuffer(SOURCE)
        assert len(buffer) == 3
        assert buffer.brace_pairs == (BracePair(0, 2),)
        assert buffer.is_fold_anchor(0)
        assert not buffer.is_fold_anchor(1)

    def test_pairs_computed_once(self) -> None:
        buffer = SourceBuffer(SOURCE)
        assert buffer.brace_pairs is buffer.brace_pairs

    def test_trailing_newline_gives_empty_last_line(self) -> None:
        assert SourceBuffer("a\n").lines == ("a", "")

    def test_fold_chars_from_config(self) -> None:
        config = AnnotateConfig(fold_open="[", fold_close="]")
        buffer = SourceBuffer("xs = [\n  1,\n]", config=config)
        assert buffer.brace_pairs == (BracePair(0, 2),)
        assert SourceBuffer("xs = [\n  1,\n]").brace_pairs == ()

    def test_config_bound_at_creation(self) -> None:
        with annotate_config_context(AnnotateConfig(fold_open="[", fold_close="]")):
            buffer = SourceBuffer("xs = [\n  1,\n]")
        assert buffer.brace_pairs == (BracePair(0, 2),)

    def test_pairs_not_affected_by_later_context(self) -> None:
        buffer = SourceBuffer(SOURCE)
        with annotate_config_context(AnnotateConfig(fold_open="[", fold_close="]")):
            assert buffer.brace_pairs == (BracePair(0, 2),)

    def test_with_config(self) -> None:
        buffer = SourceBuffer(SOURCE)
        assert buffer.with_config(AnnotateConfig(class_prefix="lm")) is buffer
        rebound = buffer.with_config(AnnotateConfig(fold_open="[", fold_close="]"))
        assert rebound is not buffer
        assert rebound.brace_pairs == ()


class TestAnnotate:
    def test_all_visible_by_default(self) -> None:
        lines = annotate(SOURCE)
        assert [line.hidden for line in lines] == [False, False, False]
        assert [line.number for line in lines] == [1, 2, 3]

    def test_collapse_anchor(self) -> None:
        state = FoldState()
        state.set_collapsed(0, True)
        lines = annotate(SourceBuffer(SOURCE), fold_state=state)
        assert [line.hidden for line in lines] == [False, True, True]
        assert lines[0].is_fold_anchor
        assert lines[0].collapsed
        assert [line.index for line in visible_lines(lines)] == [0]

    def test_collapsed_flag_only_on_anchors(self) -> None:
        state = FoldState()
        state.set_collapsed(1, True)
        lines = annotate(SOURCE, fold_state=state)
        assert not lines[1].collapsed
        assert not any(line.hidden for line in lines)

    def test_errors_use_line_numbers(self) -> None:
        index = build_error_index({"children": [{"type": 19, "error": "bad token", "line": 2, "column": 3}]})
        lines = annotate(SOURCE, index)
        assert [line.has_error for line in lines] == [False, True, False]
        assert lines[1].problem is not None
        assert lines[1].problem.message == "bad token"
        assert lines[0].problem is None

    def test_tooltips(self) -> None:
        tips = TooltipState()
        tips.toggle(1)
        lines = annotate(SOURCE, tooltips=tips)
        assert [line.tooltip_visible for line in lines] == [False, True, False]

    def test_html_matches_line_renderer(self) -> None:
        from linemark.renderers.html import render_line

        lines = annotate(SOURCE)
        assert lines[1].html == render_line("  let x = 1;")

    def test_iter_is_lazy(self) -> None:
        iterator = iter_annotated(SOURCE)
        first = next(iterator)
        assert isinstance(first, AnnotatedLine)
        assert first.index == 0

    def test_config_applies_to_prebuilt_buffer(self) -> None:
        config = AnnotateConfig(fold_open="[", fold_close="]", class_prefix="lm")
        lines = annotate(SourceBuffer("xs = [\n  1,\n]"), config=config)
        assert lines[0].is_fold_anchor
        assert not lines[1].is_fold_anchor
        assert 'class="lm-identifier"' in lines[0].html

    def test_config_palette_used_when_fold_chars_match(self) -> None:
        config = AnnotateConfig(palette={"identifier": "#010203"})
        lines = annotate(SourceBuffer(SOURCE), config=config)
        assert "#010203" in lines[1].html
        assert lines[0].is_fold_anchor

    def test_empty_buffer(self) -> None:
        lines = annotate("")
        assert len(lines) == 1
        assert lines[0].html == ""
