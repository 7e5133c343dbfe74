"""Public API surface."""

import linemark


def test_version() -> None:
    assert linemark.__version__ == "0.1.0"


def test_all_exports_resolve() -> None:
    for name in linemark.__all__:
        assert hasattr(linemark, name), name


def test_quick_start() -> None:
    folds = linemark.FoldState()
    folds.toggle(0)
    lines = linemark.annotate(linemark.SourceBuffer("fn foo() {\n  let x = 1;\n}"), fold_state=folds)
    assert [line.hidden for line in lines] == [False, True, True]
