"""Annotate a source buffer with highlighting, folds and parser problems."""

from linemark import FoldState, SourceBuffer, annotate, build_error_index

source = "fn main() {\n  let x = 1;\n  if x {\n    print(x)\n  }\n}"
problems = {"children": [{"type": 19, "error": "missing ';'", "line": 4, "column": 13}]}

folds = FoldState()
folds.toggle(2)

for line in annotate(SourceBuffer(source), build_error_index(problems), folds):
    if line.hidden:
        continue
    marker = "!" if line.has_error else " "
    fold = ("+" if line.collapsed else "-") if line.is_fold_anchor else " "
    print(f"{line.number:>3} {marker}{fold} {line.html}")
