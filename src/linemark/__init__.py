"""
linemark — source annotation engine for results viewers

Tokenizes source lines against an ordered rule table, resolves overlapping
matches into one highlighted rendering, pairs braces into fold regions and
indexes parser problems by line.

Quick Start:
    >>> from linemark import render_line
    >>> render_line("let x = 1;")
    '<span style="color:#569cd6">let</span> <span ...'

    >>> from linemark import SourceBuffer, FoldState, annotate, build_error_index
    >>> buffer = SourceBuffer("fn foo() {\\n  let x = 1;\\n}")
    >>> folds = FoldState()
    >>> folds.toggle(0)
    True
    >>> [line.hidden for line in annotate(buffer, fold_state=folds)]
    [False, True, True]

Installation:
    pip install linemark             # Zero runtime dependencies
"""

from linemark.config import (
    DEFAULT_PALETTE,
    AnnotateConfig,
    annotate_config_context,
    get_annotate_config,
    reset_annotate_config,
    set_annotate_config,
)
from linemark.document import AnnotatedLine, SourceBuffer, annotate, iter_annotated, visible_lines
from linemark.errors import ConfigError, FeedError, LinemarkError, PatternError
from linemark.folding import (
    BracePair,
    FoldState,
    TooltipState,
    fold_anchors,
    hidden_lines,
    is_hidden,
    match_braces,
)
from linemark.patterns import (
    PatternTable,
    PatternTableBuilder,
    Rule,
    create_default_builder,
    default_pattern_table,
)
from linemark.problems import (
    ERROR_NODE_TYPE,
    ErrorIndex,
    ProblemEntry,
    ProblemNode,
    build_error_index,
)
from linemark.renderers.html import HtmlLineRenderer, html_escape, render_line, segments
from linemark.resolver import highlight_tokens, overlaps, resolve
from linemark.results import ResultRow, ResultSummary, filter_rows, rows_from_json, summarize
from linemark.serialization import node_from_dict, node_from_json
from linemark.tokenizer import tokenize_line
from linemark.tokens import CandidateToken, Category

__version__ = "0.1.0"

__all__ = [
    # Config
    "DEFAULT_PALETTE",
    "AnnotateConfig",
    "annotate_config_context",
    "get_annotate_config",
    "reset_annotate_config",
    "set_annotate_config",
    # Errors
    "ConfigError",
    "FeedError",
    "LinemarkError",
    "PatternError",
    # Tokens and patterns
    "CandidateToken",
    "Category",
    "PatternTable",
    "PatternTableBuilder",
    "Rule",
    "create_default_builder",
    "default_pattern_table",
    # Pipeline
    "tokenize_line",
    "resolve",
    "overlaps",
    "highlight_tokens",
    "HtmlLineRenderer",
    "html_escape",
    "render_line",
    "segments",
    # Folding
    "BracePair",
    "FoldState",
    "TooltipState",
    "fold_anchors",
    "hidden_lines",
    "is_hidden",
    "match_braces",
    # Problems
    "ERROR_NODE_TYPE",
    "ErrorIndex",
    "ProblemEntry",
    "ProblemNode",
    "build_error_index",
    "node_from_dict",
    "node_from_json",
    # Buffer
    "AnnotatedLine",
    "SourceBuffer",
    "annotate",
    "iter_annotated",
    "visible_lines",
    # Results feed
    "ResultRow",
    "ResultSummary",
    "filter_rows",
    "rows_from_json",
    "summarize",
    # Version
    "__version__",
]
