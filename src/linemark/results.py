"""Lexer results feed: expected-vs-returned token rows and their summary.

The lexer test harness writes a JSON array of rows, one per compared
token, each marked ``OK`` or ``DIFF``. Anything other than an array decodes
to no rows; rows that are not objects are skipped.

Thread Safety:
    All functions are pure and ResultRow is frozen — safe to share.

"""

from __future__ import annotations

import json
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

from linemark.errors import FeedError
from linemark.utils.logger import get_logger

logger = get_logger(__name__)

STATUS_OK = "OK"
STATUS_DIFF = "DIFF"


@dataclass(frozen=True, slots=True)
class ResultRow:
    """One compared token."""

    index: int | None
    expected_type: str | None
    expected_value: str | None
    returned_type: str | None
    returned_value: str | None
    line: int | None
    column: int | None
    status: str

    @property
    def is_diff(self) -> bool:
        return self.status == STATUS_DIFF

    @property
    def is_pass(self) -> bool:
        return self.status == STATUS_OK

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ResultRow:
        return cls(
            index=data.get("index"),
            expected_type=data.get("expectedType"),
            expected_value=data.get("expectedValue"),
            returned_type=data.get("returnedType"),
            returned_value=data.get("returnedValue"),
            line=data.get("line"),
            column=data.get("column"),
            status=str(data.get("status", "")),
        )


@dataclass(frozen=True, slots=True)
class ResultSummary:
    """Pass/diff counts. Rows with any other status count only in total."""

    passed: int
    diffs: int
    total: int


def rows_from_data(data: Any) -> list[ResultRow]:
    """Decode an already-parsed feed value."""
    if not isinstance(data, list):
        logger.debug("Results feed is %s, not a list; treating as empty", type(data).__name__)
        return []
    return [ResultRow.from_dict(item) for item in data if isinstance(item, dict)]


def rows_from_json(payload: str | bytes, *, source: str | None = None) -> list[ResultRow]:
    """Decode a results feed document.

    Raises:
        FeedError: If ``payload`` is not valid JSON
    """
    try:
        data = json.loads(payload)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise FeedError(f"invalid JSON: {e}", source=source) from e
    return rows_from_data(data)


def summarize(rows: Iterable[ResultRow]) -> ResultSummary:
    passed = diffs = total = 0
    for row in rows:
        total += 1
        if row.is_pass:
            passed += 1
        elif row.is_diff:
            diffs += 1
    return ResultSummary(passed=passed, diffs=diffs, total=total)


def filter_rows(rows: Iterable[ResultRow], *, diffs_only: bool = False) -> list[ResultRow]:
    """All rows, or only the DIFF rows, preserving order."""
    if diffs_only:
        return [row for row in rows if row.is_diff]
    return list(rows)
