"""Conflict resolution: reduce candidates to a non-overlapping sequence.

Policy:
1. Sort by start ascending, then end descending (longer match first), then
   priority descending (later rule first).
2. Scan once, accepting a candidate iff it intersects no accepted span.
3. Re-sort the accepted tokens by start.

So the longest match wins among equal starts, and among identical spans the
rule registered later in the table wins.

Thread Safety:
    All functions are pure. Safe to call from any thread.

"""

from __future__ import annotations

from collections.abc import Iterable

from linemark.patterns import PatternTable
from linemark.tokenizer import tokenize_line
from linemark.tokens import CandidateToken


def overlaps(a: CandidateToken, b: CandidateToken) -> bool:
    """True if the two spans share at least one character."""
    return a.start < b.end and a.end > b.start


def _sort_key(token: CandidateToken) -> tuple[int, int, int]:
    return (token.start, -token.end, -token.priority)


def resolve(candidates: Iterable[CandidateToken]) -> list[CandidateToken]:
    """Pick the final, non-overlapping tokens.

    Args:
        candidates: Candidate tokens from one line, in any order

    Returns:
        Final tokens ordered by start, with ``t[i].end <= t[i + 1].start``
    """
    accepted: list[CandidateToken] = []
    for candidate in sorted(candidates, key=_sort_key):
        # Candidates arrive start-ascending, so only the accepted token with
        # the furthest end can still reach this one.
        if accepted and overlaps(accepted[-1], candidate):
            continue
        accepted.append(candidate)
    accepted.sort(key=lambda t: t.start)
    return accepted


def highlight_tokens(line: str, table: PatternTable | None = None) -> list[CandidateToken]:
    """Tokenize and resolve one line."""
    return resolve(tokenize_line(line, table))
