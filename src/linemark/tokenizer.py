"""Line tokenizer: applies every rule of a pattern table to one line.

The output is the full candidate multiset. Overlapping, contained and
duplicate candidates are all kept; choosing between them is the resolver's
job. Lines are tokenized independently, so constructs spanning a line
break (a block comment, a multi-line string) are not recognized.

Thread Safety:
    tokenize_line is a pure function. Safe to call from any thread.

"""

from __future__ import annotations

from linemark.patterns import PatternTable, default_pattern_table
from linemark.tokens import CandidateToken


def tokenize_line(line: str, table: PatternTable | None = None) -> list[CandidateToken]:
    """Collect one candidate per match of every rule.

    Args:
        line: A single line of source text (without its newline)
        table: Pattern table to apply (defaults to the built-in table)

    Returns:
        Candidates in table order, then match order within each rule.
        Zero-width matches are dropped so every candidate has start < end.
    """
    if table is None:
        table = default_pattern_table()

    candidates: list[CandidateToken] = []
    for priority, rule in enumerate(table):
        for match in rule.regex.finditer(line):
            start, end = match.span()
            if start == end:
                continue
            if rule.template is not None:
                group = match.group(1)
                candidates.append(
                    CandidateToken(
                        start=start,
                        end=end,
                        text=match.group(0),
                        category=rule.category,
                        style=rule.style,
                        priority=priority,
                        template=rule.template,
                        group=group if group is not None else "",
                        group_start=match.start(1),
                    )
                )
            else:
                candidates.append(
                    CandidateToken(
                        start=start,
                        end=end,
                        text=match.group(0),
                        category=rule.category,
                        style=rule.style,
                        priority=priority,
                    )
                )
    return candidates
