"""Token and Category definitions for the annotation engine.

The tokenizer produces CandidateToken objects, one per rule match; the
resolver keeps a non-overlapping subset of them (the final tokens) that the
renderer consumes. A final token is simply a retained candidate, so both
stages share one type.

Thread Safety:
CandidateToken is frozen (immutable) and safe to share across threads.
Category is an enum (inherently immutable).

"""

from dataclasses import dataclass
from enum import Enum


class Category(Enum):
    """Lexical categories assigned by the pattern table.

    The value is the public category name used in class attributes
    and palette lookups.

    """

    COMMENT = "comment"
    STRING = "string"
    NUMBER = "number"
    KEYWORD = "keyword"
    TYPE = "type"
    OPERATOR = "operator"
    BRACKET = "bracket"
    PUNCTUATION = "punctuation"
    FUNCTION_CALL = "function-call"
    PROPERTY = "property"
    IDENTIFIER = "identifier"


@dataclass(frozen=True, slots=True)
class CandidateToken:
    """A single rule match within one line.

    Attributes:
        start: Start offset in the line (0-indexed, inclusive)
        end: End offset in the line (exclusive); always greater than start
        text: The matched text, ``line[start:end]``
        category: Lexical category of the rule that matched
        style: Style tag of the rule, looked up in the palette
        priority: Position of the rule in the pattern table
        template: Replacement markup for template rules, else None
        group: Captured text substituted into the template
        group_start: Offset of the captured text in the line (-1 if none)

    Thread Safety:
        Frozen dataclass ensures immutability for safe sharing.

    """

    start: int
    end: int
    text: str
    category: Category
    style: str
    priority: int
    template: str | None = None
    group: str | None = None
    group_start: int = -1

    @property
    def span(self) -> tuple[int, int]:
        """(start, end) offsets."""
        return (self.start, self.end)

    def __len__(self) -> int:
        return self.end - self.start

    def __repr__(self) -> str:
        """Compact repr for debugging."""
        text = self.text
        if len(text) > 20:
            text = text[:17] + "..."
        return f"CandidateToken({self.category.value}, {text!r}, {self.start}:{self.end}, p={self.priority})"
