"""Pattern table: the ordered lexical rules used by the tokenizer.

Each rule is a compiled regex plus the category and style tag it assigns.
A rule's position in the table is its priority, which the resolver uses as
the final tie-break (later rule wins on an identical span).

Thread Safety:
PatternTable is immutable after creation. Safe to share.
Use PatternTableBuilder for mutable construction.

Example:
    >>> builder = PatternTableBuilder()
    >>> builder.register("comment", Category.COMMENT, r"//.*$")
    >>> builder.register("word", Category.IDENTIFIER, r"\\b\\w+\\b")
    >>> table = builder.build()
    >>> table.priority_of("word")
    1
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Iterator
from dataclasses import dataclass

from linemark.errors import PatternError
from linemark.tokens import Category

# Keyword groups, in table order. Each group becomes one rule.
KEYWORD_GROUPS: tuple[tuple[str, tuple[str, ...]], ...] = (
    (
        "control",
        (
            "async", "component", "import", "extern", "for", "if", "else", "while",
            "return", "break", "continue", "yield", "await", "throw", "try",
            "catch", "finally",
        ),
    ),
    ("declaration", ("render", "script", "function", "fn", "method")),
    ("type-definition", ("type", "interface", "struct", "enum", "union")),
    ("module", ("from", "export", "use", "pub", "mod", "namespace")),
    (
        "ownership",
        ("move", "copy", "ref", "deref", "owned", "borrowed", "shared", "weak"),
    ),
    ("literal", ("true", "false", "null", "none", "undefined")),
    ("context", ("this", "super", "self", "Self", "match", "case", "default")),
    ("binding", ("let", "const", "var", "new", "delete", "as", "is", "typeof")),
    ("builtin", ("print", "println")),
)

TYPE_NAMES: tuple[str, ...] = (
    "i8", "i16", "i32", "i64", "u8", "u16", "u32", "u64", "f32", "f64",
    "int", "float", "double", "bool", "char", "string", "str", "void",
    "any", "never", "Array", "Map", "Set", "Option", "Result", "Promise",
)

MULTI_CHAR_OPERATORS: tuple[str, ...] = (
    "=>", "->", "==", "!=", "<=", ">=", "&&", "||", "**",
    "++", "--", "+=", "-=", "*=", "/=", "%=",
)


def words_pattern(words: Iterable[str]) -> str:
    """Alternation matching any of ``words`` as a whole word.

    Longer words come first so a prefix never shadows a longer entry.
    """
    ordered = sorted(set(words), key=lambda w: (-len(w), w))
    return r"\b(?:" + "|".join(re.escape(w) for w in ordered) + r")\b"


@dataclass(frozen=True, slots=True)
class Rule:
    """One lexical rule.

    Attributes:
        name: Unique rule name (e.g., "keyword-control")
        category: Category assigned to matches
        regex: Compiled pattern, run with finditer over a single line
        style: Style tag for palette lookup
        template: Markup with ``{attrs}`` and ``{text}`` placeholders that
            re-wraps capture group 1 instead of the whole match, or None

    """

    name: str
    category: Category
    regex: re.Pattern[str]
    style: str
    template: str | None = None


class PatternTable:
    """Immutable, ordered rule list.

    Thread Safety:
        Immutable after creation. Safe to share across threads.
    """

    __slots__ = ("_rules", "_by_name", "_keywords")

    def __init__(self, rules: tuple[Rule, ...], keywords: frozenset[str]) -> None:
        """Initialize table with pre-built rules.

        Use PatternTableBuilder to create instances.
        """
        self._rules = rules
        self._by_name = {rule.name: index for index, rule in enumerate(rules)}
        self._keywords = keywords

    @property
    def rules(self) -> tuple[Rule, ...]:
        return self._rules

    @property
    def names(self) -> tuple[str, ...]:
        """Rule names in priority order."""
        return tuple(rule.name for rule in self._rules)

    @property
    def keywords(self) -> frozenset[str]:
        """Every word the table reserves (keywords and type names)."""
        return self._keywords

    def get(self, name: str) -> Rule | None:
        index = self._by_name.get(name)
        return None if index is None else self._rules[index]

    def priority_of(self, name: str) -> int:
        """Table position of the named rule.

        Raises:
            KeyError: If no rule has that name
        """
        return self._by_name[name]

    def __iter__(self) -> Iterator[Rule]:
        return iter(self._rules)

    def __len__(self) -> int:
        return len(self._rules)

    def __getitem__(self, index: int) -> Rule:
        return self._rules[index]

    def __contains__(self, name: str) -> bool:
        return name in self._by_name


class PatternTableBuilder:
    """Mutable builder for PatternTable.

    Rules are appended in registration order; that order is the priority.
    """

    __slots__ = ("_rules", "_names", "_keywords")

    def __init__(self) -> None:
        self._rules: list[Rule] = []
        self._names: set[str] = set()
        self._keywords: set[str] = set()

    def register(
        self,
        name: str,
        category: Category,
        pattern: str,
        *,
        style: str | None = None,
        template: str | None = None,
        flags: int = 0,
    ) -> PatternTableBuilder:
        """Append a rule.

        Args:
            name: Unique rule name
            category: Category for matches
            pattern: Regex source
            style: Style tag (defaults to the category value)
            template: Optional re-wrap template, see Rule
            flags: Extra ``re`` flags

        Returns:
            Self for chaining

        Raises:
            PatternError: Duplicate name, regex that does not compile, or a
                template rule without a capture group
        """
        if name in self._names:
            raise PatternError(name, "already registered")
        try:
            regex = re.compile(pattern, flags)
        except re.error as e:
            raise PatternError(name, f"invalid regex: {e}") from e
        if template is not None:
            if regex.groups < 1:
                raise PatternError(name, "template rules need a capture group")
            if "{text}" not in template:
                raise PatternError(name, "template must contain '{text}'")

        self._rules.append(
            Rule(
                name=name,
                category=category,
                regex=regex,
                style=style or category.value,
                template=template,
            )
        )
        self._names.add(name)
        return self

    def reserve(self, words: Iterable[str]) -> PatternTableBuilder:
        """Record words the identifier rule must not claim."""
        self._keywords.update(words)
        return self

    @property
    def reserved(self) -> frozenset[str]:
        return frozenset(self._keywords)

    def build(self) -> PatternTable:
        """Build immutable table from registered rules."""
        return PatternTable(tuple(self._rules), frozenset(self._keywords))

    def __len__(self) -> int:
        return len(self._rules)


def create_default_builder() -> PatternTableBuilder:
    """Create a builder pre-populated with the built-in rules.

    The rule order is significant: it is the priority used by the resolver.
    """
    builder = PatternTableBuilder()

    builder.register("comment", Category.COMMENT, r"//.*$")
    builder.register("string-double", Category.STRING, r'"(?:[^"\\]|\\.)*"')
    builder.register("string-single", Category.STRING, r"'(?:[^'\\]|\\.)*'")
    builder.register("string-template", Category.STRING, r"`(?:[^`\\]|\\.)*`")
    builder.register("number-float", Category.NUMBER, r"\b\d+\.\d+\b")
    builder.register("number-int", Category.NUMBER, r"\b(?:0[xX][0-9a-fA-F]+|\d+)\b")

    for group, words in KEYWORD_GROUPS:
        builder.register(
            f"keyword-{group}",
            Category.KEYWORD,
            words_pattern(words),
            style=f"keyword.{group}",
        )
        builder.reserve(words)

    builder.register("type-name", Category.TYPE, words_pattern(TYPE_NAMES))
    builder.reserve(TYPE_NAMES)

    builder.register(
        "operator-multi",
        Category.OPERATOR,
        "|".join(re.escape(op) for op in MULTI_CHAR_OPERATORS),
    )
    builder.register("operator-single", Category.OPERATOR, r"[+\-*/%=<>!&|^~?]")
    builder.register("bracket", Category.BRACKET, r"[(){}\[\]]")
    builder.register("punctuation", Category.PUNCTUATION, r"[;,.:]")
    builder.register("function-call", Category.FUNCTION_CALL, r"\b[A-Za-z_]\w*(?=\s*\()")
    builder.register(
        "property",
        Category.PROPERTY,
        r"\.([A-Za-z_]\w*)",
        template=".<span{attrs}>{text}</span>",
    )

    reserved = words_pattern(builder.reserved)
    builder.register(
        "identifier",
        Category.IDENTIFIER,
        rf"\b(?!{reserved})[A-Za-z_]\w*\b(?!\s*\()",
    )
    return builder


# Cached singleton, shared across threads since PatternTable is immutable
_DEFAULT_TABLE: PatternTable | None = None


def default_pattern_table() -> PatternTable:
    """Get the built-in pattern table (cached singleton)."""
    global _DEFAULT_TABLE
    if _DEFAULT_TABLE is None:
        _DEFAULT_TABLE = create_default_builder().build()
    return _DEFAULT_TABLE


__all__ = [
    "KEYWORD_GROUPS",
    "MULTI_CHAR_OPERATORS",
    "TYPE_NAMES",
    "PatternTable",
    "PatternTableBuilder",
    "Rule",
    "create_default_builder",
    "default_pattern_table",
    "words_pattern",
]
