"""Exception classes for linemark.

Annotation itself never fails: unrecognized text is emitted unstyled,
unmatched braces are ignored and malformed problem nodes are skipped.
These exceptions cover the places where the caller hands over something
that cannot be used at all (a broken rule table, an undecodable feed,
an invalid configuration).
"""

from __future__ import annotations


class LinemarkError(Exception):
    """Base exception for all linemark errors.

    Subclass this for specific error categories.
    """

    pass


class PatternError(LinemarkError):
    """Error while building a pattern table.

    Raised for rules whose regex does not compile, duplicate rule names,
    and template rules without a capture group.
    """

    def __init__(self, rule_name: str, message: str) -> None:
        """Initialize pattern error.

        Args:
            rule_name: Name of the offending rule (e.g., "comment")
            message: Description of the problem
        """
        self.rule_name = rule_name
        super().__init__(f"Rule '{rule_name}': {message}")


class FeedError(LinemarkError):
    """Error decoding an externally supplied feed document.

    Only raised when the payload is not decodable at all. Well-formed JSON
    with unexpected shapes is handled best-effort and never raises.
    """

    def __init__(self, message: str, source: str | None = None) -> None:
        """Initialize feed error.

        Args:
            message: Error description
            source: Name of the feed (e.g., "ast-results.json"), optional
        """
        self.message = message
        self.source = source
        prefix = f"{source}: " if source else ""
        super().__init__(f"{prefix}{message}")


class ConfigError(LinemarkError):
    """Invalid annotation configuration value."""

    pass
