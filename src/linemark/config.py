"""ContextVar-based annotation configuration for linemark.

Config is set once per caller context and read by the renderer and the
brace matcher. Nothing here is configurable per line.

Thread Safety:
    ContextVars are thread-local by design. Each thread has independent storage,
    so no locks are needed.

Usage:
    from linemark.config import AnnotateConfig, annotate_config_context

    with annotate_config_context(AnnotateConfig(class_prefix="lm")):
        html = render_line("let x = 1;")

"""

from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field
from types import MappingProxyType

from linemark.errors import ConfigError

# Style tag -> CSS color. Keyword groups share the "keyword" category but
# carry their own style tag so each group can be colored separately.
DEFAULT_PALETTE: Mapping[str, str] = MappingProxyType(
    {
        "comment": "#6a9955",
        "string": "#ce9178",
        "number": "#b5cea8",
        "keyword": "#569cd6",
        "keyword.control": "#c586c0",
        "keyword.declaration": "#569cd6",
        "keyword.type-definition": "#4ec9b0",
        "keyword.module": "#c586c0",
        "keyword.ownership": "#d7ba7d",
        "keyword.literal": "#569cd6",
        "keyword.context": "#9cdcfe",
        "keyword.binding": "#569cd6",
        "keyword.builtin": "#dcdcaa",
        "type": "#4ec9b0",
        "operator": "#d4d4d4",
        "bracket": "#ffd700",
        "punctuation": "#d4d4d4",
        "function-call": "#dcdcaa",
        "property": "#9cdcfe",
        "identifier": "#9cdcfe",
    }
)


@dataclass(frozen=True, slots=True)
class AnnotateConfig:
    """Immutable annotation configuration.

    Attributes:
        palette: Style tag -> CSS color overrides, merged over DEFAULT_PALETTE
        default_color: Color for style tags missing from the merged palette
        class_prefix: When set, token spans also get ``class="PREFIX-CATEGORY"``
        fold_open: Character that opens a fold region
        fold_close: Character that closes a fold region

    """

    palette: Mapping[str, str] = field(default_factory=dict)
    default_color: str = "#d4d4d4"
    class_prefix: str | None = None
    fold_open: str = "{"
    fold_close: str = "}"

    def __post_init__(self) -> None:
        if not self.fold_open or not self.fold_close:
            raise ConfigError("fold_open and fold_close must be non-empty")
        if self.fold_open == self.fold_close:
            raise ConfigError(f"fold_open and fold_close are both {self.fold_open!r}")
        for style, color in self.palette.items():
            if not isinstance(style, str) or not style:
                raise ConfigError(f"palette key {style!r} must be a non-empty style tag or category")
            if not isinstance(color, str) or not color:
                raise ConfigError(f"palette color for {style!r} must be a non-empty string")

    def color_for(self, style: str, category: str | None = None) -> str:
        """Resolve the color for a style tag.

        Overrides are consulted first (style tag, then category), then the
        default palette in the same order, then ``default_color``. An
        override for "keyword" therefore recolors every keyword group.
        """
        keys = (style,) if category is None else (style, category)
        for palette in (self.palette, DEFAULT_PALETTE):
            for key in keys:
                if key in palette:
                    return palette[key]
        return self.default_color

    @classmethod
    def from_dict(cls, config_dict: dict) -> "AnnotateConfig":
        """Create AnnotateConfig from dictionary.

        Only includes keys that are valid AnnotateConfig fields; unknown keys
        are silently ignored.

        Example:
            >>> config = AnnotateConfig.from_dict({
            ...     "class_prefix": "lm",
            ...     "unknown_key": "ignored",
            ... })
            >>> config.class_prefix
            'lm'

        """
        valid_fields = {f.name for f in cls.__dataclass_fields__.values()}
        filtered = {k: v for k, v in config_dict.items() if k in valid_fields}
        if "palette" in filtered:
            filtered["palette"] = dict(filtered["palette"] or {})
        return cls(**filtered)


# Module-level default config (reused, never recreated)
_DEFAULT_CONFIG: AnnotateConfig = AnnotateConfig()

_annotate_config: ContextVar[AnnotateConfig] = ContextVar(
    "annotate_config",
    default=_DEFAULT_CONFIG,
)


def get_annotate_config() -> AnnotateConfig:
    """Get current annotation configuration (context-local)."""
    return _annotate_config.get()


def set_annotate_config(config: AnnotateConfig) -> None:
    """Set annotation configuration for current context."""
    _annotate_config.set(config)


def reset_annotate_config() -> None:
    """Reset to the default configuration."""
    _annotate_config.set(_DEFAULT_CONFIG)


@contextmanager
def annotate_config_context(config: AnnotateConfig) -> Iterator[None]:
    """Context manager for temporary config changes.

    Restores the previous config even if an exception is raised.

    Example:
        >>> with annotate_config_context(AnnotateConfig(class_prefix="lm")):
        ...     get_annotate_config().class_prefix
        'lm'

    """
    previous = _annotate_config.get()
    _annotate_config.set(config)
    try:
        yield
    finally:
        _annotate_config.set(previous)


__all__ = [
    "DEFAULT_PALETTE",
    "AnnotateConfig",
    "get_annotate_config",
    "set_annotate_config",
    "reset_annotate_config",
    "annotate_config_context",
]
