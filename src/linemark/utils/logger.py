"""Package loggers.

Every module logs through ``get_logger(__name__)`` so all records land
under the ``linemark`` logger. Library code emits debug records only
(skipped feed nodes, unmatched braces); attaching handlers and choosing
levels is up to the application embedding linemark.

Example:
    >>> import logging
    >>> logging.getLogger("linemark").setLevel(logging.DEBUG)
"""

from __future__ import annotations

import logging

_ROOT = "linemark"


def get_logger(name: str) -> logging.Logger:
    """Logger for ``name``, moved under ``linemark.`` when outside it.

    >>> get_logger("folding").name
    'linemark.folding'
    >>> get_logger("linemark.document").name
    'linemark.document'
    """
    if name != _ROOT and not name.startswith(f"{_ROOT}."):
        name = f"{_ROOT}.{name}"
    return logging.getLogger(name)
