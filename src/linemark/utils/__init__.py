"""Utility modules for linemark.

Provides:
- logger: get_logger for namespaced logging
"""

from linemark.utils.logger import get_logger

__all__ = [
    "get_logger",
]
