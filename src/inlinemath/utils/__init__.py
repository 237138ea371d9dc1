"""Utility modules for inlinemath.

Provides:
- text: line iteration and line-start tables
- hashing: hash_str and hash_parts for cache keys
- logger: get_logger for logging
"""

from inlinemath.utils.hashing import hash_parts, hash_str
from inlinemath.utils.logger import get_logger
from inlinemath.utils.text import is_line_break, iter_lines, line_starts

__all__ = [
    "get_logger",
    "hash_parts",
    "hash_str",
    "is_line_break",
    "iter_lines",
    "line_starts",
]
