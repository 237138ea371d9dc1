"""Expression parsing for inlinemath.

Provides the recursive-descent parser used by every detector, plus the
bracket utilities the detectors share with it.

Usage:
    >>> from inlinemath.parsing import parse_at, parse_exact
    >>> parse_exact("1 / 2")
    Binary(op='/', left=Number(value='1'), right=Number(value='2'))
    >>> parse_at("y = x + 1;", 4).end
    9

"""

from inlinemath.parsing.brackets import find_matching, split_top_level
from inlinemath.parsing.expression import (
    MAX_DEPTH,
    MAX_NODES,
    ExpressionParser,
    ParseResult,
    parse_at,
    parse_exact,
    parse_or_raw,
    skip_ws,
)

__all__ = [
    "MAX_DEPTH",
    "MAX_NODES",
    "ExpressionParser",
    "ParseResult",
    "find_matching",
    "parse_at",
    "parse_exact",
    "parse_or_raw",
    "skip_ws",
    "split_top_level",
]
