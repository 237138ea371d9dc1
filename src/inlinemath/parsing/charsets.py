"""Character sets for O(1) classification.

All sets are frozensets for:
- O(1) membership testing (vs O(n) for strings)
- Immutability (thread-safe)
- Module-level caching (no per-call allocation)

Identifiers are ASCII only, matching the C-family sources being scanned.

Usage:
    from inlinemath.parsing.charsets import IDENT_START

    if char in IDENT_START:  # O(1) lookup
        ...
"""

import string

DIGITS: frozenset[str] = frozenset(string.digits)

IDENT_START: frozenset[str] = frozenset(string.ascii_letters + "_")

IDENT_PART: frozenset[str] = IDENT_START | DIGITS

# A character that continues a token; anything else is a token boundary
WORD_CHARS: frozenset[str] = IDENT_PART | frozenset(".")

# Characters that may begin an expression in the generic scan
EXPRESSION_START: frozenset[str] = IDENT_PART | frozenset("({[+-")

# Opening bracket -> closing bracket
BRACKET_PAIRS: dict[str, str] = {"(": ")", "{": "}", "[": "]"}
CLOSING_BRACKETS: frozenset[str] = frozenset(BRACKET_PAIRS.values())

# Never parsed: XOR in the target dialect, not exponentiation
XOR = "^"


def is_ident_char(char: str) -> bool:
    """Check if char can appear inside an identifier. Empty string is False."""
    return char in IDENT_PART if char else False


def is_boundary(char: str) -> bool:
    """Check if char separates tokens. Empty string (text edge) is a boundary."""
    return char not in WORD_CHARS if char else True
