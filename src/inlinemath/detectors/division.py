"""Division detector: ``numerator / denominator`` between two simple tokens.

A shallow lexical match rather than a parse, so it also catches trivial
fractions whose surroundings the expression parser would refuse (a ``3/4``
at the start of a longer, unparseable statement).

Tokens are identifiers (``foo_2``) or decimal literals (``3``, ``0.5``).

Example:
    >>> from inlinemath.masking import mask
    >>> source = "auto x = 3/4*Math.pow(9,2)"
    >>> [(m.numerator, m.denominator) for m in find_divisions(source, mask(source))]
    [('3', '4')]

"""

from __future__ import annotations

import re

from inlinemath.detectors import register_detector
from inlinemath.location import LineIndex
from inlinemath.matches import DivisionMatch
from inlinemath.renderers.inline import inline_fraction
from inlinemath.renderers.typeset import escape_typeset, fraction_typeset
from inlinemath.utils.text import iter_lines

_TOKEN = r"(?:[A-Za-z_][A-Za-z0-9_]*|[0-9]+(?:\.[0-9]+)?)"

DIVISION_RE = re.compile(rf"\b({_TOKEN})\s*/\s*({_TOKEN})\b", re.ASCII)


def line_exclusions(line: str) -> tuple[int | None, list[tuple[int, int]]]:
    """Find where a ``//`` comment starts and which spans are quoted.

    Quotes are tracked per line only; an unclosed quote runs to the end of
    the line.

    Returns:
        ``(comment_start, quoted_ranges)``, ranges half-open
    """
    quoted: list[tuple[int, int]] = []
    quote: str | None = None
    quote_start = 0
    escape = False

    for i, ch in enumerate(line):
        if escape:
            escape = False
            continue
        if quote is not None:
            if ch == "\\":
                escape = True
            elif ch == quote:
                quoted.append((quote_start, i + 1))
                quote = None
            continue
        if ch == '"' or ch == "'":
            quote = ch
            quote_start = i
        elif ch == "/" and line.startswith("//", i):
            return i, quoted

    if quote is not None:
        quoted.append((quote_start, len(line)))
    return None, quoted


def _in_ranges(index: int, ranges: list[tuple[int, int]]) -> bool:
    return any(start <= index < end for start, end in ranges)


def find_divisions(source: str, masked: str) -> list[DivisionMatch]:
    """Find ``a / b`` divisions line by line.

    Matches after a same-line ``//``, starting inside a same-line quoted span,
    or touching any text blanked by masking (block comments, text blocks)
    are skipped.
    """
    results: list[DivisionMatch] = []
    index = LineIndex(source)

    for line_start, line in iter_lines(source):
        if "/" not in line:
            continue
        comment_start, quoted = line_exclusions(line)

        for m in DIVISION_RE.finditer(line):
            if comment_start is not None and m.start() >= comment_start:
                break
            if _in_ranges(m.start(), quoted):
                continue
            start = line_start + m.start()
            end = line_start + m.end()
            if masked[start:end] != source[start:end]:
                continue

            numerator, denominator = m.group(1), m.group(2)
            results.append(
                DivisionMatch(
                    location=index.location(start, end),
                    typeset=fraction_typeset(
                        escape_typeset(numerator), escape_typeset(denominator)
                    ),
                    inline_text=inline_fraction(numerator, denominator),
                    numerator=numerator,
                    denominator=denominator,
                )
            )

    return results


@register_detector("division")
class DivisionDetector:
    """Detector wrapper around find_divisions()."""

    @property
    def name(self) -> str:
        return "division"

    def scan(self, source: str, masked: str) -> list[DivisionMatch]:
        return find_divisions(source, masked)
