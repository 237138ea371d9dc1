"""Loop-summation detector.

Recognizes a counting loop whose body accumulates into a variable and
renders it as a sum::

    for (int i = 0; i < n; i++) { sum += i * i; }
    ->  sum = Σ_{i=0}^{n - 1} i * i

Accumulation idioms, tried in this order (first found wins):
``acc += term;``, ``acc = acc + term;``, ``acc = term + acc;``.

Example:
    >>> from inlinemath.masking import mask
    >>> source = "for (int i = 0; i < n; i++) { sum += i * i; }"
    >>> [m.upper for m in find_summations(source, mask(source))]
    ['n - 1']

"""

from __future__ import annotations

import re

from inlinemath.detectors import register_detector
from inlinemath.detectors.loops import CountingLoop, scan_counting_loops
from inlinemath.location import LineIndex
from inlinemath.matches import SummationMatch
from inlinemath.parsing import parse_or_raw
from inlinemath.parsing.charsets import XOR
from inlinemath.renderers.inline import summation_inline
from inlinemath.renderers.typeset import summation_typeset

_ACCUMULATION_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"\b([A-Za-z_]\w*)\s*\+=\s*([^;]+);", re.ASCII),
    re.compile(r"\b([A-Za-z_]\w*)\s*=(?!=)\s*\1\b\s*\+\s*([^;]+);", re.ASCII),
    re.compile(r"\b([A-Za-z_]\w*)\s*=(?!=)\s*([^;]+)\s*\+\s*\1\s*;", re.ASCII),
)


def extract_accumulation(body: str) -> tuple[str, str] | None:
    """Return ``(accumulator, term)`` for the first accumulation idiom found."""
    for pattern in _ACCUMULATION_PATTERNS:
        m = pattern.search(body)
        if m is not None:
            return m.group(1), m.group(2).strip()
    return None


def _summation(loop: CountingLoop) -> tuple[str, str] | None:
    found = extract_accumulation(loop.body)
    if found is None:
        return None
    accumulator, term = found
    header = loop.header
    if any(XOR in text for text in (header.lower, header.upper, term, accumulator)):
        return None
    return found


def find_summations(source: str, masked: str) -> list[SummationMatch]:
    """Find counting loops that sum a term into an accumulator."""
    index = LineIndex(source)
    results: list[SummationMatch] = []

    for loop, (accumulator, term) in scan_counting_loops(masked, _summation):
        header = loop.header
        acc_expr = parse_or_raw(accumulator)
        lower, upper = parse_or_raw(header.lower), parse_or_raw(header.upper)
        term_expr = parse_or_raw(term)
        results.append(
            SummationMatch(
                location=index.location(loop.start, loop.end),
                typeset=summation_typeset(acc_expr, header.index, lower, upper, term_expr),
                inline_text=summation_inline(acc_expr, header.index, lower, upper, term_expr),
                index=header.index,
                lower=header.lower,
                upper=header.upper,
                accumulator=accumulator,
                term=term,
            )
        )

    return results


@register_detector("summation")
class SummationDetector:
    """Detector wrapper around find_summations()."""

    @property
    def name(self) -> str:
        return "summation"

    def scan(self, source: str, masked: str) -> list[SummationMatch]:
        return find_summations(source, masked)
