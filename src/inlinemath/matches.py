"""Typed match records produced by the detectors.

A match is a snapshot for one revision of one document: its range into the
original text, the detector's semantic fields as plain text, and both
renderings. Expression trees are used while rendering and then dropped.

Match Hierarchy:
Match (base)
├── DivisionMatch     token / token
├── PowerMatch        Math.pow(base, exponent)
├── ExpressionMatch   any arithmetic expression
├── SummationMatch    for-loop accumulating into a variable
└── MappingMatch      for-loop writing array[index] = value

Thread Safety:
All matches are frozen (immutable) and safe to share across threads.

"""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar

from inlinemath.location import SourceLocation
from inlinemath.renderers.inline import stacked_fraction


@dataclass(frozen=True, slots=True)
class Match:
    """Base class for all matches.

    Attributes:
        location: Range in the original text
        typeset: LaTeX rendering
        inline_text: Compact Unicode rendering

    """

    kind: ClassVar[str] = "match"

    location: SourceLocation
    typeset: str
    inline_text: str

    @property
    def start(self) -> int:
        return self.location.offset

    @property
    def end(self) -> int:
        return self.location.end_offset


@dataclass(frozen=True, slots=True)
class DivisionMatch(Match):
    """Simple ``a / b`` between two identifiers or numbers."""

    kind: ClassVar[str] = "division"

    numerator: str
    denominator: str

    @property
    def stacked(self) -> str:
        """Three-line stacked fraction, for hover text."""
        return stacked_fraction(self.numerator, self.denominator)


@dataclass(frozen=True, slots=True)
class PowerMatch(Match):
    """Two-argument power call such as ``Math.pow(x, 2)``."""

    kind: ClassVar[str] = "power"

    callee: str
    base: str
    exponent: str


@dataclass(frozen=True, slots=True)
class ExpressionMatch(Match):
    """Arithmetic expression found anywhere in code."""

    kind: ClassVar[str] = "expression"

    text: str


@dataclass(frozen=True, slots=True)
class SummationMatch(Match):
    """Counting loop that accumulates ``term`` into ``accumulator``.

    ``lower`` and ``upper`` are inclusive bounds.

    """

    kind: ClassVar[str] = "summation"

    index: str
    lower: str
    upper: str
    accumulator: str
    term: str


@dataclass(frozen=True, slots=True)
class MappingMatch(Match):
    """Counting loop that assigns ``array[index_expr] = value``.

    ``index`` is the loop variable; ``index_expr`` is the subscript text,
    which always mentions it.

    """

    kind: ClassVar[str] = "mapping"

    index: str
    lower: str
    upper: str
    array: str
    index_expr: str
    value: str


__all__ = [
    "DivisionMatch",
    "ExpressionMatch",
    "MappingMatch",
    "Match",
    "PowerMatch",
    "SummationMatch",
]
