"""Overlap resolution for merged detector output.

Detectors run independently over the same masked text, so their matches can
overlap: ``3/4`` is both a division and part of the expression
``3/4*Math.pow(9,2)``. The host can decorate only one of them per span.

Rule: earliest start wins, ties go to the longest match, and a match is kept
only if it does not intersect anything already kept. Matches are never
clipped.

Example:
    >>> from inlinemath.location import SourceLocation
    >>> from inlinemath.matches import ExpressionMatch
    >>> def m(start, end):
    ...     loc = SourceLocation(1, start + 1, start, end, 1, end + 1)
    ...     return ExpressionMatch(loc, "", "", "")
    >>> [(r.start, r.end) for r in resolve_non_overlapping([m(2, 6), m(0, 10), m(12, 20)])]
    [(0, 10), (12, 20)]

"""

from __future__ import annotations

from collections.abc import Iterable
from typing import TypeVar

from inlinemath.matches import Match

M = TypeVar("M", bound=Match)


def resolve_non_overlapping(matches: Iterable[M]) -> list[M]:
    """Reduce matches to a non-overlapping set ordered by start offset.

    The sort is stable, so among matches with identical ranges the one
    produced first (detector order) is kept.
    """
    ordered = sorted(matches, key=lambda m: (m.start, -m.location.length))
    kept: list[M] = []
    for match in ordered:
        # Sorted by start and kept matches never overlap, so only the last
        # kept match can reach past this start
        if kept and kept[-1].location.overlaps(match.location):
            continue
        kept.append(match)
    return kept


__all__ = ["resolve_non_overlapping"]
