"""Generic expression detector.

Walks the masked text and tries the parser at every token start. A parse is
kept only when it is real arithmetic: it contains a binary operator, is not
just an invocation (``foo(a + b)`` is reported as the inner ``a + b``
instead), contains no ``^``, and ends on a token boundary.

Example:
    >>> from inlinemath.masking import mask
    >>> source = "area = width * height; // m^2"
    >>> [m.text for m in find_expressions(source, mask(source))]
    ['width * height']

"""

from __future__ import annotations

from inlinemath.config import get_scan_config
from inlinemath.detectors import register_detector
from inlinemath.location import LineIndex
from inlinemath.matches import ExpressionMatch
from inlinemath.nodes import Call, Construct, contains_operator
from inlinemath.parsing import parse_at
from inlinemath.parsing.charsets import EXPRESSION_START, XOR, is_boundary
from inlinemath.renderers.inline import to_inline_text
from inlinemath.renderers.typeset import to_typeset
from inlinemath.utils.logger import get_logger

logger = get_logger(__name__)


def find_expressions(
    source: str, masked: str, max_matches: int | None = None
) -> list[ExpressionMatch]:
    """Find arithmetic expressions anywhere in code.

    Args:
        source: Original text
        masked: ``mask(source)``
        max_matches: Stop after this many matches; defaults to
            ``ScanConfig.max_expression_matches``

    Returns:
        Non-overlapping matches ordered by start offset
    """
    if max_matches is None:
        max_matches = get_scan_config().max_expression_matches
    index = LineIndex(source)
    results: list[ExpressionMatch] = []
    n = len(masked)

    i = 0
    while i < n and len(results) < max_matches:
        if masked[i] not in EXPRESSION_START or (i > 0 and not is_boundary(masked[i - 1])):
            i += 1
            continue

        parsed = parse_at(masked, i)
        if parsed is None or isinstance(parsed.expr, (Call, Construct)):
            i += 1
            continue

        end = parsed.end
        while end > i and masked[end - 1].isspace():
            end -= 1
        if end <= i:
            i += 1
            continue
        if XOR in masked[i:end]:
            i = end
            continue
        if end < n and not is_boundary(masked[end]):
            i += 1
            continue
        if not contains_operator(parsed.expr):
            i = end
            continue

        results.append(
            ExpressionMatch(
                location=index.location(i, end),
                typeset=to_typeset(parsed.expr),
                inline_text=to_inline_text(parsed.expr),
                text=source[i:end],
            )
        )
        i = end

    if results and len(results) >= max_matches:
        logger.debug("expression match limit %d reached at offset %d", max_matches, i)

    return results


@register_detector("expression")
class ExpressionDetector:
    """Detector wrapper around find_expressions()."""

    @property
    def name(self) -> str:
        return "expression"

    def scan(self, source: str, masked: str) -> list[ExpressionMatch]:
        return find_expressions(source, masked)
