"""Power-call detector: ``Math.pow(base, exponent)`` and friends.

The accepted function names come from ``ScanConfig.power_functions``; any
qualifying prefix is allowed (``java.lang.Math.pow``), as is whitespace
around the dots.

Example:
    >>> from inlinemath.masking import mask
    >>> source = "auto x = 3/4*Math.pow(9,2)"
    >>> [m.typeset for m in find_power_calls(source, mask(source))]
    ['{9}^{2}']

"""

from __future__ import annotations

import re
from functools import lru_cache

from inlinemath.config import get_scan_config
from inlinemath.detectors import register_detector
from inlinemath.location import LineIndex
from inlinemath.matches import PowerMatch
from inlinemath.parsing import find_matching, parse_or_raw, split_top_level
from inlinemath.parsing.charsets import XOR, is_ident_char
from inlinemath.renderers.inline import power_inline
from inlinemath.renderers.typeset import power_typeset


@lru_cache(maxsize=32)
def power_call_pattern(names: tuple[str, ...]) -> re.Pattern[str]:
    """Compile the call pattern for a set of qualified function names.

    The match ends at the opening parenthesis.
    """
    alternatives = "|".join(
        r"\s*\.\s*".join(re.escape(part) for part in name.split(".")) for name in names
    )
    return re.compile(rf"(?:\b[A-Za-z_]\w*\s*\.\s*)*(?:{alternatives})\s*\(", re.ASCII)


def find_power_calls(source: str, masked: str) -> list[PowerMatch]:
    """Find two-argument power calls.

    A call is skipped when it is preceded by an identifier character or a
    dot, its parenthesis is never closed, it does not have exactly two
    arguments, or either argument contains ``^``.
    """
    names = get_scan_config().power_functions
    if not names:
        return []
    pattern = power_call_pattern(names)
    index = LineIndex(source)
    results: list[PowerMatch] = []

    pos = 0
    while (m := pattern.search(masked, pos)) is not None:
        start = m.start()
        pos = m.end()
        if start > 0 and (is_ident_char(masked[start - 1]) or masked[start - 1] == "."):
            continue

        open_paren = m.end() - 1
        close_paren = find_matching(masked, open_paren)
        if close_paren is None:
            continue

        args = split_top_level(masked[open_paren + 1 : close_paren])
        if len(args) != 2:
            continue
        base_text, exponent_text = args
        if XOR in base_text or XOR in exponent_text:
            continue

        base, exponent = parse_or_raw(base_text), parse_or_raw(exponent_text)
        end = close_paren + 1
        results.append(
            PowerMatch(
                location=index.location(start, end),
                typeset=power_typeset(base, exponent),
                inline_text=power_inline(base, exponent),
                callee=source[start:open_paren].strip(),
                base=base_text,
                exponent=exponent_text,
            )
        )
        pos = end

    return results


@register_detector("power")
class PowerDetector:
    """Detector wrapper around find_power_calls()."""

    @property
    def name(self) -> str:
        return "power"

    def scan(self, source: str, masked: str) -> list[PowerMatch]:
        return find_power_calls(source, masked)
