"""Line handling shared by the masker, detectors and location tracking.

Only ``\\n`` and ``\\r`` count as line-break characters (``\\r\\n`` is one
break). ``str.splitlines`` is deliberately not used: it also splits on form
feeds, vertical tabs and Unicode separators, which the masker preserves as
ordinary code characters.

Example:
    >>> list(iter_lines("a\\r\\nb"))
    [(0, 'a'), (3, 'b')]
"""

from __future__ import annotations

import re
from collections.abc import Iterator

LINE_BREAK_CHARS: frozenset[str] = frozenset("\n\r")

_LINE_BREAK_RE = re.compile(r"\r\n|\r|\n")


def is_line_break(char: str) -> bool:
    """Return True for ``\\n`` and ``\\r``."""
    return char in LINE_BREAK_CHARS


def line_starts(text: str) -> list[int]:
    """Return the absolute offset at which every line of ``text`` starts.

    The first entry is always 0; a trailing line break opens a final empty
    line.
    """
    starts = [0]
    starts.extend(m.end() for m in _LINE_BREAK_RE.finditer(text))
    return starts


def iter_lines(text: str) -> Iterator[tuple[int, str]]:
    """Yield ``(start_offset, line_text)`` pairs, line breaks excluded."""
    pos = 0
    for m in _LINE_BREAK_RE.finditer(text):
        yield pos, text[pos : m.start()]
        pos = m.end()
    yield pos, text[pos:]
