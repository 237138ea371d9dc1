"""Source location tracking for matches.

Provides SourceLocation, the range every Match carries, and LineIndex, which
converts absolute offsets into line/column positions of the original text.

Masking preserves text length and line breaks, so an offset found in masked
text is also an offset into the original, and both coordinate systems
describe the same span.

Thread Safety:
SourceLocation is a frozen value and may be shared freely between threads.
LineIndex is read-only after construction.

"""

from __future__ import annotations

from bisect import bisect_right
from dataclasses import dataclass

from inlinemath.utils.text import line_starts


@dataclass(frozen=True, slots=True)
class SourceLocation:
    """Half-open source range ``[offset, end_offset)`` with line/column form.

    Line and column numbers are 1-indexed; columns count characters from the
    start of the line.

    Attributes:
        lineno: Starting line number (1-indexed)
        col_offset: Starting column (1-indexed)
        offset: Absolute start offset in the source text
        end_offset: Absolute end offset (exclusive)
        end_lineno: Ending line number
        end_col_offset: Column just past the last character

    Examples:
            >>> loc = SourceLocation(1, 10, 9, 12, 1, 13)
            >>> str(loc)
            '1:10-1:13'
            >>> loc.length
            3

    """

    lineno: int
    col_offset: int
    offset: int = 0
    end_offset: int = 0
    end_lineno: int | None = None
    end_col_offset: int | None = None

    def __str__(self) -> str:
        """Format location as ``line:col-line:col``."""
        if self.end_lineno is None:
            return f"{self.lineno}:{self.col_offset}"
        return f"{self.lineno}:{self.col_offset}-{self.end_lineno}:{self.end_col_offset}"

    @property
    def length(self) -> int:
        return self.end_offset - self.offset

    def overlaps(self, other: SourceLocation) -> bool:
        """Return True if the two ranges share at least one character."""
        return self.offset < other.end_offset and other.offset < self.end_offset


class LineIndex:
    """Offset to line/column lookup for one text.

    Build once per scan and share between detectors.

    Usage:
            >>> index = LineIndex("a = 1;\\nb = x / y;")
            >>> index.position(11)
            (2, 5)
            >>> str(index.location(11, 16))
            '2:5-2:10'

    """

    __slots__ = ("_starts", "_length")

    def __init__(self, text: str) -> None:
        self._starts = line_starts(text)
        self._length = len(text)

    def position(self, offset: int) -> tuple[int, int]:
        """Return the 1-indexed ``(lineno, col)`` of an absolute offset.

        Offsets are clamped to ``[0, len(text)]``.
        """
        offset = min(max(offset, 0), self._length)
        line = bisect_right(self._starts, offset) - 1
        return line + 1, offset - self._starts[line] + 1

    def location(self, start: int, end: int) -> SourceLocation:
        """Build the SourceLocation of the half-open range ``[start, end)``."""
        lineno, col = self.position(start)
        end_lineno, end_col = self.position(end)
        return SourceLocation(
            lineno=lineno,
            col_offset=col,
            offset=start,
            end_offset=end,
            end_lineno=end_lineno,
            end_col_offset=end_col,
        )
