"""Comment and literal masking.

Every detector scans masked text, never raw source: a ``/`` inside a comment
or a digit inside a string must not look like arithmetic.

``mask()`` returns a string of the same length as its input where comments,
string literals, character literals and text blocks are blanked out. Line
breaks are kept everywhere, so offsets and line/column positions in the masked
text are valid positions in the original.

Example:
    >>> mask('x = a / b; // a/b')
    'x = a / b;       '
    >>> mask('s = "1/2";')
    's =      ;'

Thread Safety:
Pure function, no shared state.

"""

from __future__ import annotations

from enum import Enum

from inlinemath.utils.text import is_line_break

BLANK = " "


class MaskState(Enum):
    """Scanner state while walking the source."""

    NORMAL = "normal"
    LINE_COMMENT = "line_comment"
    BLOCK_COMMENT = "block_comment"
    STRING = "string"
    CHAR = "char"
    TEXT_BLOCK = "text_block"


def mask(source: str) -> str:
    """Blank out comments and quoted literals, keeping length and line breaks.

    Unterminated strings and character literals end at the line break;
    unterminated block comments and text blocks run to the end of the text.

    Args:
        source: Program source text

    Returns:
        Masked text, ``len(result) == len(source)``
    """
    out = list(source)
    state = MaskState.NORMAL
    escape = False
    n = len(source)
    i = 0

    while i < n:
        ch = source[i]

        if state is MaskState.NORMAL:
            if ch == "/" and i + 1 < n and source[i + 1] in "/*":
                state = (
                    MaskState.LINE_COMMENT if source[i + 1] == "/" else MaskState.BLOCK_COMMENT
                )
                out[i] = out[i + 1] = BLANK
                i += 2
                continue
            # """ must be checked before " or the block reads as an empty string
            if source.startswith('"""', i):
                state = MaskState.TEXT_BLOCK
                out[i] = out[i + 1] = out[i + 2] = BLANK
                i += 3
                continue
            if ch == '"' or ch == "'":
                state = MaskState.STRING if ch == '"' else MaskState.CHAR
                escape = False
                out[i] = BLANK

        elif state is MaskState.LINE_COMMENT:
            if is_line_break(ch):
                state = MaskState.NORMAL
            else:
                out[i] = BLANK

        elif state is MaskState.BLOCK_COMMENT:
            if ch == "*" and i + 1 < n and source[i + 1] == "/":
                out[i] = out[i + 1] = BLANK
                state = MaskState.NORMAL
                i += 2
                continue
            if not is_line_break(ch):
                out[i] = BLANK

        elif state is MaskState.TEXT_BLOCK:
            if source.startswith('"""', i):
                out[i] = out[i + 1] = out[i + 2] = BLANK
                state = MaskState.NORMAL
                i += 3
                continue
            if not is_line_break(ch):
                out[i] = BLANK

        else:
            # STRING or CHAR
            quote = '"' if state is MaskState.STRING else "'"
            if is_line_break(ch):
                state = MaskState.NORMAL
                escape = False
            else:
                out[i] = BLANK
                if escape:
                    escape = False
                elif ch == "\\":
                    escape = True
                elif ch == quote:
                    state = MaskState.NORMAL

        i += 1

    return "".join(out)
