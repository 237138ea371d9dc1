"""Bracket matching and top-level argument splitting.

Both helpers work on masked text, where brackets inside comments and
literals are already blanked.
"""

from __future__ import annotations

from inlinemath.parsing.charsets import BRACKET_PAIRS


def find_matching(text: str, open_index: int) -> int | None:
    """Return the index of the bracket closing the one at ``open_index``.

    Only the bracket kind found at ``open_index`` is counted, so
    ``find_matching("f(a[0)", 1)`` is 5. Returns None when the bracket is
    never closed or ``open_index`` is not an opening bracket.
    """
    if open_index >= len(text):
        return None
    open_ch = text[open_index]
    close_ch = BRACKET_PAIRS.get(open_ch)
    if close_ch is None:
        return None
    depth = 0
    for i in range(open_index, len(text)):
        ch = text[i]
        if ch == open_ch:
            depth += 1
        elif ch == close_ch:
            depth -= 1
            if depth == 0:
                return i
    return None


def split_top_level(text: str, sep: str = ",") -> list[str]:
    """Split ``text`` on ``sep`` outside any (), {} or [] nesting.

    Parts are stripped and empty parts dropped. Stray closing brackets never
    drive the depth below zero.

    Example:
        >>> split_top_level("f(a, b), [1, 2], c")
        ['f(a, b)', '[1, 2]', 'c']
    """
    parts: list[str] = []
    depth = {"(": 0, "{": 0, "[": 0}
    closers = {close: open_ for open_, close in BRACKET_PAIRS.items()}
    start = 0
    for i, ch in enumerate(text):
        if ch in depth:
            depth[ch] += 1
        elif ch in closers:
            opener = closers[ch]
            depth[opener] = max(0, depth[opener] - 1)
        elif ch == sep and not any(depth.values()):
            part = text[start:i].strip()
            if part:
                parts.append(part)
            start = i + 1
    tail = text[start:].strip()
    if tail:
        parts.append(tail)
    return parts
