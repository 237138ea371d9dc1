"""Counting-loop recognition shared by the summation and mapping detectors.

Only ascending unit-step loops are recognized::

    for (<type> i = lower; i < upper; i++)      upper bound  upper - 1
    for (<type> i = lower; i <= upper; ++i)     upper bound  upper

The update clause must be exactly ``i++``, ``++i``, ``i += 1`` or
``i = i + 1``. Anything else (descending loops, strides, multiple variables)
is rejected, because the inclusive bound is only valid for a unit step.

Thread Safety:
Pure functions over masked text.

"""

from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import dataclass
from typing import TypeVar

from inlinemath.parsing import find_matching, skip_ws
from inlinemath.parsing.charsets import is_ident_char

T = TypeVar("T")

_INIT_RE = re.compile(
    r"\b(?:var|let|const|int|long|size_t|auto)?\s*([A-Za-z_]\w*)\s*=(?!=)\s*([^;]+)$",
    re.ASCII,
)


@dataclass(frozen=True, slots=True)
class LoopHeader:
    """Loop variable and inclusive bounds, as source text."""

    index: str
    lower: str
    upper: str


@dataclass(frozen=True, slots=True)
class CountingLoop:
    """A recognized loop: header plus body text.

    ``body`` excludes the braces of a block body and includes the ``;`` of a
    single-statement body. ``end`` is the offset just past the body.
    """

    start: int
    end: int
    header: LoopHeader
    body: str


def parse_loop_header(header: str) -> LoopHeader | None:
    """Parse the text between a ``for`` statement's parentheses."""
    parts = header.split(";")
    if len(parts) < 3:
        return None
    init, cond, update = parts[0].strip(), parts[1].strip(), parts[2].strip()

    if "," in init:
        return None
    init_m = _INIT_RE.search(init)
    if init_m is None:
        return None
    index = init_m.group(1)
    lower = init_m.group(2).strip()
    var = re.escape(index)

    cond_m = re.fullmatch(rf"{var}\s*(<=|<)(?![<=])\s*([^;]+)", cond, re.ASCII)
    if cond_m is None:
        return None
    op, rhs = cond_m.group(1), cond_m.group(2).strip()

    unit_step = rf"\+\+\s*{var}|{var}\s*\+\+|{var}\s*\+=\s*1|{var}\s*=\s*{var}\s*\+\s*1"
    if re.fullmatch(unit_step, update, re.ASCII) is None:
        return None

    upper = f"{rhs} - 1" if op == "<" else rhs
    return LoopHeader(index=index, lower=lower, upper=upper)


def _loop_body(masked: str, after_header: int) -> tuple[str, int] | None:
    """Return ``(body_text, end)`` for the statement following a loop header."""
    start = skip_ws(masked, after_header)
    if start >= len(masked):
        return None
    if masked[start] == "{":
        close = find_matching(masked, start)
        if close is None:
            return None
        return masked[start + 1 : close], close + 1
    semi = masked.find(";", start)
    if semi == -1:
        return None
    return masked[start : semi + 1], semi + 1


def scan_counting_loops(
    masked: str, extract: Callable[[CountingLoop], T | None]
) -> list[tuple[CountingLoop, T]]:
    """Find counting loops and apply ``extract`` to each one.

    Scanning resumes after the body of every loop ``extract`` accepts, and
    after the header of every loop it rejects, so loops nested inside a
    rejected loop are still examined.

    Args:
        masked: Masked source text
        extract: Returns the detector's payload for a loop, or None to reject

    Returns:
        ``(loop, payload)`` pairs in source order
    """
    results: list[tuple[CountingLoop, T]] = []
    n = len(masked)
    i = 0
    while (start := masked.find("for", i)) != -1:
        i = start + 3
        if (start > 0 and is_ident_char(masked[start - 1])) or (
            i < n and is_ident_char(masked[i])
        ):
            continue
        open_paren = skip_ws(masked, i)
        if open_paren >= n or masked[open_paren] != "(":
            continue
        close_paren = find_matching(masked, open_paren)
        if close_paren is None:
            continue
        i = close_paren + 1

        header = parse_loop_header(masked[open_paren + 1 : close_paren])
        if header is None:
            continue
        body = _loop_body(masked, close_paren + 1)
        if body is None:
            continue

        loop = CountingLoop(start=start, end=body[1], header=header, body=body[0])
        payload = extract(loop)
        if payload is None:
            continue
        results.append((loop, payload))
        i = loop.end

    return results
