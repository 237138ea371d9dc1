"""Recursive-descent parser for arithmetic fragments.

Parses un-lexed (masked) source text directly, character by character.
Failure is ordinary data: every rule returns ``None`` instead of raising, so
callers can try a position speculatively and move on.

Grammar (lowest to highest precedence)::

    additive       := multiplicative (("+" | "-") multiplicative)*
    multiplicative := unary (("*" | "/") unary)*
    unary          := ("+" | "-") unary | primary
    primary        := "new" qualified ["(" args ")"]
                    | "(" additive ")" | "{" additive "}"
                    | number
                    | qualified postfix*
    postfix        := "." ident | "[" text "]" | "(" args ")"

``^`` is never exponentiation (it is XOR in the scanned dialect); any span
containing it is rejected outright.

Trees are bounded: more than ``MAX_NODES`` nodes (arguments and indexes
included) or bracket nesting deeper than ``MAX_DEPTH`` means no match, which
keeps the recursive renderers within the interpreter stack.

Example:
    >>> parse_exact("a / (b + 1)")
    Binary(op='/', left=Identifier(name='a'), right=Group(...))
    >>> parse_exact("a ^ b") is None
    True

Thread Safety:
Parser instances are single-use and local to one call.

"""

from __future__ import annotations

from dataclasses import dataclass

from inlinemath.nodes import (
    Binary,
    Call,
    Construct,
    Expr,
    Group,
    Identifier,
    Index,
    Member,
    Number,
    Raw,
    Unary,
)
from inlinemath.parsing.brackets import find_matching, split_top_level
from inlinemath.parsing.charsets import DIGITS, IDENT_PART, IDENT_START, XOR

# Bracket nesting at which parsing gives up
MAX_DEPTH = 48

# Nodes per tree at which parsing gives up; renderers recurse once per level
MAX_NODES = 4 * MAX_DEPTH

_GROUP_CLOSE = {"(": ")", "{": "}"}


@dataclass(frozen=True, slots=True)
class ParseResult:
    """A parsed expression and the offset just past the consumed text.

    ``end`` includes any whitespace skipped after the last token.
    """

    expr: Expr
    end: int


def skip_ws(text: str, i: int) -> int:
    """Return the first index at or after ``i`` that is not whitespace."""
    n = len(text)
    while i < n and text[i].isspace():
        i += 1
    return i


def scan_qualified_ident(text: str, i: int) -> tuple[str, int] | None:
    """Scan ``a . b . c`` starting at ``i``.

    Returns the dotted name with inner whitespace removed and the end offset,
    or None when no identifier starts at ``i``.
    """
    n = len(text)
    if i >= n or text[i] not in IDENT_START:
        return None
    j = i
    while j < n and text[j] in IDENT_PART:
        j += 1
    segments = [text[i:j]]
    while True:
        dot = skip_ws(text, j)
        if dot >= n or text[dot] != ".":
            break
        seg_start = skip_ws(text, dot + 1)
        if seg_start >= n or text[seg_start] not in IDENT_START:
            break
        j = seg_start
        while j < n and text[j] in IDENT_PART:
            j += 1
        segments.append(text[seg_start:j])
    return ".".join(segments), j


def scan_number(text: str, i: int) -> tuple[str, int] | None:
    """Scan ``digits`` or ``digits.digits`` starting at ``i``."""
    n = len(text)
    j = i
    while j < n and text[j] in DIGITS:
        j += 1
    if j == i:
        return None
    if j + 1 < n and text[j] == "." and text[j + 1] in DIGITS:
        j += 1
        while j < n and text[j] in DIGITS:
            j += 1
    return text[i:j], j


class ExpressionParser:
    """Single-use parser over one text, positioned at ``pos``.

    Usage:
            >>> parser = ExpressionParser("x = a * b;", 4)
            >>> parser.parse_expression()
            Binary(op='*', left=Identifier(name='a'), right=Identifier(name='b'))
            >>> parser.pos
            9

    """

    __slots__ = ("_text", "pos", "_depth", "nodes")

    def __init__(self, text: str, start: int = 0, depth: int = 0, nodes: int = 0) -> None:
        self._text = text
        self.pos = start
        self._depth = depth
        # Nodes built so far, including those of enclosing parsers
        self.nodes = nodes

    def parse_expression(self) -> Expr | None:
        if self._depth > MAX_DEPTH:
            return None
        return self._parse_additive()

    def _parse_additive(self) -> Expr | None:
        left = self._parse_multiplicative()
        if left is None:
            return None
        while True:
            self.pos = skip_ws(self._text, self.pos)
            op = self._peek()
            if op not in ("+", "-"):
                return left
            self.pos += 1
            right = self._parse_multiplicative()
            if right is None or not self._count():
                return None
            left = Binary(op, left, right)

    def _parse_multiplicative(self) -> Expr | None:
        left = self._parse_unary()
        if left is None:
            return None
        while True:
            self.pos = skip_ws(self._text, self.pos)
            op = self._peek()
            if op not in ("*", "/"):
                return left
            self.pos += 1
            right = self._parse_unary()
            if right is None or not self._count():
                return None
            left = Binary(op, left, right)

    def _parse_unary(self) -> Expr | None:
        # Iterative so long sign chains cannot exhaust the stack
        signs: list[str] = []
        while True:
            self.pos = skip_ws(self._text, self.pos)
            op = self._peek()
            if op not in ("+", "-"):
                break
            signs.append(op)
            self.pos += 1
            if not self._count():
                return None
        expr = self._parse_primary()
        if expr is None:
            return None
        for op in reversed(signs):
            expr = Unary(op, expr)
        return expr

    def _parse_primary(self) -> Expr | None:
        text = self._text
        self.pos = skip_ws(text, self.pos)
        ch = self._peek()

        if text.startswith("new", self.pos) and self._peek(3) not in IDENT_PART:
            construct = self._parse_construct()
            if construct is not None:
                return construct

        if ch in _GROUP_CLOSE:
            self.pos += 1
            self._depth += 1
            inner = self.parse_expression()
            self._depth -= 1
            if inner is None:
                return None
            self.pos = skip_ws(text, self.pos)
            if self._peek() != _GROUP_CLOSE[ch]:
                return None
            self.pos += 1
            return Group(ch, inner) if self._count() else None

        number = scan_number(text, self.pos)
        if number is not None:
            value, self.pos = number
            return Number(value) if self._count() else None

        ident = scan_qualified_ident(text, self.pos)
        if ident is not None:
            name, self.pos = ident
            if not self._count():
                return None
            return self._parse_postfix(Identifier(name))

        return None

    def _parse_construct(self) -> Expr | None:
        """Parse ``new Type`` or ``new Type(args)``; None if no type follows."""
        text = self._text
        ctor = scan_qualified_ident(text, skip_ws(text, self.pos + 3))
        if ctor is None:
            return None
        name, end = ctor
        open_paren = skip_ws(text, end)
        if open_paren < len(text) and text[open_paren] == "(":
            close = find_matching(text, open_paren)
            if close is not None:
                self.pos = close + 1
                args = self._parse_args(text[open_paren + 1 : close])
                return Construct(Identifier(name), args) if self._count(2) else None
        self.pos = end
        return Construct(Identifier(name), None) if self._count(2) else None

    def _parse_postfix(self, expr: Expr) -> Expr | None:
        text = self._text
        while True:
            self.pos = skip_ws(text, self.pos)
            ch = self._peek()

            if ch == ".":
                member = scan_qualified_ident(text, skip_ws(text, self.pos + 1))
                if member is None:
                    return expr
                name, self.pos = member
                if not self._count():
                    return None
                expr = Member(expr, name)
                continue

            if ch == "[" or ch == "(":
                close = find_matching(text, self.pos)
                if close is None:
                    return expr
                inside = text[self.pos + 1 : close]
                self.pos = close + 1
                if ch == "[":
                    expr = Index(expr, self._parse_or_raw(inside.strip()))
                else:
                    expr = Call(expr, self._parse_args(inside))
                if not self._count():
                    return None
                continue

            return expr

    def _parse_args(self, args_text: str) -> tuple[Expr, ...]:
        return tuple(self._parse_or_raw(part) for part in split_top_level(args_text))

    def _parse_or_raw(self, text: str) -> Expr:
        child = ExpressionParser(text, 0, self._depth + 1, self.nodes)
        expr = child.parse_whole()
        if expr is not None:
            self.nodes = child.nodes
            return expr
        # The Raw leaf replaces whatever the failed parse built, unless it overflowed
        self.nodes = child.nodes if child.nodes > MAX_NODES else self.nodes + 1
        return Raw(text)

    def parse_whole(self) -> Expr | None:
        """Parse from ``pos`` to the end of the text, or return None."""
        if XOR in self._text or self._depth > MAX_DEPTH:
            return None
        expr = self.parse_expression()
        if expr is None or skip_ws(self._text, self.pos) != len(self._text):
            return None
        return expr

    def _count(self, n: int = 1) -> bool:
        """Record ``n`` new nodes; False once the tree exceeds MAX_NODES."""
        self.nodes += n
        return self.nodes <= MAX_NODES

    def _peek(self, ahead: int = 0) -> str:
        i = self.pos + ahead
        return self._text[i] if i < len(self._text) else ""


def parse_exact(text: str) -> Expr | None:
    """Parse all of ``text`` as a single expression.

    Leading and trailing whitespace is allowed. Returns None when anything is
    left over, when nothing parses, or when ``text`` contains ``^``.
    """
    return ExpressionParser(text).parse_whole()


def parse_at(text: str, start: int) -> ParseResult | None:
    """Parse the longest expression starting at ``start``.

    Returns None when no expression starts there or the consumed span
    contains ``^``.
    """
    parser = ExpressionParser(text, start)
    expr = parser.parse_expression()
    if expr is None:
        return None
    if XOR in text[start : parser.pos]:
        return None
    return ParseResult(expr, parser.pos)


def parse_or_raw(text: str) -> Expr:
    """Parse ``text`` exactly, falling back to a ``Raw`` leaf holding it."""
    expr = parse_exact(text)
    return expr if expr is not None else Raw(text)
