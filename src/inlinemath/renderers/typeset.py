"""Typeset (LaTeX) renderer.

Produces markup for a math-typesetting library (KaTeX, MathJax). Division
becomes a ``\\frac``, multiplication a ``\\cdot``, and parentheses are added
only where precedence requires them.

Example:
    >>> from inlinemath.parsing import parse_exact
    >>> to_typeset(parse_exact("(a + b) / 2 * c"))
    '\\\\frac{\\\\left(a + b\\\\right)}{2} \\\\cdot c'

Thread Safety:
All functions are pure. Safe for concurrent use from multiple threads.

"""

from __future__ import annotations

from enum import IntEnum

from inlinemath.errors import RenderError
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
    contains_operator,
)

_ESCAPES: dict[str, str] = {
    "\\": r"\textbackslash{}",
    "{": r"\{",
    "}": r"\}",
    "_": r"\_",
    "^": r"\^{}",
    "%": r"\%",
    "$": r"\$",
    "#": r"\#",
    "&": r"\&",
}

_ESCAPE_TABLE = str.maketrans(_ESCAPES)


class Prec(IntEnum):
    """Binding strength of each node kind."""

    ADD = 10
    MUL = 20
    UNARY = 30
    PRIMARY = 40


def escape_typeset(text: str) -> str:
    """Escape characters reserved by the typesetting language.

    Single pass, so the braces introduced for ``\\`` are not escaped again.
    """
    return text.translate(_ESCAPE_TABLE)


def precedence(expr: Expr) -> Prec:
    match expr:
        case Binary(op="+" | "-"):
            return Prec.ADD
        case Binary():
            return Prec.MUL
        case Unary():
            return Prec.UNARY
        case _:
            return Prec.PRIMARY


def _wrap(expr: Expr, min_prec: int) -> str:
    rendered = to_typeset(expr)
    if precedence(expr) < min_prec:
        return rf"\left({rendered}\right)"
    return rendered


def _args(args: tuple[Expr, ...]) -> str:
    return ", ".join(to_typeset(arg) for arg in args)


def to_typeset(expr: Expr) -> str:
    """Render an expression tree as LaTeX.

    Args:
        expr: Expression to render

    Returns:
        LaTeX markup

    Raises:
        RenderError: If ``expr`` is not an Expr node
    """
    match expr:
        case Number(value=value):
            return escape_typeset(value)
        case Identifier(name=name):
            return escape_typeset(name)
        case Raw(text=text):
            return rf"\text{{{escape_typeset(text)}}}"
        case Group(bracket="{", expr=inner):
            return rf"\left\{{{to_typeset(inner)}\right\}}"
        case Group(expr=inner):
            return rf"\left({to_typeset(inner)}\right)"
        case Unary(op=op, expr=inner):
            return f"{op}{_wrap(inner, Prec.UNARY)}"
        case Binary(op="/", left=left, right=right):
            return fraction_typeset(to_typeset(left), to_typeset(right))
        case Binary(op=op, left=left, right=right):
            prec = precedence(expr)
            symbol = r"\cdot" if op == "*" else op
            # Left-associative: an equal-precedence right operand needs parens
            return f"{_wrap(left, prec)} {symbol} {_wrap(right, prec + 1)}"
        case Member(object=obj, member=member):
            return f"{to_typeset(obj)}.{escape_typeset(member)}"
        case Index(object=obj, index=index):
            base = to_typeset(obj)
            if isinstance(obj, Index):
                base = f"{{{base}}}"
            return f"{base}_{{{to_typeset(index)}}}"
        case Call(callee=callee, args=args):
            return rf"{to_typeset(callee)}\left({_args(args)}\right)"
        case Construct(ctor=ctor, args=None):
            return rf"\operatorname{{new}}\,{to_typeset(ctor)}"
        case Construct(ctor=ctor, args=args):
            return rf"\operatorname{{new}}\,{to_typeset(ctor)}\left({_args(args)}\right)"
        case _:
            raise RenderError(f"Cannot typeset {type(expr).__name__!r}: not an Expr node")


def fraction_typeset(numerator: str, denominator: str) -> str:
    """Wrap two rendered operands in a ``\\frac``."""
    return rf"\frac{{{numerator}}}{{{denominator}}}"


def power_typeset(base: Expr, exponent: Expr) -> str:
    """Render ``base`` raised to ``exponent`` as ``{base}^{exponent}``.

    A base containing an operator is parenthesized so the exponent binds to
    the whole base.
    """
    rendered = to_typeset(base)
    if contains_operator(base):
        rendered = rf"\left({rendered}\right)"
    return f"{{{rendered}}}^{{{to_typeset(exponent)}}}"


def summation_typeset(
    accumulator: Expr, index: str, lower: Expr, upper: Expr, term: Expr
) -> str:
    """Render ``acc = \\sum_{i=lower}^{upper} term``."""
    return (
        f"{to_typeset(accumulator)} = "
        rf"\sum_{{{escape_typeset(index)}={to_typeset(lower)}}}^{{{to_typeset(upper)}}} "
        f"{to_typeset(term)}"
    )


def mapping_typeset(target: Index, value: Expr, index: str, lower: Expr, upper: Expr) -> str:
    """Render ``a_{i} = value,\\quad i = lower,\\ldots,upper``."""
    return (
        f"{to_typeset(target)} = {to_typeset(value)},"
        rf"\quad {escape_typeset(index)} = {to_typeset(lower)},\ldots,{to_typeset(upper)}"
    )


class TypesetRenderer:
    """ExprRenderer producing LaTeX markup.

    Stateless; one instance can be shared across threads.
    """

    __slots__ = ()

    def render(self, expr: Expr) -> str:
        return to_typeset(expr)
