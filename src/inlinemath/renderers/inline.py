"""Compact inline (Unicode) renderer.

Produces short text meant to sit next to the source line. It transliterates
operators (``*`` to ``·``, ``/`` to the fraction slash ``⁄``) and keeps the
source's own brackets; it never adds parentheses of its own.

Example:
    >>> from inlinemath.parsing import parse_exact
    >>> to_inline_text(parse_exact("(a + b) / 2 * c"))
    '(a+b)⁄2·c'
    >>> inline_fraction("5", "10")
    '⁵⁄₁₀'

Thread Safety:
All functions are pure. Safe for concurrent use from multiple threads.

"""

from __future__ import annotations

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

FRACTION_SLASH = "⁄"
MIDDLE_DOT = "·"
SIGMA = "Σ"
RULE = "─"

_OPERATORS = {"*": MIDDLE_DOT, "/": FRACTION_SLASH, "+": "+", "-": "-"}

_SUPERSCRIPTS = str.maketrans("0123456789", "⁰¹²³⁴⁵⁶⁷⁸⁹")
_SUBSCRIPTS = str.maketrans("0123456789", "₀₁₂₃₄₅₆₇₈₉")


def _is_ascii_digits(text: str) -> bool:
    return text.isascii() and text.isdigit()


def to_superscript_digits(value: str) -> str | None:
    """Return ``value`` in superscript digits, or None if it is not all digits."""
    if not _is_ascii_digits(value):
        return None
    return value.translate(_SUPERSCRIPTS)


def to_subscript_digits(value: str) -> str | None:
    """Return ``value`` in subscript digits, or None if it is not all digits."""
    if not _is_ascii_digits(value):
        return None
    return value.translate(_SUBSCRIPTS)


def _args(args: tuple[Expr, ...]) -> str:
    return ",".join(to_inline_text(arg) for arg in args)


def to_inline_text(expr: Expr) -> str:
    """Render an expression tree as compact Unicode text.

    Raises:
        RenderError: If ``expr`` is not an Expr node
    """
    match expr:
        case Number(value=value):
            return value
        case Identifier(name=name):
            return name
        case Raw(text=text):
            return text
        case Group(bracket="{", expr=inner):
            return f"{{{to_inline_text(inner)}}}"
        case Group(expr=inner):
            return f"({to_inline_text(inner)})"
        case Unary(op=op, expr=inner):
            return f"{op}{to_inline_text(inner)}"
        case Binary(op=op, left=left, right=right):
            return f"{to_inline_text(left)}{_OPERATORS[op]}{to_inline_text(right)}"
        case Member(object=obj, member=member):
            return f"{to_inline_text(obj)}.{member}"
        case Index(object=obj, index=index):
            return f"{to_inline_text(obj)}[{to_inline_text(index)}]"
        case Call(callee=callee, args=args):
            return f"{to_inline_text(callee)}({_args(args)})"
        case Construct(ctor=ctor, args=None):
            return f"new {to_inline_text(ctor)}"
        case Construct(ctor=ctor, args=args):
            return f"new {to_inline_text(ctor)}({_args(args)})"
        case _:
            raise RenderError(f"Cannot render {type(expr).__name__!r} inline: not an Expr node")


def power_inline(base: Expr, exponent: Expr) -> str:
    """Render a power as ``x²`` or, for non-literal exponents, ``x^(n+1)``.

    A base containing an operator is parenthesized. Superscripts are used
    only when the exponent is a bare non-negative integer literal.
    """
    rendered = to_inline_text(base)
    if contains_operator(base):
        rendered = f"({rendered})"
    if isinstance(exponent, Number):
        superscript = to_superscript_digits(exponent.value)
        if superscript is not None:
            return f"{rendered}{superscript}"
    return f"{rendered}^({to_inline_text(exponent)})"


def inline_fraction(numerator: str, denominator: str) -> str:
    """Render a two-token fraction; integer operands use super/subscripts.

    Example:
        >>> inline_fraction("a", "b")
        'a⁄b'
    """
    top = to_superscript_digits(numerator)
    bottom = to_subscript_digits(denominator)
    if top is not None and bottom is not None:
        return f"{top}{FRACTION_SLASH}{bottom}"
    return f"{numerator}{FRACTION_SLASH}{denominator}"


def _pad_center(text: str, width: int) -> str:
    pad = width - len(text)
    if pad <= 0:
        return text
    # Odd padding goes left: one digit over two reads centred in editor fonts
    left = (pad + 1) // 2
    return " " * left + text + " " * (pad - left)


def stacked_fraction(numerator: str, denominator: str) -> str:
    """Render a three-line fraction for hover text.

    Example:
        >>> print(stacked_fraction("1", "10"))
         1
        ──
        10
    """
    width = max(len(numerator), len(denominator), 1)
    return "\n".join(
        (_pad_center(numerator, width), RULE * width, _pad_center(denominator, width))
    )


def summation_inline(accumulator: Expr, index: str, lower: Expr, upper: Expr, term: Expr) -> str:
    """Render ``acc = Σ_i=lower..upper term``."""
    return (
        f"{to_inline_text(accumulator)} = {SIGMA}_{index}="
        f"{to_inline_text(lower)}..{to_inline_text(upper)} {to_inline_text(term)}"
    )


def mapping_inline(target: Index, value: Expr, index: str, lower: Expr, upper: Expr) -> str:
    """Render ``a[i] = value  (i=lower..upper)``."""
    return (
        f"{to_inline_text(target)} = {to_inline_text(value)}  "
        f"({index}={to_inline_text(lower)}..{to_inline_text(upper)})"
    )


class InlineRenderer:
    """ExprRenderer producing compact Unicode text.

    Stateless; one instance can be shared across threads.
    """

    __slots__ = ()

    def render(self, expr: Expr) -> str:
        return to_inline_text(expr)
