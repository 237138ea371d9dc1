"""Typed expression nodes for inlinemath.

All nodes are frozen dataclasses with slots for:
- Immutability: trees are safe to share and to use as cache keys
- Structural equality: identical trees compare and hash equal
- Pattern matching: ``match`` statements work naturally

Node Hierarchy:
Expr
├── Number      numeric literal, kept as source text
├── Identifier  possibly dotted name (``Math.PI``)
├── Raw         fallback leaf for text the parser could not structure
├── Group       ``( ... )`` or ``{ ... }``
├── Unary       prefix ``+`` / ``-``
├── Binary      ``+ - * /``
├── Member      ``obj.name`` after an index or call
├── Index       ``obj[index]``
├── Call        ``callee(args)``
└── Construct   ``new Type(args)``

Thread Safety:
All nodes are frozen (immutable) and safe to share across threads.

"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from typing import Literal

BinaryOp = Literal["+", "-", "*", "/"]
UnaryOp = Literal["+", "-"]
Bracket = Literal["(", "{"]


@dataclass(frozen=True, slots=True)
class Expr:
    """Base class for all expression nodes."""


@dataclass(frozen=True, slots=True)
class Number(Expr):
    """Numeric literal: digits with an optional fractional part."""

    value: str


@dataclass(frozen=True, slots=True)
class Identifier(Expr):
    """Identifier or dotted identifier chain (``a.b.c``)."""

    name: str


@dataclass(frozen=True, slots=True)
class Raw(Expr):
    """Unstructured source text.

    Produced only where a sub-expression is required but cannot be parsed.
    Terminal: its text is never parsed again.

    """

    text: str


@dataclass(frozen=True, slots=True)
class Group(Expr):
    """Bracketed sub-expression, keeping the bracket the source used."""

    bracket: Bracket
    expr: Expr


@dataclass(frozen=True, slots=True)
class Unary(Expr):
    op: UnaryOp
    expr: Expr


@dataclass(frozen=True, slots=True)
class Binary(Expr):
    op: BinaryOp
    left: Expr
    right: Expr


@dataclass(frozen=True, slots=True)
class Member(Expr):
    object: Expr
    member: str


@dataclass(frozen=True, slots=True)
class Index(Expr):
    object: Expr
    index: Expr


@dataclass(frozen=True, slots=True)
class Call(Expr):
    callee: Expr
    args: tuple[Expr, ...]


@dataclass(frozen=True, slots=True)
class Construct(Expr):
    """Constructor call ``new Type(args)``.

    ``args`` is None when the source has no argument list at all (``new Foo``),
    which renders differently from an empty list (``new Foo()``).

    """

    ctor: Expr
    args: tuple[Expr, ...] | None


def children(expr: Expr) -> tuple[Expr, ...]:
    """Return the direct child nodes of ``expr`` in source order."""
    match expr:
        case Group(expr=inner) | Unary(expr=inner):
            return (inner,)
        case Binary(left=left, right=right):
            return (left, right)
        case Member(object=obj):
            return (obj,)
        case Index(object=obj, index=index):
            return (obj, index)
        case Call(callee=callee, args=args):
            return (callee, *args)
        case Construct(ctor=ctor, args=args):
            return (ctor, *(args or ()))
        case _:
            return ()


def walk(expr: Expr) -> Iterator[Expr]:
    """Yield ``expr`` and all of its descendants, depth first."""
    stack = [expr]
    while stack:
        node = stack.pop()
        yield node
        stack.extend(reversed(children(node)))


def contains_operator(expr: Expr) -> bool:
    """Return True if any Binary node occurs anywhere in the tree.

    A lone identifier, literal or invocation without arithmetic is not worth
    surfacing as an expression.
    """
    return any(isinstance(node, Binary) for node in walk(expr))


__all__ = [
    "Binary",
    "BinaryOp",
    "Bracket",
    "Call",
    "Construct",
    "Expr",
    "Group",
    "Identifier",
    "Index",
    "Member",
    "Number",
    "Raw",
    "Unary",
    "UnaryOp",
    "children",
    "contains_operator",
    "walk",
]
