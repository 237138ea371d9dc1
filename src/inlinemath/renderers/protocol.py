"""ExprRenderer protocol: stable interface for expression renderers.

Any renderer that implements ``render(expr) -> str`` conforms to this
protocol. ``TypesetRenderer`` and ``InlineRenderer`` are the built-in
implementations.

Example:
    from inlinemath.renderers.protocol import ExprRenderer

    def label(renderer: ExprRenderer, expr: Expr) -> str:
        return renderer.render(expr)

"""

from typing import Protocol

from inlinemath.nodes import Expr


class ExprRenderer(Protocol):
    """Protocol for expression renderers.

    Implementations must be pure: structurally equal trees render to equal
    strings, so callers can cache output by tree.

    """

    def render(self, expr: Expr) -> str:
        """Render an expression tree to a string.

        Args:
            expr: The expression to render.

        Returns:
            Rendered string output.

        """
        ...
