"""Exception classes for inlinemath.

Scanning never raises for any input text: a span that cannot be recognized
simply produces no match. These exceptions cover programming and
configuration mistakes only.
"""

from __future__ import annotations


class InlineMathError(Exception):
    """Base exception for all inlinemath errors.

    Subclass this for specific error categories.
    """

    pass


class ConfigError(InlineMathError):
    """Invalid scan configuration.

    Raised when a ScanConfig field holds a value the detectors cannot use.
    """

    def __init__(self, field: str, message: str) -> None:
        """Initialize config error.

        Args:
            field: Name of the offending ScanConfig field
            message: Description of the problem
        """
        self.field = field
        super().__init__(f"Invalid config field '{field}': {message}")


class RenderError(InlineMathError):
    """Error during expression rendering.

    Raised when a renderer is handed something that is not an Expr node.
    """

    pass
