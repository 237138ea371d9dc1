"""Pattern detectors for inlinemath.

Each detector looks for one idiom in masked source and returns typed matches:
- division: ``a / b`` between two simple tokens
- power: ``Math.pow(base, exponent)`` calls
- expression: any arithmetic expression containing an operator
- summation: counting loops accumulating ``acc += term``
- mapping: counting loops assigning ``array[i] = value``

Usage:
    >>> from inlinemath.detectors import get_detector
    >>> from inlinemath.masking import mask
    >>> source = "double r = num / den;"
    >>> [m.numerator for m in get_detector("division").scan(source, mask(source))]
    ['num']

Detector Architecture:
Detectors share nothing. Each takes ``(source, masked)`` and returns a fresh
list, so they can run in any order, in any subset, or in parallel; the
overlap resolver merges their output afterwards. Tunable settings are read
from the active ScanConfig (see inlinemath.config).

Thread Safety:
All detectors are stateless. Multiple threads can use the same instances
concurrently.

"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from inlinemath.matches import Match

__all__ = [
    "BUILTIN_DETECTORS",
    "Detector",
    "get_detector",
    "register_detector",
]


@runtime_checkable
class Detector(Protocol):
    """Protocol for detectors.

    Thread Safety:
        Detectors must be stateless. All state lives in the returned matches.

    """

    @property
    def name(self) -> str:
        """Detector identifier, also the ScanConfig flag prefix."""
        ...

    def scan(self, source: str, masked: str) -> list[Match]:
        """Return matches in ``source`` ordered by start offset.

        Args:
            source: Original text; used for text fields quoted back to the user
            masked: ``mask(source)``; all recognition happens here

        """
        ...


# Registry of built-in detectors
BUILTIN_DETECTORS: dict[str, type[Detector]] = {}


def register_detector(name: str) -> Callable[[type[Detector]], type[Detector]]:
    """Decorator to register a detector class under ``name``.

    Usage:
        @register_detector("division")
        class DivisionDetector:
            ...

    """

    def decorator(cls: type[Detector]) -> type[Detector]:
        BUILTIN_DETECTORS[name] = cls
        return cls

    return decorator


def get_detector(name: str) -> Detector:
    """Get a detector instance by name.

    Raises:
        KeyError: If detector name is not recognized

    """
    if name not in BUILTIN_DETECTORS:
        available = ", ".join(sorted(BUILTIN_DETECTORS.keys()))
        raise KeyError(f"Unknown detector: {name!r}. Available: {available}")
    return BUILTIN_DETECTORS[name]()


# Import built-in detectors to register them
# These imports trigger the @register_detector decorators
from inlinemath.detectors.division import DivisionDetector, find_divisions  # noqa: E402
from inlinemath.detectors.expressions import ExpressionDetector, find_expressions  # noqa: E402
from inlinemath.detectors.mapping import MappingDetector, find_mappings  # noqa: E402
from inlinemath.detectors.power import PowerDetector, find_power_calls  # noqa: E402
from inlinemath.detectors.summation import SummationDetector, find_summations  # noqa: E402

__all__ += [
    "DivisionDetector",
    "ExpressionDetector",
    "MappingDetector",
    "PowerDetector",
    "SummationDetector",
    "find_divisions",
    "find_expressions",
    "find_mappings",
    "find_power_calls",
    "find_summations",
]
