"""ContextVar-based scan configuration for inlinemath.

Provides context-local configuration using Python's ContextVars (PEP 567).
Config is set once per scan() call and read by every detector in that
context, so detector entry points keep the plain ``scan(source, masked)``
signature.

Thread Safety:
    ContextVars are thread-local by design. Each thread has independent storage,
    so concurrent scans with different configs never see each other's settings.

Usage:
    # Through the pipeline
    matches = scan(source, config=ScanConfig(expression_enabled=False))

    # Direct detector usage (advanced)
    with scan_config_context(ScanConfig(power_functions=("Math.pow", "pow"))):
        found = find_power_calls(source, mask(source))

"""

from __future__ import annotations

import re
from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, fields
from typing import Any

from inlinemath.errors import ConfigError

DETECTOR_NAMES: tuple[str, ...] = ("division", "power", "expression", "summation", "mapping")

_QUALIFIED_NAME_RE = re.compile(r"[A-Za-z_]\w*(?:\.[A-Za-z_]\w*)*", re.ASCII)


@dataclass(frozen=True, slots=True)
class ScanConfig:
    """Immutable scan configuration.

    Attributes:
        division_enabled: Run the token/token division detector
        power_enabled: Run the power-call detector
        expression_enabled: Run the generic arithmetic-expression detector
        summation_enabled: Run the for-loop summation detector
        mapping_enabled: Run the for-loop indexed-assignment detector
        power_functions: Qualified names of two-argument power functions
        max_expression_matches: Upper bound on generic expression matches per scan
        resolve_overlaps: Reduce the merged matches to a non-overlapping set

    """

    division_enabled: bool = True
    power_enabled: bool = True
    expression_enabled: bool = True
    summation_enabled: bool = True
    mapping_enabled: bool = True
    power_functions: tuple[str, ...] = ("Math.pow",)
    max_expression_matches: int = 500
    resolve_overlaps: bool = True

    def __post_init__(self) -> None:
        if isinstance(self.power_functions, str):
            raise ConfigError("power_functions", "expected a sequence of names, got a string")
        for name in self.power_functions:
            if not isinstance(name, str) or not _QUALIFIED_NAME_RE.fullmatch(name):
                raise ConfigError("power_functions", f"{name!r} is not a qualified name")
        if self.max_expression_matches < 0:
            raise ConfigError("max_expression_matches", "must be >= 0")

    def is_enabled(self, detector: str) -> bool:
        """Return True if the named detector should run.

        Detectors without a ``<name>_enabled`` field (third-party ones added
        through register_detector) always run.
        """
        return bool(getattr(self, f"{detector}_enabled", True))

    def enabled_detectors(self, registered: Iterable[str] = ()) -> tuple[str, ...]:
        """Names of the detectors to run, built-ins first in DETECTOR_NAMES order.

        Args:
            registered: Every registered detector name; those not in
                DETECTOR_NAMES follow the built-ins in the given order

        """
        extra = [name for name in registered if name not in DETECTOR_NAMES]
        return tuple(name for name in (*DETECTOR_NAMES, *extra) if self.is_enabled(name))

    @classmethod
    def from_dict(cls, config_dict: dict[str, Any]) -> ScanConfig:
        """Create ScanConfig from dictionary.

        Useful when settings come from an editor's JSON settings store.
        Unknown keys are silently ignored; list values are converted to
        tuples.

        Example:
            >>> config = ScanConfig.from_dict({
            ...     "expression_enabled": False,
            ...     "power_functions": ["Math.pow", "StrictMath.pow"],
            ...     "unknown_key": "ignored",
            ... })
            >>> config.power_functions
            ('Math.pow', 'StrictMath.pow')

        """
        valid_fields = {f.name for f in fields(cls)}
        filtered = {
            k: tuple(v) if isinstance(v, list) else v
            for k, v in config_dict.items()
            if k in valid_fields
        }
        return cls(**filtered)


# Module-level default config (reused, never recreated)
_DEFAULT_CONFIG: ScanConfig = ScanConfig()

_scan_config: ContextVar[ScanConfig] = ContextVar(
    "scan_config",
    default=_DEFAULT_CONFIG,
)


def get_scan_config() -> ScanConfig:
    """Get current scan configuration (context-local)."""
    return _scan_config.get()


def set_scan_config(config: ScanConfig) -> None:
    """Set scan configuration for current context."""
    _scan_config.set(config)


def reset_scan_config() -> None:
    """Reset to the default configuration."""
    _scan_config.set(_DEFAULT_CONFIG)


@contextmanager
def scan_config_context(config: ScanConfig) -> Iterator[None]:
    """Context manager for temporary config changes.

    Restores the previous config even if an exception is raised.

    Example:
        >>> with scan_config_context(ScanConfig(power_enabled=False)):
        ...     get_scan_config().power_enabled
        False

    """
    token = _scan_config.set(config)
    try:
        yield
    finally:
        _scan_config.reset(token)


__all__ = [
    "DETECTOR_NAMES",
    "ScanConfig",
    "get_scan_config",
    "reset_scan_config",
    "scan_config_context",
    "set_scan_config",
]
