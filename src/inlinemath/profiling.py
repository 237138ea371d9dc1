"""Opt-in scan metrics.

Inside a ``profiled_scan()`` block every scan() call reports how much source
it read, how many candidates each detector proposed and how many survived
overlap resolution. Outside such a block get_scan_accumulator() returns None
and scan() records nothing.

Example:
    from inlinemath import scan
    from inlinemath.profiling import profiled_scan

    with profiled_scan() as metrics:
        scan("double r = 3/4*Math.pow(9,2);")

    metrics.per_detector
    # {"division": 1, "power": 1, "expression": 1, "summation": 0, "mapping": 0}
    metrics.summary()["kept"]
    # 1

"""

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar, Token
from dataclasses import dataclass, field
from time import perf_counter
from typing import Any


@dataclass
class ScanAccumulator:
    """Counters collected while a profiled block is active.

    Attributes:
        start_time: perf_counter() reading when the block was entered.
        source_length: Characters read by scans that ran the detectors.
        candidate_count: Matches proposed before overlap resolution.
        kept_count: Matches handed back to callers, cache hits included.
        scan_calls: scan() invocations, cache hits included.
        cache_hits: scan() invocations answered without running detectors.
        per_detector: Candidate totals keyed by detector name.

    """

    start_time: float = field(default_factory=perf_counter)
    source_length: int = 0
    candidate_count: int = 0
    kept_count: int = 0
    scan_calls: int = 0
    cache_hits: int = 0
    per_detector: dict[str, int] = field(default_factory=dict)

    def record_detector(self, name: str, candidates: int) -> None:
        self.per_detector[name] = self.per_detector.get(name, 0) + candidates

    def record_scan(self, source_length: int, candidates: int, kept: int) -> None:
        """Count one scan that ran the detectors.

        Args:
            source_length: Length of the scanned text.
            candidates: Matches before overlap resolution.
            kept: Matches returned.

        """
        self.scan_calls += 1
        self.source_length += source_length
        self.candidate_count += candidates
        self.kept_count += kept

    def record_cache_hit(self, kept: int) -> None:
        self.scan_calls += 1
        self.cache_hits += 1
        self.kept_count += kept

    @property
    def total_duration_ms(self) -> float:
        """Milliseconds since the accumulator was created."""
        return (perf_counter() - self.start_time) * 1000

    def summary(self) -> dict[str, Any]:
        return {
            "total_ms": round(self.total_duration_ms, 2),
            "source_length": self.source_length,
            "candidates": self.candidate_count,
            "kept": self.kept_count,
            "scan_calls": self.scan_calls,
            "cache_hits": self.cache_hits,
            "per_detector": dict(self.per_detector),
        }


_accumulator: ContextVar[ScanAccumulator | None] = ContextVar(
    "scan_accumulator",
    default=None,
)


def get_scan_accumulator() -> ScanAccumulator | None:
    """Return the active accumulator, or None outside profiled_scan()."""
    return _accumulator.get()


@contextmanager
def profiled_scan() -> Iterator[ScanAccumulator]:
    """Collect scan metrics for the duration of the with block.

    Blocks nest: the inner block gets a fresh accumulator and the outer one
    becomes active again on exit.
    """
    acc = ScanAccumulator()
    token: Token[ScanAccumulator | None] = _accumulator.set(acc)
    try:
        yield acc
    finally:
        _accumulator.reset(token)


__all__ = ["ScanAccumulator", "get_scan_accumulator", "profiled_scan"]
