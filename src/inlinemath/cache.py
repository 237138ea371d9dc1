"""Per-document scan cache for inlinemath.

Hosts re-request matches on every redraw, but only need a fresh scan when the
document changes. Results are cached under
(document_id, revision, config_hash); storing a new revision of a document
drops everything cached for its older revisions, so a cache never holds more
than one revision per document.

Thread Safety:
    DictScanCache is not thread-safe. For parallel scanning, use a cache
    implementation with internal locking (e.g. threading.Lock around get/put).

Example:
    >>> from inlinemath import scan, DictScanCache
    >>> cache = DictScanCache()
    >>> first = scan("x = a / b;", cache=cache, document_id="A.java", revision=1)
    >>> again = scan("x = a / b;", cache=cache, document_id="A.java", revision=1)  # hit
"""

from __future__ import annotations

from collections.abc import Hashable
from typing import TYPE_CHECKING, Protocol

from inlinemath.utils.hashing import hash_parts, hash_str

if TYPE_CHECKING:
    from inlinemath.config import ScanConfig
    from inlinemath.matches import Match


class ScanCache(Protocol):
    """Protocol for per-document scan caches.

    Cached value is a tuple of Match objects. Matches are immutable, safe to
    share across threads.
    """

    def get(
        self, document_id: str, revision: Hashable, config_hash: str
    ) -> tuple[Match, ...] | None:
        """Return cached matches if present, else None."""
        ...

    def put(
        self,
        document_id: str,
        revision: Hashable,
        config_hash: str,
        matches: tuple[Match, ...],
    ) -> None:
        """Store matches, replacing any older revision of the document."""
        ...

    def invalidate(self, document_id: str) -> None:
        """Drop every entry for a document."""
        ...


class DictScanCache:
    """In-memory scan cache using a dict per document.

    Not thread-safe. For parallel scanning, wrap with a lock or use a
    thread-safe implementation.
    """

    __slots__ = ("_data",)

    def __init__(self) -> None:
        # document_id -> (revision, {config_hash: matches})
        self._data: dict[str, tuple[Hashable, dict[str, tuple[Match, ...]]]] = {}

    def get(
        self, document_id: str, revision: Hashable, config_hash: str
    ) -> tuple[Match, ...] | None:
        """Return cached matches if present, else None."""
        entry = self._data.get(document_id)
        if entry is None or entry[0] != revision:
            return None
        return entry[1].get(config_hash)

    def put(
        self,
        document_id: str,
        revision: Hashable,
        config_hash: str,
        matches: tuple[Match, ...],
    ) -> None:
        """Store matches, replacing any older revision of the document."""
        entry = self._data.get(document_id)
        if entry is None or entry[0] != revision:
            entry = (revision, {})
            self._data[document_id] = entry
        entry[1][config_hash] = matches

    def invalidate(self, document_id: str) -> None:
        """Drop every entry for a document."""
        self._data.pop(document_id, None)

    def clear(self) -> None:
        self._data.clear()

    def __len__(self) -> int:
        """Number of cached (document, config) results."""
        return sum(len(by_config) for _, by_config in self._data.values())


def hash_content(source: str) -> str:
    """Compute SHA256 hash of source, used as the default revision.

    Args:
        source: Program source text

    Returns:
        Hex digest of SHA256 hash
    """
    return hash_str(source)


def hash_config(config: ScanConfig) -> str:
    """Compute hash of ScanConfig for cache key.

    Args:
        config: ScanConfig to hash

    Returns:
        Hex digest of config hash
    """
    return hash_parts(
        config.division_enabled,
        config.power_enabled,
        config.expression_enabled,
        config.summation_enabled,
        config.mapping_enabled,
        ",".join(config.power_functions),
        config.max_expression_matches,
        config.resolve_overlaps,
    )


__all__ = [
    "DictScanCache",
    "ScanCache",
    "hash_config",
    "hash_content",
]
