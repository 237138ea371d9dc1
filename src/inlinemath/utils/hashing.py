"""Hashing helpers for scan cache keys.

Content hashes double as default document revisions, so they must be stable
across processes (the builtin ``hash()`` is salted per process).

Example:
    >>> from inlinemath.utils.hashing import hash_str
    >>> hash_str("hello", truncate=16)
    '2cf24dba5fb0a30e'
"""

import hashlib

# ASCII unit separator: cannot occur in a config field rendered by str()
_PART_SEPARATOR = "\x1f"


def hash_str(content: str, truncate: int | None = None) -> str:
    """Return the SHA-256 hex digest of ``content``, optionally truncated."""
    # Lone surrogates (surrogateescape-decoded text) hash instead of raising
    digest = hashlib.sha256(content.encode("utf-8", "surrogatepass")).hexdigest()
    return digest if truncate is None else digest[:truncate]


def hash_parts(*parts: object, truncate: int | None = None) -> str:
    """Hash several values as one key.

    Parts are joined with a separator, so ``("ab", "c")`` and ``("a", "bc")``
    hash differently.
    """
    return hash_str(_PART_SEPARATOR.join(str(part) for part in parts), truncate)
