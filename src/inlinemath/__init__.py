"""
inlinemath: arithmetic in program source, rendered as math

Finds arithmetic-looking structure in C-family source text (divisions, power
calls, general expressions, counting loops that sum or fill arrays) and
renders each match twice: as LaTeX for a typesetting view and as compact
Unicode for inline display. Zero runtime dependencies.

Quick Start:
    >>> from inlinemath import scan
    >>> matches = scan("double r = 3/4*Math.pow(9,2);")
    >>> [(m.kind, m.typeset) for m in matches]
    [('expression', '\\\\frac{3}{4} \\\\cdot Math.pow\\\\left(9, 2\\\\right)')]

    >>> # Run a subset of detectors
    >>> from inlinemath import ScanConfig
    >>> config = ScanConfig(expression_enabled=False)
    >>> [m.kind for m in scan("double r = 3/4*Math.pow(9,2);", config=config)]
    ['division', 'power']

Pipeline:
    source --mask--> masked --detectors--> candidates --resolve--> matches

Installation:
    pip install inlinemath
"""

from inlinemath.cache import DictScanCache, ScanCache, hash_config, hash_content
from inlinemath.config import (
    DETECTOR_NAMES,
    ScanConfig,
    get_scan_config,
    reset_scan_config,
    scan_config_context,
    set_scan_config,
)
from inlinemath.detectors import BUILTIN_DETECTORS, Detector, get_detector, register_detector
from inlinemath.errors import ConfigError, InlineMathError, RenderError
from inlinemath.location import LineIndex, SourceLocation
from inlinemath.masking import mask
from inlinemath.matches import (
    DivisionMatch,
    ExpressionMatch,
    MappingMatch,
    Match,
    PowerMatch,
    SummationMatch,
)
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
)
from inlinemath.parsing import parse_at, parse_exact
from inlinemath.profiling import ScanAccumulator, get_scan_accumulator, profiled_scan
from inlinemath.renderers import InlineRenderer, TypesetRenderer, to_inline_text, to_typeset
from inlinemath.renderers.protocol import ExprRenderer
from inlinemath.resolver import resolve_non_overlapping
from inlinemath.serialization import from_dict, from_json, to_dict, to_json
from inlinemath.utils.logger import get_logger

__version__ = "0.1.0"

logger = get_logger(__name__)

UNTITLED = "<untitled>"


def _run_detectors(
    source: str, config: ScanConfig, acc: ScanAccumulator | None
) -> list[Match]:
    masked = mask(source)
    candidates: list[Match] = []
    for name in config.enabled_detectors(BUILTIN_DETECTORS):
        found = get_detector(name).scan(source, masked)
        logger.debug("detector %s: %d candidates", name, len(found))
        if acc is not None:
            acc.record_detector(name, len(found))
        candidates.extend(found)
    return candidates


def scan(
    source: str,
    *,
    config: ScanConfig | None = None,
    cache: ScanCache | None = None,
    document_id: str | None = None,
    revision: object = None,
) -> tuple[Match, ...]:
    """Find and render the arithmetic in a source text.

    Args:
        source: Program source text
        config: Scan configuration (uses the active context config if None)
        cache: Optional per-document cache. Storing a new revision of a
            document drops the results of its older revisions.
        document_id: Cache key for the document (defaults to "<untitled>")
        revision: Document version, e.g. an editor change counter (defaults
            to the content hash)

    Returns:
        Matches ordered by start offset; non-overlapping unless
        ``config.resolve_overlaps`` is False

    Example:
        >>> [m.inline_text for m in scan("x = a / b;")]
        ['a⁄b']

        >>> # With a cache
        >>> from inlinemath import DictScanCache
        >>> cache = DictScanCache()
        >>> matches = scan("x = a / b;", cache=cache, document_id="A.java", revision=3)
    """
    if config is None:
        config = get_scan_config()

    with scan_config_context(config):
        acc = get_scan_accumulator()

        if cache is not None:
            document_id = document_id or UNTITLED
            if revision is None:
                revision = hash_content(source)
            config_hash = hash_config(config)
            cached = cache.get(document_id, revision, config_hash)
            if cached is not None:
                logger.debug("cache hit: %s@%s", document_id, revision)
                if acc is not None:
                    acc.record_cache_hit(len(cached))
                return cached

        candidates = _run_detectors(source, config, acc)
        if config.resolve_overlaps:
            kept = resolve_non_overlapping(candidates)
        else:
            kept = sorted(candidates, key=lambda m: (m.start, m.start - m.end))
        matches = tuple(kept)
        logger.debug("scan: %d candidates, %d kept", len(candidates), len(matches))

        if cache is not None:
            cache.put(document_id, revision, config_hash, matches)

        if acc is not None:
            acc.record_scan(
                source_length=len(source), candidates=len(candidates), kept=len(matches)
            )

        return matches


__all__ = [
    "BUILTIN_DETECTORS",
    "DETECTOR_NAMES",
    "Binary",
    "Call",
    "ConfigError",
    "Construct",
    "Detector",
    "DictScanCache",
    "DivisionMatch",
    "Expr",
    "ExprRenderer",
    "ExpressionMatch",
    "Group",
    "Identifier",
    "Index",
    "InlineMathError",
    "InlineRenderer",
    "LineIndex",
    "MappingMatch",
    "Match",
    "Member",
    "Number",
    "PowerMatch",
    "Raw",
    "RenderError",
    "ScanAccumulator",
    "ScanCache",
    "ScanConfig",
    "SourceLocation",
    "SummationMatch",
    "TypesetRenderer",
    "Unary",
    "UNTITLED",
    "__version__",
    "from_dict",
    "from_json",
    "get_detector",
    "get_scan_accumulator",
    "get_scan_config",
    "hash_config",
    "hash_content",
    "mask",
    "parse_at",
    "parse_exact",
    "profiled_scan",
    "register_detector",
    "reset_scan_config",
    "resolve_non_overlapping",
    "scan",
    "scan_config_context",
    "set_scan_config",
    "to_dict",
    "to_inline_text",
    "to_json",
    "to_typeset",
]
