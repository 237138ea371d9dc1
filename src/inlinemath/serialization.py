"""Serialization: JSON round-trip for expression trees and matches.

Converts Expr nodes and Match records to/from JSON-compatible dicts. Useful
for:
- Shipping matches from a scanning worker to the editor process
- Persisting scan results next to a document revision
- Snapshot tests that compare scan output as text

Keys are written sorted, so equal results always produce identical strings.

Example:
    from inlinemath import scan
    from inlinemath.serialization import to_json, from_json

    matches = scan("double r = 3/4*Math.pow(9,2);")
    json_str = to_json(matches)
    assert from_json(json_str) == matches

Thread Safety:
    All functions are pure, safe to call from any thread.

"""

import json
from collections.abc import Sequence
from dataclasses import fields
from typing import Any

from inlinemath.location import SourceLocation
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

Serializable = Expr | Match | SourceLocation

# Registry of type names to classes for deserialization
_TYPES: dict[str, type] = {
    "Number": Number,
    "Identifier": Identifier,
    "Raw": Raw,
    "Group": Group,
    "Unary": Unary,
    "Binary": Binary,
    "Member": Member,
    "Index": Index,
    "Call": Call,
    "Construct": Construct,
    "DivisionMatch": DivisionMatch,
    "PowerMatch": PowerMatch,
    "ExpressionMatch": ExpressionMatch,
    "SummationMatch": SummationMatch,
    "MappingMatch": MappingMatch,
    "SourceLocation": SourceLocation,
}


def to_dict(obj: Serializable) -> dict[str, Any]:
    """Convert an Expr node, Match or SourceLocation to a JSON-compatible dict.

    Every object carries its class name under ``_type``.
    Recursively serializes child nodes and locations.

    Args:
        obj: Any expression node, match or location.

    Returns:
        Dict with ``_type`` and all dataclass fields.

    """
    result: dict[str, Any] = {"_type": type(obj).__name__}
    for f in fields(obj):
        result[f.name] = _serialize_value(getattr(obj, f.name))
    return result


def _serialize_value(value: Any) -> Any:
    if isinstance(value, (Expr, Match, SourceLocation)):
        return to_dict(value)
    if isinstance(value, (tuple, list)):
        return [_serialize_value(item) for item in value]
    # Primitives: str, int, None
    return value


def from_dict(data: dict[str, Any]) -> Any:
    """Reconstruct a typed node, match or location from a dict.

    The class is looked up by the ``_type`` name.

    Args:
        data: Dict with ``_type`` and fields (as produced by to_dict).

    Returns:
        Frozen dataclass instance.

    Raises:
        ValueError: If ``_type`` is missing or unknown.

    """
    type_name = data.get("_type")
    if type_name is None:
        msg = "Missing '_type' field in serialized object"
        raise ValueError(msg)

    cls = _TYPES.get(type_name)
    if cls is None:
        msg = f"Unknown type: {type_name!r}"
        raise ValueError(msg)

    kwargs: dict[str, Any] = {}
    for f in fields(cls):
        if f.name in data:
            kwargs[f.name] = _deserialize_value(data[f.name])
    return cls(**kwargs)


def _deserialize_value(value: Any) -> Any:
    if isinstance(value, dict):
        if value.get("_type") is not None:
            return from_dict(value)
        return value
    if isinstance(value, list):
        return tuple(_deserialize_value(item) for item in value)
    return value


def to_json(obj: Serializable | Sequence[Match], *, indent: int | None = None) -> str:
    """Serialize a node, a match or a sequence of matches to a JSON string.

    Keys are sorted, so equal inputs give byte-identical output.

    Args:
        obj: What to serialize; sequences become JSON arrays.
        indent: JSON indentation level (None for compact).

    """
    return json.dumps(_serialize_value(obj), sort_keys=True, indent=indent)


def from_json(data: str) -> Any:
    """Deserialize the output of to_json().

    Returns:
        The reconstructed object, or a tuple of them for a JSON array.

    Raises:
        ValueError: If the JSON holds a bare value or an untyped object.

    """
    raw = json.loads(data)
    if isinstance(raw, list):
        return tuple(from_dict(item) for item in raw)
    if not isinstance(raw, dict):
        msg = f"Expected a serialized object or array, got {type(raw).__name__}"
        raise ValueError(msg)
    return from_dict(raw)


__all__ = ["from_dict", "from_json", "to_dict", "to_json"]
