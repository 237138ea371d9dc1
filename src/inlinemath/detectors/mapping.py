"""Loop-mapping detector.

Recognizes a counting loop whose body writes an array element indexed by the
loop variable and renders it as an indexed definition::

    for (int i = 0; i <= n; ++i) { answer[i] = i + 1; }
    ->  answer_i = i + 1,  i = 0, ..., n

Only the first indexed assignment in the body is considered. If its
subscript does not mention the loop variable as a whole word, the loop is
rejected: the write is not a function of the index.

Example:
    >>> from inlinemath.masking import mask
    >>> source = "for (int i = 0; i <= n; ++i) { answer[i] = i + 1; }"
    >>> [(m.array, m.value) for m in find_mappings(source, mask(source))]
    [('answer', 'i + 1')]

"""

from __future__ import annotations

import re
from dataclasses import dataclass

from inlinemath.detectors import register_detector
from inlinemath.detectors.loops import CountingLoop, scan_counting_loops
from inlinemath.location import LineIndex
from inlinemath.matches import MappingMatch
from inlinemath.nodes import Index
from inlinemath.parsing import parse_or_raw
from inlinemath.parsing.charsets import XOR
from inlinemath.renderers.inline import mapping_inline
from inlinemath.renderers.typeset import mapping_typeset

_INDEXED_ASSIGNMENT_RE = re.compile(
    r"\b([A-Za-z_][\w.]*)\s*\[\s*([^\]]+)\]\s*=(?!=)\s*([^;]+);",
    re.ASCII,
)


@dataclass(frozen=True, slots=True)
class IndexedAssignment:
    array: str
    index: str
    value: str


def extract_indexed_assignment(body: str, index_var: str) -> IndexedAssignment | None:
    """Return the body's first ``array[index] = value;`` if it uses ``index_var``."""
    m = _INDEXED_ASSIGNMENT_RE.search(body)
    if m is None:
        return None
    array, index, value = (group.strip() for group in m.groups())
    if re.search(rf"\b{re.escape(index_var)}\b", index, re.ASCII) is None:
        return None
    return IndexedAssignment(array=array, index=index, value=value)


def _mapping(loop: CountingLoop) -> IndexedAssignment | None:
    found = extract_indexed_assignment(loop.body, loop.header.index)
    if found is None:
        return None
    header = loop.header
    fragments = (found.array, found.index, found.value, header.lower, header.upper)
    if any(XOR in text for text in fragments):
        return None
    return found


def find_mappings(source: str, masked: str) -> list[MappingMatch]:
    """Find counting loops that assign ``array[f(i)] = value``."""
    line_index = LineIndex(source)
    results: list[MappingMatch] = []

    for loop, found in scan_counting_loops(masked, _mapping):
        header = loop.header
        target = Index(parse_or_raw(found.array), parse_or_raw(found.index))
        value = parse_or_raw(found.value)
        lower, upper = parse_or_raw(header.lower), parse_or_raw(header.upper)
        results.append(
            MappingMatch(
                location=line_index.location(loop.start, loop.end),
                typeset=mapping_typeset(target, value, header.index, lower, upper),
                inline_text=mapping_inline(target, value, header.index, lower, upper),
                index=header.index,
                lower=header.lower,
                upper=header.upper,
                array=found.array,
                index_expr=found.index,
                value=found.value,
            )
        )

    return results


@register_detector("mapping")
class MappingDetector:
    """Detector wrapper around find_mappings()."""

    @property
    def name(self) -> str:
        return "mapping"

    def scan(self, source: str, masked: str) -> list[MappingMatch]:
        return find_mappings(source, masked)
