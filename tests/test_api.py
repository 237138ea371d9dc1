"""Tests for the public scan() pipeline."""

import logging
import re
from collections.abc import Iterator

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from inlinemath import (
    DivisionMatch,
    ExpressionMatch,
    MappingMatch,
    PowerMatch,
    ScanConfig,
    SummationMatch,
    get_scan_config,
    scan,
    scan_config_context,
)
from inlinemath.detectors import BUILTIN_DETECTORS, register_detector
from inlinemath.location import LineIndex

POW_LINE = "auto x = 3/4*Math.pow(9,2)"

PROGRAM = """\
// Mean of squares: sum / n
double meanSquare(double[] xs, int n) {
    double sum = 0;
    for (int i = 0; i < n; i++) { sum += xs[i] * xs[i]; }
    return sum / n;
}

void fill(int[] answer, int n) {
    for (int i = 0; i <= n; ++i) { answer[i] = i + 1; }
    String s = "1/2";  /* a/b */
    double h = Math.pow(n, 2) + 1;
}
"""


class TestScan:
    def test_outer_expression_wins(self) -> None:
        [match] = scan(POW_LINE)
        assert isinstance(match, ExpressionMatch)
        assert match.text == "3/4*Math.pow(9,2)"

    def test_disabled_detectors_do_not_run(self) -> None:
        config = ScanConfig(expression_enabled=False)
        found = scan(POW_LINE, config=config)
        assert [type(m) for m in found] == [DivisionMatch, PowerMatch]

    def test_without_overlap_resolution(self) -> None:
        found = scan(POW_LINE, config=ScanConfig(resolve_overlaps=False))
        assert [m.kind for m in found] == ["expression", "division", "power"]

    def test_division_preferred_over_identical_expression(self) -> None:
        [match] = scan("x = a / b;")
        assert isinstance(match, DivisionMatch)
        assert match.inline_text == "a⁄b"

    def test_loop_swallows_inner_expressions(self) -> None:
        [match] = scan("for (int i = 0; i < n; i++) { sum += i * i; }")
        assert isinstance(match, SummationMatch)

    def test_program(self) -> None:
        found = scan(PROGRAM)
        kinds = [(m.kind, m.location.lineno) for m in found]
        assert kinds == [
            ("summation", 4),
            ("division", 5),
            ("mapping", 9),
            ("expression", 11),
        ]
        summation = found[0]
        assert isinstance(summation, SummationMatch)
        assert summation.term == "xs[i] * xs[i]"
        mapping = found[2]
        assert isinstance(mapping, MappingMatch)
        assert mapping.value == "i + 1"
        assert found[3].typeset == r"Math.pow\left(n, 2\right) + 1"

    def test_empty_source(self) -> None:
        assert scan("") == ()

    def test_returns_tuple(self) -> None:
        assert isinstance(scan(POW_LINE), tuple)

    def test_config_restored_after_scan(self) -> None:
        scan(POW_LINE, config=ScanConfig(power_enabled=False))
        assert get_scan_config() == ScanConfig()

    def test_uses_context_config_when_none_given(self) -> None:
        with scan_config_context(ScanConfig(expression_enabled=False)):
            found = scan(POW_LINE)
        assert [m.kind for m in found] == ["division", "power"]

    def test_locations_point_into_original_text(self) -> None:
        source = "/* header */\nint y = a * b;"
        [match] = scan(source)
        assert source[match.start : match.end] == "a * b"
        assert (match.location.lineno, match.location.col_offset) == (2, 9)

    def test_logs_at_debug(self, caplog) -> None:
        caplog.set_level(logging.DEBUG, logger="inlinemath")
        scan(POW_LINE)
        messages = [r.getMessage() for r in caplog.records if r.name == "inlinemath"]
        assert "scan: 3 candidates, 1 kept" in messages


class TestLongChains:
    def test_long_operator_chain(self) -> None:
        found = scan("x = " + " + ".join(["a"] * 2000) + ";")
        assert isinstance(found, tuple)
        assert all(m.typeset and m.inline_text for m in found)

    def test_long_sign_chain(self) -> None:
        found = scan("x = " + "-" * 2000 + "a * b;")
        assert isinstance(found, tuple)
        assert all(m.typeset and m.inline_text for m in found)

    def test_long_chain_inside_power_call(self) -> None:
        found = scan("y = Math.pow(" + " * ".join(["k"] * 2000) + ", 2);")
        assert all(m.typeset for m in found)


class TestScanProperties:
    @given(st.text(alphabet=st.sampled_from(list("ab1 /*+-=;()[]{}\"'^\nfor")), max_size=200))
    @settings(max_examples=200)
    def test_never_raises_and_never_overlaps(self, source: str) -> None:
        found = scan(source)
        for match in found:
            assert 0 <= match.start < match.end <= len(source)
        for left, right in zip(found, found[1:]):
            assert left.end <= right.start

    @given(st.text(max_size=200))
    def test_same_input_same_output(self, source: str) -> None:
        assert scan(source) == scan(source)


class PiDetector:
    """Finds the constant ``PI``."""

    name = "pi"

    def scan(self, source: str, masked: str) -> list[ExpressionMatch]:
        index = LineIndex(source)
        return [
            ExpressionMatch(index.location(m.start(), m.end()), r"\pi", "π", m.group())
            for m in re.finditer(r"\bPI\b", masked)
        ]


@pytest.fixture
def pi_detector() -> Iterator[None]:
    register_detector("pi")(PiDetector)
    yield
    del BUILTIN_DETECTORS["pi"]


class TestRegisteredDetectors:
    def test_registered_detector_runs(self, pi_detector: None) -> None:
        found = scan("double t = PI; // PI")
        assert [(m.inline_text, m.start) for m in found] == [("π", 11)]

    def test_registered_detector_joins_overlap_resolution(self, pi_detector: None) -> None:
        found = scan("double c = 2 * PI * r;")
        assert [m.inline_text for m in found] == ["2·PI·r"]
