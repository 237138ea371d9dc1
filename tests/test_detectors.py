"""Tests for the five pattern detectors and the detector registry."""

import pytest

from inlinemath.config import ScanConfig, scan_config_context
from inlinemath.detectors import (
    BUILTIN_DETECTORS,
    Detector,
    find_divisions,
    find_expressions,
    find_mappings,
    find_power_calls,
    find_summations,
    get_detector,
)
from inlinemath.detectors.loops import LoopHeader, parse_loop_header
from inlinemath.masking import mask

POW_LINE = "auto x = 3/4*Math.pow(9,2)"


def divisions(source: str):
    return find_divisions(source, mask(source))


def powers(source: str):
    return find_power_calls(source, mask(source))


def expressions(source: str, max_matches: int | None = None):
    return find_expressions(source, mask(source), max_matches)


def summations(source: str):
    return find_summations(source, mask(source))


def mappings(source: str):
    return find_mappings(source, mask(source))


class TestRegistry:
    def test_all_builtins_registered(self) -> None:
        assert set(BUILTIN_DETECTORS) == {"division", "power", "expression", "summation", "mapping"}

    @pytest.mark.parametrize("name", ["division", "power", "expression", "summation", "mapping"])
    def test_get_detector(self, name: str) -> None:
        detector = get_detector(name)
        assert isinstance(detector, Detector)
        assert detector.name == name

    def test_unknown_detector(self) -> None:
        with pytest.raises(KeyError, match="Available: division, expression"):
            get_detector("modulo")

    def test_detector_scan_matches_function(self) -> None:
        assert get_detector("division").scan(POW_LINE, mask(POW_LINE)) == divisions(POW_LINE)


class TestDivision:
    def test_example_line(self) -> None:
        [match] = divisions(POW_LINE)
        assert (match.numerator, match.denominator) == ("3", "4")
        assert (match.start, match.end) == (9, 12)
        assert match.typeset == r"\frac{3}{4}"
        assert match.inline_text == "³⁄₄"

    def test_identifiers_and_spacing(self) -> None:
        [match] = divisions("double r = num / den;")
        assert (match.numerator, match.denominator) == ("num", "den")
        assert match.inline_text == "num⁄den"

    def test_decimal_operand(self) -> None:
        [match] = divisions("y = 0.5/x;")
        assert match.numerator == "0.5"

    def test_typeset_escapes_underscores(self) -> None:
        [match] = divisions("q = max_val / n_items;")
        assert match.typeset == r"\frac{max\_val}{n\_items}"

    def test_stacked(self) -> None:
        [match] = divisions("y = 1/10;")
        assert match.stacked == " 1\n──\n10"

    def test_line_comment_suffix_excluded(self) -> None:
        assert [m.numerator for m in divisions("a = x/y; // c/d")] == ["x"]

    def test_quoted_span_excluded(self) -> None:
        assert [m.numerator for m in divisions('s = "1/2"; t = x/y;')] == ["x"]

    def test_block_comment_excluded(self) -> None:
        assert [m.numerator for m in divisions("/* a/b */ c/d")] == ["c"]

    def test_does_not_span_lines(self) -> None:
        assert divisions("a /\nb") == []

    def test_location_on_later_line(self) -> None:
        [match] = divisions("int a;\nx = a / b;")
        assert str(match.location) == "2:5-2:10"


class TestPowerCall:
    def test_example_line(self) -> None:
        [match] = powers(POW_LINE)
        assert (match.base, match.exponent) == ("9", "2")
        assert match.typeset == "{9}^{2}"
        assert match.inline_text == "9²"
        assert match.callee == "Math.pow"
        assert (match.start, match.end) == (13, 26)

    def test_qualified_callee(self) -> None:
        [match] = powers("y = java.lang.Math.pow(a, b + 1);")
        assert match.callee == "java.lang.Math.pow"
        assert match.typeset == "{a}^{b + 1}"
        assert match.inline_text == "a^(b+1)"

    def test_compound_base(self) -> None:
        [match] = powers("y = Math.pow(x + 1, 2);")
        assert match.typeset == r"{\left(x + 1\right)}^{2}"
        assert match.inline_text == "(x+1)²"

    def test_nested_call_argument(self) -> None:
        [match] = powers("y = Math.pow(f(a, b), 3);")
        assert (match.base, match.exponent) == ("f(a, b)", "3")

    def test_unparseable_argument_kept_raw(self) -> None:
        [match] = powers("y = Math.pow(i++, 2);")
        assert match.typeset == r"{\text{i++}}^{2}"

    def test_preceded_by_identifier_rejected(self) -> None:
        assert powers("y = myMath.pow(2, 3);") == []

    @pytest.mark.parametrize(
        "source",
        [
            "y = Math.pow(x ^ 2, 3);",
            "y = Math.pow(1, 2, 3);",
            "y = Math.pow(1);",
            "y = Math.pow(x, 2",
            "// Math.pow(x, 2)",
            's = "Math.pow(x, 2)";',
        ],
    )
    def test_rejected(self, source: str) -> None:
        assert powers(source) == []

    def test_configured_function_names(self) -> None:
        config = ScanConfig(power_functions=("Math.pow", "pow"))
        with scan_config_context(config):
            found = powers("r = pow(x, 2) + Math.pow(y, 3);")
        assert [m.callee for m in found] == ["pow", "Math.pow"]

    def test_no_function_names(self) -> None:
        with scan_config_context(ScanConfig(power_functions=())):
            assert powers(POW_LINE) == []


class TestExpression:
    def test_finds_product(self) -> None:
        [match] = expressions("area = width * height; // m^2")
        assert match.text == "width * height"
        assert match.typeset == r"width \cdot height"
        assert match.inline_text == "width·height"

    def test_example_line(self) -> None:
        [match] = expressions(POW_LINE)
        assert match.text == "3/4*Math.pow(9,2)"
        assert match.typeset == r"\frac{3}{4} \cdot Math.pow\left(9, 2\right)"

    def test_looks_inside_calls(self) -> None:
        assert [m.text for m in expressions("f(a + b);")] == ["a + b"]

    def test_looks_inside_constructors(self) -> None:
        assert [m.text for m in expressions("x = new Foo(a + b);")] == ["a + b"]

    def test_bare_call_not_reported(self) -> None:
        assert expressions("Math.pow(a, b);") == []

    def test_operand_without_operator_not_reported(self) -> None:
        assert expressions("x = y;") == []

    def test_trailing_whitespace_trimmed(self) -> None:
        [match] = expressions("y = a + b   ;")
        assert match.text == "a + b"
        assert match.end == 9

    def test_must_end_on_boundary(self) -> None:
        assert expressions("1 + 2abc") == []

    def test_never_reports_xor(self) -> None:
        found = expressions("r = x^2 + 1; s = (a ^ b) * c;")
        assert found
        assert all("^" not in m.text for m in found)

    def test_string_contents_ignored(self) -> None:
        assert expressions('s = "a + b";') == []

    def test_multiple_statements(self) -> None:
        source = "a = b + c;\nd = e * f;"
        assert [m.text for m in expressions(source)] == ["b + c", "e * f"]

    def test_max_matches(self) -> None:
        assert len(expressions("a+b; c+d; e+f;", max_matches=2)) == 2

    def test_max_matches_from_config(self) -> None:
        with scan_config_context(ScanConfig(max_expression_matches=1)):
            assert len(expressions("a+b; c+d; e+f;")) == 1


class TestLoopHeader:
    def test_exclusive_bound(self) -> None:
        assert parse_loop_header("int i = 0; i < n; i++") == LoopHeader("i", "0", "n - 1")

    def test_inclusive_bound(self) -> None:
        assert parse_loop_header("int i = 1; i <= n; ++i") == LoopHeader("i", "1", "n")

    @pytest.mark.parametrize("update", ["i++", "++i", "i += 1", "i = i + 1", "i+=1"])
    def test_unit_step_updates(self, update: str) -> None:
        assert parse_loop_header(f"int i = 0; i < n; {update}") is not None

    def test_untyped_init(self) -> None:
        assert parse_loop_header("i = a; i < b; i++") == LoopHeader("i", "a", "b - 1")

    @pytest.mark.parametrize(
        "header",
        [
            "i = n; i > 0; i--",
            "int i = 0; i < n; i += 2",
            "int i = 0; i < n; i += 10",
            "int i = 0; i < n; j++",
            "int i = 0; j < n; i++",
            "int i = 0; i << n; i++",
            "int i = 0, j = 0; i < n; i++",
            "int i = 0; i < n",
            ";;",
        ],
    )
    def test_rejected(self, header: str) -> None:
        assert parse_loop_header(header) is None


class TestSummation:
    def test_example(self) -> None:
        source = "for (int i = 0; i < n; i++) { sum += i * i; }"
        [match] = summations(source)
        assert match.index == "i"
        assert match.lower == "0"
        assert match.upper == "n - 1"
        assert match.accumulator == "sum"
        assert match.term == "i * i"
        assert (match.start, match.end) == (0, len(source))
        assert match.typeset == r"sum = \sum_{i=0}^{n - 1} i \cdot i"
        assert match.inline_text == "sum = Σ_i=0..n-1 i·i"

    def test_descending_loop_rejected(self) -> None:
        assert summations("for (i = n; i > 0; i--) { sum += i; }") == []

    def test_self_plus_term_single_statement(self) -> None:
        source = "for (int k = 1; k <= m; k = k + 1) total = total + a[k];"
        [match] = summations(source)
        assert (match.accumulator, match.term) == ("total", "a[k]")
        assert (match.lower, match.upper) == ("1", "m")
        assert match.end == len(source)

    def test_term_plus_self(self) -> None:
        [match] = summations("for (int i = 0; i < 10; ++i) { s = i * 2 + s; }")
        assert (match.accumulator, match.term) == ("s", "i * 2")
        assert match.upper == "10 - 1"

    def test_first_idiom_wins(self) -> None:
        [match] = summations("for (int i = 0; i < n; i++) { a = a + i; b += 2 * i; }")
        assert match.accumulator == "b"

    @pytest.mark.parametrize(
        "source",
        [
            "for (int i = 0; i < n; i += 2) { sum += i; }",
            "for (int i = 0; i < n; i++) { sum -= i; }",
            "for (int i = 0; i < n; i++) { s += i ^ 1; }",
            "for (int i = 0; i < n ^ m; i++) { s += i; }",
            "// for (int i = 0; i < n; i++) { s += i; }",
            "for (int i = 0; i < n; i++) { s += i;",
            "fork (int i = 0; i < n; i++) { s += i; }",
        ],
    )
    def test_rejected(self, source: str) -> None:
        assert summations(source) == []

    def test_loop_inside_rejected_loop_found(self) -> None:
        source = "for (int i = n; i > 0; i--) { for (int j = 0; j < i; j++) { s += j; } }"
        [match] = summations(source)
        assert (match.index, match.upper) == ("j", "i - 1")

    def test_consecutive_loops(self) -> None:
        source = (
            "for (int i = 0; i < n; i++) { a += i; }\n"
            "for (int j = 0; j <= m; j++) { b += j * j; }"
        )
        found = summations(source)
        assert [m.accumulator for m in found] == ["a", "b"]
        assert found[1].location.lineno == 2


class TestMapping:
    def test_example(self) -> None:
        source = "for (int i = 0; i <= n; ++i) { answer[i] = i + 1; }"
        [match] = mappings(source)
        assert match.array == "answer"
        assert match.index == "i"
        assert match.index_expr == "i"
        assert match.value == "i + 1"
        assert match.lower == "0"
        assert match.upper == "n"
        assert match.typeset == r"answer_{i} = i + 1,\quad i = 0,\ldots,n"
        assert match.inline_text == "answer[i] = i+1  (i=0..n)"

    def test_index_expression(self) -> None:
        [match] = mappings("for (int i = 0; i < n; i++) b[2 * i + 1] = i * i;")
        assert match.index_expr == "2 * i + 1"
        assert match.typeset.startswith(r"b_{2 \cdot i + 1} = i \cdot i")

    @pytest.mark.parametrize(
        "source",
        [
            "for (int i = 0; i < n; i++) { a[j] = i; }",
            "for (int i = 0; i < n; i++) { a[idx] = i; }",
            "for (int i = 0; i < n; i++) { if (a[i] == 0) x = 1; }",
            "for (int i = 0; i < n; i++) { a[i] = i ^ 1; }",
            "for (int i = n; i > 0; i--) { a[i] = i; }",
        ],
    )
    def test_rejected(self, source: str) -> None:
        assert mappings(source) == []
