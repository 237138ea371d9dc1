"""Tests for the per-document scan cache."""

from inlinemath import DictScanCache, ScanConfig, hash_config, hash_content, scan
from inlinemath.location import SourceLocation
from inlinemath.matches import DivisionMatch

SOURCE = "double r = num / den;"


def _matches() -> tuple[DivisionMatch, ...]:
    loc = SourceLocation(1, 12, 11, 20, 1, 21)
    return (DivisionMatch(loc, r"\frac{num}{den}", "num⁄den", "num", "den"),)


class TestDictScanCache:
    def test_get_returns_none_when_empty(self) -> None:
        assert DictScanCache().get("A.java", 1, "cfg") is None

    def test_put_then_get(self) -> None:
        cache = DictScanCache()
        matches = _matches()
        cache.put("A.java", 1, "cfg", matches)
        assert cache.get("A.java", 1, "cfg") is matches

    def test_different_keys_miss(self) -> None:
        cache = DictScanCache()
        cache.put("A.java", 1, "cfg", _matches())
        assert cache.get("B.java", 1, "cfg") is None
        assert cache.get("A.java", 2, "cfg") is None
        assert cache.get("A.java", 1, "other") is None

    def test_new_revision_drops_old(self) -> None:
        cache = DictScanCache()
        cache.put("A.java", 1, "cfg", _matches())
        cache.put("A.java", 1, "cfg2", _matches())
        assert len(cache) == 2
        cache.put("A.java", 2, "cfg", ())
        assert len(cache) == 1
        assert cache.get("A.java", 1, "cfg") is None
        assert cache.get("A.java", 2, "cfg") == ()

    def test_documents_independent(self) -> None:
        cache = DictScanCache()
        cache.put("A.java", 1, "cfg", _matches())
        cache.put("B.java", 7, "cfg", ())
        assert cache.get("A.java", 1, "cfg") is not None
        assert len(cache) == 2

    def test_invalidate_and_clear(self) -> None:
        cache = DictScanCache()
        cache.put("A.java", 1, "cfg", _matches())
        cache.put("B.java", 1, "cfg", _matches())
        cache.invalidate("A.java")
        cache.invalidate("missing.java")
        assert cache.get("A.java", 1, "cfg") is None
        assert len(cache) == 1
        cache.clear()
        assert len(cache) == 0


class TestHashHelpers:
    def test_hash_content_deterministic(self) -> None:
        assert hash_content(SOURCE) == hash_content(SOURCE)

    def test_hash_content_differs(self) -> None:
        assert hash_content("a / b") != hash_content("a / c")

    def test_hash_content_lone_surrogate(self) -> None:
        assert hash_content("a / b \udcff") != hash_content("a / b \udcfe")

    def test_hash_config_deterministic(self) -> None:
        assert hash_config(ScanConfig()) == hash_config(ScanConfig())

    def test_hash_config_differs_per_field(self) -> None:
        base = hash_config(ScanConfig())
        assert hash_config(ScanConfig(expression_enabled=False)) != base
        assert hash_config(ScanConfig(power_functions=("pow",))) != base
        assert hash_config(ScanConfig(max_expression_matches=10)) != base
        assert hash_config(ScanConfig(resolve_overlaps=False)) != base


class TestScanWithCache:
    def test_lone_surrogate_in_source(self) -> None:
        cache = DictScanCache()
        source = "x = a / b; // \udcff"
        first = scan(source, cache=cache)
        assert [m.kind for m in first] == ["division"]
        assert scan(source, cache=cache) is first

    def test_second_call_hits_cache(self) -> None:
        cache = DictScanCache()
        first = scan(SOURCE, cache=cache, document_id="A.java", revision=1)
        second = scan(SOURCE, cache=cache, document_id="A.java", revision=1)
        assert second is first

    def test_revision_defaults_to_content_hash(self) -> None:
        cache = DictScanCache()
        first = scan(SOURCE, cache=cache)
        assert cache.get("<untitled>", hash_content(SOURCE), hash_config(ScanConfig())) is first
        assert scan(SOURCE, cache=cache) is first

    def test_edit_rescans(self) -> None:
        cache = DictScanCache()
        scan(SOURCE, cache=cache, document_id="A.java")
        edited = scan("x = 1;", cache=cache, document_id="A.java")
        assert edited == ()
        assert len(cache) == 1

    def test_config_is_part_of_key(self) -> None:
        cache = DictScanCache()
        with_expr = scan(SOURCE, cache=cache, document_id="A.java", revision=1)
        without = scan(
            SOURCE,
            cache=cache,
            document_id="A.java",
            revision=1,
            config=ScanConfig(division_enabled=False, expression_enabled=False),
        )
        assert with_expr != without
        assert without == ()

    def test_cache_returns_stale_result_for_same_revision(self) -> None:
        # The caller owns revision bookkeeping: reusing a revision reuses its result
        cache = DictScanCache()
        first = scan(SOURCE, cache=cache, document_id="A.java", revision=1)
        assert scan("x = 1;", cache=cache, document_id="A.java", revision=1) is first
