from __future__ import annotations

from app.crawlers.github.contracts import RepositorySummary
from app.services.compare.cache import InMemoryComparisonCache, comparison_cache_key
from app.services.compare.contracts import CodeAnalysis
from app.services.compare.fallback import FallbackSynthesizer

RESULT = FallbackSynthesizer().synthesize(
    RepositorySummary(name="alpha"),
    CodeAnalysis.empty(),
    RepositorySummary(name="beta"),
    CodeAnalysis.empty(),
)


def test_key_hashes_user_and_both_projects_without_case_folding() -> None:
    key = comparison_cache_key("octo", "alpha", "beta")

    assert len(key) == 64
    assert key == comparison_cache_key("octo", "alpha", "beta")
    assert key != comparison_cache_key("octo", "beta", "alpha")
    assert key != comparison_cache_key("Octo", "alpha", "beta")


def test_eviction_drops_first_inserted_key_after_capacity() -> None:
    cache = InMemoryComparisonCache(capacity=50)
    keys = [f"key-{index}" for index in range(51)]

    for key in keys:
        cache.put(key, RESULT)

    assert cache.size() == 50
    assert cache.get("key-0") is None
    assert cache.get("key-1") is RESULT
    assert cache.get("key-50") is RESULT
    assert cache.insertions == 51


def test_reads_do_not_refresh_eviction_order() -> None:
    cache = InMemoryComparisonCache(capacity=2)
    cache.put("first", RESULT)
    cache.put("second", RESULT)

    assert cache.get("first") is RESULT
    cache.put("third", RESULT)

    assert "first" not in cache
    assert "second" in cache
    assert "third" in cache


def test_overwrite_keeps_size_and_original_position() -> None:
    cache = InMemoryComparisonCache(capacity=2)
    cache.put("first", RESULT)
    cache.put("second", RESULT)
    cache.put("first", RESULT)

    assert cache.size() == 2
    cache.put("third", RESULT)

    assert "first" not in cache
    assert "second" in cache
