"""
Pytest tests for ResponseCache (5-minute TTL, lazy expiry, best-effort storage).

Run from the repo root:
    pytest ghf/cache/test_response_cache.py -v
"""

import json
from pathlib import Path

import pytest

from ghf.cache.response_cache import DEFAULT_RESPONSE_TTL_S, ResponseCache


class FakeClock:
    def __init__(self, now: float = 1_700_000_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def cache_file(tmp_path):
    return tmp_path / "cache" / "responses.json"


@pytest.fixture
def cache(cache_file, clock):
    return ResponseCache(cache_file=cache_file, clock=clock)


# ============================================================================
# get / set
# ============================================================================

def test_missing_key_is_a_miss(cache):
    assert cache.get("nope") is None
    assert cache.stats.miss == 1


def test_set_then_get_round_trip(cache):
    value = {"items": [{"number": 1, "title": "Fix"}], "total_count": None}
    assert cache.set("pr.list::a::b::1::30", value) is True
    assert cache.get("pr.list::a::b::1::30") == value
    assert cache.stats.hit == 1
    assert cache.stats.write == 1


def test_various_payload_types(cache):
    cache.set("str", "hello")
    cache.set("num", 42)
    cache.set("arr", [1, 2, 3])
    assert cache.get("str") == "hello"
    assert cache.get("num") == 42
    assert cache.get("arr") == [1, 2, 3]


def test_entry_persists_across_instances(cache, cache_file, clock):
    cache.set("k", {"a": 1})
    other = ResponseCache(cache_file=cache_file, clock=clock)
    assert other.get("k") == {"a": 1}
    doc = json.loads(cache_file.read_text())
    assert doc["version"] == 1
    assert doc["items"]["k"]["data"] == {"a": 1}


# ============================================================================
# TTL
# ============================================================================

def test_entry_valid_at_exactly_ttl(cache, clock):
    cache.set("k", "v")
    clock.advance(DEFAULT_RESPONSE_TTL_S)
    assert cache.get("k") == "v"


def test_expired_entry_is_removed(cache, cache_file, clock):
    cache.set("k", [1, 2, 3])
    clock.advance(5 * 60 + 1)
    assert cache.get("k") is None
    # Removed, not just hidden: gone from disk and stays a miss.
    assert "k" not in json.loads(cache_file.read_text())["items"]
    assert cache.get("k") is None
    clock.advance(-(5 * 60 + 1))
    assert cache.get("k") is None


def test_is_cached(cache, clock):
    assert cache.is_cached("k") is False
    cache.set("k", "data")
    assert cache.is_cached("k") is True
    clock.advance(301)
    assert cache.is_cached("k") is False


def test_expired_entry_counts_as_miss(cache, clock):
    cache.set("k", "v")
    clock.advance(DEFAULT_RESPONSE_TTL_S + 1)
    assert cache.get("k") is None
    assert cache.stats.hit == 0
    assert cache.stats.miss == 1


def test_write_drops_other_expired_entries(cache, cache_file, clock):
    for i in range(50):
        cache.set(f"old-{i}", i)
    clock.advance(10_000)
    cache.set("new", "v")
    fresh = ResponseCache(cache_file=cache_file, clock=clock)
    fresh._load_once()
    assert list(fresh._get_items()) == ["new"]


def test_write_keeps_live_entries(cache, cache_file, clock):
    cache.set("a", 1)
    clock.advance(200)
    cache.set("b", 2)
    clock.advance(200)
    cache.set("c", 3)
    items = json.loads(cache_file.read_text())["items"]
    assert sorted(items) == ["b", "c"]


def test_stored_none_is_cached_but_reads_as_miss(cache):
    assert cache.set("k", None) is True
    assert cache.is_cached("k") is True
    assert cache.get("k") is None


# ============================================================================
# clear
# ============================================================================

def test_clear_removes_all_entries(cache, cache_file, clock):
    cache.set("a", 1)
    cache.set("b", 2)
    cache.clear()
    assert cache.get("a") is None
    assert cache.get("b") is None
    assert not cache_file.exists()
    assert ResponseCache(cache_file=cache_file, clock=clock).get("a") is None


def test_clear_on_empty_cache(cache):
    cache.clear()
    assert cache.get("a") is None


# ============================================================================
# storage failures never reach the caller
# ============================================================================

def test_corrupt_file_is_a_miss(cache_file, clock):
    cache_file.parent.mkdir(parents=True)
    cache_file.write_text("{not json")
    cache = ResponseCache(cache_file=cache_file, clock=clock)
    assert cache.get("k") is None
    assert cache.set("k", "v") is True
    assert cache.get("k") == "v"


def test_unwritable_location_degrades_to_miss(tmp_path, clock):
    blocker = tmp_path / "blocker"
    blocker.write_text("a file, not a directory")
    cache = ResponseCache(cache_file=blocker / "responses.json", clock=clock)
    assert cache.set("k", "v") is False
    assert cache.get("k") is None
    cache.clear()


def test_unserializable_payload_is_not_cached(cache):
    assert cache.set("k", {"bad": object()}) is False
    assert cache.get("k") is None


def test_write_merges_with_other_writers(cache_file, clock):
    first = ResponseCache(cache_file=cache_file, clock=clock)
    second = ResponseCache(cache_file=cache_file, clock=clock)
    first.get("warm-up")
    second.set("from-second", 2)
    first.set("from-first", 1)
    fresh = ResponseCache(cache_file=cache_file, clock=clock)
    assert fresh.get("from-first") == 1
    assert fresh.get("from-second") == 2
