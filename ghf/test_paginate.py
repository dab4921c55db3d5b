"""
Pytest tests for PageIterator (cache-backed interactive paging).

Run from the repo root:
    pytest ghf/test_paginate.py -v
"""

import pytest

from ghf.cache import ResponseCache
from ghf.exceptions import GitHubAPIError
from ghf.paginate import (
    DEFAULT_PER_PAGE,
    Page,
    PageIterator,
    PagePhase,
    clamp_per_page,
    page_info_line,
)


class FakeFetch:
    """Fetch collaborator returning a scripted item count per page."""

    def __init__(self, counts, *, total_count=None, fail_on_page=None, status=404):
        self.counts = dict(counts)
        self.total_count = total_count
        self.fail_on_page = fail_on_page
        self.status = status
        self.calls = []

    def __call__(self, filters, page, per_page):
        self.calls.append((tuple(filters), page, per_page))
        if page == self.fail_on_page:
            raise GitHubAPIError(status_code=self.status, endpoint="/repos/acme/widgets/pulls", message="Not Found")
        n = self.counts.get(page, 0)
        return Page(items=[{"page": page, "i": i} for i in range(n)], total_count=self.total_count)


class ScriptedConfirm:
    def __init__(self, *answers):
        self.answers = list(answers)
        self.questions = []

    def __call__(self, question):
        self.questions.append(question)
        return self.answers.pop(0)


@pytest.fixture
def cache(tmp_path):
    return ResponseCache(cache_file=tmp_path / "responses.json")


def _iterator(fetch, cache, confirm, **kw):
    kw.setdefault("start_page", 1)
    kw.setdefault("per_page", 30)
    kw.setdefault("all_pages", True)
    return PageIterator(
        op_tag="pr.list",
        filters=("acme", "widgets", "open", None),
        fetch=fetch,
        cache=cache,
        confirm=confirm,
        **kw,
    )


def _cached_keys(cache):
    cache._load_once()
    return sorted(cache._get_items().keys())


# ============================================================================
# has_more heuristic
# ============================================================================

def test_full_page_has_more_and_prompts(cache):
    fetch = FakeFetch({1: 30})
    confirm = ScriptedConfirm(False)
    pages = _iterator(fetch, cache, confirm)

    first = next(pages)
    assert len(first.items) == 30
    assert pages.state.has_more is True
    assert confirm.questions == []  # prompt happens on the next advance, after rendering

    assert list(pages) == []
    assert confirm.questions == ["Load next page?"]
    assert pages.phase is PagePhase.DONE


def test_short_page_is_done_without_prompt(cache):
    for all_pages in (True, False):
        fetch = FakeFetch({1: 5})
        confirm = ScriptedConfirm()
        pages = list(_iterator(fetch, cache, confirm, all_pages=all_pages))
        assert [len(p.items) for p in pages] == [5]
        assert confirm.questions == []


def test_single_page_mode_never_prompts(cache):
    fetch = FakeFetch({1: 30, 2: 30})
    confirm = ScriptedConfirm()
    pages = _iterator(fetch, cache, confirm, all_pages=False)
    assert len(list(pages)) == 1
    assert pages.state.has_more is True
    assert confirm.questions == []
    assert len(fetch.calls) == 1


def test_exactly_full_last_page_costs_one_empty_fetch(cache):
    fetch = FakeFetch({1: 30, 2: 0})
    confirm = ScriptedConfirm(True)
    pages = list(_iterator(fetch, cache, confirm))
    assert [len(p.items) for p in pages] == [30, 0]
    assert len(fetch.calls) == 2
    assert len(confirm.questions) == 1


# ============================================================================
# end-to-end sequences
# ============================================================================

def test_declined_continuation_stops_after_one_fetch(cache):
    fetch = FakeFetch({1: 30})
    pages = _iterator(fetch, cache, ScriptedConfirm(False))
    assert len(list(pages)) == 1
    assert len(fetch.calls) == 1
    assert pages.fetch_calls == 1
    assert pages.error is None
    assert _cached_keys(cache) == ["pr.list::acme::widgets::open::1::30"]


def test_accepted_continuation_fetches_until_short_page(cache):
    fetch = FakeFetch({1: 30, 2: 12})
    confirm = ScriptedConfirm(True)
    pages = _iterator(fetch, cache, confirm)
    got = list(pages)
    assert [(p.number, len(p.items)) for p in got] == [(1, 30), (2, 12)]
    assert [c[1] for c in fetch.calls] == [1, 2]
    assert len(confirm.questions) == 1
    assert pages.state.has_more is False
    assert _cached_keys(cache) == [
        "pr.list::acme::widgets::open::1::30",
        "pr.list::acme::widgets::open::2::30",
    ]


def test_fetch_receives_filters_page_and_size(cache):
    fetch = FakeFetch({3: 2})
    list(_iterator(fetch, cache, ScriptedConfirm(), start_page=3, per_page=50))
    assert fetch.calls == [(("acme", "widgets", "open", None), 3, 50)]


# ============================================================================
# cache interaction
# ============================================================================

def test_cached_page_skips_fetch(cache):
    list(_iterator(FakeFetch({1: 5}), cache, ScriptedConfirm()))

    fetch = FakeFetch({1: 5})
    pages = list(_iterator(fetch, cache, ScriptedConfirm()))
    assert fetch.calls == []
    assert pages[0].from_cache is True
    assert pages[0].items[0] == {"page": 1, "i": 0}


def test_no_cache_always_fetches():
    fetch = FakeFetch({1: 5})
    list(_iterator(fetch, None, ScriptedConfirm()))
    list(_iterator(fetch, None, ScriptedConfirm()))
    assert len(fetch.calls) == 2


def test_different_filters_do_not_share_cache(cache):
    list(_iterator(FakeFetch({1: 5}), cache, ScriptedConfirm()))
    fetch = FakeFetch({1: 5})
    list(PageIterator(
        op_tag="pr.list", filters=("acme", "widgets", "closed", None),
        fetch=fetch, cache=cache, confirm=ScriptedConfirm(),
    ))
    assert len(fetch.calls) == 1


# ============================================================================
# failures
# ============================================================================

def test_failure_on_first_page(cache):
    fetch = FakeFetch({}, fail_on_page=1)
    pages = _iterator(fetch, cache, ScriptedConfirm())
    assert list(pages) == []
    assert "not found" in pages.error.lower()
    assert pages.phase is PagePhase.DONE
    assert _cached_keys(cache) == []


def test_failure_mid_sequence_keeps_earlier_pages(cache):
    fetch = FakeFetch({1: 30}, fail_on_page=2, status=403)
    confirm = ScriptedConfirm(True)
    pages = _iterator(fetch, cache, confirm)
    got = list(pages)
    assert [p.number for p in got] == [1]
    assert "403" in pages.error
    assert len(confirm.questions) == 1
    # Iterator is not restartable.
    assert list(pages) == []
    assert len(fetch.calls) == 2


# ============================================================================
# total_count-aware termination
# ============================================================================

def test_total_count_stops_on_exact_last_page(cache):
    fetch = FakeFetch({1: 30, 2: 30}, total_count=60)
    confirm = ScriptedConfirm(True, True)
    got = list(_iterator(fetch, cache, confirm))
    assert [p.number for p in got] == [1, 2]
    assert len(confirm.questions) == 1
    assert len(fetch.calls) == 2


def test_total_count_survives_cache(cache):
    list(_iterator(FakeFetch({1: 30}, total_count=30), cache, ScriptedConfirm()))
    confirm = ScriptedConfirm()
    got = list(_iterator(FakeFetch({}), cache, confirm))
    assert got[0].total_count == 30
    assert confirm.questions == []


# ============================================================================
# misc
# ============================================================================

@pytest.mark.parametrize("kw", [{"start_page": 0}, {"per_page": 0}, {"per_page": 101}])
def test_invalid_arguments(kw, cache):
    with pytest.raises(ValueError):
        _iterator(FakeFetch({}), cache, ScriptedConfirm(), **kw)


def test_clamp_per_page():
    assert DEFAULT_PER_PAGE == 30
    assert clamp_per_page(500) == 100
    assert clamp_per_page(0) == 1
    assert clamp_per_page(30) == 30


def test_page_info_line():
    assert page_info_line(2, 12, 30) == "  Page 2 · showing 42 total · 12 on this page"
    assert page_info_line(2, 12, 30, showing=25) == "  Page 2 · showing 25 total · 12 on this page"


def test_malformed_cached_payload_is_refetched(cache):
    cache.set("pr.list::acme::widgets::open::1::30", ["not", "a", "page"])
    fetch = FakeFetch({1: 3})
    got = list(_iterator(fetch, cache, ScriptedConfirm()))
    assert len(fetch.calls) == 1
    assert len(got[0].items) == 3
