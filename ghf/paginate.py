# SPDX-FileCopyrightText: Copyright (c) 2025 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

"""
Interactive multi-page retrieval.

PageIterator is a lazy, finite, non-restartable sequence of Page objects:

    PAGE_PENDING --load--> PAGE_LOADED --(has_more and all_pages and "yes")--> PAGE_PENDING
                                 |
                                 +--(otherwise, or fetch failed)--> DONE

Per page:
  1. key = cache_key(op_tag, *filters, page, per_page)
  2. cache hit -> use it; miss -> fetch(filters, page, per_page), store, use it.
     A GitHubAPIError ends the sequence; the classified message lands in
     `iterator.error`.
  3. yield the page (the caller renders it)
  4. has_more = len(items) == per_page
     (and, when the page carries a total_count, page * per_page < total_count)
  5. on the next advance: stop unless has_more and all_pages, else ask the
     operator; "no" stops cleanly, "yes" moves to page + 1.

The has_more heuristic means an exactly-full last page costs one extra fetch
that comes back empty when the endpoint reports no total.

Usage:
    pages = PageIterator(op_tag="pr.list", filters=(owner, repo, state, base),
                         fetch=fetch_pulls, cache=ctx.cache, confirm=ctx.confirm,
                         start_page=1, per_page=30, all_pages=True)
    for page in pages:
        render(page.items)
    if pages.error:
        ...
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Sequence

from .cache import ResponseCache, cache_key
from .cache.cache_keys import KeyPart
from .display import ask_yes_no
from .exceptions import GitHubAPIError, friendly_error

logger = logging.getLogger(__name__)

DEFAULT_PER_PAGE = 30
MAX_PER_PAGE = 100
LOAD_MORE_QUESTION = "Load next page?"


def clamp_per_page(n: int) -> int:
    return max(1, min(int(n), MAX_PER_PAGE))


@dataclass
class Page:
    """One batch of items from a single fetch."""

    items: List[Any] = field(default_factory=list)
    total_count: Optional[int] = None
    number: int = 1
    from_cache: bool = False

    def to_payload(self) -> Dict[str, Any]:
        return {"items": list(self.items), "total_count": self.total_count}

    @classmethod
    def from_payload(cls, payload: Any, *, number: int) -> Optional["Page"]:
        """Rebuild a cached page; None if the payload is not a page."""
        if not isinstance(payload, dict) or not isinstance(payload.get("items"), list):
            return None
        total = payload.get("total_count")
        return cls(
            items=payload["items"],
            total_count=int(total) if isinstance(total, int) else None,
            number=number,
            from_cache=True,
        )


# fetch(filters, page, per_page) -> Page; raises GitHubAPIError on failure.
FetchFn = Callable[[Sequence[KeyPart], int, int], Page]


class PagePhase(str, Enum):
    PAGE_PENDING = "page_pending"
    PAGE_LOADED = "page_loaded"
    DONE = "done"


@dataclass
class PaginationState:
    current_page: int
    per_page: int
    all_pages: bool
    has_more: bool = False


class PageIterator:
    def __init__(
        self,
        *,
        op_tag: str,
        filters: Sequence[KeyPart],
        fetch: FetchFn,
        cache: Optional[ResponseCache] = None,
        confirm: Callable[[str], bool] = ask_yes_no,
        start_page: int = 1,
        per_page: int = DEFAULT_PER_PAGE,
        all_pages: bool = False,
    ):
        if int(start_page) < 1:
            raise ValueError(f"start_page must be >= 1 (got {start_page})")
        if not 1 <= int(per_page) <= MAX_PER_PAGE:
            raise ValueError(f"per_page must be in 1..{MAX_PER_PAGE} (got {per_page})")

        self.op_tag = op_tag
        self.filters = tuple(filters)
        self._fetch = fetch
        self._cache = cache
        self._confirm = confirm
        self.state = PaginationState(
            current_page=int(start_page),
            per_page=int(per_page),
            all_pages=bool(all_pages),
        )
        self.phase = PagePhase.PAGE_PENDING
        self.error: Optional[str] = None
        self.fetch_calls = 0

    def __iter__(self) -> "PageIterator":
        return self

    def __next__(self) -> Page:
        if self.phase is PagePhase.PAGE_LOADED:
            if self._should_continue():
                self.state.current_page += 1
                self.phase = PagePhase.PAGE_PENDING
            else:
                self.phase = PagePhase.DONE

        if self.phase is PagePhase.DONE:
            raise StopIteration

        page = self._load_page()
        if page is None:
            self.phase = PagePhase.DONE
            raise StopIteration

        self.state.has_more = self._has_more(page)
        self.phase = PagePhase.PAGE_LOADED
        return page

    def _should_continue(self) -> bool:
        if not self.state.has_more or not self.state.all_pages:
            return False
        return bool(self._confirm(LOAD_MORE_QUESTION))

    def _has_more(self, page: Page) -> bool:
        st = self.state
        if len(page.items) != st.per_page:
            return False
        if page.total_count is not None:
            return st.current_page * st.per_page < page.total_count
        return True

    def _load_page(self) -> Optional[Page]:
        st = self.state
        key = cache_key(self.op_tag, *self.filters, st.current_page, st.per_page)

        if self._cache is not None:
            page = Page.from_payload(self._cache.get(key), number=st.current_page)
            if page is not None:
                return page

        self.fetch_calls += 1
        try:
            page = self._fetch(self.filters, st.current_page, st.per_page)
        except GitHubAPIError as e:
            logger.debug("%s page %d failed: %r", self.op_tag, st.current_page, e)
            self.error = friendly_error(e)
            return None

        page.number = st.current_page
        if self._cache is not None:
            self._cache.set(key, page.to_payload())
        return page


def page_info_line(page: int, count: int, per_page: int, showing: Optional[int] = None) -> str:
    """Pager status line. `showing` defaults to every earlier page being full."""
    if showing is None:
        showing = (page - 1) * per_page + count
    return f"  Page {page} · showing {showing} total · {count} on this page"


def print_page_info(page: int, count: int, per_page: int, showing: Optional[int] = None) -> None:
    print("\n" + page_info_line(page, count, per_page, showing))
