# SPDX-FileCopyrightText: Copyright (c) 2025 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Helpers shared by the command modules."""

from __future__ import annotations

import argparse
from typing import Any, Callable, Dict, Mapping, Optional, Sequence, Tuple

from ..cache.cache_keys import KeyPart
from ..context import RunContext
from ..display import format_date, print_muted, print_table, truncate
from ..exceptions import CommandError
from ..paginate import DEFAULT_PER_PAGE, FetchFn, Page, PageIterator, clamp_per_page, print_page_info

Summarize = Callable[[Dict[str, Any]], Dict[str, Any]]


def split_repo(owner_repo: str) -> Tuple[str, str]:
    parts = (owner_repo or "").split("/")
    if len(parts) != 2 or not parts[0] or not parts[1]:
        raise CommandError(f'Invalid format "{owner_repo}". Use owner/repo (e.g. "torvalds/linux")', exit_code=2)
    return parts[0], parts[1]


def positive_int(text: str) -> int:
    try:
        n = int(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected a positive integer, got {text!r}")
    if n < 1:
        raise argparse.ArgumentTypeError(f"expected a positive integer, got {n}")
    return n


def add_pagination_args(parser: argparse.ArgumentParser, default_limit: int = DEFAULT_PER_PAGE) -> None:
    parser.add_argument("-p", "--page", type=positive_int, default=1, help="Page number (default: 1)")
    parser.add_argument(
        "-l", "--limit", type=positive_int, default=default_limit,
        help=f"Results per page, max 100 (default: {default_limit})",
    )
    parser.add_argument(
        "--all-pages", action="store_true",
        help="Page through results interactively (asks before each next page)",
    )


def add_repo_arg(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("owner_repo", metavar="owner/repo")


def login_of(obj: Optional[Dict[str, Any]]) -> Optional[str]:
    return (obj or {}).get("login")


def short_sha(sha: Optional[str]) -> str:
    return (sha or "")[:10]


def first_line(text: Optional[str]) -> str:
    return (text or "").split("\n", 1)[0]


COMMIT_HEADERS = ["SHA", "Author", "Date", "Message"]
COMMENT_HEADERS = ["Author", "Comment", "Date"]


def commit_summary(c: Dict[str, Any]) -> Dict[str, Any]:
    commit = c.get("commit") or {}
    author = commit.get("author") or {}
    return {
        "sha": c.get("sha"),
        "author": author.get("name") or login_of(c.get("author")) or "unknown",
        "date": author.get("date"),
        "message": first_line(commit.get("message")),
    }


def commit_row(c: Dict[str, Any]) -> Sequence[Any]:
    return [short_sha(c["sha"]), c["author"], format_date(c["date"]), truncate(c["message"], 60)]


def comment_summary(c: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "user": login_of(c.get("user")),
        "body": " ".join((c.get("body") or "").split()),
        "created_at": c.get("created_at"),
    }


def comment_row(c: Dict[str, Any]) -> Sequence[Any]:
    return [c["user"], truncate(c["body"], 70), format_date(c["created_at"])]


def list_fetch(
    ctx: RunContext,
    endpoint: str,
    *,
    summarize: Summarize,
    params: Optional[Mapping[str, Any]] = None,
    items_key: Optional[str] = None,
) -> FetchFn:
    """FetchFn for a plain GET list endpoint.

    The endpoint and `params` must already encode every filter; the caller
    passes the same values as cache-key filters. With `items_key`, the body is
    an envelope like {"total_count": N, "<items_key>": [...]} (search, Actions).
    """

    def fetch(filters: Sequence[KeyPart], page: int, per_page: int) -> Page:
        data = ctx.client.get(endpoint, params={**(params or {}), "per_page": per_page, "page": page})
        if items_key is None:
            return Page(items=[summarize(x) for x in data or []])
        body = data or {}
        total = body.get("total_count")
        return Page(
            items=[summarize(x) for x in body.get(items_key) or []],
            total_count=total if isinstance(total, int) else None,
        )

    return fetch


def run_paginated(
    ctx: RunContext,
    args: argparse.Namespace,
    *,
    op_tag: str,
    filters: Sequence[KeyPart],
    fetch: FetchFn,
    headers: Sequence[str],
    row: Callable[[Dict[str, Any]], Sequence[Any]],
    empty_message: str,
    keep: Optional[Callable[[Dict[str, Any]], bool]] = None,
    on_first_page: Optional[Callable[[Page], None]] = None,
) -> int:
    """Render every page the operator asks for; a fetch failure becomes a CommandError.

    Pages already printed stay on screen; the failure message follows them.
    The "showing N total" count is the number of rows actually printed, so
    items hidden by `keep` are not counted.
    """
    per_page = clamp_per_page(args.limit)
    pages = PageIterator(
        op_tag=op_tag,
        filters=filters,
        fetch=fetch,
        cache=ctx.cache,
        confirm=ctx.confirm,
        start_page=args.page,
        per_page=per_page,
        all_pages=args.all_pages,
    )
    first = True
    showing = (args.page - 1) * per_page
    for page in pages:
        if first and on_first_page is not None:
            on_first_page(page)
        first = False

        shown = [item for item in page.items if keep is None or keep(item)]
        if not shown:
            print_muted(empty_message)
            continue
        showing += len(shown)
        print_table(headers, [row(item) for item in shown])
        print_page_info(page.number, len(shown), per_page, showing)

    if pages.error:
        raise CommandError(pages.error)
    return 0
