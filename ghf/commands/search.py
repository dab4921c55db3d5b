# SPDX-FileCopyrightText: Copyright (c) 2025 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Search commands.

Resources:
  GET /search/{repositories,users,code,issues,commits,topics}?q={q}&per_page={n}&page={p}

Example API Response:
  {
    "total_count": 4123,
    "incomplete_results": false,
    "items": [{"full_name": "psf/requests", "stargazers_count": 51000, ...}]
  }

Search responses carry total_count, so paging also stops once
page * per_page reaches it. Qualifiers (language:, repo:, ...) are folded into
q, so the query string alone identifies the result set.
"""

from __future__ import annotations

import argparse
from typing import Any, Callable, Dict, Optional, Sequence

from ..context import RunContext
from ..display import format_date, print_title, state_badge, truncate, yes_no
from ..paginate import Page
from .common import Summarize, add_pagination_args, first_line, list_fetch, login_of, run_paginated, short_sha

SEARCH_DEFAULT_LIMIT = 15
_REPOS_API_PREFIX = "https://api.github.com/repos/"


def build_query(query: str, *qualifiers: Sequence[Optional[str]]) -> str:
    """Append `name:value` qualifiers, skipping unset values.

    >>> build_query("http client", ("language", "python"), ("stars", None))
    'http client language:python'
    """
    parts = [query]
    parts.extend(f"{name}:{value}" for name, value in qualifiers if value)
    return " ".join(parts)


def build_repo_query(query: str, *, language=None, stars=None) -> str:
    return build_query(query, ("language", language), ("stars", stars))


def _title(label: str, query: str) -> Callable[[Page], None]:
    def show(page: Page) -> None:
        total = f"{page.total_count:,}" if page.total_count is not None else "?"
        print_title(f'{label} Search — "{query}" ({total} results)')
    return show


def _search(
    ctx: RunContext,
    args: argparse.Namespace,
    *,
    kind: str,
    label: str,
    q: str,
    summarize: Summarize,
    headers: Sequence[str],
    row: Callable[[Dict[str, Any]], Sequence[Any]],
    sort: Optional[str] = None,
    endpoint: Optional[str] = None,
) -> int:
    return run_paginated(
        ctx, args,
        op_tag=f"search.{kind}",
        filters=(q, sort),
        fetch=list_fetch(
            ctx, f"/search/{endpoint or kind}",
            params={"q": q, "sort": sort},
            summarize=summarize,
            items_key="items",
        ),
        headers=headers,
        row=row,
        empty_message="No results.",
        on_first_page=_title(label, args.query),
    )


def _repo_hit(r: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "full_name": r.get("full_name"),
        "stargazers_count": r.get("stargazers_count", 0),
        "forks_count": r.get("forks_count", 0),
        "language": r.get("language"),
        "updated_at": r.get("updated_at"),
    }


def repo_of_issue(repository_url: Optional[str]) -> str:
    """'https://api.github.com/repos/acme/widgets' -> 'acme/widgets'."""
    url = repository_url or ""
    return url[len(_REPOS_API_PREFIX):] if url.startswith(_REPOS_API_PREFIX) else url


def cmd_repos(ctx: RunContext, args: argparse.Namespace) -> int:
    return _search(
        ctx, args,
        kind="repos",
        endpoint="repositories",
        label="Repo",
        q=build_repo_query(args.query, language=args.language, stars=args.stars),
        sort=args.sort,
        summarize=_repo_hit,
        headers=["Repo", "Stars", "Forks", "Language", "Updated"],
        row=lambda r: [r["full_name"], r["stargazers_count"], r["forks_count"], r["language"], format_date(r["updated_at"])],
    )


def cmd_users(ctx: RunContext, args: argparse.Namespace) -> int:
    return _search(
        ctx, args,
        kind="users",
        label="User",
        q=args.query,
        summarize=lambda u: {
            "login": u.get("login"),
            "type": u.get("type"),
            "score": u.get("score"),
            "html_url": u.get("html_url"),
        },
        headers=["Login", "Type", "Score", "Profile URL"],
        row=lambda u: [u["login"], u["type"], f"{u['score'] or 0:.1f}", u["html_url"]],
    )


def cmd_code(ctx: RunContext, args: argparse.Namespace) -> int:
    ctx.require_auth()
    return _search(
        ctx, args,
        kind="code",
        label="Code",
        q=build_query(args.query, ("repo", args.repo), ("language", args.language)),
        summarize=lambda c: {
            "name": c.get("name"),
            "repo": (c.get("repository") or {}).get("full_name"),
            "path": c.get("path"),
            "html_url": c.get("html_url"),
        },
        headers=["File", "Repo", "Path", "URL"],
        row=lambda c: [c["name"], c["repo"], truncate(c["path"], 50), c["html_url"]],
    )


def cmd_issues(ctx: RunContext, args: argparse.Namespace) -> int:
    item_type = None if args.type == "all" else args.type
    q = build_query(args.query, ("type", item_type), ("state", args.state), ("repo", args.repo))
    return _search(
        ctx, args,
        kind="issues",
        label="Issue/PR",
        q=q,
        summarize=lambda i: {
            "number": i.get("number"),
            "title": i.get("title"),
            "repo": repo_of_issue(i.get("repository_url")),
            "state": i.get("state"),
            "user": login_of(i.get("user")),
            "is_pull_request": bool(i.get("pull_request")),
            "updated_at": i.get("updated_at"),
        },
        headers=["#", "Kind", "Title", "Repo", "State", "Author", "Updated"],
        row=lambda i: [
            i["number"],
            "PR" if i["is_pull_request"] else "Issue",
            truncate(i["title"], 40),
            i["repo"],
            state_badge(i["state"]),
            i["user"],
            format_date(i["updated_at"]),
        ],
    )


def cmd_commits(ctx: RunContext, args: argparse.Namespace) -> int:
    return _search(
        ctx, args,
        kind="commits",
        label="Commit",
        q=build_query(args.query, ("repo", args.repo), ("author", args.author)),
        summarize=lambda c: {
            "sha": c.get("sha"),
            "author": ((c.get("commit") or {}).get("author") or {}).get("name") or login_of(c.get("author")),
            "repo": (c.get("repository") or {}).get("full_name"),
            "message": first_line((c.get("commit") or {}).get("message")),
            "date": ((c.get("commit") or {}).get("author") or {}).get("date"),
        },
        headers=["SHA", "Author", "Repo", "Message", "Date"],
        row=lambda c: [short_sha(c["sha"]), c["author"], c["repo"], truncate(c["message"], 50), format_date(c["date"])],
    )


def cmd_topics(ctx: RunContext, args: argparse.Namespace) -> int:
    return _search(
        ctx, args,
        kind="topics",
        label="Topic",
        q=args.query,
        summarize=lambda t: {
            "name": t.get("name"),
            "display_name": t.get("display_name"),
            "featured": bool(t.get("featured")),
            "curated": bool(t.get("curated")),
        },
        headers=["Name", "Display Name", "Featured", "Curated"],
        row=lambda t: [t["name"], t["display_name"], yes_no(t["featured"]), yes_no(t["curated"])],
    )


def register(subparsers: argparse._SubParsersAction) -> None:
    search = subparsers.add_parser("search", help="Search GitHub")
    sub = search.add_subparsers(dest="search_command", metavar="<command>")
    sub.required = True

    p_repos = sub.add_parser("repos", help="Search repositories")
    p_repos.add_argument("query")
    p_repos.add_argument("--language", default=None, help="Filter by language")
    p_repos.add_argument("--stars", default=None, help="Star filter, e.g. '>100'")
    p_repos.add_argument("-s", "--sort", choices=("stars", "forks", "updated"), default="stars")
    add_pagination_args(p_repos)
    p_repos.set_defaults(func=cmd_repos)

    p_users = sub.add_parser("users", help="Search users")
    p_users.add_argument("query")
    add_pagination_args(p_users, default_limit=SEARCH_DEFAULT_LIMIT)
    p_users.set_defaults(func=cmd_users)

    p_code = sub.add_parser("code", help="Search code (requires auth)")
    p_code.add_argument("query")
    p_code.add_argument("-r", "--repo", default=None, help="Limit to owner/repo")
    p_code.add_argument("--language", default=None, help="Filter by language")
    add_pagination_args(p_code, default_limit=SEARCH_DEFAULT_LIMIT)
    p_code.set_defaults(func=cmd_code)

    p_issues = sub.add_parser("issues", help="Search issues and pull requests")
    p_issues.add_argument("query")
    p_issues.add_argument("-t", "--type", choices=("issue", "pr", "all"), default="all")
    p_issues.add_argument("-s", "--state", choices=("open", "closed"), default=None)
    p_issues.add_argument("-r", "--repo", default=None, help="Limit to owner/repo")
    add_pagination_args(p_issues, default_limit=SEARCH_DEFAULT_LIMIT)
    p_issues.set_defaults(func=cmd_issues)

    p_commits = sub.add_parser("commits", help="Search commits")
    p_commits.add_argument("query")
    p_commits.add_argument("-r", "--repo", default=None, help="Limit to owner/repo")
    p_commits.add_argument("-a", "--author", default=None, help="Filter by author login")
    add_pagination_args(p_commits, default_limit=SEARCH_DEFAULT_LIMIT)
    p_commits.set_defaults(func=cmd_commits)

    p_topics = sub.add_parser("topics", help="Search topics")
    p_topics.add_argument("query")
    add_pagination_args(p_topics, default_limit=SEARCH_DEFAULT_LIMIT)
    p_topics.set_defaults(func=cmd_topics)
