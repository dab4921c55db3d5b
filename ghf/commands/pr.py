# SPDX-FileCopyrightText: Copyright (c) 2025 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Pull request commands.

Resources:
  GET /repos/{owner}/{repo}/pulls?state={state}&base={base}&per_page={n}&page={p}
  GET /repos/{owner}/{repo}/pulls/{n}/{files,commits,reviews}
  GET /repos/{owner}/{repo}/issues/{n}/comments   (conversation comments)

Cached fields (pr.list):
  number, state, title, user, base label, head label, updated_at
"""

from __future__ import annotations

import argparse
from typing import Any, Dict, Sequence

from ..cache.cache_keys import KeyPart
from ..context import RunContext
from ..display import format_date, print_key_value, print_section, print_table, print_title, state_badge, truncate
from ..paginate import Page
from .common import (
    COMMENT_HEADERS,
    COMMIT_HEADERS,
    add_pagination_args,
    add_repo_arg,
    comment_row,
    comment_summary,
    commit_row,
    commit_summary,
    first_line,
    list_fetch,
    login_of,
    positive_int,
    run_paginated,
    split_repo,
)

PR_STATES = ("open", "closed", "all")


def _pull_summary(p: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "number": p.get("number"),
        "state": p.get("state"),
        "title": p.get("title"),
        "user": login_of(p.get("user")),
        "base": (p.get("base") or {}).get("label"),
        "head": (p.get("head") or {}).get("label"),
        "updated_at": p.get("updated_at"),
    }


def _pull_row(p: Dict[str, Any]) -> Sequence[Any]:
    return [
        p["number"],
        state_badge(p["state"]),
        truncate(p["title"], 40),
        p["user"],
        f"{p['base']} ← {p['head']}",
        format_date(p["updated_at"]),
    ]


def cmd_list(ctx: RunContext, args: argparse.Namespace) -> int:
    owner, repo = split_repo(args.owner_repo)

    def fetch(filters: Sequence[KeyPart], page: int, per_page: int) -> Page:
        _, _, state, base = filters
        data = ctx.client.get(
            f"/repos/{owner}/{repo}/pulls",
            params={"state": state, "base": base, "per_page": per_page, "page": page},
        )
        return Page(items=[_pull_summary(p) for p in data or []])

    print_title(f"Pull Requests — {args.owner_repo} [{args.state}]")
    return run_paginated(
        ctx, args,
        op_tag="pr.list",
        filters=(owner, repo, args.state, args.base),
        fetch=fetch,
        headers=["#", "State", "Title", "Author", "Base←Head", "Updated"],
        row=_pull_row,
        empty_message="No pull requests.",
    )


def cmd_view(ctx: RunContext, args: argparse.Namespace) -> int:
    owner, repo = split_repo(args.owner_repo)
    n = args.number
    p = ctx.client.get(f"/repos/{owner}/{repo}/pulls/{n}")
    files = ctx.client.get(f"/repos/{owner}/{repo}/pulls/{n}/files", params={"per_page": 100})
    reviews = ctx.client.get(f"/repos/{owner}/{repo}/pulls/{n}/reviews")

    merged = bool(p.get("merged"))
    print_title(f"PR #{p.get('number')} — {truncate(p.get('title'), 60)}")
    print(f"\n  {state_badge('merged' if merged else p.get('state'))}\n")
    print(f"  {p.get('body') or '(no description)'}\n")
    mergeable = p.get("mergeable")
    print_key_value([
        ("Repo", args.owner_repo),
        ("Author", login_of(p.get("user")) or "—"),
        ("Base ← Head", f"{(p.get('base') or {}).get('label')} ← {(p.get('head') or {}).get('label')}"),
        ("Mergeable", "checking…" if mergeable is None else str(mergeable).lower()),
        ("Draft", bool(p.get("draft"))),
        ("Labels", ", ".join(lbl.get("name", "") for lbl in p.get("labels") or []) or "—"),
        ("Reviewers", ", ".join(r.get("login", "") for r in p.get("requested_reviewers") or []) or "—"),
        ("Commits", p.get("commits")),
        ("Additions", f"+{p.get('additions', 0)}"),
        ("Deletions", f"-{p.get('deletions', 0)}"),
        ("Changed files", p.get("changed_files")),
        ("Created", format_date(p.get("created_at"))),
        ("Updated", format_date(p.get("updated_at"))),
        ("Merged at", format_date(p.get("merged_at"))),
        ("URL", p.get("html_url")),
    ])

    if files:
        print_section("Files Changed")
        print_table(
            ["File", "+", "-", "Status"],
            [[truncate(f.get("filename"), 60), f.get("additions"), f.get("deletions"), f.get("status")] for f in files],
        )
    if reviews:
        print_section("Reviews")
        print_table(
            ["Author", "State", "Submitted"],
            [[login_of(r.get("user")), state_badge(r.get("state")), format_date(r.get("submitted_at"))] for r in reviews],
        )
    return 0


def cmd_files(ctx: RunContext, args: argparse.Namespace) -> int:
    owner, repo = split_repo(args.owner_repo)
    print_title(f"Files — PR #{args.number} ({args.owner_repo})")
    return run_paginated(
        ctx, args,
        op_tag="pr.files",
        filters=(owner, repo, args.number),
        fetch=list_fetch(
            ctx, f"/repos/{owner}/{repo}/pulls/{args.number}/files",
            summarize=lambda f: {
                "filename": f.get("filename"),
                "status": f.get("status"),
                "additions": f.get("additions", 0),
                "deletions": f.get("deletions", 0),
            },
        ),
        headers=["File", "Status", "+", "-"],
        row=lambda f: [truncate(f["filename"], 60), f["status"], f"+{f['additions']}", f"-{f['deletions']}"],
        empty_message="No files changed.",
    )


def cmd_commits(ctx: RunContext, args: argparse.Namespace) -> int:
    owner, repo = split_repo(args.owner_repo)
    print_title(f"Commits — PR #{args.number} ({args.owner_repo})")
    return run_paginated(
        ctx, args,
        op_tag="pr.commits",
        filters=(owner, repo, args.number),
        fetch=list_fetch(ctx, f"/repos/{owner}/{repo}/pulls/{args.number}/commits", summarize=commit_summary),
        headers=COMMIT_HEADERS,
        row=commit_row,
        empty_message="No commits.",
    )


def cmd_reviews(ctx: RunContext, args: argparse.Namespace) -> int:
    owner, repo = split_repo(args.owner_repo)
    print_title(f"Reviews — PR #{args.number} ({args.owner_repo})")
    return run_paginated(
        ctx, args,
        op_tag="pr.reviews",
        filters=(owner, repo, args.number),
        fetch=list_fetch(
            ctx, f"/repos/{owner}/{repo}/pulls/{args.number}/reviews",
            summarize=lambda r: {
                "user": login_of(r.get("user")),
                "state": r.get("state"),
                "body": first_line(r.get("body")),
                "submitted_at": r.get("submitted_at"),
            },
        ),
        headers=["Reviewer", "State", "Comment", "Submitted"],
        row=lambda r: [r["user"], state_badge(r["state"]), truncate(r["body"], 50), format_date(r["submitted_at"])],
        empty_message="No reviews.",
    )


def cmd_comments(ctx: RunContext, args: argparse.Namespace) -> int:
    owner, repo = split_repo(args.owner_repo)
    print_title(f"Comments — PR #{args.number} ({args.owner_repo})")
    # Conversation comments live on the issue side of a PR.
    return run_paginated(
        ctx, args,
        op_tag="pr.comments",
        filters=(owner, repo, args.number),
        fetch=list_fetch(ctx, f"/repos/{owner}/{repo}/issues/{args.number}/comments", summarize=comment_summary),
        headers=COMMENT_HEADERS,
        row=comment_row,
        empty_message="No comments.",
    )


def register(subparsers: argparse._SubParsersAction) -> None:
    pr = subparsers.add_parser("pr", help="Pull request commands")
    sub = pr.add_subparsers(dest="pr_command", metavar="<command>")
    sub.required = True

    p_list = sub.add_parser("list", help="List pull requests")
    p_list.add_argument("owner_repo", metavar="owner/repo")
    p_list.add_argument("-s", "--state", choices=PR_STATES, default="open", help="open|closed|all (default: open)")
    p_list.add_argument("-b", "--base", default=None, help="Filter by base branch")
    add_pagination_args(p_list)
    p_list.set_defaults(func=cmd_list)

    p_view = sub.add_parser("view", help="View pull request details")
    p_view.add_argument("owner_repo", metavar="owner/repo")
    p_view.add_argument("number", type=positive_int)
    p_view.set_defaults(func=cmd_view)

    for name, help_text, func in (
        ("files", "List files changed in a pull request", cmd_files),
        ("commits", "List commits in a pull request", cmd_commits),
        ("reviews", "List reviews on a pull request", cmd_reviews),
        ("comments", "List conversation comments on a pull request", cmd_comments),
    ):
        p = sub.add_parser(name, help=help_text)
        add_repo_arg(p)
        p.add_argument("number", type=positive_int)
        add_pagination_args(p)
        p.set_defaults(func=func)
