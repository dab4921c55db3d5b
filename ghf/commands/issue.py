# SPDX-FileCopyrightText: Copyright (c) 2025 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Issue, label and milestone commands.

GitHub's issues endpoint also returns pull requests. They are kept in the
cached page (so a full page still counts as full) and hidden when rendering.
"""

from __future__ import annotations

import argparse
from typing import Any, Dict, Sequence

from ..cache.cache_keys import KeyPart
from ..context import RunContext
from ..display import format_date, print_key_value, print_title, state_badge, truncate
from ..paginate import Page
from .common import (
    COMMENT_HEADERS,
    add_pagination_args,
    add_repo_arg,
    comment_row,
    comment_summary,
    list_fetch,
    login_of,
    positive_int,
    run_paginated,
    split_repo,
)


def _label_names(labels) -> str:
    names = [lbl if isinstance(lbl, str) else (lbl or {}).get("name") or "" for lbl in labels or []]
    return ", ".join(n for n in names if n)


def _issue_summary(i: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "number": i.get("number"),
        "state": i.get("state"),
        "title": i.get("title"),
        "user": login_of(i.get("user")),
        "labels": _label_names(i.get("labels")),
        "comments": i.get("comments", 0),
        "updated_at": i.get("updated_at"),
        "is_pull_request": bool(i.get("pull_request")),
    }


def _issue_row(i: Dict[str, Any]) -> Sequence[Any]:
    return [
        i["number"],
        state_badge(i["state"]),
        truncate(i["title"], 40),
        i["user"],
        i["labels"],
        i["comments"],
        format_date(i["updated_at"]),
    ]


def cmd_list(ctx: RunContext, args: argparse.Namespace) -> int:
    owner, repo = split_repo(args.owner_repo)

    def fetch(filters: Sequence[KeyPart], page: int, per_page: int) -> Page:
        _, _, state, label, assignee = filters
        data = ctx.client.get(
            f"/repos/{owner}/{repo}/issues",
            params={
                "state": state, "labels": label, "assignee": assignee,
                "per_page": per_page, "page": page,
            },
        )
        return Page(items=[_issue_summary(i) for i in data or []])

    print_title(f"Issues — {args.owner_repo} [{args.state}]")
    return run_paginated(
        ctx, args,
        op_tag="issue.list",
        filters=(owner, repo, args.state, args.label, args.assignee),
        fetch=fetch,
        headers=["#", "State", "Title", "Author", "Labels", "Comments", "Updated"],
        row=_issue_row,
        keep=lambda i: not i.get("is_pull_request"),
        empty_message="No issues.",
    )


def cmd_view(ctx: RunContext, args: argparse.Namespace) -> int:
    owner, repo = split_repo(args.owner_repo)
    i = ctx.client.get(f"/repos/{owner}/{repo}/issues/{args.number}")
    print_title(f"Issue #{i.get('number')} — {truncate(i.get('title'), 60)}")
    print(f"\n  {state_badge(i.get('state'))}\n")
    print(f"  {i.get('body') or '(no description)'}\n")
    print_key_value([
        ("Repo", args.owner_repo),
        ("Author", login_of(i.get("user")) or "—"),
        ("Labels", _label_names(i.get("labels")) or "—"),
        ("Assignees", ", ".join(a.get("login", "") for a in i.get("assignees") or []) or "—"),
        ("Milestone", (i.get("milestone") or {}).get("title") or "—"),
        ("Comments", i.get("comments")),
        ("Created", format_date(i.get("created_at"))),
        ("Updated", format_date(i.get("updated_at"))),
        ("Closed", format_date(i.get("closed_at"))),
        ("URL", i.get("html_url")),
    ])
    return 0


def cmd_comments(ctx: RunContext, args: argparse.Namespace) -> int:
    owner, repo = split_repo(args.owner_repo)
    print_title(f"Comments — Issue #{args.number} ({args.owner_repo})")
    return run_paginated(
        ctx, args,
        op_tag="issue.comments",
        filters=(owner, repo, args.number),
        fetch=list_fetch(ctx, f"/repos/{owner}/{repo}/issues/{args.number}/comments", summarize=comment_summary),
        headers=COMMENT_HEADERS,
        row=comment_row,
        empty_message="No comments.",
    )


def cmd_labels(ctx: RunContext, args: argparse.Namespace) -> int:
    owner, repo = split_repo(args.owner_repo)
    print_title(f"Labels — {args.owner_repo}")
    return run_paginated(
        ctx, args,
        op_tag="issue.labels",
        filters=(owner, repo),
        fetch=list_fetch(
            ctx, f"/repos/{owner}/{repo}/labels",
            summarize=lambda lbl: {
                "name": lbl.get("name"),
                "color": lbl.get("color"),
                "description": lbl.get("description"),
            },
        ),
        headers=["Color", "Name", "Description"],
        row=lambda lbl: [f"#{lbl['color']}", lbl["name"], truncate(lbl["description"], 50)],
        empty_message="No labels.",
    )


def cmd_milestones(ctx: RunContext, args: argparse.Namespace) -> int:
    owner, repo = split_repo(args.owner_repo)
    print_title(f"Milestones — {args.owner_repo} [{args.state}]")
    return run_paginated(
        ctx, args,
        op_tag="issue.milestones",
        filters=(owner, repo, args.state),
        fetch=list_fetch(
            ctx, f"/repos/{owner}/{repo}/milestones",
            params={"state": args.state},
            summarize=lambda m: {
                "number": m.get("number"),
                "title": m.get("title"),
                "state": m.get("state"),
                "open_issues": m.get("open_issues", 0),
                "closed_issues": m.get("closed_issues", 0),
                "due_on": m.get("due_on"),
            },
        ),
        headers=["#", "Title", "State", "Open", "Closed", "Due"],
        row=lambda m: [
            m["number"],
            truncate(m["title"], 40),
            state_badge(m["state"]),
            m["open_issues"],
            m["closed_issues"],
            format_date(m["due_on"]),
        ],
        empty_message="No milestones.",
    )


def register(subparsers: argparse._SubParsersAction) -> None:
    issue = subparsers.add_parser("issue", help="Issue commands")
    sub = issue.add_subparsers(dest="issue_command", metavar="<command>")
    sub.required = True

    p_list = sub.add_parser("list", help="List issues in a repository")
    p_list.add_argument("owner_repo", metavar="owner/repo")
    p_list.add_argument("-s", "--state", choices=("open", "closed", "all"), default="open")
    p_list.add_argument("--label", default=None, help="Filter by label")
    p_list.add_argument("--assignee", default=None, help="Filter by assignee login")
    add_pagination_args(p_list)
    p_list.set_defaults(func=cmd_list)

    p_view = sub.add_parser("view", help="View issue details")
    p_view.add_argument("owner_repo", metavar="owner/repo")
    p_view.add_argument("number", type=positive_int)
    p_view.set_defaults(func=cmd_view)

    p_comments = sub.add_parser("comments", help="List comments on an issue")
    add_repo_arg(p_comments)
    p_comments.add_argument("number", type=positive_int)
    add_pagination_args(p_comments)
    p_comments.set_defaults(func=cmd_comments)

    p_labels = sub.add_parser("labels", help="List labels in a repository")
    add_repo_arg(p_labels)
    add_pagination_args(p_labels, default_limit=50)
    p_labels.set_defaults(func=cmd_labels)

    p_milestones = sub.add_parser("milestones", help="List milestones in a repository")
    add_repo_arg(p_milestones)
    p_milestones.add_argument("-s", "--state", choices=("open", "closed", "all"), default="open")
    add_pagination_args(p_milestones)
    p_milestones.set_defaults(func=cmd_milestones)
