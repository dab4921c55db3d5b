# SPDX-FileCopyrightText: Copyright (c) 2025 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Organization commands.

Resources:
  GET /orgs/{org}
  GET /user/orgs                        (auth)
  GET /orgs/{org}/repos?type={type}&sort={sort}
  GET /orgs/{org}/public_members
  GET /orgs/{org}/teams                 (auth; org membership)
  GET /orgs/{org}/events
"""

from __future__ import annotations

import argparse
from typing import Any, Dict

from ..context import RunContext
from ..display import format_date, print_key_value, print_title, truncate
from .common import add_pagination_args, list_fetch, login_of, run_paginated


def cmd_view(ctx: RunContext, args: argparse.Namespace) -> int:
    o = ctx.client.get(f"/orgs/{args.org}")
    name = f"  ({o['name']})" if o.get("name") else ""
    print_title(f"{o.get('login')}{name}")
    if o.get("description"):
        print(f"\n  {o['description']}\n")
    print_key_value([
        ("Location", o.get("location") or ""),
        ("Email", o.get("email") or ""),
        ("Blog", o.get("blog") or ""),
        ("Public repos", o.get("public_repos")),
        ("Followers", o.get("followers")),
        ("Verified", bool(o.get("is_verified"))),
        ("Created", format_date(o.get("created_at"))),
        ("URL", o.get("html_url")),
    ])
    return 0


def _org_summary(o: Dict[str, Any]) -> Dict[str, Any]:
    return {"login": o.get("login"), "description": o.get("description")}


def cmd_list(ctx: RunContext, args: argparse.Namespace) -> int:
    ctx.require_auth()
    print_title("Your Organizations")
    return run_paginated(
        ctx, args,
        op_tag="org.list",
        filters=(ctx.viewer_key(),),
        fetch=list_fetch(ctx, "/user/orgs", summarize=_org_summary),
        headers=["Org", "Description"],
        row=lambda o: [o["login"], truncate(o["description"], 60)],
        empty_message="You are not a member of any organizations.",
    )


def cmd_repos(ctx: RunContext, args: argparse.Namespace) -> int:
    print_title(f"Repos — {args.org} [{args.type}]")
    return run_paginated(
        ctx, args,
        op_tag="org.repos",
        filters=(args.org, args.type, args.sort),
        fetch=list_fetch(
            ctx, f"/orgs/{args.org}/repos",
            params={"type": args.type, "sort": args.sort},
            summarize=lambda r: {
                "name": r.get("name"),
                "stargazers_count": r.get("stargazers_count", 0),
                "language": r.get("language"),
                "description": r.get("description"),
                "updated_at": r.get("updated_at"),
            },
        ),
        headers=["Repo", "Stars", "Lang", "Description", "Updated"],
        row=lambda r: [
            r["name"],
            r["stargazers_count"],
            r["language"],
            truncate(r["description"], 40),
            format_date(r["updated_at"]),
        ],
        empty_message="No repos.",
    )


def cmd_members(ctx: RunContext, args: argparse.Namespace) -> int:
    print_title(f"Public Members — {args.org}")
    return run_paginated(
        ctx, args,
        op_tag="org.members",
        filters=(args.org,),
        fetch=list_fetch(
            ctx, f"/orgs/{args.org}/public_members",
            summarize=lambda u: {"login": u.get("login"), "type": u.get("type"), "html_url": u.get("html_url")},
        ),
        headers=["Login", "Type", "Profile URL"],
        row=lambda u: [u["login"], u["type"], u["html_url"]],
        empty_message="No public members.",
    )


def cmd_teams(ctx: RunContext, args: argparse.Namespace) -> int:
    ctx.require_auth()
    print_title(f"Teams — {args.org}")
    return run_paginated(
        ctx, args,
        op_tag="org.teams",
        filters=(ctx.viewer_key(), args.org),
        fetch=list_fetch(
            ctx, f"/orgs/{args.org}/teams",
            summarize=lambda t: {
                "slug": t.get("slug"),
                "name": t.get("name"),
                "privacy": t.get("privacy"),
                "description": t.get("description"),
            },
        ),
        headers=["Slug", "Name", "Privacy", "Description"],
        row=lambda t: [t["slug"], t["name"], t["privacy"], truncate(t["description"], 40)],
        empty_message="No teams visible.",
    )


def event_summary(e: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "type": e.get("type"),
        "actor": login_of(e.get("actor")),
        "repo": (e.get("repo") or {}).get("name"),
        "created_at": e.get("created_at"),
    }


def cmd_events(ctx: RunContext, args: argparse.Namespace) -> int:
    print_title(f"Recent Events — {args.org}")
    return run_paginated(
        ctx, args,
        op_tag="org.events",
        filters=(args.org,),
        fetch=list_fetch(ctx, f"/orgs/{args.org}/events", summarize=event_summary),
        headers=["Type", "Actor", "Repo", "Date"],
        row=lambda e: [(e["type"] or "").replace("Event", ""), e["actor"], e["repo"], format_date(e["created_at"])],
        empty_message="No recent events.",
    )


def register(subparsers: argparse._SubParsersAction) -> None:
    org = subparsers.add_parser("org", help="Organization commands")
    sub = org.add_subparsers(dest="org_command", metavar="<command>")
    sub.required = True

    p_view = sub.add_parser("view", help="View organization details")
    p_view.add_argument("org")
    p_view.set_defaults(func=cmd_view)

    p_list = sub.add_parser("list", help="List your organizations (requires auth)")
    add_pagination_args(p_list)
    p_list.set_defaults(func=cmd_list)

    p_repos = sub.add_parser("repos", help="List organization repos")
    p_repos.add_argument("org")
    p_repos.add_argument(
        "-t", "--type", choices=("all", "public", "private", "forks", "sources", "member"), default="public",
    )
    p_repos.add_argument(
        "-s", "--sort", choices=("created", "updated", "pushed", "full_name"), default="updated",
    )
    add_pagination_args(p_repos)
    p_repos.set_defaults(func=cmd_repos)

    for name, help_text, func in (
        ("members", "List public members", cmd_members),
        ("teams", "List teams (requires auth + org membership)", cmd_teams),
        ("events", "List recent public events", cmd_events),
    ):
        p = sub.add_parser(name, help=help_text)
        p.add_argument("org")
        add_pagination_args(p)
        p.set_defaults(func=func)
