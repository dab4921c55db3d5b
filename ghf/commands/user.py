# SPDX-FileCopyrightText: Copyright (c) 2025 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""User profile commands.

Listings for the authenticated user (no username given, or `notifications`)
are keyed by ctx.viewer_key() so a token switch never serves another
account's cached pages.
"""

from __future__ import annotations

import argparse
from typing import Any, Dict, Optional

from ..context import RunContext
from ..display import format_date, print_key_value, print_title, truncate, yes_no
from .common import add_pagination_args, list_fetch, run_paginated
from .gist import GIST_HEADERS, gist_row, gist_summary


def _print_profile(u: Dict[str, Any]) -> None:
    name = f"  ({u['name']})" if u.get("name") else ""
    print_title(f"{u.get('login')}{name}")
    print_key_value([
        ("Type", u.get("type")),
        ("Bio", u.get("bio") or ""),
        ("Company", u.get("company") or ""),
        ("Location", u.get("location") or ""),
        ("Email", u.get("email") or "(private)"),
        ("Blog", u.get("blog") or ""),
        ("Public repos", u.get("public_repos")),
        ("Public gists", u.get("public_gists")),
        ("Followers", u.get("followers")),
        ("Following", u.get("following")),
        ("Member since", format_date(u.get("created_at"))),
        ("Profile URL", u.get("html_url")),
    ])


def cmd_view(ctx: RunContext, args: argparse.Namespace) -> int:
    _print_profile(ctx.client.get(f"/users/{args.username}"))
    return 0


def cmd_me(ctx: RunContext, args: argparse.Namespace) -> int:
    ctx.require_auth()
    _print_profile(ctx.client.get("/user"))
    return 0


def _owner(ctx: RunContext, username: Optional[str]):
    """(endpoint prefix, cache identity) for `username`, or the viewer when None."""
    if username:
        return f"/users/{username}", username
    ctx.require_auth()
    return "/user", ctx.viewer_key()


def _people(ctx: RunContext, args: argparse.Namespace, relation: str, title: str) -> int:
    prefix, who = _owner(ctx, args.username)
    print_title(title)
    return run_paginated(
        ctx, args,
        op_tag=f"user.{relation}",
        filters=(who,),
        fetch=list_fetch(
            ctx, f"{prefix}/{relation}",
            summarize=lambda u: {"login": u.get("login"), "type": u.get("type"), "html_url": u.get("html_url")},
        ),
        headers=["Login", "Type", "Profile URL"],
        row=lambda u: [u["login"], u["type"], u["html_url"]],
        empty_message=f"No {relation}.",
    )


def cmd_followers(ctx: RunContext, args: argparse.Namespace) -> int:
    return _people(ctx, args, "followers", f"Followers — {args.username or 'you'}")


def cmd_following(ctx: RunContext, args: argparse.Namespace) -> int:
    return _people(ctx, args, "following", f"Following — {args.username or 'you'}")


def cmd_orgs(ctx: RunContext, args: argparse.Namespace) -> int:
    prefix, who = _owner(ctx, args.username)
    print_title(f"Organizations — {args.username or 'you'}")
    return run_paginated(
        ctx, args,
        op_tag="user.orgs",
        filters=(who,),
        fetch=list_fetch(
            ctx, f"{prefix}/orgs",
            summarize=lambda o: {"login": o.get("login"), "description": o.get("description")},
        ),
        headers=["Org", "Description"],
        row=lambda o: [o["login"], truncate(o["description"], 60)],
        empty_message="No organizations.",
    )


def cmd_gists(ctx: RunContext, args: argparse.Namespace) -> int:
    print_title(f"Gists — {args.username}")
    return run_paginated(
        ctx, args,
        op_tag="user.gists",
        filters=(args.username,),
        fetch=list_fetch(ctx, f"/users/{args.username}/gists", summarize=gist_summary),
        headers=GIST_HEADERS,
        row=gist_row,
        empty_message="No public gists.",
    )


def cmd_stars(ctx: RunContext, args: argparse.Namespace) -> int:
    prefix, who = _owner(ctx, args.username)
    print_title(f"Starred — {args.username or 'you'}")
    return run_paginated(
        ctx, args,
        op_tag="user.stars",
        filters=(who,),
        fetch=list_fetch(
            ctx, f"{prefix}/starred",
            summarize=lambda r: {
                "full_name": r.get("full_name"),
                "stargazers_count": r.get("stargazers_count", 0),
                "language": r.get("language"),
                "description": r.get("description"),
            },
        ),
        headers=["Repo", "Stars", "Lang", "Description"],
        row=lambda r: [r["full_name"], r["stargazers_count"], r["language"], truncate(r["description"], 40)],
        empty_message="No starred repos.",
    )


def cmd_keys(ctx: RunContext, args: argparse.Namespace) -> int:
    print_title(f"Public SSH Keys — {args.username}")
    return run_paginated(
        ctx, args,
        op_tag="user.keys",
        filters=(args.username,),
        fetch=list_fetch(
            ctx, f"/users/{args.username}/keys",
            summarize=lambda k: {"id": k.get("id"), "key": k.get("key")},
        ),
        headers=["ID", "Key"],
        row=lambda k: [k["id"], truncate(k["key"], 60)],
        empty_message="No public keys.",
    )


def cmd_notifications(ctx: RunContext, args: argparse.Namespace) -> int:
    ctx.require_auth()
    print_title("Notifications" + (" (all)" if args.all else " (unread)"))
    return run_paginated(
        ctx, args,
        op_tag="user.notifications",
        filters=(ctx.viewer_key(), args.all),
        fetch=list_fetch(
            ctx, "/notifications",
            params={"all": "true" if args.all else None},
            summarize=lambda n: {
                "repo": (n.get("repository") or {}).get("full_name"),
                "type": (n.get("subject") or {}).get("type"),
                "title": (n.get("subject") or {}).get("title"),
                "reason": n.get("reason"),
                "unread": bool(n.get("unread")),
                "updated_at": n.get("updated_at"),
            },
        ),
        headers=["Repo", "Type", "Title", "Reason", "Unread", "Updated"],
        row=lambda n: [
            n["repo"],
            n["type"],
            truncate(n["title"], 40),
            n["reason"],
            yes_no(n["unread"]),
            format_date(n["updated_at"]),
        ],
        empty_message="No notifications.",
    )


def register(subparsers: argparse._SubParsersAction) -> None:
    user = subparsers.add_parser("user", help="User profile commands")
    sub = user.add_subparsers(dest="user_command", metavar="<command>")
    sub.required = True

    p_view = sub.add_parser("view", help="View a user's public profile")
    p_view.add_argument("username")
    p_view.set_defaults(func=cmd_view)

    p_me = sub.add_parser("me", help="View your own profile (requires auth)")
    p_me.set_defaults(func=cmd_me)

    for name, help_text, func in (
        ("followers", "List followers (omit username for your own)", cmd_followers),
        ("following", "List followed users (omit username for your own)", cmd_following),
        ("orgs", "List organizations (omit username for your own)", cmd_orgs),
        ("stars", "List starred repos (omit username for your own)", cmd_stars),
    ):
        p = sub.add_parser(name, help=help_text)
        p.add_argument("username", nargs="?", default=None)
        add_pagination_args(p)
        p.set_defaults(func=func)

    for name, help_text, func in (
        ("gists", "List a user's public gists", cmd_gists),
        ("keys", "List a user's public SSH keys", cmd_keys),
    ):
        p = sub.add_parser(name, help=help_text)
        p.add_argument("username")
        add_pagination_args(p)
        p.set_defaults(func=func)

    p_notif = sub.add_parser("notifications", help="List your notifications (requires auth)")
    p_notif.add_argument("-a", "--all", action="store_true", help="Include read notifications")
    add_pagination_args(p_notif)
    p_notif.set_defaults(func=cmd_notifications)
