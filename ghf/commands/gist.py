# SPDX-FileCopyrightText: Copyright (c) 2025 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Gist commands (read-only)."""

from __future__ import annotations

import argparse
from typing import Any, Dict, Sequence

from ..context import RunContext
from ..display import format_date, print_key_value, print_muted, print_section, print_title, truncate, yes_no
from .common import add_pagination_args, list_fetch, login_of, run_paginated

GIST_HEADERS = ["ID", "Description", "Files", "Public", "Updated"]


def gist_summary(g: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "id": g.get("id"),
        "description": g.get("description"),
        "files": len(g.get("files") or {}),
        "public": bool(g.get("public")),
        "updated_at": g.get("updated_at"),
    }


def gist_row(g: Dict[str, Any]) -> Sequence[Any]:
    return [
        (g["id"] or "")[:12],
        truncate(g["description"] or "(no description)", 40),
        g["files"],
        yes_no(g["public"]),
        format_date(g["updated_at"]),
    ]


def cmd_list(ctx: RunContext, args: argparse.Namespace) -> int:
    ctx.require_auth()
    print_title("Your Gists")
    return run_paginated(
        ctx, args,
        op_tag="gist.list",
        filters=(ctx.viewer_key(),),
        fetch=list_fetch(ctx, "/gists", summarize=gist_summary),
        headers=GIST_HEADERS,
        row=gist_row,
        empty_message="No gists.",
    )


def cmd_view(ctx: RunContext, args: argparse.Namespace) -> int:
    g = ctx.client.get(f"/gists/{args.gist_id}")
    files = g.get("files") or {}
    print_title(f"Gist {g.get('id')}")
    print_key_value([
        ("Description", g.get("description") or "(no description)"),
        ("Owner", login_of(g.get("owner")) or "anonymous"),
        ("Public", bool(g.get("public"))),
        ("Files", len(files)),
        ("Comments", g.get("comments", 0)),
        ("Created", format_date(g.get("created_at"))),
        ("Updated", format_date(g.get("updated_at"))),
        ("URL", g.get("html_url")),
    ])
    for name, f in files.items():
        f = f or {}
        print_section(f"{name} ({f.get('language') or 'text'}, {f.get('size', 0)} bytes)")
        content = f.get("content")
        if content is None:
            print_muted("(content not included)")
        else:
            print(content)
            if f.get("truncated"):
                print_muted(f"(truncated; full file at {f.get('raw_url')})")
    return 0


def cmd_forks(ctx: RunContext, args: argparse.Namespace) -> int:
    print_title(f"Forks — gist {args.gist_id}")
    return run_paginated(
        ctx, args,
        op_tag="gist.forks",
        filters=(args.gist_id,),
        fetch=list_fetch(
            ctx, f"/gists/{args.gist_id}/forks",
            summarize=lambda f: {
                "id": f.get("id"),
                "owner": login_of(f.get("owner")),
                "created_at": f.get("created_at"),
            },
        ),
        headers=["ID", "Owner", "Created"],
        row=lambda f: [(f["id"] or "")[:12], f["owner"], format_date(f["created_at"])],
        empty_message="No forks.",
    )


def register(subparsers: argparse._SubParsersAction) -> None:
    gist = subparsers.add_parser("gist", help="Gist commands")
    sub = gist.add_subparsers(dest="gist_command", metavar="<command>")
    sub.required = True

    p_list = sub.add_parser("list", help="List your gists (requires auth)")
    add_pagination_args(p_list)
    p_list.set_defaults(func=cmd_list)

    p_view = sub.add_parser("view", help="View a gist and its file contents")
    p_view.add_argument("gist_id", metavar="id")
    p_view.set_defaults(func=cmd_view)

    p_forks = sub.add_parser("forks", help="List forks of a gist")
    p_forks.add_argument("gist_id", metavar="id")
    add_pagination_args(p_forks)
    p_forks.set_defaults(func=cmd_forks)
