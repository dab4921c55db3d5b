# SPDX-FileCopyrightText: Copyright (c) 2025 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Keys and emails of the authenticated user.

Resources (all require auth):
  GET /user/keys       (read:public_key)
  GET /user/gpg_keys   (read:gpg_key)
  GET /user/emails     (user:email)
"""

from __future__ import annotations

import argparse

from ..context import RunContext
from ..display import format_date, print_title, truncate, yes_no
from .common import add_pagination_args, list_fetch, run_paginated


def cmd_ssh(ctx: RunContext, args: argparse.Namespace) -> int:
    ctx.require_auth()
    print_title("SSH Keys")
    return run_paginated(
        ctx, args,
        op_tag="keys.ssh",
        filters=(ctx.viewer_key(),),
        fetch=list_fetch(
            ctx, "/user/keys",
            summarize=lambda k: {
                "id": k.get("id"),
                "title": k.get("title"),
                "key": k.get("key"),
                "created_at": k.get("created_at"),
            },
        ),
        headers=["ID", "Title", "Key", "Added"],
        row=lambda k: [k["id"], k["title"], truncate(k["key"], 40), format_date(k["created_at"])],
        empty_message="No SSH keys.",
    )


def cmd_gpg(ctx: RunContext, args: argparse.Namespace) -> int:
    ctx.require_auth()
    print_title("GPG Keys")
    return run_paginated(
        ctx, args,
        op_tag="keys.gpg",
        filters=(ctx.viewer_key(),),
        fetch=list_fetch(
            ctx, "/user/gpg_keys",
            summarize=lambda k: {
                "key_id": k.get("key_id"),
                "emails": ", ".join(e.get("email", "") for e in k.get("emails") or []),
                "can_sign": bool(k.get("can_sign")),
                "expires_at": k.get("expires_at"),
            },
        ),
        headers=["Key ID", "Emails", "Can sign", "Expires"],
        row=lambda k: [k["key_id"], truncate(k["emails"], 40), yes_no(k["can_sign"]), format_date(k["expires_at"])],
        empty_message="No GPG keys.",
    )


def cmd_emails(ctx: RunContext, args: argparse.Namespace) -> int:
    ctx.require_auth()
    print_title("Email Addresses")
    return run_paginated(
        ctx, args,
        op_tag="keys.emails",
        filters=(ctx.viewer_key(),),
        fetch=list_fetch(
            ctx, "/user/emails",
            summarize=lambda e: {
                "email": e.get("email"),
                "primary": bool(e.get("primary")),
                "verified": bool(e.get("verified")),
                "visibility": e.get("visibility"),
            },
        ),
        headers=["Email", "Primary", "Verified", "Visibility"],
        row=lambda e: [e["email"], yes_no(e["primary"]), yes_no(e["verified"]), e["visibility"] or "private"],
        empty_message="No email addresses.",
    )


def register(subparsers: argparse._SubParsersAction) -> None:
    keys = subparsers.add_parser("keys", help="Your SSH keys, GPG keys and emails (requires auth)")
    sub = keys.add_subparsers(dest="keys_command", metavar="<command>")
    sub.required = True

    for name, help_text, func in (
        ("ssh", "List your SSH keys", cmd_ssh),
        ("gpg", "List your GPG keys", cmd_gpg),
        ("emails", "List your email addresses", cmd_emails),
    ):
        p = sub.add_parser(name, help=help_text)
        add_pagination_args(p)
        p.set_defaults(func=func)
