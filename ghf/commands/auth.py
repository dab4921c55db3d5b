# SPDX-FileCopyrightText: Copyright (c) 2025 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Authentication commands (token stored in ~/.config/ghf/config.yml)."""

from __future__ import annotations

import argparse
import getpass
import logging

from .. import config
from ..client import GitHubAPIClient
from ..context import RunContext
from ..display import format_date, print_key_value, print_muted, print_success, print_title
from ..exceptions import CommandError, GitHubAPIError, friendly_error
from .cache import response_cache_of

logger = logging.getLogger(__name__)

TOKENS_URL = "https://github.com/settings/tokens"
RECOMMENDED_SCOPES = "repo, read:user, read:org, gist, workflow"


def cmd_login(ctx: RunContext, args: argparse.Namespace) -> int:
    token = (args.login_token or "").strip()
    if not token:
        print_muted(f"Create a token at: {TOKENS_URL}")
        print_muted(f"Recommended scopes: {RECOMMENDED_SCOPES}\n")
        try:
            token = getpass.getpass("Paste your GitHub Personal Access Token: ").strip()
        except EOFError:
            token = ""
    if not token:
        raise CommandError("Token cannot be empty.", exit_code=2)

    verifier = GitHubAPIClient(token=token, base_url=ctx.client.base_url, timeout=ctx.client.timeout)
    try:
        me = verifier.get("/user")
    except GitHubAPIError as e:
        raise CommandError(f"Invalid token or insufficient scopes. {friendly_error(e)}")

    try:
        config.set_stored_token(token)
    except OSError as e:
        raise CommandError(f"Could not save token to {config.config_path()}: {e}")
    # Cached /user/... listings belong to the previous account.
    response_cache_of(ctx).clear()

    print_success(f"Logged in as {me.get('login')}")
    print_key_value([
        ("Name", me.get("name") or ""),
        ("Account type", me.get("type")),
        ("Config file", str(config.config_path())),
    ])
    return 0


def cmd_logout(ctx: RunContext, args: argparse.Namespace) -> int:
    try:
        removed = config.clear_stored_token()
    except OSError as e:
        raise CommandError(f"Could not update {config.config_path()}: {e}")
    response_cache_of(ctx).clear()
    if not removed:
        print_muted("Not logged in.")
        return 0
    print_success("Logged out — token removed from local storage.")
    return 0


def cmd_status(ctx: RunContext, args: argparse.Namespace) -> int:
    ctx.require_auth()
    resp = ctx.client.get_response("/user")
    me = resp.json()
    scopes = resp.headers.get("X-OAuth-Scopes") or "(none listed)"
    print_title("Authentication Status")
    print_key_value([
        ("Status", "✔ Authenticated"),
        ("Login", me.get("login")),
        ("Name", me.get("name") or ""),
        ("Account type", me.get("type")),
        ("Public repos", me.get("public_repos")),
        ("Private repos", me.get("total_private_repos", 0)),
        ("Member since", format_date(me.get("created_at"))),
        ("Token scopes", scopes),
        ("Config file", str(config.config_path())),
    ])
    return 0


def register(subparsers: argparse._SubParsersAction) -> None:
    auth = subparsers.add_parser("auth", help="Manage GitHub authentication")
    sub = auth.add_subparsers(dest="auth_command", metavar="<command>")
    sub.required = True

    p_login = sub.add_parser("login", help="Authenticate with a Personal Access Token")
    p_login.add_argument("--with-token", dest="login_token", default=None, help="Pass the token directly (non-interactive)")
    p_login.set_defaults(func=cmd_login)

    p_logout = sub.add_parser("logout", help="Remove the stored token")
    p_logout.set_defaults(func=cmd_logout)

    p_status = sub.add_parser("status", help="Show authentication status and token scopes")
    p_status.set_defaults(func=cmd_status)
