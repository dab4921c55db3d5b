# SPDX-FileCopyrightText: Copyright (c) 2025 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Response cache maintenance."""

from __future__ import annotations

import argparse

from ..cache import ResponseCache
from ..config import response_cache_path
from ..context import RunContext
from ..display import print_success


def response_cache_of(ctx: RunContext) -> ResponseCache:
    """The on-disk response cache, even when --no-cache left ctx.cache unset."""
    return ctx.cache if ctx.cache is not None else ResponseCache(cache_file=response_cache_path())


def cmd_clear(ctx: RunContext, args: argparse.Namespace) -> int:
    cache = response_cache_of(ctx)
    cache.clear()
    print_success(f"Cache cleared ({cache.cache_file})")
    return 0


def register(subparsers: argparse._SubParsersAction) -> None:
    cache = subparsers.add_parser("cache", help="Response cache commands")
    sub = cache.add_subparsers(dest="cache_command", metavar="<command>")
    sub.required = True

    p_clear = sub.add_parser("clear", help="Remove all cached responses")
    p_clear.set_defaults(func=cmd_clear)
