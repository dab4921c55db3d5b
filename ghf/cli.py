# SPDX-FileCopyrightText: Copyright (c) 2025 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""
CLI entry point for ghf.

main() is the only place that decides the process exit code:
  0   success (including the operator declining the next page)
  1   a command failed (API error, invalid token, ...)
  2   usage error
  130 interrupted (Ctrl-C)
Commands raise CommandError / GitHubAPIError; nothing below this module exits.
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Callable, Optional, Sequence

from . import __version__
from .commands import register_all
from .context import RunContext
from .display import print_error
from .exceptions import CommandError, GitHubAPIError, friendly_error

logger = logging.getLogger(__name__)

ContextFactory = Callable[..., RunContext]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ghf",
        description="Browse GitHub from the terminal: PRs, issues, repos, search and more.",
        epilog="Examples:\n"
               "  %(prog)s auth login\n"
               "  %(prog)s pr list microsoft/vscode --all-pages\n"
               "  %(prog)s issue list psf/requests --label bug\n"
               "  %(prog)s repo list torvalds\n"
               "  %(prog)s search repos \"machine learning\" --language python\n"
               "  %(prog)s org repos python --type all\n"
               "  %(prog)s actions runs psf/requests --branch main\n"
               "  %(prog)s cache clear",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--token", default=None, help="GitHub token for this invocation (overrides the stored one)")
    parser.add_argument("--no-cache", action="store_true", help="Bypass the 5-minute response cache")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging (REST calls, cache hits/misses)")

    subparsers = parser.add_subparsers(dest="command", metavar="<group>")
    register_all(subparsers)
    return parser


def _setup_logging(verbose: bool) -> None:
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="[%(levelname)s] %(message)s")
    else:
        logging.basicConfig(level=logging.INFO, format="%(message)s")
    logging.getLogger("urllib3").setLevel(logging.WARNING)


def main(
    argv: Optional[Sequence[str]] = None,
    *,
    context_factory: ContextFactory = RunContext.from_args,
) -> int:
    parser = build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)
    _setup_logging(bool(args.verbose))

    func = getattr(args, "func", None)
    if func is None:
        parser.print_help(sys.stderr)
        return 2

    ctx = context_factory(token=args.token, use_cache=not args.no_cache)
    try:
        return int(func(ctx, args) or 0)
    except CommandError as e:
        print_error(str(e))
        return e.exit_code
    except GitHubAPIError as e:
        print_error(friendly_error(e))
        return 1
    except KeyboardInterrupt:
        print_error("Interrupted.")
        return 130
    finally:
        if ctx.cache is not None:
            hit, miss, write = ctx.cache.stats.hit, ctx.cache.stats.miss, ctx.cache.stats.write
            logger.debug("cache stats: hit=%d miss=%d write=%d", hit, miss, write)
        logger.debug("REST calls: %s", ctx.client.get_rest_call_stats())
