"""
Command groups for the `ghf` CLI.

Each module exposes `register(subparsers)`, which adds one command group and
binds every leaf command to a `func(ctx, args) -> int` handler.
"""

from . import actions, auth, cache, gist, issue, keys, org, pr, repo, search, user

COMMAND_MODULES = (auth, cache, pr, issue, repo, search, user, org, gist, keys, actions)


def register_all(subparsers) -> None:
    for module in COMMAND_MODULES:
        module.register(subparsers)


__all__ = ["COMMAND_MODULES", "register_all"]
