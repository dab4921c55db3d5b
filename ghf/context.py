# SPDX-FileCopyrightText: Copyright (c) 2025 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Per-invocation context.

One RunContext is built by the CLI entry point and handed to every command.
Nothing in ghf keeps a module-level client or cache; tests build their own
context with fakes.
"""

from __future__ import annotations

import hashlib
from dataclasses import dataclass, field
from typing import Callable, Optional

from .cache import ResponseCache
from .client import GitHubAPIClient
from .config import resolve_token, response_cache_path
from .display import ask_yes_no
from .exceptions import CommandError


@dataclass
class RunContext:
    client: GitHubAPIClient
    # None disables response caching for this invocation (--no-cache).
    cache: Optional[ResponseCache] = None
    confirm: Callable[[str], bool] = field(default=ask_yes_no)

    @classmethod
    def from_args(cls, *, token: Optional[str] = None, use_cache: bool = True) -> "RunContext":
        client = GitHubAPIClient(token=resolve_token(token))
        cache = ResponseCache(cache_file=response_cache_path()) if use_cache else None
        return cls(client=client, cache=cache)

    def require_auth(self) -> None:
        if not self.client.has_token():
            raise CommandError("Not authenticated. Run `ghf auth login` to add your token.")

    def viewer_key(self) -> str:
        """Cache-key part standing for "the authenticated user" of this token."""
        digest = hashlib.sha256((self.client.token or "").encode("utf-8")).hexdigest()
        return f"viewer-{digest[:12]}"
