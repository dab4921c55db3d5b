# SPDX-FileCopyrightText: Copyright (c) 2025 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""
ghf: a terminal client for the GitHub REST API.

Layout:
- `ghf.cache`      persisted response cache (TTL-bounded) and cache key builder
- `ghf.client`     REST client (requests) with token detection
- `ghf.exceptions` typed API errors + the user-facing failure classifier
- `ghf.paginate`   interactive multi-page retrieval
- `ghf.commands`   argparse subcommands (thin glue over the above)
- `ghf.cli`        entry point; the only place that decides the exit code
"""

__version__ = "1.0.0"

__all__ = ["__version__"]
