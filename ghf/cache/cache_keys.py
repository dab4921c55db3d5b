# SPDX-FileCopyrightText: Copyright (c) 2025 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Cache key construction.

Key format:
  <op tag>::<param 1>::<param 2>::...::<page>::<per_page>

Example:
  cache_key("pr.list", "acme", "widgets", "open", None, 2, 30)
    -> "pr.list::acme::widgets::open::2::30"

Callers must pass parameters in a stable order per operation and always lead
with the operation tag. The separator is not escaped.
"""

from __future__ import annotations

from typing import Optional, Union

CACHE_KEY_SEP = "::"

KeyPart = Optional[Union[str, int, float, bool]]


def _key_part_text(part: Union[str, int, float, bool]) -> str:
    if isinstance(part, bool):
        return "true" if part else "false"
    return str(part)


def cache_key(*parts: KeyPart) -> str:
    """Join the non-None parts with `::`."""
    return CACHE_KEY_SEP.join(_key_part_text(p) for p in parts if p is not None)
