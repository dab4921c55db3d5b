# SPDX-FileCopyrightText: Copyright (c) 2025 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Terminal output helpers (plain text; results on stdout, errors on stderr)."""

from __future__ import annotations

import sys
from datetime import datetime
from typing import Any, List, Optional, Sequence, Tuple

EMPTY_CELL = "—"


def truncate(text: Optional[str], max_len: int) -> str:
    if not text:
        return ""
    return text if len(text) <= max_len else text[: max_len - 1] + "…"


def format_date(iso: Optional[str]) -> str:
    """'2026-01-24T10:30:00Z' -> 'Jan 24, 2026'."""
    if not iso:
        return EMPTY_CELL
    try:
        dt = datetime.fromisoformat(iso.replace("Z", "+00:00"))
    except ValueError:
        return iso
    return f"{dt.strftime('%b')} {dt.day}, {dt.year}"


def state_badge(state: Optional[str]) -> str:
    return f"[{(state or 'unknown').upper()}]"


def yes_no(value: Any) -> str:
    return "yes" if value else "no"


def _cell(value: Any) -> str:
    return EMPTY_CELL if value is None or value == "" else str(value)


def print_title(title: str) -> None:
    print(f"\n  {title}")
    print("  " + "─" * (len(title) + 2))


def print_section(title: str) -> None:
    print(f"\n── {title} ──")


def print_table(headers: Sequence[str], rows: Sequence[Sequence[Any]]) -> None:
    text_rows: List[List[str]] = [[_cell(v) for v in row] for row in rows]
    widths = [len(h) for h in headers]
    for row in text_rows:
        for i, cell in enumerate(row[: len(widths)]):
            widths[i] = max(widths[i], len(cell))

    def fmt(cells: Sequence[str]) -> str:
        return "  " + "  ".join(c.ljust(widths[i]) for i, c in enumerate(cells[: len(widths)])).rstrip()

    print(fmt(list(headers)))
    print("  " + "  ".join("-" * w for w in widths))
    for row in text_rows:
        print(fmt(row))


def print_key_value(pairs: Sequence[Tuple[str, Any]]) -> None:
    """Aligned `key  value` lines; None values are skipped, booleans shown as yes/no."""
    for key, val in pairs:
        if val is None:
            continue
        shown = yes_no(val) if isinstance(val, bool) else str(val)
        print(f"  {key.ljust(22)} {shown}")


def print_muted(msg: str) -> None:
    print(f"  {msg}")


def print_success(msg: str) -> None:
    print(f"✔  {msg}")


def print_error(msg: str) -> None:
    print(f"✖  {msg}", file=sys.stderr)


def ask_yes_no(question: str) -> bool:
    """Blocking yes/no question on stdin; empty answer or EOF means no."""
    try:
        answer = input(f"{question} [y/N] ")
    except EOFError:
        return False
    return answer.strip().lower() in ("y", "yes")
