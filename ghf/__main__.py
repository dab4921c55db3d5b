#!/usr/bin/env python3
"""Module entrypoint for `ghf`.

Usage:
  - `python3 -m ghf pr list owner/repo`
"""

from __future__ import annotations

from .cli import main


if __name__ == "__main__":
    raise SystemExit(main())
