# SPDX-FileCopyrightText: Copyright (c) 2025 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

"""
Base class for disk-backed caches stored as a single JSON document.

On-disk schema:
  {"version": <int>, "items": {"<key>": <entry>, ...}}

Provides:
- Lazy loading (load on first access)
- Merge on write (entries written by another ghf process survive our write)
- Atomic write (tmp file + rename)
- Hit/miss/write stats

There is no inter-process lock: two invocations writing the same key race and
the last writer wins.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Set

logger = logging.getLogger(__name__)


@dataclass
class BaseCacheStats:
    """Basic cache statistics tracked automatically by BaseDiskCache."""
    hit: int = 0
    miss: int = 0
    write: int = 0


class BaseDiskCache:
    """Base class for JSON-document disk caches.

    Subclasses implement the entry format (TTL bookkeeping etc.) on top of
    `_peek_item` / `_set_item` / `_delete_item`, report each lookup with
    `_record_lookup()`, and call `_persist()` after mutating.
    """

    def __init__(self, *, cache_file: Path, schema_version: int = 1):
        self._cache_file = Path(cache_file)
        self._schema_version = schema_version
        self._data: Dict[str, Any] = {}
        self._loaded = False
        self._dirty = False
        self._deleted: Set[str] = set()
        self.stats = BaseCacheStats()

    @property
    def cache_file(self) -> Path:
        return self._cache_file

    def _read_disk_items(self) -> Dict[str, Any]:
        """Read the items dict from disk; missing/corrupt/unreadable -> {}."""
        if not self._cache_file.exists():
            return {}
        try:
            raw = json.loads(self._cache_file.read_text() or "{}")
        except (OSError, ValueError) as e:
            logger.debug("cache: ignoring unreadable %s (%s)", self._cache_file, e)
            return {}
        if not isinstance(raw, dict):
            return {}
        if raw.get("version") != self._schema_version:
            return {}
        items = raw.get("items")
        return dict(items) if isinstance(items, dict) else {}

    def _load_once(self) -> None:
        """Load cache from disk (once per instance)."""
        if self._loaded:
            return
        self._loaded = True
        items = self._read_disk_items()
        self._data = {"version": self._schema_version, "items": items}

    def _create_empty_cache(self) -> Dict[str, Any]:
        return {"version": self._schema_version, "items": {}}

    def _get_items(self) -> Dict[str, Any]:
        items = self._data.get("items") if isinstance(self._data, dict) else {}
        if not isinstance(items, dict):
            return {}
        return items

    def _peek_item(self, key: str) -> Optional[Any]:
        """Return the raw entry for `key` (or None). Does not touch stats."""
        return self._get_items().get(key)

    def _record_lookup(self, hit: bool) -> None:
        if hit:
            self.stats.hit += 1
        else:
            self.stats.miss += 1

    def _set_item(self, key: str, value: Any) -> None:
        items = self._get_items()
        items[key] = value
        self._data["items"] = items
        self._deleted.discard(key)
        self._dirty = True
        self.stats.write += 1

    def _delete_item(self, key: str) -> None:
        items = self._get_items()
        if items.pop(key, None) is not None:
            self._deleted.add(key)
            self._dirty = True

    def _persist(self) -> None:
        """Persist to disk, merging with whatever is there now.

        Raises OSError / TypeError / ValueError on failure; callers that treat
        the cache as advisory are expected to catch them.
        """
        if not self._dirty:
            return

        self._cache_file.parent.mkdir(parents=True, exist_ok=True)

        # Merge: disk first, then memory wins; keys we deleted stay deleted.
        merged_items = {**self._read_disk_items(), **self._get_items()}
        for key in self._deleted:
            merged_items.pop(key, None)
        merged = {"version": self._schema_version, "items": merged_items}
        payload = json.dumps(merged, separators=(",", ":"))

        tmp = Path(f"{self._cache_file}.tmp.{os.getpid()}")
        try:
            tmp.write_text(payload)
            os.replace(str(tmp), str(self._cache_file))
        finally:
            if tmp.exists():
                tmp.unlink()

        self._data = merged
        self._deleted.clear()
        self._dirty = False

    def _clear_all(self) -> None:
        """Drop every entry in memory and on disk."""
        self._data = self._create_empty_cache()
        self._loaded = True
        self._deleted.clear()
        self._dirty = False
        if self._cache_file.exists():
            self._cache_file.unlink()
