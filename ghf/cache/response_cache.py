# SPDX-FileCopyrightText: Copyright (c) 2025 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Cache for GitHub API list/search responses.

Caching strategy:
  - Key: see cache_keys.cache_key(), e.g. "pr.list::acme::widgets::open::1::30"
  - Value: {"ts": <epoch seconds written>, "data": <JSON payload>}
  - TTL: fixed 5 minutes. Expiry is lazy: a stale entry is deleted by the read
    that finds it, and every write also drops whatever else has gone stale, so
    responses.json only ever holds live entries plus the ones written since.
  - Stats: an expired entry counts as a miss, not a hit.

Every public method is best-effort. Storage errors are logged at debug level
and reported as a miss (get) or as False (set); they never reach the caller.

get() returns None for a miss, so a stored None payload reads back as a miss.
Use is_cached() to tell the two apart.
"""

from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import Any, Callable, Dict, Optional

from .cache_base import BaseDiskCache

logger = logging.getLogger(__name__)

DEFAULT_RESPONSE_TTL_S = 5 * 60

_STORAGE_ERRORS = (OSError, TypeError, ValueError)


class ResponseCache(BaseDiskCache):
    """TTL-bounded response cache persisted as <cache dir>/responses.json."""

    _SCHEMA_VERSION = 1

    def __init__(
        self,
        *,
        cache_file: Path,
        ttl_s: int = DEFAULT_RESPONSE_TTL_S,
        clock: Callable[[], float] = time.time,
    ):
        super().__init__(cache_file=cache_file, schema_version=self._SCHEMA_VERSION)
        self.ttl_s = int(ttl_s)
        self._clock = clock

    def _is_expired(self, ent: Any, now: float) -> bool:
        if not isinstance(ent, dict) or "data" not in ent:
            return True
        try:
            ts = float(ent.get("ts", 0) or 0)
        except (TypeError, ValueError):
            return True
        return now - ts > self.ttl_s

    def _fresh_entry(self, key: str) -> Optional[Dict[str, Any]]:
        """The live entry for `key`, or None. Deletes it (and persists) if stale."""
        self._load_once()
        ent = self._peek_item(key)
        if ent is None:
            self._record_lookup(False)
            logger.debug("cache miss: %s", key)
            return None

        if self._is_expired(ent, self._clock()):
            self._record_lookup(False)
            logger.debug("cache expired: %s", key)
            self._delete_item(key)
            self._persist()
            return None

        self._record_lookup(True)
        logger.debug("cache hit: %s", key)
        return ent

    def _prune_expired(self) -> int:
        now = self._clock()
        stale = [k for k, ent in self._get_items().items() if self._is_expired(ent, now)]
        for k in stale:
            self._delete_item(k)
        return len(stale)

    def get(self, key: str) -> Optional[Any]:
        """Return the cached payload, or None on miss/expiry/storage error."""
        try:
            ent = self._fresh_entry(key)
        except _STORAGE_ERRORS as e:
            logger.debug("cache get failed for %s: %s", key, e)
            return None
        return ent["data"] if ent is not None else None

    def set(self, key: str, data: Any) -> bool:
        """Store `data` under `key`; returns False (and caches nothing) on failure."""
        try:
            self._load_once()
            pruned = self._prune_expired()
            if pruned:
                logger.debug("cache pruned %d expired entries", pruned)
            self._set_item(key, {"ts": self._clock(), "data": data})
            self._persist()
            return True
        except _STORAGE_ERRORS as e:
            logger.debug("cache set failed for %s: %s", key, e)
            # Forget the unpersisted write; next access reloads from disk.
            self._loaded = False
            self._dirty = False
            self._deleted.clear()
            return False

    def is_cached(self, key: str) -> bool:
        """True iff `key` holds a live entry (including a stored None payload)."""
        try:
            return self._fresh_entry(key) is not None
        except _STORAGE_ERRORS as e:
            logger.debug("cache lookup failed for %s: %s", key, e)
            return False

    def clear(self) -> None:
        """Remove every entry."""
        try:
            self._clear_all()
        except OSError as e:
            logger.debug("cache clear failed for %s: %s", self.cache_file, e)
