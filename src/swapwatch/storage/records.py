from __future__ import annotations

import asyncio
import logging
import os
import threading
from collections.abc import Callable
from datetime import date
from pathlib import Path

from swapwatch.core.interfaces import IRecordStore
from swapwatch.core.models import SwapRecord
from swapwatch.storage.directories import ensure_base_dir, shard_path, utc_today

logger = logging.getLogger(__name__)


class JsonLinesRecordStore(IRecordStore):
    """Append-only store writing one JSON object per line, sharded by owner and UTC day.

    The first object of a shard is written without a leading newline; every
    later object is preceded by exactly one. Each record is serialized in full
    before the file is touched and lands through a single write call, so a
    failed append leaves either the whole object or nothing.
    """

    def __init__(self, out_root: Path, *, clock: Callable[[], date] = utc_today) -> None:
        """Initialize the store rooted at `out_root`.

        Args:
            out_root: Base directory, created lazily on first append
            clock: Returns the current UTC date (injectable for tests)
        """
        self.out_root = Path(out_root)
        self._clock = clock
        self._locks: dict[str, threading.Lock] = {}  # one per owner, shared by its daily shards
        self._locks_guard = threading.Lock()

    def _lock_for(self, owner: str) -> threading.Lock:
        with self._locks_guard:
            lock = self._locks.get(owner)
            if lock is None:
                lock = threading.Lock()
                self._locks[owner] = lock
            return lock

    def path_for(self, owner: str) -> Path:
        """Shard path for `owner` on the current UTC day."""
        return shard_path(self.out_root, owner, self._clock())

    def append(self, owner: str, record: SwapRecord) -> Path:
        """Append one record to the owner's shard for today.

        Filesystem errors (`OSError`) propagate unmodified; nothing is retried.

        Returns:
            Path of the shard that received the record
        """
        ensure_base_dir(self.out_root)
        path = self.path_for(owner)
        payload = record.to_json()
        with self._lock_for(owner):
            self._write_record(path, payload)
        logger.debug("Appended %s to %s", record.transaction_hash, path)
        return path

    async def aappend(self, owner: str, record: SwapRecord) -> Path:
        """Async variant of `append`; the write itself runs in a worker thread."""
        return await asyncio.to_thread(self.append, owner, record)

    @staticmethod
    def _write_record(path: Path, payload: str) -> None:
        """Write one object with a single call, newline-prefixed if the shard has content."""
        with open(path, "a", encoding="utf-8") as f:
            if f.tell() > 0:
                payload = "\n" + payload
            f.write(payload)
            f.flush()
            os.fsync(f.fileno())
