"""Storage components for decoded records.

This package provides:
- JsonLinesRecordStore: append-only, per-owner/per-day JSON line shards
- Shard naming and base directory helpers
"""

from swapwatch.storage.directories import ensure_base_dir, shard_filename, shard_path
from swapwatch.storage.records import JsonLinesRecordStore

__all__ = [
    "JsonLinesRecordStore",
    "ensure_base_dir",
    "shard_filename",
    "shard_path",
]
