"""Shard naming and base directory setup for the record store.

Layout: <out_root>/<address>_<year>_<month>_<day>_decoded_swaps.json
(one file per contract address and UTC calendar day, no zero padding).
"""

from __future__ import annotations

from datetime import date, datetime, timezone
from pathlib import Path

from swapwatch.constants import SHARD_SUFFIX


def utc_today() -> date:
    return datetime.now(timezone.utc).date()


def ensure_base_dir(out_root: Path) -> Path:
    """Create the base directory if missing; calling it again is a no-op."""
    out_root.mkdir(parents=True, exist_ok=True)
    return out_root


def shard_filename(address: str, day: date) -> str:
    return f"{address}_{day.year}_{day.month}_{day.day}_{SHARD_SUFFIX}"


def shard_path(out_root: Path, address: str, day: date) -> Path:
    return out_root / shard_filename(address, day)
