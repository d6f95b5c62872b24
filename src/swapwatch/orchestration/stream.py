"""Streaming loop: pull raw log → decode → append to the record store.

The loop is single-flow: each log is decoded and stored before the next one
is pulled, so the shard line order follows the source's delivery order.
A failure on one log is logged, counted and skipped; it never stops the loop.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from swapwatch.constants import SWAP_EVENT
from swapwatch.core.interfaces import ILogSource, IRecordStore
from swapwatch.core.models import RawLog
from swapwatch.decoding.decoder import decode_swap
from swapwatch.decoding.specs import SignatureTable
from swapwatch.errors import DecodeError

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Stats
# ---------------------------------------------------------------------------


@dataclass(kw_only=True)
class StreamStats:
    """Aggregated counters for one run of the stream loop."""

    total_logs: int = 0
    decoded: int = 0
    no_match: int = 0
    decode_failed: int = 0
    store_failed: int = 0


def _tx_label(raw_log: RawLog) -> str:
    if raw_log.transaction_hash is None:
        return "<no tx hash>"
    return "0x" + bytes(raw_log.transaction_hash).hex()


def process_log(
    raw_log: RawLog,
    *,
    table: SignatureTable,
    store: IRecordStore,
    owner: str,
    target_event: str,
    stats: StreamStats,
) -> None:
    """Decode and store one log; failures are reported and absorbed."""
    stats.total_logs += 1
    try:
        record = decode_swap(raw_log, table, target_event)
    except DecodeError as e:
        stats.decode_failed += 1
        logger.warning("Failed to decode log in %s: %s: %s", _tx_label(raw_log), type(e).__name__, e)
        return

    if record is None:
        stats.no_match += 1
        return

    logger.debug("Decoded %s", record)
    try:
        store.append(owner, record)
    except OSError as e:
        stats.store_failed += 1
        logger.error("Failed to store %s for %s: %s", record.transaction_hash, owner, e)
        return
    stats.decoded += 1


async def run_stream(
    *,
    source: ILogSource,
    table: SignatureTable,
    store: IRecordStore,
    owner: str,
    target_event: str = SWAP_EVENT,
    max_logs: int | None = None,
) -> StreamStats:
    """Consume `source` until it is exhausted (or `max_logs` logs were processed).

    Cancellation and reconnects belong to the source; this loop only pulls.
    """
    stats = StreamStats()
    async for raw_log in source:
        process_log(
            raw_log,
            table=table,
            store=store,
            owner=owner,
            target_event=target_event,
            stats=stats,
        )
        if max_logs is not None and stats.total_logs >= max_logs:
            break

    logger.info(
        "Stream finished: logs=%d decoded=%d no_match=%d decode_failed=%d store_failed=%d",
        stats.total_logs,
        stats.decoded,
        stats.no_match,
        stats.decode_failed,
        stats.store_failed,
    )
    return stats
