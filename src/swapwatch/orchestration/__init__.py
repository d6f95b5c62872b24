"""Orchestration for streaming logs into per-day record shards.

This package provides:
- Stream loop (run_stream) pulling, decoding and storing one log at a time
- Per-log processing with failure isolation (process_log)
"""

from swapwatch.orchestration.stream import StreamStats, process_log, run_stream

__all__ = [
    "StreamStats",
    "process_log",
    "run_stream",
]
