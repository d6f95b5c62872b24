from __future__ import annotations

from collections.abc import AsyncIterator
from pathlib import Path
from typing import Protocol, runtime_checkable

from swapwatch.core.models import RawLog, SwapRecord


# ---------------------------------------------------------------------------
# ILogSource
# ---------------------------------------------------------------------------

@runtime_checkable
class ILogSource(Protocol):
    """
    Abstract, ordered source of raw logs for one contract.

    Domain expectations:
    - Logs are yielded in delivery order and never mutated downstream.
    - Connecting, reconnecting and terminating the upstream transport is the
      source's concern; the stream loop only pulls.
    """

    def __aiter__(self) -> AsyncIterator[RawLog]:
        """
        Return an async iterator over raw logs.

        Implementations:
        - `LogPoller` (JSON-RPC polling over eth_getLogs)
        - In-memory or synthetic source for testing
        """
        ...


# ---------------------------------------------------------------------------
# IRecordStore
# ---------------------------------------------------------------------------

@runtime_checkable
class IRecordStore(Protocol):
    """
    Append-only sink for decoded records, sharded by owner address.

    Domain expectations:
    - A record is either fully persisted or not at all.
    - Appends to the same shard are serialized.
    - Failures surface as `OSError` and are never retried by the store.
    """

    def append(self, owner: str, record: SwapRecord) -> Path:
        """
        Persist one record for `owner`.

        Returns
        -------
        Path
            Identifier (file path) of the shard that received the record.
        """
        ...
