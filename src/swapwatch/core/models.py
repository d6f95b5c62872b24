"""Core data models.

This module defines:
- `RawLog`: one log entry as handed over by the transport (never mutated).
- `SwapRecord`: the decoded, domain-typed form of one matched Swap log.

Design notes
------------
- Topics and data stay raw bytes; all typing happens in the decoder.
- `SwapRecord.to_json` renders integers as JSON numbers (int128/uint128 fit
  exactly in Python ints) with a fixed key order.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import asdict, dataclass
from typing import Any

from eth_utils import decode_hex


def _hex_to_int(value: Any) -> int | None:
    if value is None:
        return None
    if isinstance(value, int):
        return value
    return int(value, 16)


# === Transport record ===


@dataclass(slots=True, frozen=True)
class RawLog:
    """Raw log: topic words, data payload, optional transaction hash."""

    topics: tuple[bytes, ...]  # 32 bytes each, topic 0 = signature hash
    data: bytes
    transaction_hash: bytes | None = None
    # Transport metadata, never used for decoding
    address: str | None = None  # lowercased 0x...
    block_number: int | None = None
    log_index: int | None = None

    @classmethod
    def from_rpc(cls, rl: Mapping[str, Any]) -> RawLog:
        """Build from an `eth_getLogs` JSON object (0x-hex fields)."""
        tx_hash = rl.get("transactionHash") or rl.get("transaction_hash")
        address = rl.get("address")
        return cls(
            topics=tuple(decode_hex(t) for t in rl.get("topics", [])),
            data=decode_hex(rl.get("data") or "0x"),
            transaction_hash=decode_hex(tx_hash) if tx_hash else None,
            address=address.lower() if address else None,
            block_number=_hex_to_int(rl.get("blockNumber")),
            log_index=_hex_to_int(rl.get("logIndex")),
        )

    @property
    def topic0(self) -> bytes | None:
        return self.topics[0] if self.topics else None


# === Decoded record ===


@dataclass(slots=True, frozen=True)
class SwapRecord:
    """One decoded Swap; every field is always populated."""

    transaction_hash: str
    sender: str
    recipient: str
    amount0: int  # int128
    amount1: int  # int128
    sqrtPriceX96: int  # uint128
    liquidity: int  # uint128
    tick: int  # int32

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    def to_json(self) -> str:
        """Serialize as one compact JSON object (no trailing newline)."""
        return json.dumps(self.to_dict(), separators=(",", ":"))
