"""Lightweight JSON-RPC client and log poller for Ethereum-compatible nodes.

This module provides:
- `RPC`: an async client with sane timeouts/connection limits
- `LogPoller`: an ordered async iterator of new logs for one contract
- Helper utilities to format block numbers and topics

It returns `RawLog` records ready for downstream decoding.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator, Generator, Sequence

import httpx

from swapwatch.core.models import RawLog

logger = logging.getLogger(__name__)


def to_hex_block(x: int) -> str:
    """Return a 0x-prefixed hex block number."""
    return hex(x)


def topics_param(topic0s: Sequence[str] | None) -> list[list[str]]:
    """Format topic0 signatures for eth_getLogs RPC call."""
    if not topic0s:
        return []
    return [[t.lower() for t in topic0s]]


def iter_chunks(a: int, b: int, step: int) -> Generator[tuple[int, int], None, None]:
    """Yield inclusive [start, end] block ranges of size at most `step`."""
    x = a
    while x <= b:
        y = min(b, x + step - 1)
        yield (x, y)
        x = y + 1


class RPC:
    """Minimal async RPC client.

    Parameters
    ----------
    url : str
        RPC endpoint URL.
    timeout_s : int
        Per-operation timeout in seconds (connect/read/write).
    max_connections : int
        Maximum concurrent connections to keep in the pool.
    """

    def __init__(self, url: str, *, timeout_s: int = 20, max_connections: int = 8) -> None:
        self.url = url
        self.client = httpx.AsyncClient(
            timeout=httpx.Timeout(
                connect=timeout_s,
                read=timeout_s,
                write=timeout_s,
                pool=max(30, timeout_s * 3),
            ),
            limits=httpx.Limits(
                max_connections=max_connections,
                max_keepalive_connections=max(1, max_connections // 2),
            ),
            http2=True,
        )

    async def _call(self, method: str, params: list) -> object:
        payload = {"jsonrpc": "2.0", "id": 1, "method": method, "params": params}
        r = await self.client.post(self.url, json=payload)
        r.raise_for_status()
        data = r.json()
        if "error" in data:
            e = data["error"]
            raise RuntimeError(f"RPC error: {e.get('code')} {e.get('message')}")
        return data.get("result")

    async def latest_block(self) -> int:
        """Return the latest block number as an int."""
        return int(await self._call("eth_blockNumber", []), 16)

    async def get_logs(
        self,
        *,
        address: str,
        from_block: int,
        to_block: int,
        topic0s: Sequence[str] | None = None,
    ) -> list[RawLog]:
        """Fetch logs for an address (optionally filtered by topic0) within a block range."""
        params = {
            "address": address.lower(),
            "fromBlock": to_hex_block(from_block),
            "toBlock": to_hex_block(to_block),
        }
        topics = topics_param(topic0s)
        if topics:
            params["topics"] = topics
        result = await self._call("eth_getLogs", [params]) or []
        return [RawLog.from_rpc(rl) for rl in result]

    async def aclose(self) -> None:
        """Close the underlying HTTP client."""
        await self.client.aclose()


def _chain_order(log: RawLog) -> tuple[int, int]:
    return (log.block_number or 0, log.log_index or 0)


class LogPoller:
    """Poll new blocks and yield the contract's logs in chain order.

    Starting at `start_block` ("latest" means: only blocks mined after the
    first poll), each poll fetches the range up to the current head in
    `step`-sized chunks. Stops after `max_polls` polls when given; otherwise
    runs until the consumer stops iterating.
    """

    def __init__(
        self,
        rpc: RPC,
        *,
        address: str,
        start_block: int | str = "latest",
        step: int = 1_000,
        poll_interval_s: float = 2.0,
        topic0s: Sequence[str] | None = None,
        max_polls: int | None = None,
    ) -> None:
        self.rpc = rpc
        self.address = address
        self.start_block = start_block
        self.step = step
        self.poll_interval_s = poll_interval_s
        self.topic0s = list(topic0s) if topic0s else None
        self.max_polls = max_polls

    async def _resolve_start(self) -> int:
        if isinstance(self.start_block, str):
            if self.start_block.lower() == "latest":
                return await self.rpc.latest_block() + 1
            if self.start_block.lower() in ("earliest", "genesis"):
                return 0
        return int(self.start_block)

    def __aiter__(self) -> AsyncIterator[RawLog]:
        return self._iterate()

    async def _iterate(self) -> AsyncIterator[RawLog]:
        next_block = await self._resolve_start()
        polls = 0
        while True:
            head = await self.rpc.latest_block()
            if head >= next_block:
                for a, b in iter_chunks(next_block, head, self.step):
                    logs = await self.rpc.get_logs(
                        address=self.address,
                        from_block=a,
                        to_block=b,
                        topic0s=self.topic0s,
                    )
                    logger.debug("Fetched %d logs for blocks %d-%d", len(logs), a, b)
                    for log in sorted(logs, key=_chain_order):
                        yield log
                next_block = head + 1

            polls += 1
            if self.max_polls is not None and polls >= self.max_polls:
                return
            await asyncio.sleep(self.poll_interval_s)
