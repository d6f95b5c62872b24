import json
from unittest.mock import AsyncMock

import httpx
import pytest

from swapwatch.clients.etherscan import get_contract_abi
from swapwatch.clients.rpc import RPC, LogPoller, iter_chunks, topics_param
from swapwatch.constants import SWAP_T0
from swapwatch.core.models import RawLog
from swapwatch.errors import AbiFetchError


def _log(block: int, index: int) -> RawLog:
    return RawLog(topics=(b"\x00" * 32,), data=b"", block_number=block, log_index=index)


def test_iter_chunks() -> None:
    assert list(iter_chunks(10, 25, 10)) == [(10, 19), (20, 25)]
    assert list(iter_chunks(5, 4, 10)) == []


def test_topics_param() -> None:
    assert topics_param(None) == []
    assert topics_param([SWAP_T0.upper()]) == [[SWAP_T0]]


@pytest.mark.asyncio
async def test_log_poller_yields_in_chain_order(mock_rpc) -> None:
    mock_rpc.get_logs.side_effect = [
        [_log(12, 1), _log(11, 3), _log(12, 0)],
        [_log(15, 0)],
    ]
    poller = LogPoller(mock_rpc, address="0xpool", start_block=10, step=3, poll_interval_s=0, max_polls=1)
    mock_rpc.latest_block.return_value = 15

    logs = [log async for log in poller]

    assert [(log.block_number, log.log_index) for log in logs] == [(11, 3), (12, 0), (12, 1), (15, 0)]
    ranges = [(c.kwargs["from_block"], c.kwargs["to_block"]) for c in mock_rpc.get_logs.call_args_list]
    assert ranges == [(10, 12), (13, 15)]


@pytest.mark.asyncio
async def test_log_poller_latest_only_fetches_new_blocks(mock_rpc) -> None:
    mock_rpc.latest_block = AsyncMock(side_effect=[100, 100, 102])
    mock_rpc.get_logs.return_value = [_log(101, 0)]
    poller = LogPoller(mock_rpc, address="0xpool", poll_interval_s=0, max_polls=2)

    logs = [log async for log in poller]

    assert len(logs) == 1
    mock_rpc.get_logs.assert_awaited_once()
    assert mock_rpc.get_logs.call_args.kwargs["from_block"] == 101
    assert mock_rpc.get_logs.call_args.kwargs["to_block"] == 102


@pytest.mark.asyncio
async def test_rpc_get_logs() -> None:
    seen: list[dict] = []

    def handler(request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        seen.append(body)
        if body["method"] == "eth_blockNumber":
            return httpx.Response(200, json={"jsonrpc": "2.0", "id": 1, "result": "0x1f"})
        result = [
            {
                "address": "0xPool",
                "topics": [SWAP_T0],
                "data": "0x",
                "blockNumber": "0x1e",
                "logIndex": "0x0",
                "transactionHash": "0x" + "ef" * 32,
            }
        ]
        return httpx.Response(200, json={"jsonrpc": "2.0", "id": 1, "result": result})

    rpc = RPC("http://rpc.test")
    await rpc.client.aclose()
    rpc.client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    try:
        head = await rpc.latest_block()
        logs = await rpc.get_logs(address="0xPool", from_block=30, to_block=31)
    finally:
        await rpc.aclose()

    assert head == 31
    assert logs[0].block_number == 30
    assert logs[0].transaction_hash == b"\xef" * 32
    assert seen[1]["params"] == [{"address": "0xpool", "fromBlock": "0x1e", "toBlock": "0x1f"}]


@pytest.mark.asyncio
async def test_rpc_error_is_raised() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"jsonrpc": "2.0", "id": 1, "error": {"code": -32005, "message": "limit"}})

    rpc = RPC("http://rpc.test")
    await rpc.client.aclose()
    rpc.client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    try:
        with pytest.raises(RuntimeError, match="limit"):
            await rpc.latest_block()
    finally:
        await rpc.aclose()


@pytest.mark.asyncio
async def test_get_contract_abi() -> None:
    abi = [{"type": "event", "name": "Swap", "inputs": []}]

    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.params["action"] == "getabi"
        assert request.url.params["address"] == "0xpool"
        return httpx.Response(200, json={"status": "1", "message": "OK", "result": json.dumps(abi)})

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
        assert await get_contract_abi("0xpool", "key", client=client) == abi


@pytest.mark.asyncio
async def test_get_contract_abi_not_verified() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"status": "0", "message": "NOTOK", "result": "Contract source code not verified"})

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
        with pytest.raises(AbiFetchError, match="NOTOK"):
            await get_contract_abi("0xpool", "key", client=client)
