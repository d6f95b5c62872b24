from collections.abc import Callable
from pathlib import Path
from unittest.mock import AsyncMock

import pytest

from swapwatch.abi_events import make_signature_table_from_abi
from swapwatch.constants import SWAP_T0
from swapwatch.core.models import RawLog
from swapwatch.decoding.specs import EventSchema, SignatureTable

ABI_DIR = Path(__file__).parent / "abi"

SENDER = "0xe592427a0aece92de3edee1f18e0157c05861564"
RECIPIENT = "0x3fc91a3afd70395cd496c647d5a6cc9d4b2b7fad"
TX_HASH = "0x" + "ab" * 32


def encode_word(value: int) -> bytes:
    """Encode an int as a 32-byte two's-complement ABI word."""
    return (value % (1 << 256)).to_bytes(32, "big")


def pad_address(address: str) -> bytes:
    return bytes(12) + bytes.fromhex(address[2:])


@pytest.fixture
def abi_path() -> Path:
    return ABI_DIR / "uniswap_v3_pool_abi.json"


@pytest.fixture
def signature_table(abi_path: Path) -> SignatureTable:
    return make_signature_table_from_abi(abi_path)


@pytest.fixture
def make_swap_log() -> Callable[..., RawLog]:
    def _make(
        amount0: int = 58297344647,
        amount1: int = -37006917189485972321,
        sqrt_price_x96: int = 1996611740862433600358475292128498,
        liquidity: int = 27414987083570423641,
        tick: int = 202702,
        *,
        tx_hash: str | None = TX_HASH,
        block_number: int | None = None,
        log_index: int | None = None,
    ) -> RawLog:
        return RawLog(
            topics=(bytes.fromhex(SWAP_T0[2:]), pad_address(SENDER), pad_address(RECIPIENT)),
            data=b"".join(encode_word(v) for v in (amount0, amount1, sqrt_price_x96, liquidity, tick)),
            transaction_hash=bytes.fromhex(tx_hash[2:]) if tx_hash else None,
            block_number=block_number,
            log_index=log_index,
        )

    return _make


@pytest.fixture
def mock_rpc():
    rpc = AsyncMock()
    rpc.get_logs = AsyncMock(return_value=[])
    rpc.latest_block = AsyncMock(return_value=100)
    rpc.aclose = AsyncMock()
    return rpc


def schema_named(table: SignatureTable, name: str) -> EventSchema:
    return next(schema for declared, schema in table.values() if declared == name)
