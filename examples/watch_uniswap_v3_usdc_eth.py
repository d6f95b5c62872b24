import asyncio
import logging
from pathlib import Path

from swapwatch.abi_events import make_signature_table_from_abi
from swapwatch.clients.rpc import RPC, LogPoller
from swapwatch.core.config import Settings, StreamConfig
from swapwatch.decoding.specs import get_signature_table_topic0s
from swapwatch.orchestration.stream import run_stream
from swapwatch.storage.records import JsonLinesRecordStore

EXAMPLES_ROOT = Path(__file__).parent
assert EXAMPLES_ROOT.name == "examples"
OUT_ROOT = EXAMPLES_ROOT.parent / "data_examples"

ABI = EXAMPLES_ROOT / "abi" / "uniswap_v3_pool_abi.json"
assert ABI.is_file()

logging.basicConfig(level=logging.INFO, format="%(asctime)s | %(levelname)s | %(name)s | %(message)s")

table = make_signature_table_from_abi(ABI)
config = StreamConfig(
    address="0x88e6A0c2dDD26FEEb64F039a2c41296FcB3f5640",  # Uniswap USDC/ETH v3 0.05%
    rpc_url=Settings().rpc_endpoint(),
    out_root=OUT_ROOT,
    start_block="latest",
    poll_interval_s=12.0,
)


async def main():
    rpc = RPC(config.rpc_url, timeout_s=config.timeout_s)
    poller = LogPoller(
        rpc,
        address=config.address,
        start_block=config.start_block,
        step=config.step,
        poll_interval_s=config.poll_interval_s,
        topic0s=get_signature_table_topic0s(table, config.target_event),
    )
    store = JsonLinesRecordStore(config.out_root)
    try:
        stats = await run_stream(
            source=poller,
            table=table,
            store=store,
            owner=config.address,
            max_logs=50,
        )
    finally:
        await rpc.aclose()

    print(stats)
    print(store.path_for(config.address).read_text().splitlines()[:3])


asyncio.run(main())
