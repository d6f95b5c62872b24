import json
import threading
from datetime import date
from pathlib import Path

import pytest

from swapwatch.core.interfaces import IRecordStore
from swapwatch.core.models import SwapRecord
from swapwatch.storage.directories import ensure_base_dir, shard_filename
from swapwatch.storage.records import JsonLinesRecordStore

OWNER = "0x88e6A0c2dDD26FEEb64F039a2c41296FcB3f5640"
DAY = date(2024, 3, 7)


def _record(i: int) -> SwapRecord:
    return SwapRecord(
        transaction_hash=f"0x{i:064x}",
        sender="0x" + "11" * 20,
        recipient="0x" + "22" * 20,
        amount0=i,
        amount1=-i,
        sqrtPriceX96=1 << 96,
        liquidity=10**18,
        tick=-i,
    )


@pytest.fixture
def store(tmp_path: Path) -> JsonLinesRecordStore:
    return JsonLinesRecordStore(tmp_path / "data", clock=lambda: DAY)


def test_shard_filename_has_no_zero_padding() -> None:
    assert shard_filename(OWNER, DAY) == f"{OWNER}_2024_3_7_decoded_swaps.json"
    assert shard_filename(OWNER, date(2024, 11, 21)) == f"{OWNER}_2024_11_21_decoded_swaps.json"


def test_store_is_a_record_store(store: JsonLinesRecordStore) -> None:
    assert isinstance(store, IRecordStore)


def test_ensure_base_dir_is_idempotent(tmp_path: Path) -> None:
    root = tmp_path / "a" / "b"

    ensure_base_dir(root)
    ensure_base_dir(root)

    assert root.is_dir()


def test_first_record_has_no_leading_newline(store: JsonLinesRecordStore) -> None:
    path = store.append(OWNER, _record(1))

    assert path == store.out_root / f"{OWNER}_2024_3_7_decoded_swaps.json"
    assert path.read_text() == _record(1).to_json()


def test_append_ordering(store: JsonLinesRecordStore) -> None:
    store.append(OWNER, _record(1))
    path = store.append(OWNER, _record(2))

    assert path.read_text() == _record(1).to_json() + "\n" + _record(2).to_json()
    assert [json.loads(line)["amount0"] for line in path.read_text().split("\n")] == [1, 2]


def test_shards_split_by_owner_and_day(tmp_path: Path) -> None:
    days = iter([date(2024, 1, 1), date(2024, 1, 2), date(2024, 1, 2)])
    store = JsonLinesRecordStore(tmp_path, clock=lambda: next(days))

    p1 = store.append(OWNER, _record(1))
    p2 = store.append(OWNER, _record(2))
    p3 = store.append("0xother", _record(3))

    assert len({p1, p2, p3}) == 3
    assert p1.name == f"{OWNER}_2024_1_1_decoded_swaps.json"
    assert p3.name == "0xother_2024_1_2_decoded_swaps.json"


def test_directory_failure_propagates(tmp_path: Path) -> None:
    blocker = tmp_path / "data"
    blocker.write_text("not a directory")
    store = JsonLinesRecordStore(blocker, clock=lambda: DAY)

    with pytest.raises(OSError):
        store.append(OWNER, _record(1))


def test_concurrent_appends_do_not_interleave(store: JsonLinesRecordStore) -> None:
    def worker(start: int) -> None:
        for i in range(start, start + 25):
            store.append(OWNER, _record(i))

    threads = [threading.Thread(target=worker, args=(n * 100,)) for n in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    lines = store.path_for(OWNER).read_text().split("\n")
    assert len(lines) == 100
    assert {json.loads(line)["amount0"] for line in lines} == {n * 100 + i for n in range(4) for i in range(25)}


@pytest.mark.asyncio
async def test_aappend(store: JsonLinesRecordStore) -> None:
    await store.aappend(OWNER, _record(1))
    path = await store.aappend(OWNER, _record(2))

    assert path.read_text().count("\n") == 1


def test_locks_do_not_grow_with_days(tmp_path: Path) -> None:
    days = iter(date(2024, 1, d) for d in range(1, 31))
    store = JsonLinesRecordStore(tmp_path, clock=lambda: next(days))

    for i in range(30):
        store.append(OWNER, _record(i))

    assert len(list(tmp_path.iterdir())) == 30
    assert len(store._locks) == 1
