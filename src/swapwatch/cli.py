import asyncio
import json
import logging
from pathlib import Path

import click
import httpx
from eth_utils import keccak
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from .abi_events import make_signature_table_from_abi
from .constants import SWAP_EVENT
from .core.config import Settings, StreamConfig
from .core.models import RawLog
from .decoding.decoder import decode_fields
from .decoding.specs import SignatureTable, get_signature_table_topic0s
from .errors import SwapwatchError

console = Console()


def _parse_block(value: str) -> int | str:
    return int(value) if value.isdigit() else value


async def _load_table(address: str, abi_path: str | None, settings: Settings) -> SignatureTable:
    """Signature table from a local ABI file, else from the block explorer."""
    if abi_path:
        return make_signature_table_from_abi(Path(abi_path))

    from .clients.etherscan import get_contract_abi

    if settings.etherscan_api_key is None:
        raise click.UsageError("Pass --abi or set ETHERSCAN_API_KEY")
    abi = await get_contract_abi(
        address,
        settings.etherscan_api_key.get_secret_value(),
        url=settings.etherscan_api_url,
    )
    return make_signature_table_from_abi(abi)


@click.group()
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default="INFO",
    show_default=True,
)
def cli(log_level: str) -> None:
    """swapwatch: decode swap events from a contract into daily JSON shards."""
    logging.basicConfig(
        level=log_level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True)],
    )


@cli.command("topics")
@click.option("--abi", "abi_path", required=True, type=click.Path(exists=True, dir_okay=False))
def topics_cmd(abi_path: str) -> None:
    """Print the signature table built from an ABI file."""
    table = make_signature_table_from_abi(Path(abi_path))
    out = Table(title=f"{len(table)} event signatures")
    out.add_column("topic0", style="cyan", overflow="fold")
    out.add_column("event", style="bold", no_wrap=True)
    out.add_column("signature", overflow="fold")
    for topic0, (name, schema) in table.items():
        out.add_row("0x" + topic0.hex(), name, schema.signature)
    console.print(out)


@cli.command("check-signature")
@click.argument("signature")
@click.option("--expected", required=True, help="Expected 0x-prefixed topic0")
def check_signature_cmd(signature: str, expected: str) -> None:
    """Compare the Keccak-256 of a canonical SIGNATURE against an expected topic0."""
    computed = "0x" + keccak(text=signature).hex()
    console.print(f"computed: {computed}")
    console.print(f"expected: {expected.lower()}")
    if computed != expected.lower():
        raise click.ClickException("signature hash mismatch")
    console.print("[green]match[/]")


@cli.command("inspect")
@click.option("--abi", "abi_path", required=True, type=click.Path(exists=True, dir_okay=False))
@click.argument("logs_file", type=click.File("r"))
def inspect_cmd(abi_path: str, logs_file) -> None:
    """Decode every parameter of the logs in LOGS_FILE ('-' for stdin).

    LOGS_FILE holds one `eth_getLogs` object or a JSON list of them.
    """
    table = make_signature_table_from_abi(Path(abi_path))
    payload = json.load(logs_file)
    entries = payload if isinstance(payload, list) else [payload]

    for i, entry in enumerate(entries):
        raw = RawLog.from_rpc(entry)
        match = table.get(raw.topic0) if raw.topic0 is not None else None
        if match is None:
            console.print(f"[yellow]log {i}: no event in the ABI for this topic0[/]")
            continue

        _, schema = match
        try:
            fields = decode_fields(raw, schema)
        except SwapwatchError as e:
            raise click.ClickException(f"log {i}: {e}") from e

        out = Table(title=f"log {i}: {schema.signature}")
        out.add_column("param", style="bold", no_wrap=True)
        out.add_column("type", style="cyan", no_wrap=True)
        out.add_column("value", overflow="fold")
        for param in schema.params:
            out.add_row(param.name, param.kind, str(fields[param.name]))
        console.print(out)


@cli.command("watch")
@click.argument("address")
@click.option("--abi", "abi_path", type=click.Path(exists=True, dir_okay=False), help="Local ABI JSON (else fetched from the explorer)")
@click.option("--rpc", "rpc_url", default=None, help="RPC endpoint URL (else RPC_URL / INFURA_API_KEY)")
@click.option("--event", "target_event", default=SWAP_EVENT, show_default=True, help="Event name to decode")
@click.option("--out-root", type=click.Path(file_okay=False), default="./data", show_default=True)
@click.option("--from-block", "start_block", default="latest", show_default=True, help="Block number, 'earliest' or 'latest'")
@click.option("--step", type=int, default=1_000, show_default=True, help="Blocks per eth_getLogs request")
@click.option("--poll-interval", "poll_interval_s", type=float, default=2.0, show_default=True)
@click.option("--max-logs", type=int, default=None, help="Stop after this many logs")
def watch_cmd(
    address: str,
    abi_path: str | None,
    rpc_url: str | None,
    target_event: str,
    out_root: str,
    start_block: str,
    step: int,
    poll_interval_s: float,
    max_logs: int | None,
) -> None:
    """Stream logs of ADDRESS, decode target events and append them to daily shards."""
    from .clients.rpc import RPC, LogPoller
    from .orchestration.stream import run_stream
    from .storage.records import JsonLinesRecordStore

    settings = Settings()
    try:
        endpoint = rpc_url or settings.rpc_endpoint()
    except ValueError as e:
        raise click.UsageError(str(e)) from e

    config = StreamConfig(
        address=address,
        rpc_url=endpoint,
        target_event=target_event,
        out_root=Path(out_root),
        start_block=_parse_block(start_block),
        step=step,
        poll_interval_s=poll_interval_s,
    )

    async def run() -> None:
        table = await _load_table(config.address, abi_path, settings)
        topic0s = get_signature_table_topic0s(table, config.target_event)
        if not topic0s:
            raise click.UsageError(f"ABI declares no event named {config.target_event!r}")
        rpc = RPC(config.rpc_url, timeout_s=config.timeout_s)
        poller = LogPoller(
            rpc,
            address=config.address,
            start_block=config.start_block,
            step=config.step,
            poll_interval_s=config.poll_interval_s,
            topic0s=topic0s,
        )
        try:
            stats = await run_stream(
                source=poller,
                table=table,
                store=JsonLinesRecordStore(config.out_root),
                owner=config.address,
                target_event=config.target_event,
                max_logs=max_logs,
            )
        finally:
            await rpc.aclose()

        console.print(
            f"[bold]summary[/]: "
            f"[green]decoded[/]={stats.decoded}  "
            f"no_match={stats.no_match}  "
            f"[red]decode_failed[/]={stats.decode_failed}  "
            f"[red]store_failed[/]={stats.store_failed}  "
            f"(logs={stats.total_logs})"
        )

    try:
        asyncio.run(run())
    except KeyboardInterrupt:
        console.print("[yellow]stopped[/]")
    except (SwapwatchError, httpx.HTTPError, RuntimeError) as e:
        raise click.ClickException(str(e)) from e


if __name__ == "__main__":
    cli()
