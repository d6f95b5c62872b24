"""Schema-driven event decoder.

This module translates a `RawLog` into a `SwapRecord` using a `SignatureTable`.
Fields are located by declared kind and position (indexed params from topics,
the others from 32-byte data words), never by parameter name, so a renamed
parameter cannot silently leave a field at zero.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from swapwatch.constants import SWAP_EVENT
from swapwatch.core.models import RawLog, SwapRecord
from swapwatch.decoding.specs import EventSchema, ParamSpec, SignatureTable
from swapwatch.decoding.utils import (
    narrow_tick,
    narrow_unsigned_128,
    parse_word,
    recover_signed_128,
    topic_to_address,
    word_at,
    word_to_uint,
)
from swapwatch.errors import MalformedLog, MissingTransactionHash, SchemaMismatch

MIN_TOPICS = 3  # signature + sender + recipient

# ---------- swap layout ----------

# Indexed params, in declaration order
_SWAP_TOPIC_LAYOUT: tuple[tuple[str, str], ...] = (
    ("sender", "address"),
    ("recipient", "address"),
)

# Non-indexed params, in declaration order: (field, kind prefix, narrowing)
_SWAP_DATA_LAYOUT: tuple[tuple[str, str, Callable[[int], int]], ...] = (
    ("amount0", "int", recover_signed_128),
    ("amount1", "int", recover_signed_128),
    ("sqrtPriceX96", "uint", narrow_unsigned_128),
    ("liquidity", "uint", narrow_unsigned_128),
    ("tick", "int", narrow_tick),
)


# ---------- helper functions ----------


def _lookup_schema(raw_log: RawLog, table: SignatureTable, target_event: str) -> EventSchema | None:
    """Return the matching schema, or None for unknown or non-target events."""
    topic0 = raw_log.topic0
    if topic0 is None:
        return None
    entry = table.get(bytes(topic0))
    if entry is None:
        return None
    name, schema = entry
    if name != target_event:
        return None
    return schema


def _kind_matches(kind: str, prefix: str) -> bool:
    if prefix == "address":
        return kind == "address"
    return kind.startswith(prefix)


def _check_swap_layout(schema: EventSchema) -> tuple[tuple[ParamSpec, ...], tuple[ParamSpec, ...]]:
    """Validate that the schema has the swap shape; return (topic params, data params)."""
    topic_params = schema.topic_params[: len(_SWAP_TOPIC_LAYOUT)]
    data_params = schema.data_params[: len(_SWAP_DATA_LAYOUT)]
    if len(topic_params) < len(_SWAP_TOPIC_LAYOUT) or len(data_params) < len(_SWAP_DATA_LAYOUT):
        raise SchemaMismatch(f"{schema.signature} does not declare the swap parameters")

    for (field, prefix), param in zip(_SWAP_TOPIC_LAYOUT, topic_params):
        if not _kind_matches(param.kind, prefix):
            raise SchemaMismatch(f"{schema.signature}: {field} expects {prefix}, got {param.kind}")
    for (field, prefix, _), param in zip(_SWAP_DATA_LAYOUT, data_params):
        if not _kind_matches(param.kind, prefix):
            raise SchemaMismatch(f"{schema.signature}: {field} expects {prefix}*, got {param.kind}")
    return topic_params, data_params


def _check_structure(raw_log: RawLog, schema: EventSchema, min_topics: int = 1) -> None:
    """Reject logs too short for the schema instead of defaulting fields."""
    need_topics = max(min_topics, len(schema.topic_params) + 1)
    if len(raw_log.topics) < need_topics:
        raise MalformedLog(f"{schema.name}: expected {need_topics} topics, got {len(raw_log.topics)}")
    if len(raw_log.data) < schema.min_data_size:
        raise MalformedLog(
            f"{schema.name}: expected {schema.min_data_size} data bytes, got {len(raw_log.data)}"
        )


def _render_tx_hash(raw_log: RawLog) -> str:
    if raw_log.transaction_hash is None:
        raise MissingTransactionHash("log has no transaction hash")
    return "0x" + bytes(raw_log.transaction_hash).hex()


# ---------- main decoders ----------


def decode_swap(
    raw_log: RawLog,
    table: SignatureTable,
    target_event: str = SWAP_EVENT,
) -> SwapRecord | None:
    """Decode a raw log into a `SwapRecord`, or return None when it does not match.

    Raises
    ------
    MalformedLog
        Fewer topics or data words than the schema needs.
    MissingTransactionHash
        The log carries no transaction hash.
    SchemaMismatch
        The matched schema does not declare the swap parameters.
    """
    schema = _lookup_schema(raw_log, table, target_event)
    if schema is None:
        return None

    topic_params, data_params = _check_swap_layout(schema)
    _check_structure(raw_log, schema, MIN_TOPICS)

    values: dict[str, Any] = {}
    for (field, _), param in zip(_SWAP_TOPIC_LAYOUT, topic_params):
        values[field] = topic_to_address(raw_log.topics[param.position])
    for (field, _, narrow), param in zip(_SWAP_DATA_LAYOUT, data_params):
        values[field] = narrow(word_to_uint(word_at(raw_log.data, param.position)))

    return SwapRecord(transaction_hash=_render_tx_hash(raw_log), **values)


def decode_fields(raw_log: RawLog, schema: EventSchema) -> dict[str, Any]:
    """Decode every declared parameter with its full ABI type (no domain narrowing)."""
    _check_structure(raw_log, schema)
    out: dict[str, Any] = {}
    for param in schema.params:
        if param.indexed:
            word = raw_log.topics[param.position]
        else:
            word = word_at(raw_log.data, param.position)
        out[param.name] = parse_word(bytes(word), param.kind)
    return out
