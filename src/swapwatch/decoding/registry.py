"""Signature table builder.

This module exposes:
- `signature_hash(schema)` → Keccak-256 of the canonical signature
- `add_event_schema(table, name, schema)` → insert one schema (last wins)
- `build_signature_table(schemas_by_name)` → read-only SignatureTable

The table is built once per schema document and shared read-only by every
decode call.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from types import MappingProxyType

from eth_utils import keccak

from swapwatch.decoding.specs import EventSchema, SignatureTable

logger = logging.getLogger(__name__)


def signature_hash(schema: EventSchema) -> bytes:
    """Hash the UTF-8 canonical signature into the 32-byte topic0."""
    return keccak(text=schema.signature)


def add_event_schema(table: dict[bytes, tuple[str, EventSchema]], name: str, schema: EventSchema) -> None:
    """Insert one schema keyed by its signature hash; duplicates overwrite."""
    topic0 = signature_hash(schema)
    previous = table.get(topic0)
    if previous is not None:
        logger.warning(
            "Duplicate signature hash 0x%s for event %s (%s replaces %s)",
            topic0.hex(),
            name,
            schema.signature,
            previous[1].signature,
        )
    table[topic0] = (name, schema)


def build_signature_table(schemas_by_name: Mapping[str, Iterable[EventSchema]]) -> SignatureTable:
    """Build the hash → (name, schema) table for every schema of every name."""
    table: dict[bytes, tuple[str, EventSchema]] = {}
    for name, schemas in schemas_by_name.items():
        for schema in schemas:
            add_event_schema(table, name, schema)
    logger.debug("Built signature table with %d entries", len(table))
    return MappingProxyType(table)
