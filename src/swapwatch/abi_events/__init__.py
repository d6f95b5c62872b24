import json
from collections.abc import Iterable, Mapping, Sequence
from pathlib import Path
from typing import Any, Literal

from eth_utils.abi import event_signature_to_log_topic
from pydantic import BaseModel

from swapwatch.decoding.registry import build_signature_table
from swapwatch.decoding.specs import EventSchema, ParamSpec, SignatureTable


class AbiInput(BaseModel):
    indexed: bool = False
    internalType: str | None = None
    name: str
    type: str


class AbiEvent(BaseModel):
    anonymous: bool = False
    inputs: Sequence[AbiInput]
    name: str
    type: Literal["event"]


def get_event_signature(event: AbiEvent) -> str:
    return f"{event.name}({','.join(event_input.type for event_input in event.inputs)})"


def get_event_topic0(event: AbiEvent) -> bytes:
    return event_signature_to_log_topic(get_event_signature(event))


def get_event_param_specs(event: AbiEvent) -> tuple[ParamSpec, ...]:
    specs: list[ParamSpec] = []
    topic_idx = 1
    word_idx = 0
    for event_input in event.inputs:
        if event_input.indexed:
            specs.append(ParamSpec(event_input.name, event_input.type, True, topic_idx))
            topic_idx += 1
        else:
            specs.append(ParamSpec(event_input.name, event_input.type, False, word_idx))
            word_idx += 1
    return tuple(specs)


def event_schema_from_abi(event: AbiEvent) -> EventSchema:
    return EventSchema(name=event.name, params=get_event_param_specs(event))


AbiJson = Iterable[dict[str, Any]]
AbiSpec = AbiJson | Mapping[str, Any] | Path | str


def load_abi(abi: AbiSpec) -> list[dict[str, Any]]:
    """Normalize an ABI document into a list of entries.

    Accepts a path, a JSON string (block explorers return the ABI that way),
    a bare ABI list or a build artifact with an `abi` key.
    """
    if isinstance(abi, Path):
        abi = json.loads(abi.read_text(encoding="utf-8"))
    elif isinstance(abi, str):
        abi = json.loads(abi)

    if isinstance(abi, Mapping):
        if not isinstance(abi.get("abi"), list):
            raise ValueError("Unsupported ABI format: expected a list or a dict with an 'abi' list")
        abi = abi["abi"]

    return [entry for entry in abi if isinstance(entry, dict)]


def get_events_from_abi(abi: AbiSpec) -> dict[str, list[AbiEvent]]:
    """Group event definitions by declared name (overloads share a name)."""
    events: dict[str, list[AbiEvent]] = {}
    for entry in load_abi(abi):
        if entry.get("type") != "event":
            continue
        event = AbiEvent.model_validate(entry)
        events.setdefault(event.name, []).append(event)
    return events


def get_event_schemas_from_abi(abi: AbiSpec) -> dict[str, list[EventSchema]]:
    return {
        name: [event_schema_from_abi(event) for event in events]
        for name, events in get_events_from_abi(abi).items()
    }


def make_signature_table_from_abi(abi: AbiSpec) -> SignatureTable:
    return build_signature_table(get_event_schemas_from_abi(abi))
