from __future__ import annotations

from .abi_events import make_signature_table_from_abi
from .constants import SWAP_EVENT, SWAP_T0
from .core.models import RawLog, SwapRecord
from .decoding.decoder import decode_swap
from .decoding.registry import build_signature_table
from .decoding.specs import EventSchema, ParamSpec, SignatureTable
from .errors import DecodeError, MalformedLog, MissingTransactionHash, SchemaMismatch
from .orchestration.stream import run_stream
from .storage.records import JsonLinesRecordStore

__all__ = [
    "make_signature_table_from_abi",
    "build_signature_table",
    "decode_swap",
    "run_stream",
    "JsonLinesRecordStore",
    "EventSchema",
    "ParamSpec",
    "SignatureTable",
    "RawLog",
    "SwapRecord",
    "DecodeError",
    "MalformedLog",
    "MissingTransactionHash",
    "SchemaMismatch",
    "SWAP_EVENT",
    "SWAP_T0",
]
