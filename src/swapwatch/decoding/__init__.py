"""Event decoding driven by interface-description schemas.

This package provides:
- Event schema system (EventSchema, ParamSpec, SignatureTable)
- Signature table builder keyed by Keccak-256 of the canonical signature
- Swap decoder that translates raw logs into SwapRecord objects
"""

from swapwatch.decoding.decoder import decode_fields, decode_swap
from swapwatch.decoding.registry import add_event_schema, build_signature_table, signature_hash
from swapwatch.decoding.specs import EventSchema, ParamSpec, SignatureTable

__all__ = [
    "decode_fields",
    "decode_swap",
    "add_event_schema",
    "build_signature_table",
    "signature_hash",
    "EventSchema",
    "ParamSpec",
    "SignatureTable",
]
