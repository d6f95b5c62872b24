"""Decoding utilities: ABI word access, typed parsers, and numeric narrowing."""

from __future__ import annotations

from typing import Any

from swapwatch.constants import ADDRESS_SIZE, WORD_SIZE
from swapwatch.errors import MalformedLog

UINT256_MODULUS = 1 << 256
INT128_MAX = (1 << 127) - 1
INT128_MIN = -(1 << 127)
UINT128_MODULUS = 1 << 128
UINT128_MASK = (1 << 128) - 1
UINT64_MASK = (1 << 64) - 1
UINT32_MASK = (1 << 32) - 1


def word_at(data: bytes, i: int) -> bytes:
    """Return the i-th 32-byte ABI word; a short payload is malformed, never padded."""
    start = WORD_SIZE * i
    end = start + WORD_SIZE
    if end > len(data):
        raise MalformedLog(f"data holds {len(data)} bytes, word {i} needs {end}")
    return data[start:end]


def word_to_uint(word: bytes) -> int:
    return int.from_bytes(word, "big", signed=False)


def topic_to_address(topic: bytes) -> str:
    """Indexed address: left-zero-padded 32-byte topic, address in the trailing 20 bytes."""
    if len(topic) != WORD_SIZE:
        raise MalformedLog(f"topic must be {WORD_SIZE} bytes, got {len(topic)}")
    return "0x" + topic[-ADDRESS_SIZE:].hex()


def recover_signed_128(raw: int) -> int:
    """Recover a signed 128-bit value from an unsigned 256-bit two's-complement word.

    Values above the int128 maximum are negative: magnitude is `2**256 - raw`,
    truncated to its low 128 bits, and the negated magnitude wraps into
    [-2**127, 2**127 - 1]. Values outside int128 lose their high-order bits.
    """
    if raw > INT128_MAX:
        magnitude = (UINT256_MODULUS - raw) & UINT128_MASK
        return ((INT128_MAX + 1 - magnitude) % UINT128_MODULUS) + INT128_MIN
    return raw & UINT128_MASK


def narrow_unsigned_128(raw: int) -> int:
    return raw & UINT128_MASK


def narrow_tick(raw: int) -> int:
    """Low 64 bits, then reinterpreted as a signed 32-bit integer.

    A narrowing cast, not a full two's-complement recovery; ticks always fit
    int24 so the result matches the declared value.
    """
    low = (raw & UINT64_MASK) & UINT32_MASK
    return low - (1 << 32) if low >= 1 << 31 else low


def _type_bits(typ: str, prefix: str) -> int:
    suffix = typ[len(prefix):]
    return int(suffix) if suffix else 256


def parse_word(word: bytes, typ: str) -> Any:
    """Parse one 32-byte ABI word (topic or data) according to the declared type."""
    if typ == "address":
        return "0x" + word[-ADDRESS_SIZE:].hex()
    if typ == "bool":
        return word_to_uint(word) != 0
    if typ.startswith("uint"):
        return word_to_uint(word) & ((1 << _type_bits(typ, "uint")) - 1)
    if typ.startswith("int"):
        bits = _type_bits(typ, "int")
        v = word_to_uint(word) & ((1 << bits) - 1)
        if v >= 1 << (bits - 1):
            v -= 1 << bits
        return v
    if typ.startswith("bytes") and typ != "bytes":
        return "0x" + word[: int(typ[5:])].hex()
    # Dynamic types sit behind an offset (or a hash when indexed): raw hex
    return "0x" + word.hex()
