"""Event schema primitives and signature table typing.

Defines lightweight dataclasses to describe one declared event:
- `ParamSpec`: one declared parameter (kind, indexed flag, topic/word position)
- `EventSchema`: one event definition (name, params; canonical signature derived)
- `SignatureTable`: read-only mapping from topic0 bytes → (name, EventSchema)
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass

from swapwatch.constants import WORD_SIZE


@dataclass(frozen=True)
class ParamSpec:
    """Describe one declared parameter.

    `position` is the topic index (1-based, topic 0 is the signature hash) for
    indexed params and the 0-based data word index for the others.
    """

    name: str
    kind: str  # e.g., "address", "uint160", "int24", "bytes32"
    indexed: bool
    position: int


@dataclass(frozen=True)
class EventSchema:
    """One named event definition; immutable once built."""

    name: str
    params: tuple[ParamSpec, ...]  # declaration order

    @property
    def signature(self) -> str:
        """Canonical signature: name + parenthesized types, no names or spaces."""
        return f"{self.name}({','.join(p.kind for p in self.params)})"

    @property
    def topic_params(self) -> tuple[ParamSpec, ...]:
        return tuple(p for p in self.params if p.indexed)

    @property
    def data_params(self) -> tuple[ParamSpec, ...]:
        return tuple(p for p in self.params if not p.indexed)

    @property
    def data_words(self) -> int:
        """Number of 32-byte words the data payload must hold."""
        return len(self.data_params)

    @property
    def min_data_size(self) -> int:
        return WORD_SIZE * self.data_words


# Topic0 (32 raw bytes) → (declared event name, schema). Built once, never mutated.
SignatureTable = Mapping[bytes, tuple[str, EventSchema]]


def get_signature_table_topic0s(table: SignatureTable, name: str | None = None) -> list[str]:
    """Return the table keys as 0x-prefixed lowercase hex strings.

    With `name`, only the hashes of events declared under that name (all of
    its overloads) are returned.
    """
    return ["0x" + topic0.hex() for topic0, (declared, _) in table.items() if name is None or declared == name]
