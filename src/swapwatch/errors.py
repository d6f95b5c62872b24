"""Error kinds raised by the decoding core and the ABI loader.

NoMatch is not an exception: the decoder returns None for logs that belong
to other events. Store failures are plain `OSError`s and propagate as-is.
"""

from __future__ import annotations


class SwapwatchError(Exception):
    """Base class for all swapwatch errors."""


class DecodeError(SwapwatchError):
    """A matched log could not be turned into a record."""


class MalformedLog(DecodeError):
    """The log is structurally too short for its schema."""


class MissingTransactionHash(DecodeError):
    """The log carries no transaction hash."""


class SchemaMismatch(DecodeError):
    """The matched schema does not have the layout the record needs."""


class AbiFetchError(SwapwatchError):
    """The block explorer did not return a usable ABI."""
