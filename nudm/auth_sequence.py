"""Sequence number handling for authentication vector generation."""

from __future__ import annotations

from nudm.models import PatchItem

SQN_MAX = 0x7FFFFFFFFFF
IND = 32
SQN_HEX_LENGTH = 12
SQN_BYTE_LENGTH = 6
SEQUENCE_NUMBER_PATH = "/sequenceNumber"
REPLACE = "replace"


def strict_hex(value: str, length: int) -> str:
    """Left-pad ``value`` with zeros to ``length``, or keep only its last ``length`` characters."""
    if not isinstance(value, str):
        raise TypeError(f"expected a string, got {type(value).__name__}")
    if length < 0:
        raise ValueError("length must not be negative")
    if len(value) < length:
        return value.rjust(length, "0")
    return value[len(value) - length:]


def _parse_sqn(sqn_hex: str) -> int:
    normalised = strict_hex(sqn_hex, SQN_HEX_LENGTH)
    try:
        bytes.fromhex(normalised)
    except ValueError:
        raise ValueError(f"invalid sequence number: {sqn_hex!r}") from None
    return int(normalised, 16)


def resync_sequence_number(sqn_ms: bytes) -> str:
    """Return the SQN to continue from after a UE re-synchronisation.

    ``sqn_ms`` is the six-byte sequence number recovered from AUTS; the
    result is moved past the UE's value and wrapped below the SQN limit.
    """
    sqn_ms = bytes(sqn_ms)
    if len(sqn_ms) != SQN_BYTE_LENGTH:
        raise ValueError(f"SQNms must be {SQN_BYTE_LENGTH} bytes, got {len(sqn_ms)}")
    value = (int.from_bytes(sqn_ms, "big") + IND + 1) % SQN_MAX
    return strict_hex(format(value, "x"), SQN_HEX_LENGTH)


def next_sequence_number(sqn_hex: str) -> str:
    """Return the hex SQN that follows ``sqn_hex``, kept to twelve digits."""
    value = _parse_sqn(sqn_hex) + 1
    return strict_hex(format(value, "x"), SQN_HEX_LENGTH)


def sequence_number_patch(sqn_hex: str) -> PatchItem:
    """Build the patch that stores ``sqn_hex`` as the subscriber's sequence number."""
    _parse_sqn(sqn_hex)
    return PatchItem(op=REPLACE, path=SEQUENCE_NUMBER_PATH, value=strict_hex(sqn_hex, SQN_HEX_LENGTH))