"""Object identifiers and the canonical envelope used for hashing."""

from __future__ import annotations

import enum
import string
import struct
from dataclasses import dataclass
from typing import ClassVar

from .blake3 import blake3_hash
from .errors import InvalidHexError

MAGIC = b"CTXO1"
HEADER_LEN = len(MAGIC) + 1 + 8

_HEX_DIGITS = frozenset(string.hexdigits)


class ObjectKind(enum.IntEnum):
    """Discriminant stored in the canonical envelope."""

    BLOB = 1
    TYPED = 2


@dataclass(frozen=True, order=True, repr=False)
class ObjectId:
    """A 32-byte BLAKE3 content hash identifying a stored object."""

    raw: bytes

    LEN: ClassVar[int] = 32
    HEX_LEN: ClassVar[int] = 64

    def __post_init__(self) -> None:
        if not isinstance(self.raw, (bytes, bytearray, memoryview)):
            raise TypeError("ObjectId requires bytes")
        raw = bytes(self.raw)
        if len(raw) != self.LEN:
            raise ValueError(f"ObjectId requires {self.LEN} bytes, got {len(raw)}")
        object.__setattr__(self, "raw", raw)

    @classmethod
    def from_hex(cls, text: str) -> ObjectId:
        """Parse a 64-character hex string, ignoring surrounding whitespace."""
        text = text.strip()
        if len(text) != cls.HEX_LEN:
            raise InvalidHexError(f"expected {cls.HEX_LEN} hex chars, got {len(text)}")
        bad = next((c for c in text if c not in _HEX_DIGITS), None)
        if bad is not None:
            raise InvalidHexError(f"invalid character {bad!r}")
        return cls(bytes.fromhex(text))

    def hex(self) -> str:
        """Return the lowercase 64-character hex form."""
        return self.raw.hex()

    def shard(self) -> str:
        """Return the first two hex characters, used as a directory shard."""
        return self.raw[:1].hex()

    def __bytes__(self) -> bytes:
        return self.raw

    def __str__(self) -> str:
        return self.hex()

    def __repr__(self) -> str:
        return f"ObjectId({self.hex()[:12]}...)"


def canonical_bytes(kind: ObjectKind, payload: bytes) -> bytes:
    """Build the envelope: magic, kind byte, u64 LE length, payload."""
    payload = bytes(payload)
    return MAGIC + bytes([int(kind)]) + struct.pack("<Q", len(payload)) + payload


def hash_blob(data: bytes) -> ObjectId:
    """Compute the id of raw bytes stored as a blob."""
    return ObjectId(blake3_hash(canonical_bytes(ObjectKind.BLOB, data)))


def hash_typed(serialized: bytes) -> ObjectId:
    """Compute the id of a serialized typed object."""
    return ObjectId(blake3_hash(canonical_bytes(ObjectKind.TYPED, serialized)))