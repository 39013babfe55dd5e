"""Exception hierarchy for the content store."""

from __future__ import annotations

from pathlib import Path


class CtxError(Exception):
    """Base class for every error raised by the store."""


class InvalidHexError(CtxError, ValueError):
    """A string could not be parsed as an object id."""

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(f"invalid hex: {reason}")


class ObjectNotFoundError(CtxError, LookupError):
    """No object with the requested id is stored."""

    def __init__(self, object_hex: str) -> None:
        self.object_hex = object_hex
        super().__init__(f"object not found: {object_hex}")


class HashMismatchError(CtxError):
    """Stored content does not hash to the id it was stored under."""

    def __init__(self, expected: str, actual: str) -> None:
        self.expected = expected
        self.actual = actual
        super().__init__(f"hash mismatch: expected {expected}, got {actual}")


class CorruptedObjectError(CtxError):
    """A stored object has a malformed envelope."""

    def __init__(self, path: str | Path, reason: str) -> None:
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"corrupted object at {self.path}: {reason}")


class BlobTooLargeError(CtxError, ValueError):
    """A blob exceeds the maximum allowed size."""

    def __init__(self, size: int, limit: int) -> None:
        self.size = size
        self.limit = limit
        super().__init__(f"blob too large: {size} bytes exceeds limit of {limit} bytes")


class SerializationError(CtxError):
    """A value could not be serialized."""


class DeserializationError(CtxError):
    """Stored bytes could not be deserialized."""


class CompressionError(CtxError):
    """Compressing or decompressing an object failed."""


class RefNotFoundError(CtxError, LookupError):
    """A reference does not exist."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"ref not found: {name}")


class InvalidRefError(CtxError):
    """A reference file holds malformed content."""

    def __init__(self, path: str | Path, reason: str) -> None:
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"invalid ref at {self.path}: {reason}")


class GcError(CtxError):
    """Garbage collection could not complete an operation."""