"""Content-addressed object storage with integrity verification."""

from __future__ import annotations

import io
import json
import os
import struct
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import zstandard

from .errors import (
    CompressionError,
    CorruptedObjectError,
    DeserializationError,
    GcError,
    HashMismatchError,
    InvalidHexError,
    ObjectNotFoundError,
    SerializationError,
    BlobTooLargeError,
)
from .fsutil import atomic_write
from .object_id import (
    HEADER_LEN,
    MAGIC,
    ObjectId,
    ObjectKind,
    canonical_bytes,
    hash_blob,
    hash_typed,
)

MAX_BLOB_SIZE = 100 * 1024 * 1024
"""Largest blob accepted by :meth:`ObjectStore.put_blob`, in bytes."""

COMPRESSION_LEVEL = 3


@dataclass(frozen=True)
class ObjectInfo:
    """An object found on disk: its id, compressed size and modification time."""

    object_id: ObjectId
    size: int
    modified: float


def _serialize(value: Any) -> bytes:
    try:
        text = json.dumps(
            value,
            sort_keys=True,
            separators=(",", ":"),
            ensure_ascii=False,
            allow_nan=False,
        )
    except (TypeError, ValueError) as exc:
        raise SerializationError(str(exc)) from exc
    return text.encode("utf-8")


def _deserialize(payload: bytes) -> Any:
    try:
        return json.loads(payload.decode("utf-8"))
    except (UnicodeDecodeError, ValueError) as exc:
        raise DeserializationError(str(exc)) from exc


def _compress(data: bytes) -> bytes:
    try:
        return zstandard.ZstdCompressor(level=COMPRESSION_LEVEL).compress(data)
    except zstandard.ZstdError as exc:
        raise CompressionError(str(exc)) from exc


def _decompress(data: bytes) -> bytes:
    try:
        reader = zstandard.ZstdDecompressor().stream_reader(io.BytesIO(data))
        with reader:
            return reader.read()
    except zstandard.ZstdError as exc:
        raise CompressionError(str(exc)) from exc


class ObjectStore:
    """Stores zstd-compressed objects under paths derived from their hashes."""

    def __init__(self, root: str | os.PathLike[str]) -> None:
        self.root = Path(root)

    def object_path(self, object_id: ObjectId) -> Path:
        """Return the file path an object is stored at."""
        return self.root / object_id.shard() / object_id.hex()

    def exists(self, object_id: ObjectId) -> bool:
        """Return True if the object is present in the store."""
        return self.object_path(object_id).exists()

    def put_blob(self, data: bytes | bytearray | memoryview) -> ObjectId:
        """Store raw bytes and return their id; existing content is not rewritten."""
        data = bytes(data)
        if len(data) > MAX_BLOB_SIZE:
            raise BlobTooLargeError(len(data), MAX_BLOB_SIZE)
        object_id = hash_blob(data)
        if not self.exists(object_id):
            self._write_object(object_id, canonical_bytes(ObjectKind.BLOB, data))
        return object_id

    def get_blob(self, object_id: ObjectId) -> bytes:
        """Return the raw bytes of a blob, verifying its integrity."""
        kind, payload = self._read_object(object_id)
        if kind is not ObjectKind.BLOB:
            raise CorruptedObjectError(
                self.object_path(object_id), f"expected Blob, got {kind.name.title()}"
            )
        return payload

    def put_typed(self, value: Any) -> ObjectId:
        """Serialize a JSON-compatible value deterministically and store it."""
        serialized = _serialize(value)
        object_id = hash_typed(serialized)
        if not self.exists(object_id):
            self._write_object(object_id, canonical_bytes(ObjectKind.TYPED, serialized))
        return object_id

    def get_typed(self, object_id: ObjectId) -> Any:
        """Load and deserialize a typed object."""
        kind, payload = self._read_object(object_id)
        if kind is not ObjectKind.TYPED:
            raise CorruptedObjectError(
                self.object_path(object_id), f"expected Typed, got {kind.name.title()}"
            )
        return _deserialize(payload)

    def list_all_objects(self) -> list[ObjectInfo]:
        """Return every object on disk with its compressed size and mtime."""
        if not self.root.exists():
            return []
        objects = []
        for shard_dir in self.root.iterdir():
            if not shard_dir.is_dir():
                continue
            for obj_path in shard_dir.iterdir():
                if not obj_path.is_file() or obj_path.suffix:
                    continue
                try:
                    object_id = ObjectId.from_hex(obj_path.name)
                except InvalidHexError as exc:
                    raise GcError(
                        f"failed to parse object ID {obj_path.name}: {exc}"
                    ) from exc
                try:
                    stat = obj_path.stat()
                    modified = stat.st_mtime
                except OSError:
                    raise
                objects.append(ObjectInfo(object_id, stat.st_size, modified or time.time()))
        return objects

    def delete(self, object_id: ObjectId) -> None:
        """Remove an object; only safe once it is unreachable from every ref."""
        path = self.object_path(object_id)
        if not path.exists():
            raise ObjectNotFoundError(object_id.hex())
        try:
            path.unlink()
        except OSError as exc:
            raise GcError(f"failed to delete object {object_id.hex()}: {exc}") from exc

    def _write_object(self, object_id: ObjectId, canonical: bytes) -> None:
        atomic_write(self.object_path(object_id), _compress(canonical))

    def _read_object(self, object_id: ObjectId) -> tuple[ObjectKind, bytes]:
        path = self.object_path(object_id)
        if not path.exists():
            raise ObjectNotFoundError(object_id.hex())
        canonical = _decompress(path.read_bytes())

        if len(canonical) < HEADER_LEN:
            raise CorruptedObjectError(path, "object too small")
        if canonical[: len(MAGIC)] != MAGIC:
            raise CorruptedObjectError(path, "invalid magic bytes")
        kind_byte = canonical[len(MAGIC)]
        try:
            kind = ObjectKind(kind_byte)
        except ValueError:
            raise CorruptedObjectError(path, f"unknown kind: {kind_byte}") from None
        (length,) = struct.unpack("<Q", canonical[len(MAGIC) + 1 : HEADER_LEN])
        payload = canonical[HEADER_LEN:]
        if len(payload) != length:
            raise CorruptedObjectError(
                path, f"length mismatch: header says {length}, got {len(payload)}"
            )

        expected = hash_blob(payload) if kind is ObjectKind.BLOB else hash_typed(payload)
        if expected != object_id:
            raise HashMismatchError(object_id.hex(), expected.hex())
        return kind, payload