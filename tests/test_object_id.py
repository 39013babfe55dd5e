import struct

import pytest

from ctxstore.errors import InvalidHexError
from ctxstore.object_id import (
    MAGIC,
    ObjectId,
    ObjectKind,
    canonical_bytes,
    hash_blob,
    hash_typed,
)


def test_from_bytes_roundtrip():
    raw = bytes([42] * 32)
    assert ObjectId(raw).raw == raw


def test_hex_roundtrip():
    oid = ObjectId(bytes(range(32)))
    text = oid.hex()
    assert len(text) == 64
    assert ObjectId.from_hex(text) == oid


def test_shard():
    raw = bytearray(32)
    raw[0] = 0xAB
    assert ObjectId(bytes(raw)).shard() == "ab"


def test_shard_leading_zero():
    raw = bytearray(32)
    raw[0] = 0x05
    assert ObjectId(bytes(raw)).shard() == "05"


def test_from_hex_invalid_length():
    with pytest.raises(InvalidHexError):
        ObjectId.from_hex("abc")


def test_from_hex_invalid_chars():
    with pytest.raises(InvalidHexError):
        ObjectId.from_hex("g" * 64)


def test_from_hex_whitespace_trimmed():
    text = "a" * 64
    assert ObjectId.from_hex(f"  {text}  ").hex() == text


def test_from_hex_accepts_uppercase():
    assert ObjectId.from_hex("AB" * 32) == ObjectId(bytes([0xAB] * 32))


def test_display():
    assert str(ObjectId(bytes([0xAB] * 32))) == "ab" * 32


def test_debug_short():
    text = repr(ObjectId(bytes([0xAB] * 32)))
    assert "abababababab" in text
    assert "ab" * 32 not in text


def test_wrong_length_rejected():
    with pytest.raises(ValueError):
        ObjectId(b"\x00" * 31)


def test_hash_blob_deterministic():
    first = hash_blob(b"test data")
    second = hash_blob(b"test data")
    assert first == second
    assert first.hex() == second.hex()
    assert len(first.raw) == 32


def test_hash_blob_different_content():
    assert hash_blob(b"content 1") != hash_blob(b"content 2")


def test_blob_and_typed_hashes_differ():
    assert hash_blob(b"same") != hash_typed(b"same")


def test_canonical_bytes_format():
    payload = b"test"
    canonical = canonical_bytes(ObjectKind.BLOB, payload)
    assert canonical[:5] == MAGIC
    assert canonical[5] == ObjectKind.BLOB
    assert struct.unpack("<Q", canonical[6:14])[0] == 4
    assert canonical[14:] == payload


def test_canonical_bytes_typed():
    payload = b"serialized data"
    canonical = canonical_bytes(ObjectKind.TYPED, payload)
    assert canonical[:5] == MAGIC
    assert canonical[5] == ObjectKind.TYPED
    assert struct.unpack("<Q", canonical[6:14])[0] == len(payload)


def test_object_id_equality_and_hash():
    a = ObjectId(bytes([0x42] * 32))
    b = ObjectId(bytes([0x42] * 32))
    assert a == b
    assert len({a, b}) == 1


def test_object_id_inequality_and_order():
    a = ObjectId(bytes([0x42] * 32))
    b = ObjectId(bytes([0x43] * 32))
    assert a != b
    assert a < b