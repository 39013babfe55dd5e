"""BLAKE3 hashing with a 32-byte output."""

from __future__ import annotations

import struct

_MASK = 0xFFFFFFFF
_BLOCK_LEN = 64
_CHUNK_LEN = 1024
_OUT_LEN = 32

_CHUNK_START = 1 << 0
_CHUNK_END = 1 << 1
_PARENT = 1 << 2
_ROOT = 1 << 3

_IV = (
    0x6A09E667,
    0xBB67AE85,
    0x3C6EF372,
    0xA54FF53A,
    0x510E527F,
    0x9B05688C,
    0x1F83D9AB,
    0x5BE0CD19,
)

_MSG_PERMUTATION = (2, 6, 3, 10, 7, 0, 4, 13, 1, 11, 12, 5, 9, 14, 15, 8)

_G_POSITIONS = (
    (0, 4, 8, 12),
    (1, 5, 9, 13),
    (2, 6, 10, 14),
    (3, 7, 11, 15),
    (0, 5, 10, 15),
    (1, 6, 11, 12),
    (2, 7, 8, 13),
    (3, 4, 9, 14),
)


def _build_steps() -> tuple[tuple[int, int, int, int, int, int], ...]:
    steps = []
    schedule = list(range(16))
    for _ in range(7):
        for k, (a, b, c, d) in enumerate(_G_POSITIONS):
            steps.append((a, b, c, d, schedule[2 * k], schedule[2 * k + 1]))
        schedule = [schedule[p] for p in _MSG_PERMUTATION]
    return tuple(steps)


_STEPS = _build_steps()
_WORDS16 = struct.Struct("<16I")


def _compress(
    cv: tuple[int, ...] | list[int],
    m: tuple[int, ...],
    counter: int,
    block_len: int,
    flags: int,
) -> list[int]:
    s = [*cv, _IV[0], _IV[1], _IV[2], _IV[3],
         counter & _MASK, (counter >> 32) & _MASK, block_len, flags]
    for a, b, c, d, xi, yi in _STEPS:
        va = (s[a] + s[b] + m[xi]) & _MASK
        vd = s[d] ^ va
        vd = ((vd >> 16) | (vd << 16)) & _MASK
        vc = (s[c] + vd) & _MASK
        vb = s[b] ^ vc
        vb = ((vb >> 12) | (vb << 20)) & _MASK
        va = (va + vb + m[yi]) & _MASK
        vd ^= va
        vd = ((vd >> 8) | (vd << 24)) & _MASK
        vc = (vc + vd) & _MASK
        vb ^= vc
        vb = ((vb >> 7) | (vb << 25)) & _MASK
        s[a], s[b], s[c], s[d] = va, vb, vc, vd
    for i in range(8):
        s[i] ^= s[i + 8]
        s[i + 8] ^= cv[i]
    return s


def _chunk_cv(chunk: bytes, counter: int, is_root: bool) -> list[int]:
    blocks = [chunk[i:i + _BLOCK_LEN] for i in range(0, len(chunk), _BLOCK_LEN)] or [b""]
    cv: list[int] | tuple[int, ...] = _IV
    last = len(blocks) - 1
    for position, block in enumerate(blocks):
        flags = 0
        if position == 0:
            flags |= _CHUNK_START
        if position == last:
            flags |= _CHUNK_END
            if is_root:
                flags |= _ROOT
        words = _WORDS16.unpack(block.ljust(_BLOCK_LEN, b"\0"))
        cv = _compress(cv, words, counter, len(block), flags)[:8]
    return list(cv)


def _merge(cvs: list[list[int]], is_root: bool) -> list[int]:
    if len(cvs) == 1:
        return cvs[0]
    split = 1 << ((len(cvs) - 1).bit_length() - 1)
    left = _merge(cvs[:split], False)
    right = _merge(cvs[split:], False)
    flags = _PARENT | (_ROOT if is_root else 0)
    return _compress(_IV, tuple(left + right), 0, _BLOCK_LEN, flags)[:8]


def blake3_hash(data: bytes | bytearray | memoryview) -> bytes:
    """Return the 32-byte BLAKE3 digest of ``data``."""
    data = bytes(data)
    chunks = [data[i:i + _CHUNK_LEN] for i in range(0, len(data), _CHUNK_LEN)] or [b""]
    if len(chunks) == 1:
        words = _chunk_cv(chunks[0], 0, True)
    else:
        cvs = [_chunk_cv(chunk, index, False) for index, chunk in enumerate(chunks)]
        words = _merge(cvs, True)
    return struct.pack("<8I", *words)[:_OUT_LEN]