"""Jenkins lookup3 ``hashlittle`` 32-bit hash for hash-table lookup."""

from __future__ import annotations

_MASK = 0xFFFFFFFF


def hashsize(n: int) -> int:
    """Return the number of buckets in a table indexed by n bits."""
    return 1 << n


def hashmask(n: int) -> int:
    """Return the mask that keeps the low n bits of a hash."""
    return hashsize(n) - 1


def _rot(x: int, k: int) -> int:
    return ((x << k) | (x >> (32 - k))) & _MASK


def _mix(a: int, b: int, c: int) -> tuple[int, int, int]:
    a = (a - c) & _MASK; a ^= _rot(c, 4); c = (c + b) & _MASK
    b = (b - a) & _MASK; b ^= _rot(a, 6); a = (a + c) & _MASK
    c = (c - b) & _MASK; c ^= _rot(b, 8); b = (b + a) & _MASK
    a = (a - c) & _MASK; a ^= _rot(c, 16); c = (c + b) & _MASK
    b = (b - a) & _MASK; b ^= _rot(a, 19); a = (a + c) & _MASK
    c = (c - b) & _MASK; c ^= _rot(b, 4); b = (b + a) & _MASK
    return a, b, c


def _final(a: int, b: int, c: int) -> int:
    c ^= b; c = (c - _rot(b, 14)) & _MASK
    a ^= c; a = (a - _rot(c, 11)) & _MASK
    b ^= a; b = (b - _rot(a, 25)) & _MASK
    c ^= b; c = (c - _rot(b, 16)) & _MASK
    a ^= c; a = (a - _rot(c, 4)) & _MASK
    b ^= a; b = (b - _rot(a, 14)) & _MASK
    c ^= b; c = (c - _rot(b, 24)) & _MASK
    return c


def _word(chunk: bytes) -> int:
    """Little-endian value of up to four bytes."""
    return int.from_bytes(chunk, "little")


def hashlittle(key: bytes | bytearray | memoryview | str, initval: int = 0) -> int:
    """Hash a byte string into a 32-bit value, seeded with initval.

    Strings are hashed as their UTF-8 encoding.
    """
    data = key.encode("utf-8") if isinstance(key, str) else bytes(key)
    length = len(data)
    a = b = c = (0xDEADBEEF + length + initval) & _MASK

    ofs = 0
    while length - ofs > 12:
        a = (a + _word(data[ofs:ofs + 4])) & _MASK
        b = (b + _word(data[ofs + 4:ofs + 8])) & _MASK
        c = (c + _word(data[ofs + 8:ofs + 12])) & _MASK
        a, b, c = _mix(a, b, c)
        ofs += 12

    tail = data[ofs:]
    if not tail:
        return c
    a = (a + _word(tail[0:4])) & _MASK
    b = (b + _word(tail[4:8])) & _MASK
    c = (c + _word(tail[8:12])) & _MASK
    return _final(a, b, c)