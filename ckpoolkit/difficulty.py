"""Share difficulty and target arithmetic, share error codes and hash-rate strings."""

from __future__ import annotations

import logging
import math
import struct
from enum import IntEnum

from .sha2 import sha256

log = logging.getLogger(__name__)

# 0x00000000FFFF0000000000000000000000000000000000000000000000000000
TRUEDIFFONE = 26959535291011309493156476344723991336010898738574164086137773096960.0
BITS192 = 6277101735386680763835789423207666416102355444464034512896.0
BITS128 = 340282366920938463463374607431768211456.0
BITS64 = 18446744073709551616.0

_U64_MAX = 0xFFFFFFFFFFFFFFFF


class ShareError(IntEnum):
    """Outcome of checking a submitted share."""

    INVALID_NONCE2 = -9
    WORKER_MISMATCH = -8
    NO_NONCE = -7
    NO_NTIME = -6
    NO_NONCE2 = -5
    NO_JOBID = -4
    NO_USERNAME = -3
    INVALID_SIZE = -2
    NOT_ARRAY = -1
    NONE = 0
    INVALID_JOBID = 1
    STALE = 2
    NTIME_INVALID = 3
    DUPE = 4
    HIGH_DIFF = 5
    INVALID_VERSION_MASK = 6


_SHARE_ERROR_TEXT = {
    ShareError.INVALID_NONCE2: "Invalid nonce2 length",
    ShareError.WORKER_MISMATCH: "Worker mismatch",
    ShareError.NO_NONCE: "No nonce",
    ShareError.NO_NTIME: "No ntime",
    ShareError.NO_NONCE2: "No nonce2",
    ShareError.NO_JOBID: "No job_id",
    ShareError.NO_USERNAME: "No username",
    ShareError.INVALID_SIZE: "Invalid array size",
    ShareError.NOT_ARRAY: "Params not array",
    ShareError.NONE: "Valid",
    ShareError.INVALID_JOBID: "Invalid JobID",
    ShareError.STALE: "Stale",
    ShareError.NTIME_INVALID: "Ntime out of range",
    ShareError.DUPE: "Duplicate",
    ShareError.HIGH_DIFF: "Above target",
    ShareError.INVALID_VERSION_MASK: "Invalid version mask",
}


def share_error_text(err: int) -> str:
    """Return the human-readable text for a share error code.

    Raises ValueError for a code that is not a ShareError.
    """
    return _SHARE_ERROR_TEXT[ShareError(err)]


def _check_256(target: bytes) -> bytes:
    target = bytes(target)
    if len(target) != 32:
        raise ValueError(f"expected 32 bytes, got {len(target)}")
    return target


def le256todouble(target: bytes) -> float:
    """Convert a little-endian 256-bit value to a float."""
    w0, w1, w2, w3 = struct.unpack("<4Q", _check_256(target))
    return float(w3) * BITS192 + float(w2) * BITS128 + float(w1) * BITS64 + float(w0)


def be256todouble(target: bytes) -> float:
    """Convert a big-endian 256-bit value to a float."""
    w3, w2, w1, w0 = struct.unpack(">4Q", _check_256(target))
    return float(w3) * BITS192 + float(w2) * BITS128 + float(w1) * BITS64 + float(w0)


def diff_from_target(target: bytes) -> float:
    """Return the difficulty of a little-endian 256-bit target."""
    dcut64 = le256todouble(target)
    if dcut64 <= 0:
        dcut64 = 1.0
    return TRUEDIFFONE / dcut64


def diff_from_betarget(target: bytes) -> float:
    """Return the difficulty of a big-endian 256-bit target."""
    dcut64 = be256todouble(target)
    if dcut64 <= 0:
        dcut64 = 1.0
    return TRUEDIFFONE / dcut64


def diff_from_nbits(nbits: bytes) -> float:
    """Return the network difficulty of a packed 4-byte nbits field.

    The first byte is the size in bytes of the target, clamped to 3..32.
    """
    nbits = bytes(nbits)
    if len(nbits) < 4:
        raise ValueError(f"nbits needs 4 bytes, got {len(nbits)}")
    log.debug("Nbits is %s", nbits[:4].hex())
    shift = nbits[0]
    if shift < 3:
        log.warning("Corrupt shift of %d in nbits", shift)
        shift = 3
    elif shift > 32:
        log.warning("Corrupt shift of %d in nbits", shift)
        shift = 32
    target = bytearray(32)
    start = 32 - shift
    target[start:start + 3] = nbits[1:4]
    return diff_from_betarget(bytes(target))


def _u64(value: float) -> int:
    if value != value or value <= 0:
        return 0
    return min(int(value), _U64_MAX)


def target_from_diff(diff: float) -> bytes:
    """Return the little-endian 256-bit target for a difficulty.

    A difficulty of zero gives the all-ones target.
    """
    if diff == 0.0:
        return b"\xff" * 32
    d64 = TRUEDIFFONE / diff
    words = []
    for scale in (BITS192, BITS128, BITS64):
        h64 = _u64(d64 / scale)
        words.append(h64)
        d64 -= float(h64) * scale
    words.append(_u64(d64))
    w3, w2, w1, w0 = words
    return struct.pack("<4Q", w0, w1, w2, w3)


def fulltest(hash: bytes, target: bytes) -> bool:
    """Return whether a little-endian 256-bit hash is at or below target."""
    return int.from_bytes(_check_256(hash), "little") <= int.from_bytes(
        _check_256(target), "little"
    )


def gen_hash(data: bytes) -> bytes:
    """Return the double SHA-256 of data."""
    return sha256(sha256(bytes(data)))


_SUFFIXES = (
    (1e18, 1e15, "E"),
    (1e15, 1e12, "P"),
    (1e12, 1e9, "T"),
    (1e9, 1e6, "G"),
    (1e6, 1e3, "M"),
)


def suffix_string(val: float, sigdigits: int = 0) -> str:
    """Format a value with a K, M, G, T, P or E suffix.

    With sigdigits of 0 the value is shown to three significant figures
    (whole numbers below a thousand); otherwise it is right-aligned in
    sigdigits + 1 characters, padded with trailing zeroes.
    """
    suffix = ""
    decimal = True
    for limit, divisor, name in _SUFFIXES:
        if val >= limit:
            dval = (val / divisor) / 1000
            suffix = name
            break
    else:
        if val >= 1000:
            dval = val / 1000
            suffix = "K"
        else:
            dval = val
            decimal = False

    if not sigdigits:
        if decimal:
            return "%.3g%s" % (dval, suffix)
        return "%d%s" % (int(dval), suffix)

    magnitude = math.floor(math.log10(dval)) if dval > 0.0 else 0
    ndigits = int(sigdigits - 1 - magnitude)
    if ndigits < 0:
        ndigits = 6
    return "%*.*f%s" % (sigdigits + 1, ndigits, dval, suffix)