"""Hex, base64, base58 and bech32 helpers, script building and byte-order shuffles."""

from __future__ import annotations

import base64
import logging
import struct

log = logging.getLogger(__name__)

PAGESIZE = 4096

_HEXDIGITS = frozenset("0123456789abcdefABCDEF")
_B58_ALPHABET = "123456789ABCDEFGHJKLMNPQRSTUVWXYZabcdefghijkmnopqrstuvwxyz"
_B58_VALUES = {ch: i for i, ch in enumerate(_B58_ALPHABET)}
_BECH32_CHARSET = "qpzry9x8gf2tvdw0s3jn54khce6mua7l"
_BECH32_VALUES = {
    **{ch: i for i, ch in enumerate(_BECH32_CHARSET)},
    **{ch.upper(): i for i, ch in enumerate(_BECH32_CHARSET)},
}


def bin2hex(data: bytes) -> str:
    """Return data as lower-case hex."""
    return bytes(data).hex()


def validhex(buf: str) -> bool:
    """Return whether buf is a non-empty, even-length string of hex digits."""
    if not buf or len(buf) % 2:
        log.debug("Invalid hex due to length %d", len(buf) if buf else 0)
        return False
    for offset, ch in enumerate(buf):
        if ch not in _HEXDIGITS:
            log.debug("Invalid hex due to value %r at offset %d", ch, offset)
            return False
    return True


def hex2bin(hexstr: str, length: int) -> bytes:
    """Decode exactly length bytes from hexstr.

    Raises ValueError if hexstr is not precisely 2 * length hex digits.
    """
    if len(hexstr) % 2:
        raise ValueError("early end of string in hex string")
    if any(ch not in _HEXDIGITS for ch in hexstr):
        raise ValueError("invalid binary encoding in hex string")
    if len(hexstr) != 2 * length:
        raise ValueError(f"hex string does not decode to {length} bytes")
    return bytes.fromhex(hexstr)


def http_base64(src: str | bytes) -> str:
    """Return src encoded as MIME base64, as used in HTTP basic auth."""
    raw = src.encode("utf-8") if isinstance(src, str) else bytes(src)
    return base64.b64encode(raw).decode("ascii")


def b58tobin(b58: str) -> bytes:
    """Decode a base58 string into its 25-byte binary form.

    Only the low 200 bits of the decoded number are kept, as for an address.
    """
    value = 0
    for ch in b58:
        try:
            value = value * 58 + _B58_VALUES[ch]
        except KeyError:
            raise ValueError(f"invalid base58 character {ch!r}") from None
    return (value % (1 << 200)).to_bytes(25, "big")


def safecmp(a: str | None, b: str | None) -> int:
    """Compare two strings, tolerating None and empty strings.

    Returns 0 when equal, otherwise a non-zero value; -1 when exactly one side
    is None or empty.
    """
    if a is None or b is None:
        return 0 if a is b else -1
    if not a or not b:
        return 0 if len(a) == len(b) else -1
    return (a > b) - (a < b)


def cmdmatch(buf: str | None, cmd: str) -> bool:
    """Return whether buf starts with cmd, ignoring case."""
    if not buf:
        return False
    if len(buf) < len(cmd):
        return False
    return buf[:len(cmd)].lower() == cmd.lower()


def _bech32_values(addr: str) -> list[int]:
    """Return the 5-bit data values of a bech32 address, without checksum."""
    sep = addr.rfind("1")
    if sep < 0:
        raise ValueError("bech32 address has no separator")
    payload = addr[sep + 1:]
    if len(payload) < 7:
        raise ValueError("bech32 address too short")
    try:
        return [_BECH32_VALUES[ch] for ch in payload[:-6]]
    except KeyError as exc:
        raise ValueError(f"invalid bech32 character {exc.args[0]!r}") from None


def _convert_bits(values: list[int]) -> bytes:
    """Regroup 5-bit values into bytes, dropping any leftover bits."""
    acc = 0
    bits = 0
    out = bytearray()
    for value in values:
        acc = ((acc << 5) | value) & 0xFFFFFFFF
        bits += 5
        while bits >= 8:
            bits -= 8
            out.append((acc >> bits) & 0xFF)
    return bytes(out)


def address_to_txn(addr: str, script: bool = False, segwit: bool = False) -> bytes:
    """Return the output script paying to addr."""
    if segwit:
        values = _bech32_values(addr)
        version = values[0]
        if version:
            version = (version + 0x50) & 0xFF
        program = _convert_bits(values[1:])
        return bytes([version, len(program) & 0xFF]) + program
    pubkey_hash = b58tobin(addr)[1:21]
    if script:
        return b"\xa9\x14" + pubkey_hash + b"\x87"
    return b"\x76\xa9\x14" + pubkey_hash + b"\x88\xac"


def ser_number(val: int) -> bytes:
    """Serialise a block height for a coinbase: a length byte then the value."""
    if val < 0x80:
        length = 1
    elif val < 0x8000:
        length = 2
    elif val < 0x800000:
        length = 3
    else:
        length = 4
    return bytes([length]) + struct.pack("<i", val)[:length]


def get_sernumber(data: bytes) -> int:
    """Decode a value written by ser_number; 0 if the length byte is invalid."""
    if not data:
        return 0
    length = data[0]
    if length < 1 or length > 4:
        return 0
    raw = bytes(data[1:1 + length]).ljust(4, b"\x00")
    return struct.unpack("<i", raw)[0]


def align_len(length: int) -> int:
    """Round length up to a multiple of 4."""
    rem = length % 4
    return length + 4 - rem if rem else length


def round_up_page(length: int) -> int:
    """Round length up to a multiple of the page size."""
    rem = length % PAGESIZE
    return length + PAGESIZE - rem if rem else length


def trail_slash(path: str) -> str:
    """Return path ending with exactly one added '/' if it lacked one."""
    return path if path.endswith("/") else path + "/"


def _words(data: bytes, count: int) -> tuple[int, ...]:
    data = bytes(data)
    if len(data) != count * 4:
        raise ValueError(f"expected {count * 4} bytes, got {len(data)}")
    return struct.unpack(f"<{count}I", data)


def swap_256(data: bytes) -> bytes:
    """Reverse the order of the eight 32-bit words of a 256-bit value."""
    return struct.pack("<8I", *reversed(_words(data, 8)))


def bswap_256(data: bytes) -> bytes:
    """Reverse the word order and the bytes within each word of a 256-bit value."""
    return struct.pack(">8I", *reversed(_words(data, 8)))


def flip_32(data: bytes) -> bytes:
    """Byte-swap each of the eight 32-bit words of a 256-bit value."""
    return struct.pack(">8I", *_words(data, 8))


def flip_80(data: bytes) -> bytes:
    """Byte-swap each of the twenty 32-bit words of an 80-byte header."""
    return struct.pack(">20I", *_words(data, 20))