"""
typedsig.utils.bytes
====================

Lightweight helpers around byte handling:

- Hex helpers: to_hex/from_hex, 0x-prefix management
- Padding: left_pad
- Integer conversions: int_to_be (unsigned and two's complement)
- Bytes-like normalization: b()
- Scrubbing: zeroize() for mutable buffers holding secrets

Examples
--------
>>> to_hex(b"\\x01\\x02")
'0x0102'
>>> from_hex('0xdeadbeef')
b'\\xde\\xad\\xbe\\xef'
>>> int_to_be(258, length=3)
b'\\x00\\x01\\x02'
"""

from __future__ import annotations

from typing import Union

BytesLike = Union[bytes, bytearray, memoryview]


# -----------------------
# Basic bytes/hex helpers
# -----------------------

def strip0x(s: str) -> str:
    return s[2:] if s.startswith(("0x", "0X")) else s


def to_hex(data: BytesLike, *, prefix: bool = True) -> str:
    """Return lowercase hex string of data."""
    if isinstance(data, memoryview):
        data = data.tobytes()
    elif isinstance(data, bytearray):
        data = bytes(data)
    if not isinstance(data, bytes):
        raise TypeError("to_hex expects bytes-like")
    h = data.hex()
    return f"0x{h}" if prefix else h


def from_hex(h: str) -> bytes:
    """
    Parse hex string with or without 0x prefix; ignores surrounding whitespace.

    Odd-length input is rejected: every value we parse (addresses, keys,
    fixed byte strings) has a fixed byte width.
    """
    if not isinstance(h, str):
        raise TypeError("from_hex expects str")
    h = strip0x(h.strip())
    if len(h) % 2 == 1:
        raise ValueError("hex string must have even length")
    try:
        return bytes.fromhex(h)
    except ValueError as e:
        raise ValueError(f"invalid hex string: {e}") from e


def b(x: Union[BytesLike, str]) -> bytes:
    """
    Normalize input to bytes:
    - bytes/bytearray/memoryview → bytes
    - str → parsed as hex (0x prefix optional)
    """
    if isinstance(x, bytes):
        return x
    if isinstance(x, bytearray):
        return bytes(x)
    if isinstance(x, memoryview):
        return x.tobytes()
    if isinstance(x, str):
        return from_hex(x)
    raise TypeError(f"unsupported type for b(): {type(x)!r}")


# ---------------------
# Padding
# ---------------------

def left_pad(data: BytesLike, n: int = 32) -> bytes:
    """Right-align `data` in an `n`-byte buffer, zero-filling the high-order bytes."""
    data_b = b(data)
    if len(data_b) > n:
        raise ValueError(f"cannot pad {len(data_b)} bytes into {n}")
    return bytes(n - len(data_b)) + data_b


# ---------------------
# Integer conversions
# ---------------------

def int_to_be(value: int, *, length: int = 32, signed: bool = False) -> bytes:
    """Big-endian fixed-width encoding; two's complement when `signed`."""
    if not isinstance(value, int) or isinstance(value, bool):
        raise TypeError("int_to_be expects int")
    try:
        return value.to_bytes(length, "big", signed=signed)
    except OverflowError as e:
        raise ValueError(f"integer {value} does not fit in {length} bytes") from e


# ---------------------
# Secrets
# ---------------------

def zeroize(buf: bytearray) -> None:
    """Overwrite a mutable buffer in place with zeros."""
    for i in range(len(buf)):
        buf[i] = 0


__all__ = [
    "BytesLike",
    "strip0x",
    "to_hex",
    "from_hex",
    "b",
    "left_pad",
    "int_to_be",
    "zeroize",
]
