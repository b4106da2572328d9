"""
typedsig.utils.hash
===================

Keccak-256 (Ethereum-style, original Keccak padding — *not* NIST SHA3-256).

The digest is provided by pycryptodome's ``Crypto.Hash.keccak``. CPython's
``hashlib.sha3_256`` uses the FIPS-202 padding and produces different output,
so it must never be substituted here.
"""

from __future__ import annotations

from Crypto.Hash import keccak as _keccak

from .bytes import BytesLike


def keccak256(data: BytesLike) -> bytes:
    """Return the 32-byte Keccak-256 digest of *data*."""
    if not isinstance(data, (bytes, bytearray, memoryview)):
        raise TypeError("keccak256 expects bytes-like input")
    h = _keccak.new(digest_bits=256)
    h.update(bytes(data))
    return h.digest()


__all__ = ["keccak256"]
