"""
Utility helpers.

Re-exports:
- bytes: hex helpers, padding, integer conversion, zeroize
- hash: Keccak-256
"""

from .bytes import b, from_hex, int_to_be, left_pad, to_hex, zeroize
from .hash import keccak256

__all__ = [
    # bytes
    "b",
    "to_hex",
    "from_hex",
    "left_pad",
    "int_to_be",
    "zeroize",
    # hash
    "keccak256",
]
