"""
Data encoder
============

    encodeData(s) = typeHash(s) ‖ enc(member1) ‖ ... ‖ enc(memberN)
    hashStruct(s) = keccak256(encodeData(s))

Members are encoded in declaration order and each contributes exactly one
32-byte word: atomic and dynamic values their own encoding, nested structs
their struct hash (never their raw encodeData).
"""

from __future__ import annotations

from typing import Any, Optional, Set

from ..errors import EncodingError
from ..types.members import WORD, MemberKind, as_member
from ..types.structs import StructType
from ..utils.hash import keccak256
from .type_hash import TypeHashCache, type_hash


def encode_data(value: StructType, *, cache: Optional[TypeHashCache] = None) -> bytes:
    """Type hash followed by one 32-byte word per member."""
    return _encode(value, cache, set())


def hash_struct(value: StructType, *, cache: Optional[TypeHashCache] = None) -> bytes:
    """``keccak256(encode_data(value))``; the type hash is already part of encode_data."""
    return keccak256(encode_data(value, cache=cache))


def _encode(value: StructType, cache: Optional[TypeHashCache], active: Set[int]) -> bytes:
    if not isinstance(value, StructType):
        raise EncodingError("encode_data expects a struct value", got=type(value).__name__)

    # Struct values on the current path; an object graph that contains itself has no finite hash.
    marker = id(value)
    if marker in active:
        raise EncodingError("cyclic struct value", type_name=value.type_name)
    active.add(marker)
    try:
        buf = bytearray(type_hash(value, cache=cache))
        value.visit_members(_DataVisitor(buf, cache, active))
    finally:
        active.discard(marker)
    return bytes(buf)


class _DataVisitor:
    __slots__ = ("_buf", "_cache", "_active")

    def __init__(self, buf: bytearray, cache: Optional[TypeHashCache], active: Set[int]) -> None:
        self._buf = buf
        self._cache = cache
        self._active = active

    def visit(self, name: str, value: Any) -> None:
        member = as_member(value)
        if member.KIND is MemberKind.REFERENCE:
            word = keccak256(_encode(member, self._cache, self._active))
        else:
            word = member.encode_data()
        if len(word) != WORD:
            raise EncodingError(
                "member encoding must be 32 bytes",
                member=name,
                type_name=member.type_name,
                length=len(word),
            )
        self._buf += word


__all__ = ["encode_data", "hash_struct"]
