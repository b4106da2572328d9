"""
typedsig.types.members
======================

Member value types and their 32-byte encodings.

Every field value of a struct is one of three kinds (a closed family, see
:class:`MemberKind`):

- **atomic**    fixed-width values encoded directly into one 32-byte word:
                ``bytes1``..``bytes32``, ``address``, ``uint8``..``uint256``,
                ``int8``..``int256`` and ``bool``.
- **dynamic**   variable-length content whose encoding is the Keccak-256 of the
                content: ``string``.
- **reference** nested struct values (see :mod:`typedsig.types.structs`); they
                encode as their own struct hash.

Each member exposes ``type_name`` (the canonical name used in type strings),
``encode_data()`` (exactly 32 bytes) and ``add_members(builder)`` which is a
no-op for atomic and dynamic values: they are leaves of the type graph.

Fixed byte strings are right-aligned in the 32-byte word (high-order bytes
zero), the same layout used for addresses.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from typing import TYPE_CHECKING, Any, ClassVar, Type, Union

from ..errors import EncodingError
from ..utils.bytes import b, int_to_be, left_pad, to_hex
from ..utils.hash import keccak256

if TYPE_CHECKING:  # pragma: no cover
    from ..encoding.type_graph import TypeGraphBuilder

WORD = 32
ADDRESS_LEN = 20


class MemberKind(str, Enum):
    ATOMIC = "atomic"
    DYNAMIC = "dynamic"
    REFERENCE = "reference"


class MemberType:
    """Base of every value that may appear as a struct field."""

    KIND: ClassVar[MemberKind]
    TYPE_NAME: ClassVar[str]

    @property
    def type_name(self) -> str:
        return self.TYPE_NAME

    def encode_data(self) -> bytes:
        raise NotImplementedError

    def add_members(self, builder: "TypeGraphBuilder") -> None:
        # Atomic and dynamic values are leaves of the type graph.
        return None


class AtomicType(MemberType):
    KIND = MemberKind.ATOMIC


class DynamicType(MemberType):
    KIND = MemberKind.DYNAMIC


# ---------------------------------------------------------------------------
# Atomic: address
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Address(AtomicType):
    """20-byte account or contract address."""

    TYPE_NAME: ClassVar[str] = "address"

    value: bytes

    def __post_init__(self) -> None:
        object.__setattr__(self, "value", _fixed(self.value, ADDRESS_LEN, self.TYPE_NAME))

    @classmethod
    def from_hex(cls, h: str) -> "Address":
        return cls(_parse_hex(h, cls.TYPE_NAME))

    def encode_data(self) -> bytes:
        return left_pad(self.value, WORD)

    def __str__(self) -> str:
        return to_hex(self.value)


# ---------------------------------------------------------------------------
# Atomic: fixed-size byte strings
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class FixedBytes(AtomicType):
    """Base for ``bytesN``; concrete classes set SIZE (1..32)."""

    TYPE_NAME: ClassVar[str] = "bytesN"
    SIZE: ClassVar[int] = 0

    value: bytes

    def __post_init__(self) -> None:
        object.__setattr__(self, "value", _fixed(self.value, self.SIZE, self.TYPE_NAME))

    @classmethod
    def from_hex(cls, h: str) -> "FixedBytes":
        return cls(_parse_hex(h, cls.TYPE_NAME))

    def encode_data(self) -> bytes:
        return left_pad(self.value, WORD)

    def __str__(self) -> str:
        return to_hex(self.value)


@lru_cache(maxsize=None)
def fixed_bytes_type(size: int) -> Type[FixedBytes]:
    """Return the (unique) ``bytes{size}`` class."""
    if not isinstance(size, int) or not 1 <= size <= WORD:
        raise ValueError(f"bytesN size must be in 1..32, got {size!r}")
    return type(
        f"Bytes{size}",
        (FixedBytes,),
        {"SIZE": size, "TYPE_NAME": f"bytes{size}", "__module__": __name__},
    )


Bytes1 = fixed_bytes_type(1)
Bytes2 = fixed_bytes_type(2)
Bytes3 = fixed_bytes_type(3)
Bytes4 = fixed_bytes_type(4)
Bytes5 = fixed_bytes_type(5)
Bytes6 = fixed_bytes_type(6)
Bytes7 = fixed_bytes_type(7)
Bytes8 = fixed_bytes_type(8)
Bytes9 = fixed_bytes_type(9)
Bytes10 = fixed_bytes_type(10)
Bytes11 = fixed_bytes_type(11)
Bytes12 = fixed_bytes_type(12)
Bytes13 = fixed_bytes_type(13)
Bytes14 = fixed_bytes_type(14)
Bytes15 = fixed_bytes_type(15)
Bytes16 = fixed_bytes_type(16)
Bytes17 = fixed_bytes_type(17)
Bytes18 = fixed_bytes_type(18)
Bytes19 = fixed_bytes_type(19)
Bytes20 = fixed_bytes_type(20)
Bytes21 = fixed_bytes_type(21)
Bytes22 = fixed_bytes_type(22)
Bytes23 = fixed_bytes_type(23)
Bytes24 = fixed_bytes_type(24)
Bytes25 = fixed_bytes_type(25)
Bytes26 = fixed_bytes_type(26)
Bytes27 = fixed_bytes_type(27)
Bytes28 = fixed_bytes_type(28)
Bytes29 = fixed_bytes_type(29)
Bytes30 = fixed_bytes_type(30)
Bytes31 = fixed_bytes_type(31)
Bytes32 = fixed_bytes_type(32)


# ---------------------------------------------------------------------------
# Atomic: integers and bool
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Uint(AtomicType):
    """Base for ``uintN``; concrete classes set BITS (8..256, step 8)."""

    TYPE_NAME: ClassVar[str] = "uint256"
    BITS: ClassVar[int] = 256

    value: int

    def __post_init__(self) -> None:
        v = self.value
        if not isinstance(v, int) or isinstance(v, bool):
            raise EncodingError(f"{self.TYPE_NAME} expects int", got=type(v).__name__)
        if not 0 <= v < (1 << self.BITS):
            raise EncodingError(f"value out of range for {self.TYPE_NAME}", value=str(v))

    @classmethod
    def from_bytes(cls, data: Union[bytes, bytearray, str]) -> "Uint":
        """Build from a big-endian byte string of at most 32 bytes."""
        raw = _bytes_or_hex(data, cls.TYPE_NAME)
        if len(raw) > WORD:
            raise EncodingError(f"{cls.TYPE_NAME} takes at most 32 bytes", length=len(raw))
        return cls(int.from_bytes(raw, "big"))

    def encode_data(self) -> bytes:
        return int_to_be(self.value, length=WORD)


@dataclass(frozen=True)
class Int(AtomicType):
    """Base for ``intN``; two's complement, sign-extended to 32 bytes."""

    TYPE_NAME: ClassVar[str] = "int256"
    BITS: ClassVar[int] = 256

    value: int

    def __post_init__(self) -> None:
        v = self.value
        if not isinstance(v, int) or isinstance(v, bool):
            raise EncodingError(f"{self.TYPE_NAME} expects int", got=type(v).__name__)
        bound = 1 << (self.BITS - 1)
        if not -bound <= v < bound:
            raise EncodingError(f"value out of range for {self.TYPE_NAME}", value=str(v))

    def encode_data(self) -> bytes:
        return int_to_be(self.value, length=WORD, signed=True)


def _check_bits(bits: int) -> None:
    if not isinstance(bits, int) or bits % 8 or not 8 <= bits <= 256:
        raise ValueError(f"integer width must be a multiple of 8 in 8..256, got {bits!r}")


@lru_cache(maxsize=None)
def uint_type(bits: int) -> Type[Uint]:
    """Return the (unique) ``uint{bits}`` class."""
    _check_bits(bits)
    return type(f"Uint{bits}", (Uint,), {"BITS": bits, "TYPE_NAME": f"uint{bits}", "__module__": __name__})


@lru_cache(maxsize=None)
def int_type(bits: int) -> Type[Int]:
    """Return the (unique) ``int{bits}`` class."""
    _check_bits(bits)
    return type(f"Int{bits}", (Int,), {"BITS": bits, "TYPE_NAME": f"int{bits}", "__module__": __name__})


Uint8 = uint_type(8)
Uint16 = uint_type(16)
Uint32 = uint_type(32)
Uint64 = uint_type(64)
Uint128 = uint_type(128)
Uint256 = uint_type(256)

Int8 = int_type(8)
Int16 = int_type(16)
Int32 = int_type(32)
Int64 = int_type(64)
Int128 = int_type(128)
Int256 = int_type(256)


@dataclass(frozen=True)
class Bool(AtomicType):
    TYPE_NAME: ClassVar[str] = "bool"

    value: bool

    def __post_init__(self) -> None:
        if not isinstance(self.value, bool):
            raise EncodingError("bool expects True/False", got=type(self.value).__name__)

    def encode_data(self) -> bytes:
        return int_to_be(int(self.value), length=WORD)


# ---------------------------------------------------------------------------
# Dynamic: string
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class String(DynamicType):
    """UTF-8 text; encodes as keccak256 of its bytes."""

    TYPE_NAME: ClassVar[str] = "string"

    value: str

    def __post_init__(self) -> None:
        if not isinstance(self.value, str):
            raise EncodingError("string expects str", got=type(self.value).__name__)

    def encode_data(self) -> bytes:
        return keccak256(self.value.encode("utf-8"))

    def __str__(self) -> str:
        return self.value


# ---------------------------------------------------------------------------
# Coercion & helpers
# ---------------------------------------------------------------------------


def as_member(value: Any) -> MemberType:
    """
    Normalize a visited field value into a MemberType.

    Plain ``str`` becomes :class:`String` and plain ``bool`` becomes
    :class:`Bool`; integers and bytes are ambiguous (which width?) and must be
    wrapped explicitly.
    """
    if isinstance(value, MemberType):
        return value
    if isinstance(value, str):
        return String(value)
    if isinstance(value, bool):
        return Bool(value)
    raise EncodingError(
        "field value must be a typed member (wrap ints/bytes in Uint256, Address, ...)",
        got=type(value).__name__,
    )


def _fixed(value: Any, size: int, type_name: str) -> bytes:
    raw = _bytes_or_hex(value, type_name)
    if len(raw) != size:
        raise EncodingError(f"{type_name} must be {size} bytes", length=len(raw))
    return raw


def _bytes_or_hex(value: Any, type_name: str) -> bytes:
    try:
        return b(value)
    except (TypeError, ValueError) as e:
        raise EncodingError(f"invalid {type_name} value: {e}") from e


def _parse_hex(h: str, type_name: str) -> bytes:
    if not isinstance(h, str):
        raise EncodingError(f"{type_name} hex must be str", got=type(h).__name__)
    return _bytes_or_hex(h, type_name)


__all__ = [
    "WORD",
    "MemberKind",
    "MemberType",
    "AtomicType",
    "DynamicType",
    "Address",
    "FixedBytes",
    "fixed_bytes_type",
    *[f"Bytes{n}" for n in range(1, 33)],
    "Uint",
    "Int",
    "uint_type",
    "int_type",
    "Uint8", "Uint16", "Uint32", "Uint64", "Uint128", "Uint256",
    "Int8", "Int16", "Int32", "Int64", "Int128", "Int256",
    "Bool",
    "String",
    "as_member",
]
