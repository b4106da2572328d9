"""
Domain separator & signing digest
=================================

    domainSeparator = hashStruct(eip712Domain)
    encode(domainSeparator, message) = 0x19 ‖ 0x01 ‖ domainSeparator ‖ hashStruct(message)
    signHash = keccak256(encode(...))

The domain binds a signature to one application/contract/chain and prevents
replay across them. Which domain fields exist is up to the caller;
:class:`Eip712Domain` covers the recommended set (name, version, chainId,
verifyingContract, salt) with every field optional. Any other struct named
``EIP712Domain`` works as well.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Hashable, Optional, Tuple, Union

from .encoding.data import hash_struct
from .encoding.type_hash import TypeHashCache
from .errors import EncodingError
from .types.members import Address, Bytes32, MemberType, String, Uint256
from .types.structs import MemberVisitor, StructType
from .utils.bytes import BytesLike, b, to_hex
from .utils.hash import keccak256

EIP191_PREFIX = b"\x19\x01"
ENCODED_LEN = len(EIP191_PREFIX) + 32 + 32


@dataclass(frozen=True)
class DomainSeparator:
    """32-byte domain hash, opaque once built."""

    value: bytes

    def __post_init__(self) -> None:
        try:
            raw = b(self.value)
        except (TypeError, ValueError) as e:
            raise EncodingError(f"invalid domain separator: {e}") from e
        if len(raw) != 32:
            raise EncodingError("domain separator must be 32 bytes", length=len(raw))
        object.__setattr__(self, "value", raw)

    @classmethod
    def from_bytes(cls, value: Union[BytesLike, str]) -> "DomainSeparator":
        return cls(value)

    @classmethod
    def new(cls, domain: StructType, *, cache: Optional[TypeHashCache] = None) -> "DomainSeparator":
        """Hash a domain struct (e.g. :class:`Eip712Domain`)."""
        return cls(hash_struct(domain, cache=cache))

    def as_bytes(self) -> bytes:
        return self.value

    def hex(self) -> str:
        return to_hex(self.value)


_DOMAIN_FIELDS: Tuple[Tuple[str, str], ...] = (
    ("name", "name"),
    ("version", "version"),
    ("chainId", "chain_id"),
    ("verifyingContract", "verifying_contract"),
    ("salt", "salt"),
)


@dataclass(frozen=True)
class Eip712Domain(StructType):
    """
    The standard domain struct. Omitted (None) fields are left out of both the
    type string and the encoding, so each combination of present fields is its
    own type (see :meth:`type_key`).
    """

    TYPE_NAME = "EIP712Domain"

    name: Optional[Any] = None
    version: Optional[Any] = None
    chain_id: Optional[Any] = None
    verifying_contract: Optional[Any] = None
    salt: Optional[Any] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "name", _coerce(self.name, String))
        object.__setattr__(self, "version", _coerce(self.version, String))
        object.__setattr__(self, "chain_id", _coerce(self.chain_id, Uint256))
        object.__setattr__(self, "verifying_contract", _coerce(self.verifying_contract, Address))
        object.__setattr__(self, "salt", _coerce(self.salt, Bytes32))

    def present(self) -> Tuple[str, ...]:
        return tuple(field for field, attr in _DOMAIN_FIELDS if getattr(self, attr) is not None)

    def type_key(self) -> Hashable:
        return (type(self), self.present())

    def visit_members(self, visitor: MemberVisitor) -> None:
        for field, attr in _DOMAIN_FIELDS:
            value = getattr(self, attr)
            if value is not None:
                visitor.visit(field, value)


def _coerce(value: Any, member_cls: type) -> Optional[MemberType]:
    if value is None or isinstance(value, member_cls):
        return value
    if isinstance(value, MemberType):
        raise EncodingError(
            f"expected {member_cls.TYPE_NAME}, got {value.type_name}",
        )
    return member_cls(value)


def encode(
    domain_separator: DomainSeparator,
    message: StructType,
    *,
    cache: Optional[TypeHashCache] = None,
) -> bytes:
    """The 66-byte pre-image of the signing digest."""
    buf = bytearray(EIP191_PREFIX)
    buf += domain_separator.as_bytes()
    buf += hash_struct(message, cache=cache)
    return bytes(buf)


def sign_hash(
    domain_separator: DomainSeparator,
    message: StructType,
    *,
    cache: Optional[TypeHashCache] = None,
) -> bytes:
    """The 32-byte digest a signer signs."""
    return keccak256(encode(domain_separator, message, cache=cache))


__all__ = [
    "EIP191_PREFIX",
    "ENCODED_LEN",
    "DomainSeparator",
    "Eip712Domain",
    "encode",
    "sign_hash",
]
