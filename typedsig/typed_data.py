"""
typedsig.typed_data
===================

Typed-data documents in the JSON shape used by wallets (``eth_signTypedData``):

    {
      "types": {
        "EIP712Domain": [{"name": "name", "type": "string"}, ...],
        "Person": [{"name": "name", "type": "string"}, {"name": "wallet", "type": "address"}],
        "Mail": [{"name": "from", "type": "Person"}, ...]
      },
      "primaryType": "Mail",
      "domain": {"name": "Ether Mail", ...},
      "message": {"from": {"name": "Cow", "wallet": "0x..."}, ...}
    }

The document is turned into :class:`TypedStruct` values, which implement the
same traversal protocol as hand-written struct classes, so hashing and signing
go through the regular pipeline.

Supported member types: ``string``, ``address``, ``bool``, ``uintN``, ``intN``,
``bytesN`` and declared struct names. Array types and dynamic ``bytes`` are not
supported and raise :class:`~typedsig.errors.EncodingError`.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from typing import Any, Dict, Hashable, List, Mapping, Optional, Sequence, Tuple, Union

from .domain import DomainSeparator, encode, sign_hash
from .encoding.data import hash_struct
from .encoding.type_graph import encode_type
from .encoding.type_hash import TypeHashCache, type_hash
from .errors import EncodingError
from .signer import PrivateKeyLike, TypedSignature, recover_address, sign_digest
from .types.members import (Address, Bool, MemberType, String, fixed_bytes_type,
                            int_type, uint_type)
from .types.structs import MemberVisitor, StructType
from .utils.bytes import BytesLike

DOMAIN_TYPE = "EIP712Domain"

Schema = Dict[str, Tuple[Tuple[str, str], ...]]

_INT_RE = re.compile(r"^(u?int)(\d+)$")
_BYTES_RE = re.compile(r"^bytes(\d+)$")


class TypedStruct(StructType):
    """A struct value whose type is declared by a typed-data document."""

    def __init__(
        self,
        type_name: str,
        members: Sequence[Tuple[str, MemberType]],
        schema_key: Hashable,
    ) -> None:
        self._type_name = type_name
        self._members = tuple(members)
        self._schema_key = schema_key

    @property
    def type_name(self) -> str:
        return self._type_name

    def type_key(self) -> Hashable:
        # Same name under the same document schema is the same type.
        return ("typed-data", self._type_name, self._schema_key)

    def visit_members(self, visitor: MemberVisitor) -> None:
        for name, value in self._members:
            visitor.visit(name, value)

    def __getitem__(self, name: str) -> MemberType:
        for n, v in self._members:
            if n == name:
                return v
        raise KeyError(name)

    def __repr__(self) -> str:
        inner = ", ".join(f"{n}={v!r}" for n, v in self._members)
        return f"{self._type_name}({inner})"


# ---------------------------------------------------------------------------
# Schema parsing
# ---------------------------------------------------------------------------


def parse_types(raw: Any) -> Schema:
    if not isinstance(raw, Mapping):
        raise EncodingError("'types' must be an object")
    out: Schema = {}
    for type_name, fields in raw.items():
        if not isinstance(type_name, str) or not type_name:
            raise EncodingError("type names must be non-empty strings")
        if not isinstance(fields, list):
            raise EncodingError("type fields must be a list", type_name=type_name)
        members: List[Tuple[str, str]] = []
        seen = set()
        for f in fields:
            if not isinstance(f, Mapping):
                raise EncodingError("field entries must be objects", type_name=type_name)
            name, ftype = f.get("name"), f.get("type")
            if not isinstance(name, str) or not isinstance(ftype, str):
                raise EncodingError("field entries need string 'name' and 'type'", type_name=type_name)
            if name in seen:
                raise EncodingError("duplicate field name", type_name=type_name, field=name)
            seen.add(name)
            members.append((name, ftype))
        out[type_name] = tuple(members)
    if DOMAIN_TYPE not in out:
        raise EncodingError(f"'types' must declare {DOMAIN_TYPE}")
    return out


class _ValueBuilder:
    def __init__(self, schema: Schema) -> None:
        self._schema = schema
        self._key: Hashable = tuple(sorted(schema.items()))

    def struct(self, type_name: str, obj: Any, path: str) -> TypedStruct:
        if not isinstance(obj, Mapping):
            raise EncodingError(f"{path}: expected an object for {type_name}")
        members: List[Tuple[str, MemberType]] = []
        for fname, ftype in self._schema[type_name]:
            if fname not in obj:
                raise EncodingError(f"{path}: missing field '{fname}'", type_name=type_name)
            members.append((fname, self.member(ftype, obj[fname], f"{path}.{fname}")))
        return TypedStruct(type_name, members, self._key)

    def member(self, ftype: str, value: Any, path: str) -> MemberType:
        if ftype.endswith("]"):
            raise EncodingError(f"{path}: array types are not supported", type=ftype)
        if ftype in self._schema:
            return self.struct(ftype, value, path)
        if ftype == "string":
            if not isinstance(value, str):
                raise EncodingError(f"{path}: expected a string")
            return String(value)
        if ftype == "bytes":
            raise EncodingError(f"{path}: dynamic 'bytes' is not supported")
        if ftype == "address":
            return _wrap(Address, value, path)
        if ftype == "bool":
            if not isinstance(value, bool):
                raise EncodingError(f"{path}: expected true/false")
            return Bool(value)
        m = _INT_RE.match(ftype)
        if m:
            try:
                cls = (uint_type if m.group(1) == "uint" else int_type)(int(m.group(2)))
            except ValueError as e:
                raise EncodingError(f"{path}: {e}", type=ftype) from e
            return _wrap(cls, _parse_int(value, path), path)
        m = _BYTES_RE.match(ftype)
        if m:
            try:
                cls = fixed_bytes_type(int(m.group(1)))
            except ValueError as e:
                raise EncodingError(f"{path}: {e}", type=ftype) from e
            return _wrap(cls, value, path)
        raise EncodingError(f"{path}: unknown type '{ftype}'")


def _wrap(cls: type, value: Any, path: str) -> MemberType:
    try:
        return cls(value)
    except EncodingError as e:
        raise EncodingError(f"{path}: {e.message}", **e.data) from e


def _parse_int(value: Any, path: str) -> int:
    if isinstance(value, bool):
        raise EncodingError(f"{path}: expected an integer")
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        s = value.strip()
        try:
            if s.lower().startswith(("0x", "-0x")):
                return int(s, 16)
            return int(s, 10)
        except ValueError as e:
            raise EncodingError(f"{path}: invalid integer {value!r}") from e
    raise EncodingError(f"{path}: expected an integer")


# ---------------------------------------------------------------------------
# Document
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class TypedData:
    types: Schema
    primary_type: str
    domain: TypedStruct
    message: TypedStruct

    @classmethod
    def from_dict(cls, obj: Mapping[str, Any]) -> "TypedData":
        if not isinstance(obj, Mapping):
            raise EncodingError("typed data must be an object")
        for key in ("types", "primaryType", "domain", "message"):
            if key not in obj:
                raise EncodingError(f"typed data is missing '{key}'")
        schema = parse_types(obj["types"])
        primary = obj["primaryType"]
        if not isinstance(primary, str) or primary not in schema:
            raise EncodingError("primaryType must name a declared type", primary_type=str(primary))
        builder = _ValueBuilder(schema)
        return cls(
            types=schema,
            primary_type=primary,
            domain=builder.struct(DOMAIN_TYPE, obj["domain"], "domain"),
            message=builder.struct(primary, obj["message"], "message"),
        )

    @classmethod
    def from_json(cls, text: Union[str, bytes]) -> "TypedData":
        try:
            obj = json.loads(text)
        except ValueError as e:
            raise EncodingError(f"invalid JSON: {e}") from e
        return cls.from_dict(obj)

    def domain_separator(self, *, cache: Optional[TypeHashCache] = None) -> DomainSeparator:
        return DomainSeparator.new(self.domain, cache=cache)

    def encode_type(self) -> str:
        return encode_type(self.message)

    def type_hash(self, *, cache: Optional[TypeHashCache] = None) -> bytes:
        return type_hash(self.message, cache=cache)

    def struct_hash(self, *, cache: Optional[TypeHashCache] = None) -> bytes:
        return hash_struct(self.message, cache=cache)

    def encode(self, *, cache: Optional[TypeHashCache] = None) -> bytes:
        return encode(self.domain_separator(cache=cache), self.message, cache=cache)

    def sign_hash(self, *, cache: Optional[TypeHashCache] = None) -> bytes:
        return sign_hash(self.domain_separator(cache=cache), self.message, cache=cache)

    def sign(
        self,
        private_key: PrivateKeyLike,
        *,
        recovery_offset: Optional[int] = None,
        cache: Optional[TypeHashCache] = None,
    ) -> TypedSignature:
        return sign_digest(self.sign_hash(cache=cache), private_key, recovery_offset=recovery_offset)

    def recover(
        self,
        signature: Union[TypedSignature, BytesLike, str],
        v: Optional[int] = None,
        *,
        recovery_offset: Optional[int] = None,
        cache: Optional[TypeHashCache] = None,
    ) -> Address:
        return recover_address(self.sign_hash(cache=cache), signature, v, recovery_offset=recovery_offset)


__all__ = ["DOMAIN_TYPE", "TypedStruct", "TypedData", "parse_types"]
