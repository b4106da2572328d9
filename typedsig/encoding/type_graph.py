"""
Canonical type encoder
======================

Turns a struct value's schema into the canonical type string that is hashed
into its type hash:

    encodeType(T) = T(type1 name1,...,typeN nameN) ‖ R1(...) ‖ ... ‖ Rk(...)

where R1..Rk are all struct types transitively referenced by T's fields
(excluding T itself), each listed once and sorted ascending by name. Member
lists keep declaration order. For example:

    Transaction(Person from,Person to,Asset tx)Asset(address token,uint256 amount)Person(address wallet,string name)

How the graph walk terminates
-----------------------------
A :class:`TypeGraphBuilder` keeps one *outer* record (the first struct visited,
the root) and a name → record map for every other struct type. A struct's
record is inserted *before* its fields are visited; meeting a name that is
already recorded is a lookup, never a second traversal. That is what makes
self-referential and mutually recursive types terminate.

The same lookup enforces name uniqueness: a recorded name reached through a
value of a different type identity raises :class:`~typedsig.errors.DuplicateTypeName`.
Names of atomic and dynamic member types are recorded too, so a struct named
like one (`uint256`) is rejected whichever field comes first.
Without it, the sort-by-name step would be ambiguous.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Hashable, List, Optional, Set, Tuple

from ..errors import DuplicateTypeName, EncodingError, SchemaError
from ..types.members import MemberKind, as_member
from ..types.structs import StructType


@dataclass(frozen=True)
class Member:
    type: str
    name: str

    def render(self) -> str:
        return f"{self.type} {self.name}"


@dataclass
class EncodedType:
    name: str
    type_key: Hashable
    members: List[Member] = field(default_factory=list)

    def render(self) -> str:
        return f"{self.name}({','.join(m.render() for m in self.members)})"

    def key(self) -> Tuple[str, Hashable, Tuple[Member, ...]]:
        return (self.name, self.type_key, tuple(self.members))


class TypeGraphBuilder:
    """Collects the struct types reachable from one root; used once per encode."""

    def __init__(self) -> None:
        self.outer: Optional[EncodedType] = None
        self.inner: Dict[str, EncodedType] = {}
        # Names of atomic and dynamic member types seen so far.
        self.leaves: Set[str] = set()

    def lookup(self, name: str) -> Optional[EncodedType]:
        if self.outer is not None and self.outer.name == name:
            return self.outer
        return self.inner.get(name)

    def add_struct(self, value: StructType) -> None:
        name = value.type_name
        if self.lookup(name) is not None or name in self.leaves:
            raise DuplicateTypeName(name)

        # Placeholder goes in before the fields are walked.
        record = EncodedType(name=name, type_key=value.type_key())
        if self.outer is None:
            self.outer = record
        else:
            self.inner[name] = record

        value.visit_members(_SchemaVisitor(self, record))

    def referenced(self) -> List[str]:
        """Inner type names in canonical order (UTF-8 byte order, i.e. code point order)."""
        return sorted(self.inner, key=lambda n: n.encode("utf-8"))

    def records(self) -> List[EncodedType]:
        """Outer record first, then inner records in canonical order."""
        if self.outer is None:
            raise SchemaError("no struct type was visited")
        return [self.outer, *(self.inner[n] for n in self.referenced())]

    def schema_key(self) -> Hashable:
        """Identity of the whole collected graph: every record's name, type key and members."""
        return tuple(r.key() for r in self.records())

    def render(self) -> str:
        return "".join(r.render() for r in self.records())


class _SchemaVisitor:
    __slots__ = ("_builder", "_record")

    def __init__(self, builder: TypeGraphBuilder, record: EncodedType) -> None:
        self._builder = builder
        self._record = record

    def visit(self, name: str, value: Any) -> None:
        member = as_member(value)
        type_name = member.type_name
        self._record.members.append(Member(type=type_name, name=name))

        existing = self._builder.lookup(type_name)
        if existing is not None:
            if member.KIND is not MemberKind.REFERENCE or existing.type_key != member.type_key():
                raise DuplicateTypeName(type_name)
            return

        if member.KIND is not MemberKind.REFERENCE:
            self._builder.leaves.add(type_name)
            return

        member.add_members(self._builder)


def build_type_graph(value: StructType) -> TypeGraphBuilder:
    if not isinstance(value, StructType):
        raise EncodingError("encode_type expects a struct value", got=type(value).__name__)
    builder = TypeGraphBuilder()
    value.add_members(builder)
    if builder.outer is None or builder.outer.name != value.type_name:
        raise SchemaError("root struct was not recorded first", type_name=value.type_name)
    return builder


def encode_type(value: StructType) -> str:
    """Canonical type string of *value*'s struct type (root first, then references sorted)."""
    return build_type_graph(value).render()


__all__ = ["Member", "EncodedType", "TypeGraphBuilder", "build_type_graph", "encode_type"]
