"""
typedsig.types.structs
======================

Struct values and the member traversal protocol.

A struct class declares a ``TYPE_NAME`` and implements ``visit_members``,
calling ``visitor.visit(name, value)`` once per field in declaration order.
That single method drives both the type-graph walk (schema) and the data
encoder (values); no reflection over attributes is performed.

Example
-------
    @dataclass
    class Person(StructType):
        TYPE_NAME = "Person"
        name: str
        wallet: Address

        def visit_members(self, visitor):
            visitor.visit("name", self.name)
            visitor.visit("wallet", self.wallet)

Field names are the on-chain (usually camelCase) names, not Python attribute
names.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Hashable, Protocol

from .members import MemberKind, MemberType

if TYPE_CHECKING:  # pragma: no cover
    from ..encoding.type_graph import TypeGraphBuilder


class MemberVisitor(Protocol):
    def visit(self, name: str, value: Any) -> None: ...


class StructType(MemberType):
    """Base class for struct (reference) values."""

    KIND = MemberKind.REFERENCE

    def visit_members(self, visitor: MemberVisitor) -> None:
        """Call ``visitor.visit(name, value)`` for each field, in declaration order."""
        raise NotImplementedError(f"{type(self).__name__} must implement visit_members")

    def type_key(self) -> Hashable:
        """
        Identity of this value's concrete type.

        The class itself by default. Classes whose field set varies per instance
        must return a key that distinguishes each schema.
        """
        return type(self)

    def add_members(self, builder: "TypeGraphBuilder") -> None:
        builder.add_struct(self)

    def encode_data(self) -> bytes:
        # As a field of another struct, a nested struct collapses to its hash.
        from ..encoding.data import hash_struct

        return hash_struct(self)


__all__ = ["MemberVisitor", "StructType"]
