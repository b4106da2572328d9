# SPDX-License-Identifier: Apache-2.0
"""
Hand-written struct classes shared by the unit tests.

Field names follow the on-chain names (``from`` is a Python keyword, hence
``sender`` as the attribute).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Hashable, List, Optional, Tuple

from typedsig.types import Address, StructType, Uint256

COW = "0xCD2a3d9F938E13CD947Ec05AbC7FE734Df8DD826"
BOB = "0xbBbBBBBbbBBBbbbBbbBbbbbBBbBbbbbBbBbbBBbB"
VERIFYING_CONTRACT = "0xCcCCccccCCCCcCCCCCCcCcCccCcCCCcCcccccccC"


@dataclass
class Person(StructType):
    TYPE_NAME = "Person"

    name: str
    wallet: Address

    def visit_members(self, visitor) -> None:
        visitor.visit("name", self.name)
        visitor.visit("wallet", self.wallet)


@dataclass
class Mail(StructType):
    TYPE_NAME = "Mail"

    sender: Person
    to: Person
    contents: str

    def visit_members(self, visitor) -> None:
        visitor.visit("from", self.sender)
        visitor.visit("to", self.to)
        visitor.visit("contents", self.contents)


def cow_to_bob() -> Mail:
    return Mail(
        sender=Person("Cow", Address.from_hex(COW)),
        to=Person("Bob", Address.from_hex(BOB)),
        contents="Hello, Bob!",
    )


# Transaction/Asset/Person(wallet, name): a second Person shape, used on its own.


@dataclass
class WalletPerson(StructType):
    TYPE_NAME = "Person"

    wallet: Address
    name: str

    def visit_members(self, visitor) -> None:
        visitor.visit("wallet", self.wallet)
        visitor.visit("name", self.name)


@dataclass
class Asset(StructType):
    TYPE_NAME = "Asset"

    token: Address
    amount: Uint256

    def visit_members(self, visitor) -> None:
        visitor.visit("token", self.token)
        visitor.visit("amount", self.amount)


@dataclass
class Transaction(StructType):
    TYPE_NAME = "Transaction"

    sender: WalletPerson
    to: WalletPerson
    tx: Asset

    def visit_members(self, visitor) -> None:
        visitor.visit("from", self.sender)
        visitor.visit("to", self.to)
        visitor.visit("tx", self.tx)


def sample_transaction() -> Transaction:
    return Transaction(
        sender=WalletPerson(Address.from_hex(COW), "Cow"),
        to=WalletPerson(Address.from_hex(BOB), "Bob"),
        tx=Asset(Address.from_hex(VERIFYING_CONTRACT), Uint256(10**18)),
    )


# Recursive shapes. Values are linked after construction, so they form object cycles.


@dataclass(eq=False)
class Node(StructType):
    TYPE_NAME = "Node"

    label: str
    next: Optional["Node"] = None

    def visit_members(self, visitor) -> None:
        visitor.visit("label", self.label)
        visitor.visit("next", self.next)


@dataclass(eq=False)
class Left(StructType):
    TYPE_NAME = "Left"

    right: Optional["Right"] = None

    def visit_members(self, visitor) -> None:
        visitor.visit("right", self.right)


@dataclass(eq=False)
class Right(StructType):
    TYPE_NAME = "Right"

    left: Optional[Left] = None

    def visit_members(self, visitor) -> None:
        visitor.visit("left", self.left)


class Named(StructType):
    """A struct whose name and members are chosen per instance."""

    def __init__(self, type_name: str, members: List[Tuple[str, Any]], key: Hashable = None) -> None:
        self._type_name = type_name
        self._members = members
        self._key = key if key is not None else ("named", type_name)

    @property
    def type_name(self) -> str:
        return self._type_name

    def type_key(self) -> Hashable:
        return self._key

    def visit_members(self, visitor) -> None:
        for name, value in self._members:
            visitor.visit(name, value)


@dataclass
class Holder(StructType):
    """Root with an arbitrary list of fields, for ad-hoc graphs."""

    TYPE_NAME = "Holder"

    fields: List[Tuple[str, Any]] = field(default_factory=list)

    def type_key(self) -> Hashable:
        # Field sets vary per instance.
        return (Holder, tuple((n, getattr(v, "type_name", type(v).__name__)) for n, v in self.fields))

    def visit_members(self, visitor) -> None:
        for name, value in self.fields:
            visitor.visit(name, value)


@dataclass
class Envelope(StructType):
    """Wraps a domain whose shape depends on which fields are present."""

    TYPE_NAME = "Envelope"

    domain: Any

    def visit_members(self, visitor) -> None:
        visitor.visit("domain", self.domain)
