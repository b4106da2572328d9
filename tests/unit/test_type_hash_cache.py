# SPDX-License-Identifier: Apache-2.0
"""
Type-hash memoization:

- keccak256 of the canonical type string, computed once per schema (the whole reachable type graph)
- independent of field values
- concurrent first use yields one stored value
"""
from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor

from typedsig.domain import Eip712Domain
from typedsig.encoding import TypeHashCache, default_cache, encode_type, hash_struct, type_hash
from typedsig.types import Address, Uint8, Uint256
from typedsig.utils import keccak256, to_hex

from tests.unit._structs import Envelope, Named, Person, cow_to_bob


def test_type_hash_vector(cache, vectors):
    mail = cow_to_bob()
    th = type_hash(mail, cache=cache)
    assert to_hex(th) == vectors["type_hash"]
    assert th == keccak256(encode_type(mail).encode("utf-8"))


def test_computed_once_per_type(cache):
    mail = cow_to_bob()
    first = type_hash(mail, cache=cache)
    second = type_hash(mail, cache=cache)
    assert first == second
    assert cache.misses == 1
    assert cache.hits == 1
    assert len(cache) == 1
    assert mail in cache


def test_independent_of_values(cache):
    a = Person("Alice", Address(b"\x01" * 20))
    b = Person("Bob", Address(b"\x02" * 20))
    assert type_hash(a, cache=cache) == type_hash(b, cache=cache)
    assert cache.misses == 1


def test_hash_struct_fills_nested_types(cache):
    mail = cow_to_bob()
    hash_struct(mail, cache=cache)
    assert mail in cache
    assert mail.sender in cache
    assert len(cache) == 2


def test_domain_shapes_are_distinct_types(cache):
    short = Eip712Domain(name="App")
    full = Eip712Domain(name="App", chain_id=1)
    assert type_hash(short, cache=cache) != type_hash(full, cache=cache)
    assert type_hash(Eip712Domain(name="Other"), cache=cache) == type_hash(short, cache=cache)
    assert len(cache) == 2


def test_caches_are_isolated(cache):
    other = TypeHashCache()
    mail = cow_to_bob()
    assert type_hash(mail, cache=cache) == type_hash(mail, cache=other)
    assert cache.misses == 1
    assert other.misses == 1


def test_clear(cache):
    type_hash(cow_to_bob(), cache=cache)
    cache.clear()
    assert len(cache) == 0
    assert cache.hits == cache.misses == 0


def test_default_cache_is_shared():
    assert default_cache() is default_cache()
    mail = cow_to_bob()
    assert type_hash(mail) == type_hash(mail, cache=TypeHashCache())
    assert mail in default_cache()


def test_concurrent_first_use(cache):
    mails = [cow_to_bob() for _ in range(64)]
    with ThreadPoolExecutor(max_workers=8) as pool:
        results = list(pool.map(lambda m: type_hash(m, cache=cache), mails))
    assert len(set(results)) == 1
    assert len(cache) == 1


def test_nested_domain_shape_is_part_of_the_key(cache):
    short = Envelope(Eip712Domain(name="A"))
    longer = Envelope(Eip712Domain(name="A", chain_id=1))

    first = type_hash(short, cache=cache)
    second = type_hash(longer, cache=cache)

    assert first != second
    assert second == keccak256(encode_type(longer).encode("utf-8"))
    assert encode_type(longer) == "Envelope(EIP712Domain domain)EIP712Domain(string name,uint256 chainId)"
    assert cache.misses == 2


def test_member_width_is_part_of_the_key(cache):
    narrow = Named("Slot", [("v", Uint8(1))], key="slot")
    wide = Named("Slot", [("v", Uint256(1))], key="slot")
    assert type_hash(narrow, cache=cache) == keccak256(b"Slot(uint8 v)")
    assert type_hash(wide, cache=cache) == keccak256(b"Slot(uint256 v)")


def test_shared_cache_keeps_nested_shapes_apart(cache):
    from typedsig.domain import DomainSeparator, sign_hash

    ds = DomainSeparator(b"\x22" * 32)
    short = Envelope(Eip712Domain(name="A"))
    longer = Envelope(Eip712Domain(name="A", chain_id=1))
    sign_hash(ds, short, cache=cache)
    assert hash_struct(longer, cache=cache) == hash_struct(longer, cache=TypeHashCache())


def test_concurrent_hits_are_counted(cache):
    mail = cow_to_bob()
    type_hash(mail, cache=cache)
    with ThreadPoolExecutor(max_workers=8) as pool:
        list(pool.map(lambda _: type_hash(mail, cache=cache), range(200)))
    assert cache.misses == 1
    assert cache.hits == 200


def test_non_struct_is_never_contained(cache):
    assert "Mail" not in cache
