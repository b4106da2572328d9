# SPDX-License-Identifier: Apache-2.0
"""
Domain separator and the 66-byte signing pre-image:

    0x19 ‖ 0x01 ‖ domainSeparator ‖ hashStruct(message)
"""
from __future__ import annotations

import pytest

from typedsig.domain import EIP191_PREFIX, ENCODED_LEN, DomainSeparator, Eip712Domain, encode, sign_hash
from typedsig.encoding import encode_type, hash_struct
from typedsig.errors import EncodingError
from typedsig.types import Address, Bytes32, String, Uint256
from typedsig.utils import keccak256, to_hex

from tests.unit._structs import VERIFYING_CONTRACT, cow_to_bob


def test_domain_type_string(ether_mail_domain):
    assert encode_type(ether_mail_domain) == (
        "EIP712Domain(string name,string version,uint256 chainId,address verifyingContract)"
    )


def test_domain_separator_vector(domain_separator, vectors):
    assert domain_separator.hex() == vectors["domain_separator"]
    assert len(domain_separator.as_bytes()) == 32


def test_domain_fields_are_coerced(ether_mail_domain):
    assert ether_mail_domain.name == String("Ether Mail")
    assert ether_mail_domain.chain_id == Uint256(1)
    assert ether_mail_domain.verifying_contract == Address.from_hex(VERIFYING_CONTRACT)
    assert ether_mail_domain.present() == ("name", "version", "chainId", "verifyingContract")


def test_omitted_fields_leave_the_type():
    d = Eip712Domain(chain_id=5, salt=b"\x11" * 32)
    assert encode_type(d) == "EIP712Domain(uint256 chainId,bytes32 salt)"
    assert d.salt == Bytes32(b"\x11" * 32)


def test_empty_domain():
    assert encode_type(Eip712Domain()) == "EIP712Domain()"


def test_domain_field_type_mismatch():
    with pytest.raises(EncodingError):
        Eip712Domain(name=Uint256(1))
    with pytest.raises(EncodingError):
        Eip712Domain(chain_id=-1)


def test_separator_from_bytes(domain_separator):
    again = DomainSeparator.from_bytes(domain_separator.hex())
    assert again == domain_separator
    with pytest.raises(EncodingError):
        DomainSeparator(b"\x00" * 31)
    with pytest.raises(EncodingError):
        DomainSeparator.from_bytes("0xnothex")


def test_encode_layout(domain_separator, cache):
    mail = cow_to_bob()
    pre = encode(domain_separator, mail, cache=cache)
    assert len(pre) == ENCODED_LEN == 66
    assert pre[:2] == EIP191_PREFIX == b"\x19\x01"
    assert pre[2:34] == domain_separator.as_bytes()
    assert pre[34:] == hash_struct(mail, cache=cache)


def test_sign_hash_vector(domain_separator, cache, vectors):
    mail = cow_to_bob()
    digest = sign_hash(domain_separator, mail, cache=cache)
    assert to_hex(digest) == vectors["sign_hash"]
    assert digest == keccak256(encode(domain_separator, mail, cache=cache))


def test_domain_binds_the_digest(domain_separator, cache):
    other = DomainSeparator.new(
        Eip712Domain(name="Ether Mail", version="2", chain_id=1, verifying_contract=VERIFYING_CONTRACT),
        cache=cache,
    )
    mail = cow_to_bob()
    assert sign_hash(domain_separator, mail, cache=cache) != sign_hash(other, mail, cache=cache)
