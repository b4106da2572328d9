# SPDX-License-Identifier: Apache-2.0
"""
Shared pytest fixtures:
- Fresh type-hash cache per test (the process default is left alone)
- The "Ether Mail" domain and message, and the keccak("cow") signing key
- Published digests/signature for that message
- Logger reset so handlers installed by one test never leak into the next
"""
from __future__ import annotations

import logging

import pytest

from typedsig import logging as tlog
from typedsig.domain import DomainSeparator, Eip712Domain
from typedsig.encoding import TypeHashCache
from typedsig.utils import keccak256

from tests.unit import read_json_fixture
from tests.unit._structs import VERIFYING_CONTRACT, cow_to_bob


@pytest.fixture()
def cache() -> TypeHashCache:
    return TypeHashCache()


@pytest.fixture(scope="session")
def vectors() -> dict:
    return read_json_fixture("typed_data/vectors.json")


@pytest.fixture(scope="session")
def cow_key() -> bytes:
    return keccak256(b"cow")


@pytest.fixture()
def mail():
    return cow_to_bob()


@pytest.fixture()
def ether_mail_domain() -> Eip712Domain:
    return Eip712Domain(
        name="Ether Mail",
        version="1",
        chain_id=1,
        verifying_contract=VERIFYING_CONTRACT,
    )


@pytest.fixture()
def domain_separator(ether_mail_domain, cache) -> DomainSeparator:
    return DomainSeparator.new(ether_mail_domain, cache=cache)


@pytest.fixture(autouse=True)
def _reset_typedsig_logger():
    yield
    logger = logging.getLogger(tlog.ROOT_LOGGER)
    for h in list(logger.handlers):
        logger.removeHandler(h)
    logger.addHandler(logging.NullHandler())
    logger.setLevel(logging.NOTSET)
    logger.propagate = True
