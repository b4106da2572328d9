# SPDX-License-Identifier: Apache-2.0
from __future__ import annotations

import io
import json
import logging

import pytest

from typedsig import logging as tlog
from typedsig.config import Config
from typedsig.encoding import TypeHashCache, type_hash
from typedsig.signer import sign_digest

from tests.unit._structs import cow_to_bob


def test_json_lines_for_type_hash():
    stream = io.StringIO()
    tlog.configure(json=True, level="DEBUG", stream=stream)
    type_hash(cow_to_bob(), cache=TypeHashCache())

    lines = [json.loads(line) for line in stream.getvalue().splitlines()]
    computed = [r for r in lines if r["msg"] == "type hash computed"]
    assert computed
    assert computed[0]["type_name"] == "Mail"
    assert computed[0]["level"] == "DEBUG"
    assert computed[0]["logger"] == "typedsig.encoding.type_hash"
    assert computed[0]["type_hash"].startswith("0x")


def test_text_format_and_level_filter():
    stream = io.StringIO()
    tlog.configure(json=False, level="WARNING", stream=stream)
    type_hash(cow_to_bob(), cache=TypeHashCache())
    assert stream.getvalue() == ""

    tlog.get_logger("typedsig.test").warning("careful", extra={"who": "me"})
    line = stream.getvalue().strip()
    assert "| WARNING | typedsig.test | who=me | careful" in line


def test_key_material_is_not_logged(cow_key):
    stream = io.StringIO()
    tlog.configure(json=True, level="DEBUG", stream=stream)
    sign_digest(b"\x11" * 32, cow_key)
    out = stream.getvalue()
    assert "digest signed" in out
    assert cow_key.hex() not in out


def test_configure_from_config():
    cfg = Config(log_level="info", log_format="json")
    logger = tlog.configure_from_config(cfg)
    assert logger.level == logging.INFO
    assert isinstance(logger.handlers[0].formatter, tlog.JSONFormatter)
    assert logger.propagate is False


def test_unknown_level():
    with pytest.raises(ValueError):
        tlog.configure(level="LOUD")
