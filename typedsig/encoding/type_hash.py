"""
Type-hash cache
===============

``typeHash(T) = keccak256(encodeType(T))`` depends only on the schema, so it
is computed once per schema and memoized.

:class:`TypeHashCache` maps a schema key to its 32-byte hash. The key covers the
whole reachable type graph (every record's name, ``type_key()`` and member
list, see :meth:`TypeGraphBuilder.schema_key`), so two values of one class whose
nested members differ in shape never share an entry. Looking a key up walks the
schema; only rendering and hashing the type string are saved.

Dict reads take no lock; the hit/miss counters are updated under it. A miss
computes the hash outside the lock and inserts under it, first writer wins.
Two threads missing on the same schema at once both compute the same
deterministic value, so the race is harmless. The cache only grows.

A process-wide default is created lazily by :func:`default_cache`. Every public
hashing function takes ``cache=`` so callers and tests can use their own.
"""

from __future__ import annotations

import threading
from typing import Dict, Hashable, Optional

from ..errors import EncodingError
from ..logging import get_logger
from ..types.structs import StructType
from ..utils.bytes import to_hex
from ..utils.hash import keccak256
from .type_graph import build_type_graph

log = get_logger(__name__)


class TypeHashCache:
    def __init__(self) -> None:
        self._hashes: Dict[Hashable, bytes] = {}
        self._lock = threading.Lock()
        self.hits = 0
        self.misses = 0

    def __len__(self) -> int:
        return len(self._hashes)

    def __contains__(self, value: object) -> bool:
        if not isinstance(value, StructType):
            return False
        return build_type_graph(value).schema_key() in self._hashes

    def get(self, value: StructType) -> bytes:
        if not isinstance(value, StructType):
            raise EncodingError("type_hash expects a struct value", got=type(value).__name__)
        graph = build_type_graph(value)
        key = graph.schema_key()
        cached = self._hashes.get(key)
        if cached is not None:
            with self._lock:
                self.hits += 1
            return cached

        result = keccak256(graph.render().encode("utf-8"))
        with self._lock:
            self.misses += 1
            stored = self._hashes.setdefault(key, result)
        log.debug("type hash computed", extra={"type_name": value.type_name, "type_hash": to_hex(stored)})
        return stored

    def clear(self) -> None:
        with self._lock:
            self._hashes.clear()
            self.hits = 0
            self.misses = 0


_DEFAULT: Optional[TypeHashCache] = None
_DEFAULT_LOCK = threading.Lock()


def default_cache() -> TypeHashCache:
    """Process-wide cache, created on first use (thread-safe)."""
    global _DEFAULT
    if _DEFAULT is None:
        with _DEFAULT_LOCK:
            if _DEFAULT is None:
                _DEFAULT = TypeHashCache()
    return _DEFAULT


def type_hash(value: StructType, *, cache: Optional[TypeHashCache] = None) -> bytes:
    """Memoized ``keccak256(encode_type(value))``."""
    return (cache if cache is not None else default_cache()).get(value)


__all__ = ["TypeHashCache", "default_cache", "type_hash"]
