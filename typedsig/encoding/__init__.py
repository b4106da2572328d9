"""
Schema and value encoders.

- type_graph: canonical type string (encode_type) via the type-graph builder
- type_hash:  memoized keccak256 of the canonical type string
- data:       encode_data / hash_struct
"""

from .data import encode_data, hash_struct
from .type_graph import TypeGraphBuilder, encode_type
from .type_hash import TypeHashCache, default_cache, type_hash

__all__ = [
    "TypeGraphBuilder",
    "encode_type",
    "TypeHashCache",
    "default_cache",
    "type_hash",
    "encode_data",
    "hash_struct",
]
