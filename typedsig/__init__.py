"""
typedsig — hashing and signing of typed structured data.

Struct values describe their fields through ``visit_members``; from there the
package derives the canonical type string, the (memoized) type hash, the data
encoding and struct hash, the domain-separated signing digest, and a
recoverable secp256k1 signature.

    from typedsig import DomainSeparator, Eip712Domain, sign_typed

    domain = DomainSeparator.new(Eip712Domain(name="Ether Mail", version="1", chain_id=1,
                                              verifying_contract="0xCcCC..."))
    sig = sign_typed(domain, mail, private_key)
"""

from .version import __version__  # noqa: F401

# Errors & config
from .config import Config  # noqa: F401
from .errors import (  # noqa: F401
    ConfigError,
    DuplicateTypeName,
    EncodingError,
    InvalidKeyError,
    RecoveryError,
    SchemaError,
    SigningError,
    TypedSigError,
)

# Member types & struct protocol
from .types import *  # noqa: F401,F403
from .types import __all__ as _types_all

# Encoders
from .encoding import (  # noqa: F401
    TypeGraphBuilder,
    TypeHashCache,
    default_cache,
    encode_data,
    encode_type,
    hash_struct,
    type_hash,
)

# Domain & digest
from .domain import DomainSeparator, Eip712Domain, encode, sign_hash  # noqa: F401

# Signing
from .signer import (  # noqa: F401
    TypedSignature,
    address_from_private_key,
    recover_address,
    recover_typed,
    sign_digest,
    sign_typed,
)

# Typed-data documents
from .typed_data import TypedData, TypedStruct  # noqa: F401

__all__ = [
    "__version__",
    # Core
    "Config",
    "TypedSigError", "SchemaError", "DuplicateTypeName", "EncodingError",
    "InvalidKeyError", "SigningError", "RecoveryError", "ConfigError",
    # Types
    *_types_all,
    # Encoders
    "TypeGraphBuilder", "TypeHashCache", "default_cache",
    "encode_type", "type_hash", "encode_data", "hash_struct",
    # Domain
    "DomainSeparator", "Eip712Domain", "encode", "sign_hash",
    # Signing
    "TypedSignature", "sign_digest", "sign_typed",
    "recover_address", "recover_typed", "address_from_private_key",
    # Typed data
    "TypedData", "TypedStruct",
]
