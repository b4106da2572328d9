"""
typedsig.signer
===============

secp256k1 signing and recovery over typed-data digests.

Curve operations are delegated to ``coincurve`` (libsecp256k1 bindings), which
uses RFC 6979 deterministic nonces and low-s normalized signatures, so a given
(key, digest) pair always yields the same signature.

Key handling
------------
The private scalar is copied into a mutable buffer that this module owns and
that buffer is zeroed in a ``finally`` block on every exit path: success,
malformed key, out-of-range scalar, or curve failure. That buffer is the only
copy that is actually scrubbed:

- immutable ``bytes`` held by the caller cannot be overwritten from Python;
- ``coincurve.PrivateKey`` keeps its own immutable copy (``PrivateKey.secret``),
  which lives until the key object is garbage-collected. The signer drops its
  reference in the same ``finally`` block, so on success the object goes away
  when the call returns. After a curve failure the raised exception's traceback
  can keep it alive until the exception itself is released.

Signatures are returned as :class:`TypedSignature` ``(signature, v)`` where
``signature`` is the 64-byte ``r ‖ s`` and ``v`` is the recovery id plus an
offset (27 by default, the convention expected by ``ecrecover``).
"""

from __future__ import annotations

from typing import NamedTuple, Optional, Union

from coincurve import PrivateKey, PublicKey

from .config import DEFAULT_RECOVERY_OFFSET
from .domain import DomainSeparator, sign_hash
from .encoding.type_hash import TypeHashCache
from .errors import EncodingError, InvalidKeyError, RecoveryError, SigningError
from .logging import get_logger
from .types.members import Address
from .types.structs import StructType
from .utils.bytes import BytesLike, b, to_hex, zeroize
from .utils.hash import keccak256

log = get_logger(__name__)

PrivateKeyLike = Union[bytes, bytearray, memoryview, str]


class TypedSignature(NamedTuple):
    signature: bytes
    v: int

    @property
    def r(self) -> bytes:
        return self.signature[:32]

    @property
    def s(self) -> bytes:
        return self.signature[32:]

    def to_bytes(self) -> bytes:
        """65-byte ``r ‖ s ‖ v`` form."""
        return self.signature + bytes([self.v])

    def hex(self) -> str:
        return to_hex(self.to_bytes())


def _secret_buffer(private_key: PrivateKeyLike) -> bytearray:
    try:
        return bytearray(b(private_key))
    except (TypeError, ValueError) as e:
        raise InvalidKeyError(f"unreadable private key: {e}") from e


def _digest32(digest: BytesLike) -> bytes:
    try:
        raw = b(digest)
    except (TypeError, ValueError) as e:
        raise EncodingError(f"invalid digest: {e}") from e
    if len(raw) != 32:
        raise EncodingError("digest must be 32 bytes", length=len(raw))
    return raw


def _load_key(secret: bytearray) -> PrivateKey:
    if len(secret) != 32:
        raise InvalidKeyError("private key must be 32 bytes", length=len(secret))
    try:
        return PrivateKey(bytes(secret))
    except ValueError as e:
        raise InvalidKeyError("private key scalar must be in 1..n-1") from e


def sign_digest(
    digest: BytesLike,
    private_key: PrivateKeyLike,
    *,
    recovery_offset: Optional[int] = None,
) -> TypedSignature:
    """Sign an already computed 32-byte digest."""
    msg = _digest32(digest)
    offset = DEFAULT_RECOVERY_OFFSET if recovery_offset is None else recovery_offset
    secret = _secret_buffer(private_key)
    key: Optional[PrivateKey] = None
    try:
        key = _load_key(secret)
        try:
            raw = key.sign_recoverable(msg, hasher=None)
        except ValueError as e:
            raise SigningError("curve signing failed", cause=str(e)) from e
    finally:
        key = None
        zeroize(secret)

    if len(raw) != 65:
        raise SigningError("unexpected recoverable signature length", length=len(raw))
    log.debug("digest signed", extra={"digest": to_hex(msg), "recovery_id": raw[64]})
    return TypedSignature(signature=bytes(raw[:64]), v=raw[64] + offset)


def sign_typed(
    domain_separator: DomainSeparator,
    message: StructType,
    private_key: PrivateKeyLike,
    *,
    recovery_offset: Optional[int] = None,
    cache: Optional[TypeHashCache] = None,
) -> TypedSignature:
    """Sign ``sign_hash(domain_separator, message)`` with a 32-byte secp256k1 scalar."""
    digest = sign_hash(domain_separator, message, cache=cache)
    return sign_digest(digest, private_key, recovery_offset=recovery_offset)


def _split_signature(
    signature: Union[TypedSignature, BytesLike, str],
    v: Optional[int],
) -> tuple[bytes, int]:
    if isinstance(signature, TypedSignature):
        return signature.signature, signature.v if v is None else v
    try:
        raw = b(signature)
    except (TypeError, ValueError) as e:
        raise RecoveryError(f"unreadable signature: {e}") from e
    if len(raw) == 65 and v is None:
        return raw[:64], raw[64]
    if len(raw) == 64 and v is not None:
        return raw, v
    raise RecoveryError("expected a 65-byte signature, or 64 bytes plus v", length=len(raw))


def public_key_to_address(public_key: PublicKey) -> Address:
    """Last 20 bytes of keccak256 of the uncompressed point (without the 0x04 tag)."""
    return Address(keccak256(public_key.format(compressed=False)[1:])[-20:])


def recover_address(
    digest: BytesLike,
    signature: Union[TypedSignature, BytesLike, str],
    v: Optional[int] = None,
    *,
    recovery_offset: Optional[int] = None,
) -> Address:
    """Recover the signer's address from a digest and a recoverable signature."""
    msg = _digest32(digest)
    rs, v_ = _split_signature(signature, v)
    offset = DEFAULT_RECOVERY_OFFSET if recovery_offset is None else recovery_offset
    recovery_id = v_ - offset
    if not 0 <= recovery_id <= 3:
        raise RecoveryError("recovery id out of range", v=v_, offset=offset)
    try:
        public_key = PublicKey.from_signature_and_message(rs + bytes([recovery_id]), msg, hasher=None)
    except ValueError as e:
        raise RecoveryError("signature does not recover to a public key", cause=str(e)) from e
    return public_key_to_address(public_key)


def recover_typed(
    domain_separator: DomainSeparator,
    message: StructType,
    signature: Union[TypedSignature, BytesLike, str],
    v: Optional[int] = None,
    *,
    recovery_offset: Optional[int] = None,
    cache: Optional[TypeHashCache] = None,
) -> Address:
    digest = sign_hash(domain_separator, message, cache=cache)
    return recover_address(digest, signature, v, recovery_offset=recovery_offset)


def address_from_private_key(private_key: PrivateKeyLike) -> Address:
    secret = _secret_buffer(private_key)
    key: Optional[PrivateKey] = None
    try:
        key = _load_key(secret)
        public_key = key.public_key
    finally:
        key = None
        zeroize(secret)
    return public_key_to_address(public_key)


__all__ = [
    "TypedSignature",
    "sign_digest",
    "sign_typed",
    "recover_address",
    "recover_typed",
    "address_from_private_key",
    "public_key_to_address",
]
