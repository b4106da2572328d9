"""
typedsig.errors
---------------

A small, consistent error system for the typed-data hashing and signing code.

Design goals
------------
- One root `TypedSigError` with a machine-friendly `code` and optional `data`.
- Concrete subclasses for the failure domains (schema, encoding, key, signing,
  recovery, config).
- Safe JSON representation (`to_dict`) suitable for logs and CLI output.
- Clear separation of *retryable* vs *permanent* failures: schema and encoding
  errors are programming/input errors; key and signing errors may succeed with
  different key material.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Mapping, Optional


class ErrorCode(str, Enum):
    SCHEMA = "TYPEDSIG/SCHEMA"
    ENCODING = "TYPEDSIG/ENCODING"
    INVALID_KEY = "TYPEDSIG/INVALID_KEY"
    SIGNING = "TYPEDSIG/SIGNING"
    RECOVERY = "TYPEDSIG/RECOVERY"
    CONFIG = "TYPEDSIG/CONFIG"


@dataclass(eq=False)
class TypedSigError(Exception):
    """
    Root error for typedsig.

    Attributes
    ----------
    code: str
        Machine-stable error code (see ErrorCode).
    message: str
        Human hint suitable for logs; never contains key material.
    data: dict
        Optional machine data (type names, lengths). Must be JSON-serializable.
    retryable: bool
        Whether the caller may succeed by retrying with different inputs.
    """

    code: str
    message: str
    data: Dict[str, Any] = field(default_factory=dict)
    retryable: bool = False

    def __post_init__(self) -> None:
        super().__init__(f"{self.code}: {self.message}")

    def to_dict(self) -> Dict[str, Any]:
        """JSON-safe shape suitable for logs/CLI."""
        return {
            "code": str(self.code.value if isinstance(self.code, Enum) else self.code),
            "message": self.message,
            "data": _jsonmap(self.data),
            "retryable": self.retryable,
        }

    def __str__(self) -> str:  # pragma: no cover - human formatting
        code = self.code.value if isinstance(self.code, Enum) else self.code
        parts = [f"{code}: {self.message}"]
        if self.data:
            preview = ", ".join(f"{k}={v}" for k, v in self.data.items())
            parts.append(f"[{preview}]")
        return " ".join(parts)


class SchemaError(TypedSigError):
    """Malformed type graph, e.g. two distinct struct types sharing a name."""

    def __init__(self, message="invalid struct schema", **data: Any) -> None:
        super().__init__(code=ErrorCode.SCHEMA, message=message, data=_jsonmap(data))


class DuplicateTypeName(SchemaError):
    def __init__(self, type_name: str) -> None:
        super().__init__(f"types with duplicated name: {type_name}", type_name=type_name)


class EncodingError(TypedSigError):
    """A value or document cannot be encoded under its declared type."""

    def __init__(self, message="encoding failed", **data: Any) -> None:
        super().__init__(code=ErrorCode.ENCODING, message=message, data=_jsonmap(data))


class InvalidKeyError(TypedSigError):
    """Private scalar is zero, outside the curve order, or malformed."""

    def __init__(self, message="invalid private key", **data: Any) -> None:
        super().__init__(
            code=ErrorCode.INVALID_KEY,
            message=message,
            data=_jsonmap(data),
            retryable=True,
        )


class SigningError(TypedSigError):
    def __init__(self, message="signing failed", **data: Any) -> None:
        super().__init__(
            code=ErrorCode.SIGNING,
            message=message,
            data=_jsonmap(data),
            retryable=True,
        )


class RecoveryError(TypedSigError):
    def __init__(self, message="public key recovery failed", **data: Any) -> None:
        super().__init__(code=ErrorCode.RECOVERY, message=message, data=_jsonmap(data))


class ConfigError(TypedSigError):
    def __init__(self, message="invalid configuration", **data: Any) -> None:
        super().__init__(code=ErrorCode.CONFIG, message=message, data=_jsonmap(data))


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _coerce_json(v: Any) -> Any:
    if v is None or isinstance(v, (bool, int, float, str)):
        return v
    if isinstance(v, (bytes, bytearray, memoryview)):
        return "0x" + bytes(v).hex()
    if isinstance(v, Mapping):
        return {str(k): _coerce_json(x) for k, x in v.items()}
    if isinstance(v, (list, tuple)):
        return [_coerce_json(x) for x in v]
    return str(v)


def _jsonmap(d: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    return {k: _coerce_json(v) for k, v in (d or {}).items()}


__all__ = [
    "ErrorCode",
    "TypedSigError",
    "SchemaError",
    "DuplicateTypeName",
    "EncodingError",
    "InvalidKeyError",
    "SigningError",
    "RecoveryError",
    "ConfigError",
]
