"""
typedsig configuration.

- Loads defaults and supports overrides via environment variables (TYPEDSIG_*).
- Explicit keyword overrides win over the environment.

Only ambient concerns live here (logging and the recovery-id convention); the
hashing pipeline itself has no knobs.
"""

from __future__ import annotations

import os
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Optional

from .errors import ConfigError

DEFAULT_LOG_LEVEL = "WARNING"
DEFAULT_LOG_FORMAT = "text"
# Legacy verifiers (ecrecover) expect v ∈ {27, 28}.
DEFAULT_RECOVERY_OFFSET = 27

_LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG", "NOTSET")
_LOG_FORMATS = ("text", "json")


def _env(name: str, default: Optional[str] = None) -> Optional[str]:
    v = os.getenv(name)
    return v if v is not None and v != "" else default


def _parse_offset(val: Any) -> int:
    try:
        offset = int(str(val).strip(), 0) if not isinstance(val, int) else val
    except ValueError as e:
        raise ConfigError("recovery offset must be an integer", value=str(val)) from e
    # Recovery ids are 0..3 and v must stay a single byte.
    if not 0 <= offset <= 252:
        raise ConfigError("recovery offset must fit in one byte with the recovery id", value=offset)
    return offset


@dataclass(slots=True)
class Config:
    log_level: str = field(default=DEFAULT_LOG_LEVEL)
    log_format: str = field(default=DEFAULT_LOG_FORMAT)
    recovery_offset: int = field(default=DEFAULT_RECOVERY_OFFSET)

    def __post_init__(self) -> None:
        level = str(self.log_level).strip().upper()
        if level not in _LOG_LEVELS:
            raise ConfigError("unknown log level", value=self.log_level)
        self.log_level = level
        fmt = str(self.log_format).strip().lower()
        if fmt not in _LOG_FORMATS:
            raise ConfigError("log format must be 'text' or 'json'", value=self.log_format)
        self.log_format = fmt
        self.recovery_offset = _parse_offset(self.recovery_offset)

    @classmethod
    def from_env(cls, prefix: str = "TYPEDSIG_") -> "Config":
        """
        Create config from environment variables:

        TYPEDSIG_LOG_LEVEL         (DEBUG/INFO/WARNING/...)
        TYPEDSIG_LOG_FORMAT        (text|json)
        TYPEDSIG_RECOVERY_OFFSET   (int, default 27; 0 for raw recovery ids)
        """
        return cls(
            log_level=_env(f"{prefix}LOG_LEVEL", DEFAULT_LOG_LEVEL),
            log_format=_env(f"{prefix}LOG_FORMAT", DEFAULT_LOG_FORMAT),
            recovery_offset=_env(f"{prefix}RECOVERY_OFFSET", str(DEFAULT_RECOVERY_OFFSET)),
        )

    @classmethod
    def with_overrides(cls, base: Optional["Config"] = None, **overrides: Any) -> "Config":
        """
        Build from an existing config (default: environment) plus keyword overrides.
        Unknown keys and None values are ignored.
        """
        base = base or cls.from_env()
        data = base.to_dict()
        data.update({k: v for k, v in overrides.items() if k in data and v is not None})
        return cls(**data)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


__all__ = ["Config", "DEFAULT_RECOVERY_OFFSET"]
