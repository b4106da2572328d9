"""
Version helpers for typedsig.

- Exposes __version__ (PEP 440).
- ``TYPEDSIG_VERSION`` in the environment overrides it (used by release tooling).
"""

from __future__ import annotations

import os

DEFAULT_VERSION = "0.1.0"

__version__ = os.environ.get("TYPEDSIG_VERSION") or DEFAULT_VERSION

__all__ = ["__version__", "DEFAULT_VERSION"]
