"""
Member value types (atomic, dynamic) and the struct traversal protocol.
"""

from .members import *  # noqa: F401,F403
from .members import __all__ as _members_all
from .structs import MemberVisitor, StructType

__all__ = [*_members_all, "MemberVisitor", "StructType"]
