"""
ensure-access
=============

Raise file and directory permissions to at least a given octal mode, across
whole trees, without ever revoking a permission that is already granted.
"""

from .branding import VERSION
from .permissions import (
    Change,
    EnforcementReport,
    Permission,
    PermissionEnforcer,
    PermissionSet,
    enforce,
    parse_mode_spec,
    union,
)

__version__ = VERSION

__all__ = [
    "Change",
    "EnforcementReport",
    "Permission",
    "PermissionEnforcer",
    "PermissionSet",
    "enforce",
    "parse_mode_spec",
    "union",
]
