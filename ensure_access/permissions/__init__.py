"""
Permission model and enforcer.
"""

from .enforcer import Change, EnforcementReport, PermissionEnforcer, enforce
from .model import Permission, PermissionSet, parse_mode_spec, union

__all__ = [
    "Change",
    "EnforcementReport",
    "PermissionEnforcer",
    "enforce",
    "Permission",
    "PermissionSet",
    "parse_mode_spec",
    "union",
]
