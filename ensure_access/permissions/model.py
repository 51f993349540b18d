"""
Permission model.

Owner/group/everyone read-write-execute bits, octal parsing and encoding, and
the union merge used to raise permissions without ever revoking one.
"""

from __future__ import annotations

import string
from collections.abc import Sequence
from dataclasses import dataclass

from ensure_access.exceptions import ModeSpecError

OCTAL_DIGITS = frozenset(string.octdigits)
MODE_SPEC_LENGTH = 3

# Set in the encoded form to mark directories. Reporting only, never passed to chmod.
DIRECTORY_BIT = 1 << 9
PERMISSION_MASK = 0o777


@dataclass(frozen=True)
class Permission:
    """Read, write and execute rights of a single user class."""

    read: bool = False
    write: bool = False
    execute: bool = False

    @classmethod
    def from_digit(cls, digit: int) -> Permission:
        """
        Build a Permission from one octal digit.

        Args:
            digit: Integer 0-7, bit 2 is read, bit 1 write, bit 0 execute

        Returns:
            The matching Permission
        """
        if not 0 <= digit <= 7:
            raise ValueError(f"octal digit out of range: {digit}")
        return cls(read=bool(digit & 4), write=bool(digit & 2), execute=bool(digit & 1))

    @property
    def octal(self) -> int:
        return 4 * self.read + 2 * self.write + 1 * self.execute

    def union(self, other: Permission) -> Permission:
        return Permission(
            read=self.read or other.read,
            write=self.write or other.write,
            execute=self.execute or other.execute,
        )

    __or__ = union

    def __str__(self) -> str:
        letters = ""
        if self.read:
            letters += "r"
        if self.write:
            letters += "w"
        if self.execute:
            letters += "x"
        return letters


@dataclass(frozen=True)
class PermissionSet:
    """Permissions for the owner, group and everyone of one filesystem entity."""

    owner: Permission = Permission()
    group: Permission = Permission()
    everyone: Permission = Permission()

    @classmethod
    def from_digits(cls, digits: Sequence[int]) -> PermissionSet:
        """
        Build a PermissionSet from three octal digits in owner, group, everyone order.

        Args:
            digits: Exactly three integers 0-7

        Returns:
            The matching PermissionSet
        """
        if len(digits) != MODE_SPEC_LENGTH:
            raise ValueError(f"expected {MODE_SPEC_LENGTH} octal digits, got {len(digits)}")
        owner, group, everyone = digits
        return cls(
            owner=Permission.from_digit(owner),
            group=Permission.from_digit(group),
            everyone=Permission.from_digit(everyone),
        )

    @classmethod
    def from_mode(cls, mode: int) -> PermissionSet:
        """Decode the low 9 permission bits of a mode, ignoring everything above them."""
        return cls.from_digits([(mode >> 6) & 0o7, (mode >> 3) & 0o7, mode & 0o7])

    def union(self, other: PermissionSet) -> PermissionSet:
        return PermissionSet(
            owner=self.owner | other.owner,
            group=self.group | other.group,
            everyone=self.everyone | other.everyone,
        )

    __or__ = union

    def encode(self, is_dir: bool = False) -> int:
        """
        Encode as an integer mode.

        Args:
            is_dir: Set the directory bit above the 9 permission bits

        Returns:
            dir_bit << 9 | owner << 6 | group << 3 | everyone
        """
        dir_bit = DIRECTORY_BIT if is_dir else 0
        return dir_bit | self.owner.octal << 6 | self.group.octal << 3 | self.everyone.octal

    def octal_string(self, is_dir: bool = False) -> str:
        """Four octal digits, the first one being the directory bit ("1755", "0644")."""
        return f"{self.encode(is_dir):04o}"

    def __str__(self) -> str:
        return f"{self.owner} {self.group} {self.everyone}"


def union(a: PermissionSet, b: PermissionSet) -> PermissionSet:
    """Bitwise OR of two permission sets. Never removes a bit present in either."""
    return a.union(b)


def parse_mode_spec(text: str) -> PermissionSet:
    """
    Parse a user supplied mode such as "755".

    Args:
        text: Exactly 3 characters, each an octal digit

    Returns:
        The target PermissionSet

    Raises:
        ModeSpecError: If the length is not 3 or a character is not 0-7
    """
    if len(text) != MODE_SPEC_LENGTH:
        raise ModeSpecError(f'must be {MODE_SPEC_LENGTH} octal digits, got "{text}"')

    for char in text:
        if char not in OCTAL_DIGITS:
            raise ModeSpecError(f'must be {MODE_SPEC_LENGTH} octal digits, "{char}" is not an octal digit')

    return PermissionSet.from_digits([int(char, 8) for char in text])
