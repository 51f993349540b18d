"""
Permission enforcer.
Raises the permissions of every entity under a set of root paths to at least a
target mode, without ever removing a permission that is already granted.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass, field

from ensure_access.exceptions import ApplyError, EnforcementError, TraversalError
from ensure_access.permissions.model import PERMISSION_MASK, PermissionSet
from ensure_access.walker import WalkEntry, walk

DRY_RUN_MARKER = "[dry run] "

Walker = Callable[[str], Iterable[WalkEntry]]
Chmod = Callable[[str, int], None]


@dataclass(frozen=True)
class Change:
    """A permission change applied (or, in dry-run mode, only reported) on one entity."""

    path: str
    current: PermissionSet
    updated: PermissionSet
    is_dir: bool
    dry_run: bool = False

    @property
    def octal(self) -> int:
        return self.updated.encode(self.is_dir)

    @property
    def octal_string(self) -> str:
        return self.updated.octal_string(self.is_dir)


@dataclass
class EnforcementReport:
    changes: list[Change] = field(default_factory=list)
    errors: list[EnforcementError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


class PermissionEnforcer:
    """
    Enforces a minimum PermissionSet on filesystem trees.

    For every visited entity the target is merged into the current permissions
    with a union. Entities already granting everything the target asks for are
    left alone; the rest are chmod-ed (unless dry_run) and logged.
    """

    def __init__(
        self,
        target: PermissionSet,
        dry_run: bool = False,
        logger: logging.Logger | None = None,
        walk: Walker = walk,
        chmod: Chmod = os.chmod,
    ):
        self.target = target
        self.dry_run = dry_run
        self.logger = logger or logging.getLogger(__name__)
        self._walk = walk
        self._chmod = chmod

    def enforce(self, paths: Iterable[str]) -> EnforcementReport:
        """
        Enforce the target on each root path in order.

        A failure aborts the remaining entities of its root only; later roots
        are still processed.

        Args:
            paths: Root files / directories

        Returns:
            EnforcementReport with every change and one error per failed root
        """
        report = EnforcementReport()

        for root in paths:
            try:
                for change in self.iter_changes(root):
                    report.changes.append(change)
            except EnforcementError as e:
                self.logger.error(str(e))
                report.errors.append(e)

        return report

    def enforce_path(self, root: str) -> list[Change]:
        """
        Enforce the target on a single root path and everything below it.

        Raises:
            TraversalError: If an entity cannot be listed or stat-ed
            ApplyError: If chmod fails
        """
        return list(self.iter_changes(root))

    def iter_changes(self, root: str) -> Iterator[Change]:
        """Apply and yield changes one entity at a time, so changes made before a failure are still seen."""
        for entry in self._entries(root):
            change = self.plan(entry)
            if change is None:
                continue

            if not self.dry_run:
                self._apply(root, entry, change)

            self._log_change(change)
            yield change

    def plan(self, entry: WalkEntry) -> Change | None:
        """Work out the change needed for one entry, None when it already complies."""
        current = PermissionSet.from_mode(entry.permission_bits)
        updated = self.target | current

        if updated == current:
            self.logger.debug(f"{entry.path} already has {current}, skipping")
            return None

        return Change(
            path=entry.path,
            current=current,
            updated=updated,
            is_dir=entry.is_dir,
            dry_run=self.dry_run,
        )

    def _entries(self, root: str) -> Iterator[WalkEntry]:
        """Pull entries from the walker, wrapping OS errors with the root."""
        try:
            it = iter(self._walk(root))
        except OSError as e:
            raise TraversalError(root, e) from e

        while True:
            try:
                entry = next(it)
            except StopIteration:
                return
            except OSError as e:
                raise TraversalError(root, e) from e
            yield entry

    def _apply(self, root: str, entry: WalkEntry, change: Change) -> None:
        # The directory bit of the encoding would be the sticky bit for chmod.
        new_mode = entry.special_bits | (change.octal & PERMISSION_MASK)
        try:
            self._chmod(entry.path, new_mode)
        except OSError as e:
            raise ApplyError(root, entry.path, e) from e

    def _log_change(self, change: Change) -> None:
        marker = DRY_RUN_MARKER if change.dry_run else ""
        self.logger.info("%schmod %s %s", marker, change.octal_string, change.path)


def enforce(
    paths: Iterable[str],
    target: PermissionSet,
    dry_run: bool = False,
    logger: logging.Logger | None = None,
) -> EnforcementReport:
    """Compatibility function: enforce target on paths with the default collaborators."""
    return PermissionEnforcer(target, dry_run=dry_run, logger=logger).enforce(paths)
