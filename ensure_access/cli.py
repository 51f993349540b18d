"""ensure-access command line interface."""

import argparse
import logging

from ensure_access.branding import VERSION, ea_print
from ensure_access.config import resolve_settings, validate_mode_spec, validate_path
from ensure_access.exceptions import EnsureAccessError, ValidationError
from ensure_access.logging_setup import setup_logging
from ensure_access.permissions.enforcer import PermissionEnforcer

logger = logging.getLogger(__name__)


def _mode_arg(value: str) -> str:
    try:
        validate_mode_spec(value)
    except ValidationError as e:
        raise argparse.ArgumentTypeError(str(e)) from e
    return value


def _path_arg(value: str) -> str:
    try:
        return validate_path(value)
    except ValidationError as e:
        raise argparse.ArgumentTypeError(str(e)) from e


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ensure-access",
        description=(
            "Recursively raise the permissions of files and directories to at least "
            "MODE. Permissions that are already granted are never removed."
        ),
    )
    parser.add_argument(
        "--mode",
        "-m",
        type=_mode_arg,
        help="3 digit octal representation of permissions to set for files / directories",
    )
    parser.add_argument(
        "--path",
        "-p",
        dest="paths",
        action="append",
        type=_path_arg,
        default=[],
        metavar="PATH",
        help="File / directory for which permissions will be set (repeatable)",
    )
    parser.add_argument(
        "--dry-run",
        "-n",
        action="store_true",
        default=None,
        help="Print actions which would occur without executing them",
    )
    parser.add_argument("--config", "-c", metavar="FILE", help="YAML config file")
    parser.add_argument("--verbose", "-v", action="store_true", help="Also report entities left unchanged")
    parser.add_argument("--version", "-V", action="version", version=f"ensure-access {VERSION}")
    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point. Returns the process exit code."""
    parser = create_parser()
    args = parser.parse_args(argv)

    # Minimal logging so config errors are reported before the level is known
    setup_logging("DEBUG" if args.verbose else "INFO")

    try:
        settings = resolve_settings(
            mode=args.mode,
            paths=args.paths,
            dry_run=args.dry_run,
            log_level="DEBUG" if args.verbose else None,
            config_path=args.config,
        )
    except EnsureAccessError as e:
        logger.critical(str(e))
        return 1

    log = setup_logging(settings.log_level)

    if settings.mode is None:
        log.critical("--mode option required")
        return 1

    if not settings.paths:
        log.critical("--path option required")
        return 1

    enforcer = PermissionEnforcer(settings.mode, dry_run=settings.dry_run, logger=log)
    report = enforcer.enforce(settings.paths)

    if not report.ok:
        ea_print(f"{len(report.errors)} of {len(settings.paths)} paths failed", "error")
        return 1

    if settings.dry_run:
        ea_print(f"{len(report.changes)} changes would be made", "info")
    else:
        ea_print(f"{len(report.changes)} changes made", "success")
    return 0
