"""
Settings for ensure-access.

Values come from, in increasing priority: built-in defaults, environment
variables, a YAML config file, and command line flags. Every mode and path is
validated here, before any filesystem walk starts.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from ensure_access.exceptions import ConfigError, PathNotFoundError
from ensure_access.permissions.model import PermissionSet, parse_mode_spec

logger = logging.getLogger(__name__)

ENV_CONFIG = "ENSURE_ACCESS_CONFIG"
ENV_DRY_RUN = "ENSURE_ACCESS_DRY_RUN"
ENV_LOG_LEVEL = "ENSURE_ACCESS_LOG_LEVEL"

DEFAULT_LOG_LEVEL = "INFO"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

CONFIG_KEYS = {"mode", "paths", "dry_run", "log_level"}

TRUE_VALUES = {"1", "true", "yes", "on"}
FALSE_VALUES = {"0", "false", "no", "off", ""}


@dataclass(frozen=True)
class Settings:
    mode: PermissionSet | None = None
    paths: tuple[str, ...] = ()
    dry_run: bool = False
    log_level: str = DEFAULT_LOG_LEVEL


def validate_mode_spec(text: str) -> PermissionSet:
    """Validate a 3 digit octal mode and return the target PermissionSet."""
    return parse_mode_spec(text)


def validate_path(text: str) -> str:
    """Check a path argument exists. Symlinks are followed, so a dangling link is rejected."""
    if not os.path.exists(text):
        raise PathNotFoundError(text)
    return text


def validate_log_level(text: str) -> str:
    level = text.strip().upper()
    if level not in LOG_LEVELS:
        raise ConfigError(f"unknown log level \"{text}\", expected one of {', '.join(LOG_LEVELS)}")
    return level


def parse_bool(text: str, name: str) -> bool:
    value = text.strip().lower()
    if value in TRUE_VALUES:
        return True
    if value in FALSE_VALUES:
        return False
    raise ConfigError(f'{name} must be a boolean, got "{text}"')


def load_config_file(path: str | Path) -> dict[str, Any]:
    """
    Load a YAML config file.

    Args:
        path: Config file path

    Returns:
        Mapping with a subset of the keys mode, paths, dry_run, log_level

    Raises:
        ConfigError: If the file is unreadable, not YAML, or has unexpected keys or types
    """
    path = Path(path)

    try:
        with open(path) as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise ConfigError(f"cannot read config file {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid YAML in config file {path}: {e}") from e

    if data is None:
        return {}

    if not isinstance(data, dict):
        raise ConfigError(f"config file {path} must contain a mapping")

    unknown = set(data) - CONFIG_KEYS
    if unknown:
        raise ConfigError(f"unknown keys in config file {path}: {', '.join(sorted(unknown))}")

    if "mode" in data and not isinstance(data["mode"], str):
        # An unquoted 755 is read by YAML as the integer 755
        raise ConfigError(f'"mode" must be a quoted string in {path}, e.g. mode: "755"')

    if "paths" in data:
        paths = data["paths"]
        if not isinstance(paths, list) or not all(isinstance(p, str) for p in paths):
            raise ConfigError(f'"paths" must be a list of strings in {path}')

    if "dry_run" in data and not isinstance(data["dry_run"], bool):
        raise ConfigError(f'"dry_run" must be true or false in {path}')

    if "log_level" in data and not isinstance(data["log_level"], str):
        raise ConfigError(f'"log_level" must be a string in {path}')

    logger.debug(f"Loaded config file {path}")
    return data


def resolve_settings(
    mode: str | None = None,
    paths: Iterable[str] = (),
    dry_run: bool | None = None,
    log_level: str | None = None,
    config_path: str | Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> Settings:
    """
    Merge command line values over the config file, environment and defaults.

    Paths from the command line replace the config file's paths rather than
    extending them.

    Raises:
        ValidationError: If a mode or path is invalid
        ConfigError: If the config file or an environment variable is invalid
    """
    environ = os.environ if environ is None else environ

    resolved_dry_run = False
    resolved_log_level = DEFAULT_LOG_LEVEL

    if environ.get(ENV_DRY_RUN) is not None:
        resolved_dry_run = parse_bool(environ[ENV_DRY_RUN], ENV_DRY_RUN)
    if environ.get(ENV_LOG_LEVEL):
        resolved_log_level = validate_log_level(environ[ENV_LOG_LEVEL])

    config_path = config_path or environ.get(ENV_CONFIG)
    file_values = load_config_file(config_path) if config_path else {}

    resolved_mode = file_values.get("mode")
    resolved_paths = list(file_values.get("paths", []))
    resolved_dry_run = file_values.get("dry_run", resolved_dry_run)
    if "log_level" in file_values:
        resolved_log_level = validate_log_level(file_values["log_level"])

    if mode is not None:
        resolved_mode = mode
    paths = list(paths)
    if paths:
        resolved_paths = paths
    if dry_run is not None:
        resolved_dry_run = dry_run
    if log_level is not None:
        resolved_log_level = validate_log_level(log_level)

    return Settings(
        mode=validate_mode_spec(resolved_mode) if resolved_mode is not None else None,
        paths=tuple(validate_path(p) for p in resolved_paths),
        dry_run=resolved_dry_run,
        log_level=resolved_log_level,
    )
