"""
Custom exceptions for ensure-access.
"""


class EnsureAccessError(Exception):
    """Base exception for all ensure-access errors."""
    pass


class ValidationError(EnsureAccessError):
    """Raised when a command line or config value is rejected."""
    pass


class ModeSpecError(ValidationError):
    """Raised when a mode specification is not exactly 3 octal digits."""
    pass


class PathNotFoundError(ValidationError):
    """Raised when a path argument does not exist."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f'file / directory "{path}" does not exist')


class ConfigError(EnsureAccessError):
    """Raised when the config file cannot be read or has the wrong shape."""
    pass


class EnforcementError(EnsureAccessError):
    """
    Failure while enforcing permissions under one root path.

    Enforcement for that root stops at the first failure, other roots are
    still processed.
    """

    def __init__(self, root: str, detail: str):
        self.root = root
        self.detail = detail
        super().__init__(f'error ensuring permissions for "{root}": {detail}')


class TraversalError(EnforcementError):
    """Raised when an entity under a root cannot be listed or stat-ed."""

    def __init__(self, root: str, cause: OSError):
        self.cause = cause
        super().__init__(root, str(cause))


class ApplyError(EnforcementError):
    """Raised when chmod fails on an entity."""

    def __init__(self, root: str, path: str, cause: OSError):
        self.path = path
        self.cause = cause
        super().__init__(root, f"error running chmod on {path}: {cause}")
