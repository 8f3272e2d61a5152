"""
Error types raised by the bootstrap.

Every error carries the process exit code the CLI reports for it.
"""

from typing import Optional

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_USAGE = 2
EXIT_ELEVATION_DENIED = 3
EXIT_PERMISSION_DENIED = 4
EXIT_PATH_NOT_FOUND = 5
EXIT_LINK_CONFLICT = 6


class BootstrapError(Exception):
    """Base class for bootstrap failures."""
    exit_code = EXIT_FAILURE

    def __init__(self, message: str, exit_code: Optional[int] = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class InstallFailed(BootstrapError):
    """An install command exited non-zero."""

    def __init__(self, tool: str, reason: str):
        super().__init__(f"Installing {tool} failed: {reason}")
        self.tool = tool
        self.reason = reason


class ElevationDenied(BootstrapError):
    """The elevation request was declined by the user or the OS."""
    exit_code = EXIT_ELEVATION_DENIED

    def __init__(self, operation: str, detail: str = ""):
        message = f"Elevation denied for operation '{operation}'"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)
        self.operation = operation


class PermissionDenied(BootstrapError):
    """A write was rejected for insufficient rights."""
    exit_code = EXIT_PERMISSION_DENIED

    def __init__(self, subject: str, detail: str = "", exit_code: Optional[int] = None):
        message = f"Permission denied: {subject}"
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message, exit_code=exit_code)
        self.subject = subject


class PathNotFound(BootstrapError):
    """A filesystem operation was given a path that does not exist."""
    exit_code = EXIT_PATH_NOT_FOUND

    def __init__(self, path):
        super().__init__(f"Path not found: {path}")
        self.path = path


class LinkConflict(BootstrapError):
    """The link target exists and points somewhere else."""
    exit_code = EXIT_LINK_CONFLICT

    def __init__(self, target, existing: str):
        super().__init__(f"Cannot link {target}: already exists ({existing})")
        self.target = target


class UnknownOperation(BootstrapError):
    """No operation is registered under the requested name."""
    exit_code = EXIT_USAGE

    def __init__(self, name: str, known):
        super().__init__(f"Unknown operation '{name}'. Known operations: {', '.join(sorted(known))}")
        self.name = name
