"""
Command runner for spawning external processes and waiting on them.
"""

import logging
import shutil
import subprocess
from dataclasses import dataclass
from typing import List, Sequence

from .context import ProcessContext

# Conventional "command not found" status used when the executable is missing.
EXIT_COMMAND_NOT_FOUND = 127


@dataclass
class CommandResult:
    """Exit status and captured output of a finished command."""

    args: List[str]
    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0

    @property
    def output(self) -> str:
        """Combined stdout/stderr, stripped."""
        parts = [p.strip() for p in (self.stdout, self.stderr) if p and p.strip()]
        return "\n".join(parts)


class CommandRunner:
    """Runs commands synchronously in the context's directory and environment."""

    def __init__(self, context: ProcessContext):
        """
        Initialize the runner.

        Args:
            context: Process context supplying cwd and environment
        """
        self.logger = logging.getLogger(__name__)
        self.context = context

    def resolve(self, executable: str) -> str:
        """Resolve an executable against the context PATH.

        On Windows this also finds ``.cmd``/``.bat`` shims, which
        ``CreateProcess`` does not search for on its own.
        """
        found = shutil.which(executable, path=self.context.getenv("PATH"))
        return found or executable

    def run(self, args: Sequence[str], capture: bool = True) -> CommandResult:
        """
        Run a command to completion.

        Args:
            args: Command and arguments
            capture: Capture stdout/stderr; when False the child writes
                straight to this process's console

        Returns:
            Command result
        """
        argv = list(args)
        if not argv:
            raise ValueError("Cannot run an empty command")

        resolved = [self.resolve(argv[0])] + argv[1:]
        self.logger.debug(f"Running: {' '.join(argv)} (cwd={self.context.cwd})")

        try:
            completed = subprocess.run(
                resolved,
                cwd=str(self.context.cwd),
                env=self.context.environ,
                capture_output=capture,
                text=True,
                errors="replace"
            )
        except FileNotFoundError:
            return CommandResult(
                args=argv,
                returncode=EXIT_COMMAND_NOT_FOUND,
                stderr=f"{argv[0]}: command not found"
            )

        result = CommandResult(
            args=argv,
            returncode=completed.returncode,
            stdout=completed.stdout or "",
            stderr=completed.stderr or ""
        )
        if not result.ok:
            self.logger.debug(f"{argv[0]} exited with {result.returncode}")
        return result
