"""
Privilege gate: elevation checks and re-invocation under elevation.

Elevation is never attempted in-process. A privileged step that finds the
process unelevated starts a fresh copy of the bootstrap through the OS
elevation prompt, naming the operation to run, and waits for it.
"""

import logging
import subprocess
from typing import List

from .context import ProcessContext
from .errors import BootstrapError, ElevationDenied, PermissionDenied
from .runner import CommandRunner

# ERROR_CANCELLED, returned when the UAC consent prompt is declined.
ERROR_CANCELLED = 1223

ELEVATED_FLAG = "--elevated"

# Prefix written to stderr when the elevated process could not be started.
LAUNCH_FAILED_MARKER = "elevated launch failed: "


def _ps_quote(value: str) -> str:
    return "'" + value.replace("'", "''") + "'"


class PrivilegeGate:
    """Answers "are we elevated?" and re-runs named operations elevated."""

    def __init__(self,
                 context: ProcessContext,
                 runner: CommandRunner,
                 relaunch_command: List[str],
                 powershell: str = "powershell",
                 sudo: str = "sudo"):
        """
        Initialize the gate.

        Args:
            context: Process context (identity, cwd)
            runner: Command runner used to spawn the elevated child
            relaunch_command: Argv that starts this bootstrap, including
                global options, before the ``run <operation>`` part
            powershell: PowerShell executable used for the ``runas`` launch
            sudo: sudo executable used on POSIX
        """
        self.logger = logging.getLogger(__name__)
        self.context = context
        self.runner = runner
        self.relaunch_command = list(relaunch_command)
        self.powershell = powershell
        self.sudo = sudo

    def is_elevated(self) -> bool:
        """Whether the process principal has administrative rights.

        Queried from the OS identity on every call.
        """
        return self.context.identity.is_admin()

    def child_command(self, operation: str, *args: str) -> List[str]:
        """Argv for the elevated child."""
        return self.relaunch_command + ["run", operation, *args, ELEVATED_FLAG]

    def run_elevated(self, operation: str, *args: str) -> int:
        """
        Run a named operation in a new elevated process.

        Args:
            operation: Operation name from the dispatch table
            *args: Operation arguments

        Returns:
            Exit status of the elevated child

        Raises:
            ElevationDenied: The elevation request was declined
            PermissionDenied: This process is already an elevated child
                that did not receive administrative rights
            BootstrapError: The elevated process could not be started
        """
        if self.context.elevated_child:
            raise PermissionDenied(
                f"operation '{operation}'",
                "process was started elevated but lacks administrative rights"
            )

        argv = self.child_command(operation, *args)
        self.logger.info(f"Requesting elevation for '{operation}'")

        if self.context.windows:
            return self._run_as_windows(operation, argv)
        return self._run_with_sudo(operation, argv)

    def _run_as_windows(self, operation: str, argv: List[str]) -> int:
        # Only ERROR_CANCELLED from the shell-execute call means the prompt
        # was declined; any other launch failure is reported on stderr.
        arguments = subprocess.list2cmdline(argv[1:])
        script = (
            "$psi = New-Object System.Diagnostics.ProcessStartInfo; "
            f"$psi.FileName = {_ps_quote(argv[0])}; "
            f"$psi.Arguments = {_ps_quote(arguments)}; "
            f"$psi.WorkingDirectory = {_ps_quote(str(self.context.cwd))}; "
            "$psi.Verb = 'runas'; "
            "$psi.UseShellExecute = $true; "
            "try { $p = [System.Diagnostics.Process]::Start($psi) } catch { "
            "$e = $_.Exception; "
            "while ($e -and -not ($e -is [System.ComponentModel.Win32Exception])) { $e = $e.InnerException }; "
            f"if ($e -and $e.NativeErrorCode -eq {ERROR_CANCELLED}) {{ exit {ERROR_CANCELLED} }}; "
            f"[Console]::Error.WriteLine({_ps_quote(LAUNCH_FAILED_MARKER)} + $_.Exception.Message); "
            "exit 1 "
            "}; "
            "$p.WaitForExit(); "
            "exit $p.ExitCode"
        )
        result = self.runner.run(
            [self.powershell, "-NoProfile", "-NonInteractive", "-Command", script]
        )
        if result.returncode == ERROR_CANCELLED:
            raise ElevationDenied(operation, "the consent prompt was declined")
        if LAUNCH_FAILED_MARKER in (result.stderr or ""):
            raise BootstrapError(f"Cannot start elevated '{operation}': {result.stderr.strip()}")
        self.logger.info(f"Elevated '{operation}' exited with {result.returncode}")
        return result.returncode

    def _run_with_sudo(self, operation: str, argv: List[str]) -> int:
        # Validate credentials first so a refused password is not mistaken
        # for a failing child.
        check = self.runner.run([self.sudo, "-v"], capture=False)
        if not check.ok:
            raise ElevationDenied(operation, check.output or f"{self.sudo} -v exited with {check.returncode}")

        result = self.runner.run([self.sudo, "-n", "--", *argv], capture=False)
        self.logger.info(f"Elevated '{operation}' exited with {result.returncode}")
        return result.returncode
