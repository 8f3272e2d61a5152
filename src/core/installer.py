"""
Idempotent tool installer.

A tool's install command only runs when its presence check reports the tool
absent, so re-running a batch is safe: anything already installed is
skipped without touching the package manager.
"""

import logging
from typing import Iterable, List

from ..models.installation import InstallReport, InstallResult
from ..models.tool import ToolDescriptor
from .errors import InstallFailed
from .locator import ToolLocator
from .privilege import PrivilegeGate
from .runner import CommandRunner

INSTALL_TOOL_OPERATION = "install-tool"

# Failure reasons are kept to the tail of the captured output.
MAX_REASON_LENGTH = 2000


class ToolInstaller:
    """Ensures tools are installed, one at a time, in order."""

    def __init__(self,
                 runner: CommandRunner,
                 locator: ToolLocator,
                 gate: PrivilegeGate,
                 dry_run: bool = False):
        """
        Initialize the installer.

        Args:
            runner: Command runner for presence checks and install commands
            locator: Tool locator for command-name presence checks
            gate: Privilege gate for tools that need elevation
            dry_run: Log install commands instead of running them
        """
        self.logger = logging.getLogger(__name__)
        self.runner = runner
        self.locator = locator
        self.gate = gate
        self.dry_run = dry_run

    def is_present(self, tool: ToolDescriptor) -> bool:
        """Run the tool's presence check."""
        if tool.presence.verify:
            return self.runner.run(tool.presence.verify).ok
        return self.locator.locate(tool.presence.command) is not None

    def ensure_installed(self, tool: ToolDescriptor) -> InstallResult:
        """
        Install a tool unless it is already present.

        Args:
            tool: Tool descriptor

        Returns:
            AlreadyPresent, Installed or Failed result

        Raises:
            ElevationDenied: The tool needs elevation and the request was declined
        """
        if self.is_present(tool):
            self.logger.debug(f"{tool.name} already present")
            return InstallResult.already_present(tool.name)

        self.logger.info(f"Installing {tool.name} via {tool.manager.value}")
        try:
            self._install(tool)
        except InstallFailed as e:
            self.logger.error(str(e))
            return InstallResult.failed(tool.name, e.reason)

        self.logger.info(f"Installed {tool.name}")
        return InstallResult.installed(tool.name)

    def ensure_all_installed(self, tools: Iterable[ToolDescriptor]) -> InstallReport:
        """
        Ensure every tool in order, continuing past failures.

        Args:
            tools: Ordered tool descriptors

        Returns:
            Report holding one result per tool, in input order
        """
        report = InstallReport()
        for tool in tools:
            report.results.append(self.ensure_installed(tool))
        report.complete()

        if report.failures:
            self.logger.warning(
                f"{len(report.failures)} tool(s) failed to install: "
                f"{', '.join(r.tool for r in report.failures)}"
            )
        return report

    def _install(self, tool: ToolDescriptor) -> None:
        if self.dry_run:
            self.logger.info(f"[dry-run] would run: {' '.join(tool.install_command)}")
            return

        if tool.requires_elevation and not self.gate.is_elevated():
            status = self.gate.run_elevated(INSTALL_TOOL_OPERATION, tool.name)
            if status != 0:
                raise InstallFailed(tool.name, f"elevated install exited with status {status}")
            return

        result = self.runner.run(tool.install_command)
        if not result.ok:
            reason = result.output or f"exit status {result.returncode}"
            raise InstallFailed(tool.name, reason[-MAX_REASON_LENGTH:])


def find_tool(tools: List[ToolDescriptor], name: str) -> ToolDescriptor:
    """Look a tool up by name (case-insensitive)."""
    for tool in tools:
        if tool.name.lower() == name.lower():
            return tool
    raise KeyError(name)
