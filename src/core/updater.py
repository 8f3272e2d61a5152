"""
System update sweep across installed package managers.
"""

import logging
from typing import Iterable, List

from ..models.catalog import UpdateCommand
from ..models.installation import UpdateResult
from .locator import ToolLocator
from .runner import CommandRunner


class SystemUpdater:
    """Runs each configured update command, skipping absent package managers."""

    def __init__(self, runner: CommandRunner, locator: ToolLocator, dry_run: bool = False):
        self.logger = logging.getLogger(__name__)
        self.runner = runner
        self.locator = locator
        self.dry_run = dry_run

    def update_all(self, commands: Iterable[UpdateCommand]) -> List[UpdateResult]:
        """
        Run update commands in order, continuing past failures.

        Args:
            commands: Update commands

        Returns:
            One result per command
        """
        results: List[UpdateResult] = []
        for update in commands:
            executable = update.command[0]
            if self.locator.locate(executable) is None:
                self.logger.info(f"Skipping {update.name}: {executable} not found")
                results.append(UpdateResult(name=update.name, command=update.command,
                                            success=True, skipped=True))
                continue

            if self.dry_run:
                self.logger.info(f"[dry-run] would run: {' '.join(update.command)}")
                results.append(UpdateResult(name=update.name, command=update.command, success=True))
                continue

            self.logger.info(f"Updating {update.name}")
            result = self.runner.run(update.command)
            if not result.ok:
                self.logger.error(f"Update {update.name} failed with exit status {result.returncode}")
            results.append(UpdateResult(
                name=update.name,
                command=update.command,
                success=result.ok,
                output=result.output or None
            ))
        return results
