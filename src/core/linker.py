"""
Directory links: junctions on Windows, symlinks elsewhere.
"""

import logging
import os
from pathlib import Path
from typing import Iterable

from ..models.setting import LinkEntry
from .context import ProcessContext
from .errors import BootstrapError, LinkConflict, PathNotFound
from .runner import CommandRunner


class DirectoryLinker:
    """Creates directory links, leaving correct existing links alone."""

    def __init__(self, context: ProcessContext, runner: CommandRunner, dry_run: bool = False):
        self.logger = logging.getLogger(__name__)
        self.context = context
        self.runner = runner
        self.dry_run = dry_run

    def link_directory(self, source, target) -> bool:
        """
        Link ``target`` to the existing directory ``source``.

        Args:
            source: Existing directory
            target: Link path to create

        Returns:
            True if a link was created, False if it already existed

        Raises:
            PathNotFound: ``source`` is not an existing directory
            LinkConflict: ``target`` exists and is not a link to ``source``
        """
        source = self.context.expand(source)
        target = self.context.expand(target)

        if not source.is_dir():
            raise PathNotFound(source)

        if target.exists() or target.is_symlink():
            if self._points_to(target, source):
                self.logger.debug(f"{target} already links to {source}")
                return False
            raise LinkConflict(target, f"points to {target.resolve()}")

        if self.dry_run:
            self.logger.info(f"[dry-run] would link {target} -> {source}")
            return True

        target.parent.mkdir(parents=True, exist_ok=True)
        if self.context.windows:
            result = self.runner.run(["cmd", "/c", "mklink", "/J", str(target), str(source)])
            if not result.ok:
                raise BootstrapError(f"mklink failed for {target}: {result.output}")
        else:
            os.symlink(source, target, target_is_directory=True)

        self.logger.info(f"Linked {target} -> {source}")
        return True

    def link_all(self, links: Iterable[LinkEntry]) -> int:
        """Create every link in order, stopping at the first error."""
        created = 0
        for link in links:
            if self.link_directory(link.source, link.target):
                created += 1
        return created

    @staticmethod
    def _points_to(target: Path, source: Path) -> bool:
        try:
            return target.resolve() == source.resolve()
        except OSError:
            return False
