"""
Tool lookup on the session PATH.
"""

import shutil
from typing import Optional, Protocol

from .context import ProcessContext


class ToolLocator(Protocol):
    """Finds an executable by name."""

    def locate(self, command: str) -> Optional[str]:
        ...


class PathToolLocator:
    """Looks commands up on the context's PATH without spawning anything."""

    def __init__(self, context: ProcessContext):
        self.context = context

    def locate(self, command: str) -> Optional[str]:
        return shutil.which(command, path=self.context.getenv("PATH"))
