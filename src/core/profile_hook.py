"""
Profile hook: the block in the user's shell rc file that loads the managed
profile files.

The block sits between marker lines. It is appended once and rewritten in
place when the set of files changes; the rest of the rc file is untouched.
"""

import logging
import shlex
from pathlib import Path
from typing import List, Optional, Sequence

from ..models.setting import ShellFlavor
from .context import ProcessContext
from .errors import PermissionDenied

BEGIN_MARKER = "# >>> shell-bootstrap >>>"
END_MARKER = "# <<< shell-bootstrap <<<"


def _ps_quote(value: str) -> str:
    return "'" + value.replace("'", "''") + "'"


def default_rc_file(context: ProcessContext, flavor: ShellFlavor) -> Path:
    """The rc file an interactive shell of the given flavor reads.

    PowerShell reads ``$PROFILE`` (CurrentUserCurrentHost). POSIX shells
    read ``~/.zshrc`` when ``$SHELL`` is zsh and ``~/.bashrc`` otherwise.
    """
    home = context.home or Path.home()
    if flavor == ShellFlavor.POWERSHELL:
        return home / "Documents" / "PowerShell" / "Microsoft.PowerShell_profile.ps1"
    shell = context.getenv("SHELL") or ""
    if Path(shell).name == "zsh":
        return home / ".zshrc"
    return home / ".bashrc"


class ProfileHook:
    """Keeps the source block for the managed profile files in an rc file."""

    def __init__(self, rc_file: Path, sources: Sequence[Path], flavor: ShellFlavor, dry_run: bool = False):
        """
        Initialize the hook.

        Args:
            rc_file: Shell rc file or PowerShell profile to edit
            sources: Managed profile files to load, in order
            flavor: Syntax of the rc file
            dry_run: Log the edit instead of performing it
        """
        self.logger = logging.getLogger(__name__)
        self.rc_file = Path(rc_file)
        self.sources = list(sources)
        self.flavor = flavor
        self.dry_run = dry_run

    def _source_line(self, path: Path) -> str:
        if self.flavor == ShellFlavor.POWERSHELL:
            quoted = _ps_quote(str(path))
            return f"if (Test-Path {quoted}) {{ . {quoted} }}"
        quoted = shlex.quote(str(path))
        return f"[ -f {quoted} ] && . {quoted}"

    def block(self) -> List[str]:
        return [BEGIN_MARKER, *(self._source_line(p) for p in self.sources), END_MARKER]

    def ensure(self) -> bool:
        """
        Add or refresh the source block.

        Returns:
            True if the rc file changed

        Raises:
            PermissionDenied: The rc file cannot be read or written
        """
        try:
            text = self.rc_file.read_text(encoding="utf-8") if self.rc_file.exists() else ""
        except OSError as e:
            raise PermissionDenied(str(self.rc_file), f"cannot read: {e}")

        updated = self._with_block(text)
        if updated == text:
            self.logger.debug(f"Profile hook already in {self.rc_file}")
            return False

        if self.dry_run:
            self.logger.info(f"[dry-run] would add the profile hook to {self.rc_file}")
            return False

        try:
            self.rc_file.parent.mkdir(parents=True, exist_ok=True)
            self.rc_file.write_text(updated, encoding="utf-8")
        except OSError as e:
            raise PermissionDenied(str(self.rc_file), f"cannot write: {e}")
        self.logger.info(f"Added the profile hook to {self.rc_file}")
        return True

    def _with_block(self, text: str) -> str:
        lines = text.splitlines()
        block = self.block()
        start = _index(lines, BEGIN_MARKER)
        end = _index(lines, END_MARKER, start) if start is not None else None

        if start is not None and end is not None:
            lines[start:end + 1] = block
            return "\n".join(lines) + "\n"

        prefix = text
        if prefix and not prefix.endswith("\n"):
            prefix += "\n"
        return prefix + "\n".join(block) + "\n"


def _index(lines: List[str], marker: str, start: Optional[int] = 0) -> Optional[int]:
    for i in range(start or 0, len(lines)):
        if lines[i].strip() == marker:
            return i
    return None
