"""
Managed profile files holding aliases and exported variables.

The shell sources these files at session start. Each file is owned by the
bootstrap: it is parsed into key/value pairs, updated, and rewritten whole,
sorted by key, so applying the same entries again leaves it byte-identical.
"""

import logging
import os
import re
import shlex
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from ..models.setting import ShellFlavor

HEADER = "Managed by shell-bootstrap. Manual edits are overwritten."


def _ps_quote(value: str) -> str:
    return "'" + value.replace("'", "''") + "'"


def _ps_unquote(value: str) -> str:
    value = value.strip()
    if len(value) >= 2 and value[0] == value[-1] == "'":
        return value[1:-1].replace("''", "'")
    return value


def _sh_unquote(value: str) -> Optional[str]:
    try:
        parts = shlex.split(value)
    except ValueError:
        # Unbalanced quotes
        return None
    return parts[0] if parts else ""


class ProfileSyntax:
    """Renders and parses one line kind of a profile file."""

    comment = "#"

    def render(self, key: str, value: str) -> str:
        raise NotImplementedError

    def parse(self, line: str) -> Optional[Tuple[str, str]]:
        raise NotImplementedError


class PosixAliasSyntax(ProfileSyntax):
    pattern = re.compile(r"^alias (?P<key>[^=\s]+)=(?P<value>.*)$")

    def render(self, key: str, value: str) -> str:
        return f"alias {key}={shlex.quote(value)}"

    def parse(self, line: str) -> Optional[Tuple[str, str]]:
        match = self.pattern.match(line)
        if not match:
            return None
        value = _sh_unquote(match.group("value"))
        if value is None:
            return None
        return match.group("key"), value


class PosixExportSyntax(ProfileSyntax):
    pattern = re.compile(r"^export (?P<key>[A-Za-z_][A-Za-z0-9_]*)=(?P<value>.*)$")

    def render(self, key: str, value: str) -> str:
        return f"export {key}={shlex.quote(value)}"

    def parse(self, line: str) -> Optional[Tuple[str, str]]:
        match = self.pattern.match(line)
        if not match:
            return None
        value = _sh_unquote(match.group("value"))
        if value is None:
            return None
        return match.group("key"), value


class PowerShellAliasSyntax(ProfileSyntax):
    """``Set-Alias`` for plain command names, a wrapper function otherwise.

    PowerShell aliases cannot carry arguments, so ``gs -> git status``
    becomes ``function gs { git status @args }``.
    """

    alias_pattern = re.compile(r"^Set-Alias -Name (?P<key>\S+) -Value (?P<value>.+) -Force$")
    function_pattern = re.compile(r"^function (?P<key>\S+) \{ (?P<value>.*) @args \}$")

    def render(self, key: str, value: str) -> str:
        if any(c.isspace() for c in value.strip()):
            return f"function {key} {{ {value.strip()} @args }}"
        return f"Set-Alias -Name {key} -Value {_ps_quote(value)} -Force"

    def parse(self, line: str) -> Optional[Tuple[str, str]]:
        match = self.alias_pattern.match(line)
        if match:
            return match.group("key"), _ps_unquote(match.group("value"))
        match = self.function_pattern.match(line)
        if match:
            return match.group("key"), match.group("value")
        return None


SYNTAXES = {
    ("alias", ShellFlavor.POSIX): PosixAliasSyntax,
    ("alias", ShellFlavor.POWERSHELL): PowerShellAliasSyntax,
    ("export", ShellFlavor.POSIX): PosixExportSyntax,
}


class ManagedProfile:
    """A profile file of key/value lines owned by the bootstrap."""

    def __init__(self, path: Path, syntax: ProfileSyntax, owner: Optional[Tuple[int, int]] = None):
        """
        Args:
            path: Profile file path
            syntax: Line syntax
            owner: (uid, gid) given the file and any directories created for
                it, when written on behalf of another user
        """
        self.logger = logging.getLogger(__name__)
        self.path = Path(path)
        self.syntax = syntax
        self.owner = owner

    @classmethod
    def for_kind(cls, path: Path, kind: str, flavor: ShellFlavor,
                 owner: Optional[Tuple[int, int]] = None) -> "ManagedProfile":
        try:
            syntax = SYNTAXES[(kind, flavor)]()
        except KeyError:
            raise ValueError(f"No {flavor.value} syntax for {kind} profiles")
        return cls(path, syntax, owner)

    def read(self) -> Dict[str, str]:
        """Parse the file into key/value pairs; unknown lines are dropped."""
        entries: Dict[str, str] = {}
        if not self.path.exists():
            return entries
        for line in self.path.read_text(encoding="utf-8").splitlines():
            parsed = self.syntax.parse(line.strip())
            if parsed:
                key, value = parsed
                entries[key] = value
        return entries

    def get(self, key: str) -> Optional[str]:
        return self.read().get(key)

    def render(self, entries: Dict[str, str]) -> str:
        lines = [f"{self.syntax.comment} {HEADER}"]
        lines.extend(self.syntax.render(key, entries[key]) for key in sorted(entries))
        return "\n".join(lines) + "\n"

    def set(self, key: str, value: str) -> bool:
        """
        Write one entry, overwriting any previous value.

        Returns:
            True if the file content changed

        Raises:
            OSError: The file or its directory cannot be written
        """
        entries = self.read()
        entries[key] = value
        content = self.render(entries)

        if self.path.exists() and self.path.read_text(encoding="utf-8") == content:
            return False

        created = _missing_parents(self.path)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(content, encoding="utf-8")
        if self.owner is not None:
            for path in [*created, self.path]:
                os.chown(path, *self.owner)
        self.logger.debug(f"Wrote {key} to {self.path}")
        return True


def _missing_parents(path: Path) -> List[Path]:
    missing = []
    parent = path.parent
    while not parent.exists() and parent != parent.parent:
        missing.append(parent)
        parent = parent.parent
    return missing
