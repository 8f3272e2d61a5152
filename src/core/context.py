"""
Process context: the ambient session state every component works against.

Components never read ``os.environ``, ``os.getcwd()`` or the OS identity
directly; they receive a ``ProcessContext`` so tests can supply a fake one.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Optional, Tuple

from .identity import Identity, current_identity


@dataclass(frozen=True)
class InvokingUser:
    """The unprivileged user an elevated child acts on behalf of."""

    name: str
    uid: int
    gid: int

    @property
    def owner(self) -> Tuple[int, int]:
        return self.uid, self.gid

@dataclass
class ProcessContext:
    """Current directory, environment snapshot and identity of this process."""

    cwd: Path
    environ: Dict[str, str]
    identity: Identity
    windows: bool = os.name == "nt"
    # Set when this process was itself started by an elevation request.
    elevated_child: bool = False
    home: Optional[Path] = field(default=None)

    @classmethod
    def from_current_process(cls, elevated_child: bool = False) -> "ProcessContext":
        return cls(
            cwd=Path.cwd(),
            environ=dict(os.environ),
            identity=current_identity(),
            elevated_child=elevated_child,
            home=Path.home(),
        )

    def getenv(self, key: str, default: Optional[str] = None) -> Optional[str]:
        return self.environ.get(key, default)

    def setenv(self, key: str, value: str) -> None:
        """Record a variable written to the OS so later steps see it."""
        self.environ[key] = value

    def expand(self, path) -> Path:
        """Expand ``~`` and make relative paths absolute against ``cwd``."""
        text = str(path)
        if text == "~" or text.startswith(("~/", "~\\")):
            text = str(self.home or Path.home()) + text[1:]
        expanded = Path(text)
        if not expanded.is_absolute():
            expanded = self.cwd / expanded
        return expanded

    def invoking_user(self) -> Optional[InvokingUser]:
        """The user who requested elevation, when this is a sudo child.

        sudo records the invoking account in ``SUDO_USER``, ``SUDO_UID`` and
        ``SUDO_GID``. User-scoped writes made here belong to that account.
        """
        if self.windows or not self.elevated_child:
            return None
        name = self.environ.get("SUDO_USER")
        uid = self.environ.get("SUDO_UID")
        gid = self.environ.get("SUDO_GID")
        if not name or not uid or not gid or uid == "0":
            return None
        try:
            return InvokingUser(name, int(uid), int(gid))
        except ValueError:
            return None
