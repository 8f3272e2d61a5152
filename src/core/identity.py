"""
Operating system identity queries.
"""

import ctypes
import logging
import os
from typing import Protocol

logger = logging.getLogger(__name__)

IS_WINDOWS = os.name == "nt"


class Identity(Protocol):
    """The security principal the current process runs as."""

    def is_admin(self) -> bool:
        ...


class WindowsIdentity:
    """Membership in the Administrators group, as seen by the shell."""

    def is_admin(self) -> bool:
        try:
            return bool(ctypes.windll.shell32.IsUserAnAdmin())
        except (AttributeError, OSError) as e:
            logger.debug(f"IsUserAnAdmin unavailable: {e}")
            return False


class PosixIdentity:
    """Effective uid 0."""

    def is_admin(self) -> bool:
        return os.geteuid() == 0


def current_identity() -> Identity:
    """Return the identity provider for this platform."""
    return WindowsIdentity() if IS_WINDOWS else PosixIdentity()
