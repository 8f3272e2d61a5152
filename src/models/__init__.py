"""
Data models for the shell bootstrap.
"""

from .tool import ToolDescriptor, PresenceCheck, PackageManager
from .installation import InstallResult, InstallReport, InstallStatus, UpdateResult
from .setting import SettingEntry, SettingScope, SettingTarget, LinkEntry, ShellFlavor
from .catalog import Catalog, UpdateCommand

__all__ = [
    "ToolDescriptor",
    "PresenceCheck",
    "PackageManager",
    "InstallResult",
    "InstallReport",
    "InstallStatus",
    "UpdateResult",
    "SettingEntry",
    "SettingScope",
    "SettingTarget",
    "LinkEntry",
    "ShellFlavor",
    "Catalog",
    "UpdateCommand"
]
