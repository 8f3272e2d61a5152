"""
Core modules for the shell bootstrap.
"""

from .orchestrator import BootstrapOrchestrator
from .installer import ToolInstaller
from .configurator import SettingsApplier
from .privilege import PrivilegeGate
from .context import ProcessContext

__all__ = [
    "BootstrapOrchestrator",
    "ToolInstaller",
    "SettingsApplier",
    "PrivilegeGate",
    "ProcessContext"
]
