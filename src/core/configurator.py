"""
Configuration applier: aliases, environment variables and git config.

Settings are independent key/value writes with overwrite semantics. A batch
is applied in order and stops at the first rejected write; earlier writes
are not rolled back.
"""

import logging
from pathlib import Path
from typing import Iterable, List, Optional, Tuple

from ..models.setting import SettingEntry, SettingScope, SettingTarget, ShellFlavor
from .context import ProcessContext
from .errors import PermissionDenied
from .privilege import PrivilegeGate
from .profile_files import ManagedProfile
from .runner import CommandRunner

APPLY_SETTINGS_OPERATION = "apply-settings"


def _ps_quote(value: str) -> str:
    return "'" + value.replace("'", "''") + "'"


class AliasWriter:
    """Writes aliases into the managed alias profile for the entry's scope."""

    def __init__(self, user_file: Path, machine_file: Path, flavor: ShellFlavor,
                 user_owner: Optional[Tuple[int, int]] = None):
        self.profiles = {
            SettingScope.USER: ManagedProfile.for_kind(user_file, "alias", flavor, owner=user_owner),
            SettingScope.MACHINE: ManagedProfile.for_kind(machine_file, "alias", flavor),
        }

    def is_current(self, entry: SettingEntry) -> bool:
        return self.profiles[entry.scope].get(entry.key) == entry.value

    def write(self, entry: SettingEntry) -> None:
        profile = self.profiles[entry.scope]
        try:
            profile.set(entry.key, entry.value)
        except OSError as e:
            raise PermissionDenied(entry.label, f"cannot write {profile.path}: {e}")


class EnvironmentWriter:
    """Persists environment variables at user or machine scope.

    On Windows the variables go to the registry-backed environment through
    ``[Environment]::SetEnvironmentVariable``; elsewhere into an exported
    profile file.
    """

    def __init__(self,
                 context: ProcessContext,
                 runner: CommandRunner,
                 user_file: Path,
                 machine_file: Path,
                 powershell: str = "powershell",
                 user_owner: Optional[Tuple[int, int]] = None):
        self.context = context
        self.runner = runner
        self.powershell = powershell
        self.profiles = {}
        if not context.windows:
            self.profiles = {
                SettingScope.USER: ManagedProfile.for_kind(user_file, "export", ShellFlavor.POSIX,
                                                           owner=user_owner),
                SettingScope.MACHINE: ManagedProfile.for_kind(machine_file, "export", ShellFlavor.POSIX),
            }

    def is_current(self, entry: SettingEntry) -> bool:
        if not self.context.windows:
            return self.profiles[entry.scope].get(entry.key) == entry.value
        script = (
            f"[Environment]::GetEnvironmentVariable("
            f"{_ps_quote(entry.key)}, {_ps_quote(_registry_target(entry))})"
        )
        result = self.runner.run([self.powershell, "-NoProfile", "-NonInteractive", "-Command", script])
        return result.ok and result.stdout.rstrip("\r\n") == entry.value

    def write(self, entry: SettingEntry) -> None:
        if self.context.windows:
            self._write_windows(entry)
        else:
            profile = self.profiles[entry.scope]
            try:
                profile.set(entry.key, entry.value)
            except OSError as e:
                raise PermissionDenied(entry.label, f"cannot write {profile.path}: {e}")
        self.context.setenv(entry.key, entry.value)

    def _write_windows(self, entry: SettingEntry) -> None:
        script = (
            f"[Environment]::SetEnvironmentVariable("
            f"{_ps_quote(entry.key)}, {_ps_quote(entry.value)}, {_ps_quote(_registry_target(entry))})"
        )
        result = self.runner.run([self.powershell, "-NoProfile", "-NonInteractive", "-Command", script])
        if not result.ok:
            raise PermissionDenied(entry.label, result.output or f"exit status {result.returncode}")


def _registry_target(entry: SettingEntry) -> str:
    return "Machine" if entry.scope == SettingScope.MACHINE else "User"


class VcsConfigWriter:
    """Writes git configuration through ``git config``.

    In a sudo child, user-level (``--global``) writes run as the invoking
    user so they land in that user's own git config.
    """

    def __init__(self, runner: CommandRunner, git: str = "git",
                 run_as: Optional[str] = None, sudo: str = "sudo"):
        self.runner = runner
        self.git = git
        self.run_as = run_as
        self.sudo = sudo

    def _command(self, entry: SettingEntry, *args: str) -> List[str]:
        level = "--system" if entry.scope == SettingScope.MACHINE else "--global"
        argv = [self.git, "config", level, *args]
        if self.run_as and entry.scope == SettingScope.USER:
            argv = [self.sudo, "-u", self.run_as, "-H", "--", *argv]
        return argv

    def is_current(self, entry: SettingEntry) -> bool:
        result = self.runner.run(self._command(entry, "--get", entry.key))
        return result.ok and result.stdout.rstrip("\r\n") == entry.value

    def write(self, entry: SettingEntry) -> None:
        result = self.runner.run(self._command(entry, entry.key, entry.value))
        if not result.ok:
            raise PermissionDenied(entry.label, result.output or f"exit status {result.returncode}")


class SettingsApplier:
    """Applies setting entries, delegating to an elevated process when needed."""

    def __init__(self,
                 gate: PrivilegeGate,
                 aliases: AliasWriter,
                 environment: EnvironmentWriter,
                 vcs: VcsConfigWriter,
                 dry_run: bool = False):
        """
        Initialize the applier.

        Args:
            gate: Privilege gate consulted for machine-scoped entries
            aliases: Alias writer
            environment: Environment variable writer
            vcs: Git config writer
            dry_run: Log writes instead of performing them
        """
        self.logger = logging.getLogger(__name__)
        self.gate = gate
        self.writers = {
            SettingTarget.ALIAS: aliases,
            SettingTarget.ENVIRONMENT_VARIABLE: environment,
            SettingTarget.VCS_CONFIG: vcs,
        }
        self.dry_run = dry_run

    def apply_settings(self, settings: Iterable[SettingEntry]) -> None:
        """
        Apply settings in order.

        When a machine-scoped entry differs from what the system already
        holds and the process is not elevated, the whole batch is handed to
        an elevated ``apply-settings`` run and nothing is written from this
        process. Machine-scoped entries already in place are left alone, so
        a configured machine is never asked for elevation again.

        Args:
            settings: Ordered setting entries

        Raises:
            PermissionDenied: A write was rejected, or the elevated run failed
            ElevationDenied: The elevation request was declined
        """
        entries: List[SettingEntry] = list(settings)
        machine = [e for e in entries if e.scope == SettingScope.MACHINE]
        machine_in_place = False

        if machine and not self.dry_run and not self.gate.is_elevated():
            pending = [e for e in machine if not self.writers[e.target].is_current(e)]
            if pending:
                self.logger.info(
                    f"{len(pending)} machine-scoped setting(s) to change; delegating to an elevated process"
                )
                status = self.gate.run_elevated(APPLY_SETTINGS_OPERATION)
                if status != 0:
                    raise PermissionDenied(
                        f"operation '{APPLY_SETTINGS_OPERATION}'",
                        f"elevated run exited with status {status}",
                        exit_code=status
                    )
                return
            self.logger.debug("Machine-scoped settings already in place")
            machine_in_place = True

        applied = 0
        for entry in entries:
            if machine_in_place and entry.scope == SettingScope.MACHINE:
                continue
            if self.dry_run:
                self.logger.info(f"[dry-run] would set {entry.label} = {entry.value}")
                continue
            self.writers[entry.target].write(entry)
            applied += 1
            self.logger.debug(f"Applied {entry.label}")

        if not self.dry_run:
            self.logger.info(f"Applied {applied} setting(s)")
