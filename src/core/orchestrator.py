"""
Bootstrap orchestrator: wires the components and owns the operation table.
"""

import logging
from typing import Dict, List, Optional

from ..models.catalog import Catalog
from ..models.installation import InstallReport, UpdateResult
from ..models.setting import ShellFlavor
from .configurator import (
    APPLY_SETTINGS_OPERATION,
    AliasWriter,
    EnvironmentWriter,
    SettingsApplier,
    VcsConfigWriter,
)
from .context import ProcessContext
from .errors import EXIT_FAILURE, EXIT_OK, BootstrapError
from .installer import INSTALL_TOOL_OPERATION, ToolInstaller, find_tool
from .linker import DirectoryLinker
from .locator import PathToolLocator, ToolLocator
from .operations import OperationRegistry, require_args
from .privilege import PrivilegeGate
from .profile_hook import ProfileHook, default_rc_file
from .runner import CommandRunner
from .updater import SystemUpdater


class BootstrapOrchestrator:
    """Runs session startup and the named bootstrap operations."""

    def __init__(self,
                 catalog: Catalog,
                 context: ProcessContext,
                 gate: PrivilegeGate,
                 installer: ToolInstaller,
                 applier: SettingsApplier,
                 linker: DirectoryLinker,
                 updater: SystemUpdater,
                 profile_hook: Optional[ProfileHook] = None,
                 apply_settings_on_startup: bool = True,
                 install_on_startup: bool = False):
        """
        Initialize the orchestrator.

        Args:
            catalog: Tools, settings, links and update commands
            context: Process context
            gate: Privilege gate
            installer: Tool installer
            applier: Settings applier
            linker: Directory linker
            updater: System updater
            profile_hook: rc file hook kept up to date during ``startup``
            apply_settings_on_startup: Apply settings during ``startup``
            install_on_startup: Run the install batch during ``startup``
        """
        self.logger = logging.getLogger(__name__)
        self.catalog = catalog
        self.context = context
        self.gate = gate
        self.installer = installer
        self.applier = applier
        self.linker = linker
        self.updater = updater
        self.profile_hook = profile_hook
        self.apply_settings_on_startup = apply_settings_on_startup
        self.install_on_startup = install_on_startup
        self.registry = self._build_registry()

    @classmethod
    def from_settings(cls,
                      settings,
                      catalog: Catalog,
                      context: ProcessContext,
                      relaunch_command: List[str],
                      runner: Optional[CommandRunner] = None,
                      locator: Optional[ToolLocator] = None) -> "BootstrapOrchestrator":
        """Build the orchestrator and its components from application settings."""
        runner = runner or CommandRunner(context)
        locator = locator or PathToolLocator(context)
        profile = settings.profile
        dry_run = settings.dry_run
        # A sudo child writes user-scoped settings on behalf of its invoker
        invoker = context.invoking_user()
        user_owner = invoker.owner if invoker else None

        alias_files = [profile.user_dir / profile.alias_file_name(),
                       profile.machine_dir / profile.alias_file_name()]
        env_files = [profile.user_dir / profile.env_file, profile.machine_dir / profile.env_file]

        gate = PrivilegeGate(
            context,
            runner,
            relaunch_command,
            powershell=settings.elevation.powershell,
            sudo=settings.elevation.sudo
        )
        applier = SettingsApplier(
            gate,
            AliasWriter(*alias_files, profile.shell, user_owner=user_owner),
            EnvironmentWriter(
                context,
                runner,
                *env_files,
                powershell=settings.elevation.powershell,
                user_owner=user_owner
            ),
            VcsConfigWriter(
                runner,
                git=settings.git,
                run_as=invoker.name if invoker else None,
                sudo=settings.elevation.sudo
            ),
            dry_run=dry_run
        )

        profile_hook = None
        if settings.hook_profile_on_startup:
            sources = list(alias_files)
            if profile.shell == ShellFlavor.POSIX and not context.windows:
                sources += env_files
            profile_hook = ProfileHook(
                profile.rc_file or default_rc_file(context, profile.shell),
                sources,
                profile.shell,
                dry_run=dry_run
            )

        return cls(
            catalog=catalog,
            context=context,
            gate=gate,
            installer=ToolInstaller(runner, locator, gate, dry_run=dry_run),
            applier=applier,
            linker=DirectoryLinker(context, runner, dry_run=dry_run),
            updater=SystemUpdater(runner, locator, dry_run=dry_run),
            profile_hook=profile_hook,
            apply_settings_on_startup=settings.apply_settings_on_startup,
            install_on_startup=settings.install_on_startup
        )

    def _build_registry(self) -> OperationRegistry:
        registry = OperationRegistry()
        registry.register("startup", self.startup,
                          "Session start: apply settings, hook the shell profile, optionally install")
        registry.register("install", self.install, "Install every catalog tool that is missing")
        registry.register(INSTALL_TOOL_OPERATION, self.install_tool, "Install one catalog tool", "<tool>")
        registry.register(APPLY_SETTINGS_OPERATION, self.apply_settings, "Write aliases, variables and git config")
        registry.register("link", self.link, "Create catalog directory links")
        registry.register("update", self.update, "Run package manager updates")
        return registry

    # ----- Dispatch -----

    def run(self, operation: str, args: Optional[List[str]] = None) -> int:
        """Run an operation in this process."""
        return self.registry.dispatch(operation, args or [])

    def run_admin(self, operation: str, args: Optional[List[str]] = None) -> int:
        """Run an operation with administrative rights.

        Runs in-process when already elevated, otherwise in an elevated child.
        """
        args = args or []
        if operation not in self.registry:
            # Surface the unknown name before prompting for elevation.
            return self.registry.dispatch(operation, args)
        if self.gate.is_elevated():
            return self.registry.dispatch(operation, args)
        return self.gate.run_elevated(operation, *args)

    # ----- Operations -----

    def startup(self, args: List[str]) -> int:
        require_args("startup", args, 0, "")
        status = EXIT_OK
        if self.apply_settings_on_startup:
            status = self.apply_settings([])
        if self.profile_hook is not None and not self.context.elevated_child:
            self.profile_hook.ensure()
        if self.install_on_startup:
            status = max(status, self.install([]))
        return status

    def install(self, args: List[str]) -> int:
        require_args("install", args, 0, "")
        self.logger.info(f"Ensuring {len(self.catalog.tools)} tool(s)")
        report = self.installer.ensure_all_installed(self.catalog.tools)
        self._log_install_summary(report)
        return EXIT_OK if report.success else EXIT_FAILURE

    def install_tool(self, args: List[str]) -> int:
        require_args(INSTALL_TOOL_OPERATION, args, 1, "<tool>")
        try:
            tool = find_tool(self.catalog.tools, args[0])
        except KeyError:
            raise BootstrapError(f"No tool named '{args[0]}' in the catalog")
        result = self.installer.ensure_installed(tool)
        if not result.ok:
            self.logger.error(f"{tool.name}: {result.reason}")
            return EXIT_FAILURE
        self.logger.info(f"{tool.name}: {result.status.value}")
        return EXIT_OK

    def apply_settings(self, args: List[str]) -> int:
        require_args(APPLY_SETTINGS_OPERATION, args, 0, "")
        self.applier.apply_settings(self.catalog.settings)
        return EXIT_OK

    def link(self, args: List[str]) -> int:
        require_args("link", args, 0, "")
        created = self.linker.link_all(self.catalog.links)
        self.logger.info(f"Created {created} link(s), {len(self.catalog.links) - created} already in place")
        return EXIT_OK

    def update(self, args: List[str]) -> int:
        require_args("update", args, 0, "")
        results = self.updater.update_all(self.catalog.updates)
        self._log_update_summary(results)
        return EXIT_OK if all(r.success for r in results) else EXIT_FAILURE

    # ----- Reporting -----

    def _log_install_summary(self, report: InstallReport) -> None:
        self.logger.info("=" * 60)
        self.logger.info("INSTALL SUMMARY")
        self.logger.info("=" * 60)
        self.logger.info(f"Total tools: {len(report.results)}")
        self.logger.info(f"Already present: {len(report.already_present)}")
        self.logger.info(f"Installed: {len(report.installed)}")
        self.logger.info(f"Failed: {len(report.failures)}")
        for failure in report.failures:
            self.logger.error(f"  {failure.tool}: {failure.reason}")
        if report.duration_seconds is not None:
            self.logger.info(f"Duration: {report.duration_seconds:.2f} seconds")
        self.logger.info("=" * 60)

    def _log_update_summary(self, results: List[UpdateResult]) -> None:
        counts: Dict[str, int] = {"updated": 0, "skipped": 0, "failed": 0}
        for result in results:
            if result.skipped:
                counts["skipped"] += 1
            elif result.success:
                counts["updated"] += 1
            else:
                counts["failed"] += 1
                self.logger.error(f"  {result.name}: {result.output or 'failed'}")
        self.logger.info(
            f"Updates: {counts['updated']} ran, {counts['skipped']} skipped, {counts['failed']} failed"
        )
