"""
Default workstation catalog: tools, settings, links and update commands.

A JSON config file with a "catalog" section replaces these defaults.
"""

from src.models.catalog import Catalog, UpdateCommand
from src.models.setting import SettingEntry, SettingScope, SettingTarget
from src.models.tool import PackageManager, ToolDescriptor

USER = SettingScope.USER
MACHINE = SettingScope.MACHINE


def _scoop(name, package=None, description=None):
    return ToolDescriptor(name=name, manager=PackageManager.SCOOP, package=package, description=description)


def _winget(name, package, description=None, requires_elevation=False):
    return ToolDescriptor(
        name=name,
        manager=PackageManager.WINGET,
        package=package,
        description=description,
        requires_elevation=requires_elevation
    )


def _npm(name, package=None):
    return ToolDescriptor(name=name, manager=PackageManager.NPM, package=package)


def _dotnet(name, package):
    return ToolDescriptor(name=name, manager=PackageManager.DOTNET, package=package)


def _go(name, package):
    return ToolDescriptor(name=name, manager=PackageManager.GO, package=package)


DEFAULT_TOOLS = [
    _scoop("git", description="Version control"),
    _scoop("rg", "ripgrep", "Recursive grep"),
    _scoop("fd", description="Fast find"),
    _scoop("fzf", description="Fuzzy finder"),
    _scoop("bat", description="cat with syntax highlighting"),
    _scoop("jq", description="JSON processor"),
    _scoop("lazygit"),
    _scoop("delta", description="git diff pager"),
    _scoop("zoxide", description="Directory jumper"),
    _scoop("starship", description="Prompt"),
    _scoop("nvim", "neovim", "Editor"),
    _scoop("node", "nodejs-lts"),
    _scoop("go"),
    _winget("pwsh", "Microsoft.PowerShell", "PowerShell 7", requires_elevation=True),
    _winget("dotnet", "Microsoft.DotNet.SDK.8", ".NET SDK", requires_elevation=True),
    _winget("code", "Microsoft.VisualStudioCode", "VS Code"),
    _npm("tsc", "typescript"),
    _npm("prettier"),
    _npm("tldr"),
    _dotnet("dotnet-ef", "dotnet-ef"),
    _dotnet("csharpier", "csharpier"),
    _go("gopls", "golang.org/x/tools/gopls@latest"),
    _go("lf", "github.com/gokcehan/lf@latest"),
]

DEFAULT_SETTINGS = [
    # Aliases
    SettingEntry(key="g", value="git", target=SettingTarget.ALIAS),
    SettingEntry(key="lg", value="lazygit", target=SettingTarget.ALIAS),
    SettingEntry(key="vim", value="nvim", target=SettingTarget.ALIAS),
    SettingEntry(key="gs", value="git status -sb", target=SettingTarget.ALIAS),
    # Environment variables
    SettingEntry(key="EDITOR", value="nvim", target=SettingTarget.ENVIRONMENT_VARIABLE),
    SettingEntry(key="FZF_DEFAULT_COMMAND", value="fd --type f --hidden --exclude .git",
                 target=SettingTarget.ENVIRONMENT_VARIABLE),
    SettingEntry(key="DOTNET_CLI_TELEMETRY_OPTOUT", value="1",
                 target=SettingTarget.ENVIRONMENT_VARIABLE, scope=MACHINE),
    SettingEntry(key="POWERSHELL_TELEMETRY_OPTOUT", value="1",
                 target=SettingTarget.ENVIRONMENT_VARIABLE, scope=MACHINE),
    # Git configuration
    SettingEntry(key="alias.st", value="status -sb", target=SettingTarget.VCS_CONFIG),
    SettingEntry(key="alias.co", value="checkout", target=SettingTarget.VCS_CONFIG),
    SettingEntry(key="alias.lg", value="log --oneline --graph --decorate", target=SettingTarget.VCS_CONFIG),
    SettingEntry(key="core.autocrlf", value="input", target=SettingTarget.VCS_CONFIG),
    SettingEntry(key="core.pager", value="delta", target=SettingTarget.VCS_CONFIG),
    SettingEntry(key="credential.helper", value="manager", target=SettingTarget.VCS_CONFIG),
    SettingEntry(key="init.defaultBranch", value="main", target=SettingTarget.VCS_CONFIG),
]

DEFAULT_UPDATES = [
    UpdateCommand(name="scoop", command=["scoop", "update", "*"]),
    UpdateCommand(name="winget", command=["winget", "upgrade", "--all", "--silent",
                                          "--accept-source-agreements", "--accept-package-agreements"]),
    UpdateCommand(name="npm", command=["npm", "update", "-g"]),
    UpdateCommand(name="dotnet tools", command=["dotnet", "tool", "update", "--all", "-g"]),
]


def default_catalog() -> Catalog:
    """Return a fresh copy of the default catalog."""
    return Catalog(
        tools=[t.model_copy(deep=True) for t in DEFAULT_TOOLS],
        settings=[s.model_copy() for s in DEFAULT_SETTINGS],
        links=[],
        updates=[u.model_copy(deep=True) for u in DEFAULT_UPDATES]
    )
