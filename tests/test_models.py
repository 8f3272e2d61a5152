"""
Tests for tool, setting and catalog models.
"""

import pytest
from pydantic import ValidationError

from config.catalog import default_catalog
from src.models.catalog import Catalog
from src.models.installation import InstallResult, InstallStatus
from src.models.setting import SettingEntry, SettingScope, SettingTarget
from src.models.tool import PackageManager, PresenceCheck, ToolDescriptor


class TestToolDescriptor:
    @pytest.mark.parametrize("manager,expected", [
        (PackageManager.SCOOP, ["scoop", "install", "pkg"]),
        (PackageManager.NPM, ["npm", "install", "-g", "pkg"]),
        (PackageManager.DOTNET, ["dotnet", "tool", "install", "-g", "pkg"]),
        (PackageManager.GO, ["go", "install", "pkg"]),
    ])
    def test_install_command_from_manager(self, manager, expected):
        tool = ToolDescriptor(name="tool", manager=manager, package="pkg")
        assert tool.install_command == expected

    def test_winget_uses_exact_id(self):
        tool = ToolDescriptor(name="code", manager="winget", package="Microsoft.VisualStudioCode")
        assert tool.install_command[:5] == ["winget", "install", "--id", "Microsoft.VisualStudioCode", "-e"]

    def test_package_defaults_to_name(self):
        assert ToolDescriptor(name="fzf").install_command == ["scoop", "install", "fzf"]

    def test_explicit_install_command_kept(self):
        tool = ToolDescriptor(name="rustup", manager="custom", install_command=["winget", "install", "Rustlang.Rustup"])
        assert tool.install_command == ["winget", "install", "Rustlang.Rustup"]

    def test_custom_requires_command(self):
        with pytest.raises(ValidationError):
            ToolDescriptor(name="thing", manager="custom")

    def test_presence_defaults_to_name(self):
        assert ToolDescriptor(name="rg", package="ripgrep").presence.command == "rg"

    def test_presence_rejects_both_methods(self):
        with pytest.raises(ValidationError):
            PresenceCheck(command="rg", verify=["rg", "--version"])

    def test_blank_name_rejected(self):
        with pytest.raises(ValidationError):
            ToolDescriptor(name="  ")


class TestSettingEntry:
    def test_defaults_to_user_scope(self):
        entry = SettingEntry(key="EDITOR", value="nvim", target="environment_variable")
        assert entry.scope == SettingScope.USER
        assert entry.label == "environment_variable:user:EDITOR"

    def test_key_with_whitespace_rejected(self):
        with pytest.raises(ValidationError):
            SettingEntry(key="bad key", value="x", target=SettingTarget.ALIAS)

    @pytest.mark.parametrize("value", ["line1\nit's", "a\rb", "trailing\n"])
    def test_multiline_value_rejected(self, value):
        with pytest.raises(ValidationError):
            SettingEntry(key="X", value=value, target=SettingTarget.ENVIRONMENT_VARIABLE)

    def test_schema_example(self):
        example = SettingEntry.model_json_schema()["example"]
        assert SettingEntry(**example).scope == SettingScope.MACHINE


class TestCatalog:
    def test_duplicate_tools_rejected(self):
        with pytest.raises(ValidationError):
            Catalog(tools=[{"name": "rg"}, {"name": "RG"}])

    def test_from_json_shape(self):
        catalog = Catalog(**{
            "tools": [{"name": "rg", "package": "ripgrep"}],
            "settings": [{"key": "g", "value": "git", "target": "alias"}],
            "links": [{"source": "~/dotfiles/nvim", "target": "~/.config/nvim"}],
            "updates": [{"name": "scoop", "command": ["scoop", "update", "*"]}],
        })
        assert catalog.tools[0].install_command == ["scoop", "install", "ripgrep"]
        assert catalog.settings[0].target == SettingTarget.ALIAS
        assert len(catalog.links) == 1

    def test_default_catalog_is_fresh_copy(self):
        first = default_catalog()
        first.tools.clear()
        assert default_catalog().tools

    def test_default_catalog_has_machine_settings(self):
        scopes = {s.scope for s in default_catalog().settings}
        assert scopes == {SettingScope.USER, SettingScope.MACHINE}


class TestInstallResult:
    def test_ok(self):
        assert InstallResult.installed("x").ok
        assert InstallResult.already_present("x").ok
        failed = InstallResult.failed("x", "reason")
        assert not failed.ok
        assert failed.status == InstallStatus.FAILED
