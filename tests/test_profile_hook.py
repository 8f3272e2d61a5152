"""
Tests for the rc file hook that loads the managed profile files.
"""

from pathlib import Path

import pytest

from src.core.errors import PermissionDenied
from src.core.profile_hook import BEGIN_MARKER, END_MARKER, ProfileHook, default_rc_file
from src.models.setting import ShellFlavor


class TestDefaultRcFile:
    def test_bash_by_default(self, context):
        assert default_rc_file(context, ShellFlavor.POSIX) == context.home / ".bashrc"

    def test_zsh_from_shell_variable(self, context):
        context.environ["SHELL"] = "/usr/bin/zsh"
        assert default_rc_file(context, ShellFlavor.POSIX) == context.home / ".zshrc"

    def test_powershell_profile(self, windows_context):
        expected = windows_context.home / "Documents" / "PowerShell" / "Microsoft.PowerShell_profile.ps1"
        assert default_rc_file(windows_context, ShellFlavor.POWERSHELL) == expected


class TestPosixHook:
    SOURCES = [Path("/home/me/.config/shell-bootstrap/aliases.sh"), Path("/etc/profile.d/my env.sh")]

    def test_appends_guarded_block(self, tmp_path):
        rc_file = tmp_path / ".bashrc"
        rc_file.write_text("alias ll='ls -l'")

        assert ProfileHook(rc_file, self.SOURCES, ShellFlavor.POSIX).ensure() is True

        assert rc_file.read_text().splitlines() == [
            "alias ll='ls -l'",
            BEGIN_MARKER,
            "[ -f /home/me/.config/shell-bootstrap/aliases.sh ] && . /home/me/.config/shell-bootstrap/aliases.sh",
            "[ -f '/etc/profile.d/my env.sh' ] && . '/etc/profile.d/my env.sh'",
            END_MARKER,
        ]

    def test_second_run_is_a_no_op(self, tmp_path):
        rc_file = tmp_path / ".bashrc"
        hook = ProfileHook(rc_file, self.SOURCES, ShellFlavor.POSIX)
        hook.ensure()
        before = rc_file.read_text()

        assert hook.ensure() is False
        assert rc_file.read_text() == before

    def test_block_replaced_in_place(self, tmp_path):
        rc_file = tmp_path / ".bashrc"
        ProfileHook(rc_file, self.SOURCES, ShellFlavor.POSIX).ensure()
        with rc_file.open("a") as f:
            f.write("export AFTER=1\n")

        ProfileHook(rc_file, self.SOURCES[:1], ShellFlavor.POSIX).ensure()

        lines = rc_file.read_text().splitlines()
        assert lines.count(BEGIN_MARKER) == 1
        assert not any("my env.sh" in line for line in lines)
        assert lines[-1] == "export AFTER=1"

    def test_dry_run_writes_nothing(self, tmp_path):
        rc_file = tmp_path / ".bashrc"
        assert ProfileHook(rc_file, self.SOURCES, ShellFlavor.POSIX, dry_run=True).ensure() is False
        assert not rc_file.exists()

    def test_unwritable_rc_is_permission_denied(self, tmp_path):
        blocker = tmp_path / "blocked"
        blocker.write_text("not a directory")

        with pytest.raises(PermissionDenied):
            ProfileHook(blocker / ".bashrc", self.SOURCES, ShellFlavor.POSIX).ensure()


class TestPowerShellHook:
    def test_dot_sources_with_test_path(self, tmp_path):
        profile = tmp_path / "Microsoft.PowerShell_profile.ps1"
        source = Path(r"C:\Users\O'Neil\Documents\PowerShell\shell-bootstrap\shell-bootstrap-aliases.ps1")

        ProfileHook(profile, [source], ShellFlavor.POWERSHELL).ensure()

        quoted = r"'C:\Users\O''Neil\Documents\PowerShell\shell-bootstrap\shell-bootstrap-aliases.ps1'"
        assert f"if (Test-Path {quoted}) {{ . {quoted} }}" in profile.read_text().splitlines()
