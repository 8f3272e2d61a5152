"""
Configuration settings for the shell bootstrap.
"""

import os
from typing import Optional
from pathlib import Path
from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from src.models.setting import ShellFlavor

IS_WINDOWS = os.name == "nt"


def _default_user_dir() -> Path:
    if IS_WINDOWS:
        return Path.home() / "Documents" / "PowerShell" / "shell-bootstrap"
    return Path.home() / ".config" / "shell-bootstrap"


def _default_machine_dir() -> Path:
    if IS_WINDOWS:
        return Path(os.environ.get("ProgramData", r"C:\ProgramData")) / "shell-bootstrap"
    return Path("/etc/profile.d")


class ProfileConfig(BaseModel):
    """Where generated profile files live and which shell reads them."""
    shell: ShellFlavor = Field(
        default=ShellFlavor.POWERSHELL if IS_WINDOWS else ShellFlavor.POSIX,
        description="Syntax of generated profile files"
    )
    user_dir: Path = Field(default_factory=_default_user_dir, description="User-scoped profile directory")
    machine_dir: Path = Field(default_factory=_default_machine_dir, description="Machine-scoped profile directory")
    alias_file: str = Field(default="", description="Alias file name (derived from shell when empty)")
    env_file: str = Field(default="shell-bootstrap-env.sh", description="Exported variables file name")
    rc_file: Optional[Path] = Field(
        default=None,
        description="Shell rc file or PowerShell profile that loads the managed files (derived when empty)"
    )

    @field_validator("user_dir", "machine_dir", "rc_file")
    @classmethod
    def expand_home(cls, v):
        return Path(v).expanduser() if v is not None else v

    def alias_file_name(self) -> str:
        if self.alias_file:
            return self.alias_file
        if self.shell == ShellFlavor.POWERSHELL:
            return "shell-bootstrap-aliases.ps1"
        return "shell-bootstrap-aliases.sh"


class ElevationConfig(BaseModel):
    """Programs used to request elevated rights."""
    powershell: str = Field(default="powershell", description="PowerShell used for -Verb RunAs")
    sudo: str = Field(default="sudo", description="sudo used on POSIX systems")


class LoggingConfig(BaseModel):
    """Logging configuration."""
    level: str = Field(default="INFO", description="Logging level")
    format: str = Field(
        default="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        description="Log format"
    )
    file_path: Optional[Path] = Field(default_factory=lambda: _default_user_dir() / "logs" / "shell_bootstrap.log")
    max_file_size_mb: int = Field(default=10, description="Maximum log file size in MB")
    backup_count: int = Field(default=5, description="Number of log backups to keep")

    @field_validator("level")
    @classmethod
    def validate_level(cls, v):
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown logging level: {v}")
        return level


class Settings(BaseSettings):
    """Main application settings."""
    model_config = SettingsConfigDict(
        env_prefix="SHELL_BOOTSTRAP_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore"
    )

    # Component configs
    profile: ProfileConfig = Field(default_factory=ProfileConfig)
    elevation: ElevationConfig = Field(default_factory=ElevationConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    # Session start behaviour
    apply_settings_on_startup: bool = Field(
        default=True,
        description="Apply catalog settings every time the session starts"
    )
    install_on_startup: bool = Field(
        default=False,
        description="Run the install batch every time the session starts"
    )
    hook_profile_on_startup: bool = Field(
        default=True,
        description="Add the source block for the managed files to the shell rc file at session start"
    )

    # Operational settings
    dry_run: bool = Field(default=False, description="Log commands and writes instead of performing them")
    git: str = Field(default="git", description="git executable used for config writes")
