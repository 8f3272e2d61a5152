"""
Configuration entries applied on every run.
"""

from enum import Enum
from pathlib import Path
from pydantic import BaseModel, ConfigDict, Field, field_validator


class SettingTarget(str, Enum):
    """Where a setting is written."""
    ALIAS = "alias"
    ENVIRONMENT_VARIABLE = "environment_variable"
    VCS_CONFIG = "vcs_config"


class SettingScope(str, Enum):
    """Scope of a setting; machine scope needs elevation."""
    USER = "user"
    MACHINE = "machine"


class SettingEntry(BaseModel):
    """A key/value setting written with overwrite semantics."""
    key: str = Field(..., description="Alias name, variable name or config key")
    value: str = Field(..., description="Value to write")
    target: SettingTarget = Field(..., description="Target system")
    scope: SettingScope = Field(default=SettingScope.USER, description="User or machine scope")

    @field_validator("key")
    @classmethod
    def validate_key(cls, v):
        if not v or any(c.isspace() for c in v):
            raise ValueError(f"Invalid setting key: {v!r}")
        return v

    @field_validator("value")
    @classmethod
    def validate_value(cls, v):
        # Profile files hold one entry per line
        if "\n" in v or "\r" in v:
            raise ValueError(f"Setting value must be a single line: {v!r}")
        return v

    @property
    def label(self) -> str:
        return f"{self.target.value}:{self.scope.value}:{self.key}"

    model_config = ConfigDict(json_schema_extra={
        "example": {
            "key": "DOTNET_CLI_TELEMETRY_OPTOUT",
            "value": "1",
            "target": "environment_variable",
            "scope": "machine"
        }
    })


class LinkEntry(BaseModel):
    """A directory link (junction on Windows, symlink elsewhere)."""
    source: Path = Field(..., description="Existing directory the link points to")
    target: Path = Field(..., description="Link path to create")


class ShellFlavor(str, Enum):
    """Syntax used for generated profile files."""
    POWERSHELL = "powershell"
    POSIX = "posix"
