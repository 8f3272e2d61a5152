"""
Tool-related data models.
"""

from enum import Enum
from typing import Optional, List
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class PackageManager(str, Enum):
    """Package manager used to install a tool."""
    SCOOP = "scoop"
    WINGET = "winget"
    NPM = "npm"
    DOTNET = "dotnet"
    GO = "go"
    CUSTOM = "custom"


# Argument templates per package manager; "{package}" is substituted.
INSTALL_TEMPLATES = {
    PackageManager.SCOOP: ["scoop", "install", "{package}"],
    PackageManager.WINGET: [
        "winget", "install", "--id", "{package}", "-e",
        "--accept-source-agreements", "--accept-package-agreements"
    ],
    PackageManager.NPM: ["npm", "install", "-g", "{package}"],
    PackageManager.DOTNET: ["dotnet", "tool", "install", "-g", "{package}"],
    PackageManager.GO: ["go", "install", "{package}"],
}


class PresenceCheck(BaseModel):
    """How to decide whether a tool is already installed.

    Either a command name resolved through the tool locator, or an
    argument list whose zero exit status means the tool is present.
    """
    command: Optional[str] = Field(None, description="Executable name to look up on PATH")
    verify: Optional[List[str]] = Field(None, description="Command whose success means present")

    @model_validator(mode="after")
    def validate_one_method(self):
        if self.command and self.verify:
            raise ValueError("Presence check takes either 'command' or 'verify', not both")
        return self


class ToolDescriptor(BaseModel):
    """A tool the bootstrap knows how to install."""
    name: str = Field(..., description="Tool identifier")
    manager: PackageManager = Field(default=PackageManager.SCOOP, description="Package manager to use")
    package: Optional[str] = Field(None, description="Package id if it differs from the tool name")
    install_command: List[str] = Field(default_factory=list, description="Explicit install argv")
    presence: PresenceCheck = Field(default_factory=PresenceCheck, description="Presence check")
    requires_elevation: bool = Field(default=False, description="Install needs administrative rights")
    description: Optional[str] = Field(None, description="Tool description")

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        if not v.strip():
            raise ValueError("Tool name must not be empty")
        return v.strip()

    @model_validator(mode="after")
    def resolve_install_command(self):
        """Derive the install argv from the package manager when not given."""
        if not self.install_command:
            if self.manager == PackageManager.CUSTOM:
                raise ValueError(f"Tool '{self.name}' uses a custom manager but has no install_command")
            package = self.package or self.name
            self.install_command = [
                part.format(package=package) for part in INSTALL_TEMPLATES[self.manager]
            ]
        if not self.presence.command and not self.presence.verify:
            self.presence = PresenceCheck(command=self.name)
        return self

    model_config = ConfigDict(json_schema_extra={
        "example": {
            "name": "rg",
            "manager": "scoop",
            "package": "ripgrep",
            "description": "Fast recursive grep"
        }
    })
