"""
The catalog: everything a bootstrap run installs, writes and links.
"""

from typing import List
from pydantic import BaseModel, Field, field_validator

from .setting import LinkEntry, SettingEntry
from .tool import ToolDescriptor


class UpdateCommand(BaseModel):
    """A package-manager update command."""
    name: str = Field(..., description="Display name")
    command: List[str] = Field(..., min_length=1, description="Command argv")


class Catalog(BaseModel):
    """Static configuration data for one workstation profile."""
    tools: List[ToolDescriptor] = Field(default_factory=list)
    settings: List[SettingEntry] = Field(default_factory=list)
    links: List[LinkEntry] = Field(default_factory=list)
    updates: List[UpdateCommand] = Field(default_factory=list)

    @field_validator("tools")
    @classmethod
    def validate_unique_tools(cls, v):
        seen = set()
        for tool in v:
            key = tool.name.lower()
            if key in seen:
                raise ValueError(f"Duplicate tool in catalog: {tool.name}")
            seen.add(key)
        return v
