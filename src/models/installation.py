"""
Installation and update result models.
"""

from enum import Enum
from typing import Optional, List
from datetime import datetime, timezone
from pydantic import BaseModel, ConfigDict, Field


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class InstallStatus(str, Enum):
    """Outcome of ensuring a single tool."""
    ALREADY_PRESENT = "already_present"
    INSTALLED = "installed"
    FAILED = "failed"


class InstallResult(BaseModel):
    """Result of ensuring one tool is installed."""
    tool: str = Field(..., description="Tool name")
    status: InstallStatus = Field(..., description="Install outcome")
    reason: Optional[str] = Field(None, description="Failure reason (captured output)")

    @classmethod
    def already_present(cls, tool: str) -> "InstallResult":
        return cls(tool=tool, status=InstallStatus.ALREADY_PRESENT)

    @classmethod
    def installed(cls, tool: str) -> "InstallResult":
        return cls(tool=tool, status=InstallStatus.INSTALLED)

    @classmethod
    def failed(cls, tool: str, reason: str) -> "InstallResult":
        return cls(tool=tool, status=InstallStatus.FAILED, reason=reason)

    @property
    def ok(self) -> bool:
        return self.status != InstallStatus.FAILED

    model_config = ConfigDict(json_schema_extra={
        "example": {
            "tool": "rg",
            "status": "failed",
            "reason": "Couldn't find manifest for 'ripgrep'."
        }
    })


class InstallReport(BaseModel):
    """Summary of an install batch."""
    results: List[InstallResult] = Field(default_factory=list)
    started_at: datetime = Field(default_factory=_utcnow)
    completed_at: Optional[datetime] = None
    duration_seconds: Optional[float] = None

    @property
    def failures(self) -> List[InstallResult]:
        return [r for r in self.results if r.status == InstallStatus.FAILED]

    @property
    def installed(self) -> List[InstallResult]:
        return [r for r in self.results if r.status == InstallStatus.INSTALLED]

    @property
    def already_present(self) -> List[InstallResult]:
        return [r for r in self.results if r.status == InstallStatus.ALREADY_PRESENT]

    @property
    def success(self) -> bool:
        return not self.failures

    def complete(self) -> None:
        """Mark the batch as complete."""
        self.completed_at = _utcnow()
        self.duration_seconds = (self.completed_at - self.started_at).total_seconds()


class UpdateResult(BaseModel):
    """Result of one system update command."""
    name: str
    command: List[str]
    success: bool
    skipped: bool = False
    output: Optional[str] = None
