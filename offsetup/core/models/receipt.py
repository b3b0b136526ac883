"""
Command receipts: the result of running one install step.

Command runners return receipts instead of raising. The dispatcher
decides what a failed receipt means for the remaining steps.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any, Literal

from pydantic import BaseModel, Field


def _now_iso() -> str:
    """Current UTC time as ISO string."""
    return datetime.now(UTC).isoformat()


class CommandReceipt(BaseModel):
    """Outcome of a single shell command."""

    command: str
    shell: str = "sh"
    platform: str = ""              # manifest platform key the step belongs to
    status: Literal["ok", "skipped", "failed"] = "ok"

    started_at: str = Field(default_factory=_now_iso)
    ended_at: str = Field(default_factory=_now_iso)
    duration_ms: int = 0

    return_code: int | None = None
    output: str = ""
    error: str | None = None
    silenced: bool = False          # failed, but the entry has fail_silently

    metadata: dict[str, Any] = Field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return self.status == "ok"

    @property
    def failed(self) -> bool:
        return self.status == "failed"

    @classmethod
    def success(cls, command: str, output: str = "", **kwargs: Any) -> CommandReceipt:
        """Create a success receipt."""
        return cls(command=command, status="ok", output=output, **kwargs)

    @classmethod
    def failure(cls, command: str, error: str, **kwargs: Any) -> CommandReceipt:
        """Create a failure receipt."""
        return cls(command=command, status="failed", error=error, **kwargs)

    @classmethod
    def skip(cls, command: str, reason: str = "", **kwargs: Any) -> CommandReceipt:
        """Create a skip receipt."""
        return cls(command=command, status="skipped", output=reason, **kwargs)
