"""Models for change detection results."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class ChangeStatus(str, Enum):
    """How a contract file differs from the persisted graph."""

    ADDED = "added"
    MODIFIED = "modified"
    REMOVED = "removed"


class ChangeRecord(BaseModel):
    model_config = ConfigDict(frozen=False)

    file_path: str                      # unique within a diff
    status: ChangeStatus
    module_id: str
    file_name: str = ""
    current_hash: Optional[str] = None  # registry fingerprint, None when removed
    stored_hash: Optional[str] = None   # graph fingerprint, None when added


class ModuleIdConflict(BaseModel):
    """Several contract files declare the same module id."""

    model_config = ConfigDict(frozen=False)

    module_id: str
    file_paths: list[str] = Field(default_factory=list)


class ChangeReport(BaseModel):
    model_config = ConfigDict(frozen=False)

    has_changes: bool = False
    total_changes: int = 0
    added_count: int = 0
    modified_count: int = 0
    removed_count: int = 0
    changes: list[ChangeRecord] = Field(default_factory=list)
    anomalies: list[ModuleIdConflict] = Field(default_factory=list)

    @classmethod
    def from_changes(
        cls,
        changes: list[ChangeRecord],
        anomalies: list[ModuleIdConflict] | None = None,
    ) -> "ChangeReport":
        """Build a report with counts derived from ``changes``."""
        added = sum(1 for c in changes if c.status == ChangeStatus.ADDED)
        modified = sum(1 for c in changes if c.status == ChangeStatus.MODIFIED)
        removed = sum(1 for c in changes if c.status == ChangeStatus.REMOVED)
        return cls(
            has_changes=bool(changes),
            total_changes=len(changes),
            added_count=added,
            modified_count=modified,
            removed_count=removed,
            changes=list(changes),
            anomalies=list(anomalies or []),
        )
