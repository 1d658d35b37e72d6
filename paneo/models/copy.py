"""Copy and move job models."""

from datetime import datetime, timezone
from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field, computed_field
import uuid


class CopyStatus(str, Enum):
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELED = "canceled"

    @property
    def is_terminal(self) -> bool:
        return self is not CopyStatus.RUNNING


class CopyRequest(BaseModel):
    from_root_id: str = Field(min_length=1)
    from_path: str = Field(min_length=1)
    to_root_id: str = Field(min_length=1)
    to_dir_path: str  # "" is the root itself
    new_name: Optional[str] = None
    overwrite_existing: bool = True


class MoveRequest(BaseModel):
    from_root_id: str = Field(min_length=1)
    from_path: str = Field(min_length=1)
    to_root_id: str = Field(min_length=1)
    to_dir_path: str
    new_name: Optional[str] = None


class CopyProgress(BaseModel):
    total_files: int = 0
    processed_files: int = 0
    copied_files: int = 0
    skipped: int = 0
    total_bytes: int = 0
    processed_bytes: int = 0
    current_file: str = ""
    current_file_bytes: int = 0
    current_file_total_bytes: int = 0

    @computed_field
    @property
    def percent(self) -> Optional[int]:
        """Whole-number completion by file count; None while the total is unknown."""
        if self.total_files <= 0:
            return None
        value = round(self.processed_files / self.total_files * 100)
        return max(0, min(100, value))


class CopyResult(BaseModel):
    copied_files: int = 0
    copied_directories: int = 0
    skipped: int = 0

    def __add__(self, other: "CopyResult") -> "CopyResult":
        return CopyResult(
            copied_files=self.copied_files + other.copied_files,
            copied_directories=self.copied_directories + other.copied_directories,
            skipped=self.skipped + other.skipped,
        )


class CopyJob(BaseModel):
    id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    request: CopyRequest
    status: CopyStatus = CopyStatus.RUNNING
    progress: CopyProgress = Field(default_factory=CopyProgress)
    result: Optional[CopyResult] = None
    error: Optional[str] = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(tz=timezone.utc))
    completed_at: Optional[datetime] = None
