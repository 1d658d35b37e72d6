"""Core shared models."""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field


class Root(BaseModel):
    id: str
    name: str
    path: str = Field(exclude=True)  # canonical absolute base path, never sent to clients

    model_config = {"frozen": True}


class ResolvedPath(BaseModel):
    root: Root
    relative_path: str = ""
    abs_path: str

    model_config = {"frozen": True}

    @property
    def name(self) -> str:
        return self.relative_path.rsplit("/", 1)[-1]


class FileListEntry(BaseModel):
    name: str
    path: str
    is_directory: bool
    size: int = 0
    mtime: datetime


class DirectoryListing(BaseModel):
    root_id: str
    root_name: str
    path: str
    parent_path: Optional[str] = None
    entries: list[FileListEntry] = Field(default_factory=list)
