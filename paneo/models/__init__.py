"""Data models."""

from .common import Root, ResolvedPath, FileListEntry, DirectoryListing
from .copy import (
    CopyStatus,
    CopyRequest,
    MoveRequest,
    CopyProgress,
    CopyResult,
    CopyJob,
)

__all__ = [
    "Root",
    "ResolvedPath",
    "FileListEntry",
    "DirectoryListing",
    "CopyStatus",
    "CopyRequest",
    "MoveRequest",
    "CopyProgress",
    "CopyResult",
    "CopyJob",
]
