"""Copy, move and listing operations addressed by (root id, relative path)."""

import logging
import stat
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

import aiofiles.os

from ..errors import DestinationExists, InvalidName, InvalidPath, NotADirectory, PathNotFound
from ..models.common import DirectoryListing, FileListEntry, ResolvedPath
from ..models.copy import CopyRequest, CopyResult, MoveRequest
from ..utils.fs_errors import is_cross_device_error, is_missing_error
from .cancellation import CancellationToken
from .engine import (
    CopyEngine,
    ProgressCallback,
    check_copy_target,
    path_occupied,
    remove_path,
    stat_or_none,
)
from .roots import get_root_registry, normalize_relative_path

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TransferPlan:
    source: ResolvedPath
    destination: ResolvedPath
    destination_exists: bool


def validate_target_name(name: Optional[str]) -> str:
    clean = (name or "").strip()
    if not clean or clean in (".", "..") or "/" in clean or "\\" in clean or "\0" in clean:
        raise InvalidName(f"Invalid target name: {name!r}")
    return clean


async def plan_transfer(
    from_root_id: str,
    from_path: str,
    to_root_id: str,
    to_dir_path: str,
    new_name: Optional[str] = None,
    check_target: bool = True,
) -> TransferPlan:
    """Resolve and validate both ends of a copy or move without touching the disk.

    With ``check_target`` off the caller runs ``check_copy_target`` itself, after
    its own checks on the destination slot.
    """
    registry = get_root_registry()
    source = registry.resolve(from_root_id, from_path)
    if await stat_or_none(source.abs_path) is None:
        raise PathNotFound(f"Source not found: {source.relative_path or '/'}")

    destination_dir = registry.resolve(to_root_id, to_dir_path)
    dir_stat = await stat_or_none(destination_dir.abs_path)
    if dir_stat is None:
        raise PathNotFound(f"Destination not found: {destination_dir.relative_path or '/'}")
    if not stat.S_ISDIR(dir_stat.st_mode):
        raise NotADirectory("Destination is not a directory")

    target_name = validate_target_name(new_name or source.name)
    destination = registry.resolve_child(destination_dir, target_name)
    if check_target:
        check_copy_target(source, destination)

    return TransferPlan(
        source=source,
        destination=destination,
        destination_exists=await path_occupied(destination.abs_path),
    )


async def plan_copy(request: CopyRequest) -> TransferPlan:
    return await plan_transfer(
        request.from_root_id,
        request.from_path,
        request.to_root_id,
        request.to_dir_path,
        request.new_name,
    )


async def copy_path(
    request: CopyRequest,
    token: Optional[CancellationToken] = None,
    on_progress: Optional[ProgressCallback] = None,
) -> CopyResult:
    """Copy and wait for the result, without registering a job."""
    plan = await plan_copy(request)
    engine = CopyEngine(
        overwrite_existing=request.overwrite_existing,
        token=token,
        on_progress=on_progress,
    )
    return await engine.copy(plan.source, plan.destination)


async def move_path(request: MoveRequest) -> None:
    """Rename into place, or copy then delete when crossing devices.

    A move never merges: an occupied destination slot is an error.
    """
    plan = await plan_transfer(
        request.from_root_id,
        request.from_path,
        request.to_root_id,
        request.to_dir_path,
        request.new_name,
        check_target=False,
    )
    if not plan.source.relative_path:
        raise InvalidPath("A root cannot be moved")
    if plan.destination_exists:
        raise DestinationExists()
    check_copy_target(plan.source, plan.destination)

    src, dst = plan.source.abs_path, plan.destination.abs_path
    try:
        await aiofiles.os.rename(src, dst)
        logger.info(f"Moved {src} -> {dst}")
        return
    except OSError as e:
        if not is_cross_device_error(e):
            raise

    logger.info(f"Cross-device move {src} -> {dst}, falling back to copy and delete")
    engine = CopyEngine(overwrite_existing=False)
    await engine.copy(plan.source, plan.destination)
    await remove_path(src)


async def list_directory(root_id: str, relative_path: Optional[str] = None) -> DirectoryListing:
    registry = get_root_registry()
    target = registry.resolve(root_id, relative_path)
    target_stat = await stat_or_none(target.abs_path)
    if target_stat is None:
        raise PathNotFound(f"Directory not found: {target.relative_path or '/'}")
    if not stat.S_ISDIR(target_stat.st_mode):
        raise NotADirectory()

    entries = []
    for name in await aiofiles.os.listdir(target.abs_path):
        child = registry.resolve_child(target, name)
        try:
            child_stat = await aiofiles.os.stat(child.abs_path)
        except OSError as e:
            # Dangling symlinks, or entries removed between listdir and stat
            if is_missing_error(e):
                continue
            raise
        is_dir = stat.S_ISDIR(child_stat.st_mode)
        entries.append(FileListEntry(
            name=name,
            path=child.relative_path,
            is_directory=is_dir,
            size=0 if is_dir else child_stat.st_size,
            mtime=datetime.fromtimestamp(child_stat.st_mtime, tz=timezone.utc),
        ))

    entries.sort(key=lambda e: (not e.is_directory, e.name.casefold()))

    parent_path = None
    if target.relative_path:
        parent_path = normalize_relative_path(target.relative_path.rpartition("/")[0])

    return DirectoryListing(
        root_id=root_id,
        root_name=target.root.name,
        path=target.relative_path,
        parent_path=parent_path,
        entries=entries,
    )
