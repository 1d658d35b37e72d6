"""Recursive merge-copy with streamed file bytes and progress reporting."""

import asyncio
import logging
import os
import shutil
import stat
from typing import Callable, Optional

import aiofiles
import aiofiles.os

from ..config import settings
from ..errors import CopyFailed, DestinationInsideSource, DestinationIsSameAsSource
from ..models.common import ResolvedPath
from ..models.copy import CopyProgress, CopyResult
from .cancellation import CancellationToken

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[CopyProgress], None]


def check_copy_target(source: ResolvedPath, destination: ResolvedPath) -> None:
    if source.abs_path == destination.abs_path:
        raise DestinationIsSameAsSource()
    if destination.abs_path.startswith(source.abs_path.rstrip(os.sep) + os.sep):
        raise DestinationInsideSource()


async def stat_or_none(path: str) -> Optional[os.stat_result]:
    try:
        return await aiofiles.os.stat(path)
    except FileNotFoundError:
        return None


async def path_occupied(path: str) -> bool:
    """True for any existing entry, including a dangling symlink."""
    return await aiofiles.os.path.exists(path) or await aiofiles.os.path.islink(path)


async def remove_path(path: str) -> None:
    """Delete a file, a symlink or a whole directory tree."""
    if await aiofiles.os.path.isdir(path) and not await aiofiles.os.path.islink(path):
        await asyncio.to_thread(shutil.rmtree, path)
    else:
        await aiofiles.os.remove(path)


class CopyEngine:
    """Copies one file or directory tree, merging into existing directories.

    Conflicting files (and file/directory type mismatches) are replaced when
    ``overwrite_existing`` is set and skipped otherwise; directories present on
    both sides are always merged. ``on_progress`` receives a fresh
    ``CopyProgress`` copy after every change, including every streamed chunk.
    """

    def __init__(
        self,
        overwrite_existing: bool = True,
        token: Optional[CancellationToken] = None,
        on_progress: Optional[ProgressCallback] = None,
        chunk_size: Optional[int] = None,
    ):
        self.overwrite_existing = overwrite_existing
        self.token = token or CancellationToken()
        self.on_progress = on_progress
        self.chunk_size = chunk_size or settings.copy_chunk_size
        self.progress = CopyProgress()
        self._subtree_totals: dict[str, tuple[int, int]] = {}
        self._source: Optional[ResolvedPath] = None

    async def copy(self, source: ResolvedPath, destination: ResolvedPath) -> CopyResult:
        check_copy_target(source, destination)
        self._source = source
        try:
            return await self._run(source.abs_path, destination.abs_path)
        except OSError as e:
            raise CopyFailed(str(e)) from e

    async def _run(self, src: str, dst: str) -> CopyResult:
        self.token.raise_if_cancelled()

        # Totals are taken once up front; later changes to the source tree are not re-counted.
        total_files, total_bytes = await self._measure(src)
        self.progress = CopyProgress(total_files=total_files, total_bytes=total_bytes)
        self._emit()
        logger.debug(f"Copying {src} -> {dst}: {total_files} files, {total_bytes} bytes")

        src_stat = await aiofiles.os.stat(src)
        if not stat.S_ISDIR(src_stat.st_mode) and not self.overwrite_existing:
            if await path_occupied(dst):
                self.progress.current_file = self._display_path(src)
                self.progress.current_file_total_bytes = src_stat.st_size
                self._mark_skipped(1, src_stat.st_size)
                return CopyResult(skipped=1)

        return await self._copy_entry(src, dst)

    async def _measure(self, path: str) -> tuple[int, int]:
        self.token.raise_if_cancelled()
        st = await aiofiles.os.stat(path)
        if not stat.S_ISDIR(st.st_mode):
            return 1, st.st_size

        files = size = 0
        for name in await aiofiles.os.listdir(path):
            child_files, child_size = await self._measure(os.path.join(path, name))
            files += child_files
            size += child_size
        self._subtree_totals[path] = (files, size)
        return files, size

    async def _copy_entry(self, src: str, dst: str) -> CopyResult:
        self.token.raise_if_cancelled()
        src_stat = await aiofiles.os.stat(src)
        if stat.S_ISDIR(src_stat.st_mode):
            return await self._copy_directory(src, dst)
        return await self._copy_file(src, dst, src_stat.st_size)

    async def _copy_directory(self, src: str, dst: str) -> CopyResult:
        dst_stat = await stat_or_none(dst)
        # a dangling symlink occupies the slot like a file does
        occupied = dst_stat is not None or await aiofiles.os.path.islink(dst)

        if occupied and (dst_stat is None or not stat.S_ISDIR(dst_stat.st_mode)):
            if not self.overwrite_existing:
                files, size = self._subtree_totals.get(src, (0, 0))
                self._mark_skipped(files, size)
                return CopyResult(skipped=files)
            await remove_path(dst)
            await aiofiles.os.mkdir(dst)
        elif not occupied:
            await aiofiles.os.mkdir(dst)

        result = CopyResult(copied_directories=1)
        for name in await aiofiles.os.listdir(src):
            result = result + await self._copy_entry(os.path.join(src, name), os.path.join(dst, name))
        return result

    async def _copy_file(self, src: str, dst: str, size: int) -> CopyResult:
        self.progress.current_file = self._display_path(src)
        self.progress.current_file_total_bytes = size
        self.progress.current_file_bytes = 0
        self._emit()

        dst_stat = await stat_or_none(dst)
        dst_is_link = await aiofiles.os.path.islink(dst)
        if dst_stat is not None or dst_is_link:
            if not self.overwrite_existing:
                self._mark_skipped(1, size)
                return CopyResult(skipped=1)
            # never write through a link; replace it with a regular file
            if dst_is_link or stat.S_ISDIR(dst_stat.st_mode):
                await remove_path(dst)

        await self._stream(src, dst)

        self.progress.copied_files += 1
        self.progress.processed_files += 1
        self.progress.current_file_bytes = self.progress.current_file_total_bytes
        self._emit()
        return CopyResult(copied_files=1)

    async def _stream(self, src: str, dst: str) -> None:
        self.token.raise_if_cancelled()
        writing = False
        copied = 0
        try:
            async with aiofiles.open(src, "rb") as reader:
                async with aiofiles.open(dst, "wb") as writer:
                    writing = True
                    while True:
                        self.token.raise_if_cancelled()
                        chunk = await reader.read(self.chunk_size)
                        if not chunk:
                            break
                        await writer.write(chunk)
                        copied += len(chunk)
                        self.progress.current_file_bytes = copied
                        self.progress.current_file_total_bytes = max(
                            self.progress.current_file_total_bytes, copied
                        )
                        self.progress.processed_bytes += len(chunk)
                        self._emit()
        except BaseException:
            if writing:
                await self._discard_partial(dst)
            raise

        try:
            await asyncio.to_thread(shutil.copymode, src, dst)
        except OSError as e:
            logger.debug(f"Could not copy permissions to {dst}: {e}")

    async def _discard_partial(self, path: str) -> None:
        try:
            await aiofiles.os.remove(path)
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.warning(f"Could not remove partial file {path}: {e}")

    def _mark_skipped(self, files: int, size: int) -> None:
        self.progress.skipped += files
        self.progress.processed_files += files
        self.progress.processed_bytes += size
        self.progress.current_file_bytes = self.progress.current_file_total_bytes
        self._emit()

    def _display_path(self, path: str) -> str:
        source = self._source
        rest = os.path.relpath(path, source.abs_path).replace(os.sep, "/")
        if rest == ".":
            return source.relative_path
        return f"{source.relative_path}/{rest}" if source.relative_path else rest

    def _emit(self) -> None:
        if self.on_progress is not None:
            self.on_progress(self.progress.model_copy())
