"""Configured roots and path resolution confined to them."""

import os
import posixpath
import re
from functools import lru_cache
from typing import Optional

import aiofiles.os

from ..config import settings
from ..errors import InvalidPath, RootsNotConfigured, UnknownRoot
from ..models.common import ResolvedPath, Root

_DRIVE_RE = re.compile(r"^[A-Za-z]:")


class RootRegistry:
    def __init__(self, roots: list[Root]):
        self._roots = {root.id: root for root in roots}

    @classmethod
    def from_config(cls, raw: str) -> "RootRegistry":
        """Parse ``alias=path`` / ``path`` entries separated by ``;`` or newlines."""
        entries = [item.strip() for item in re.split(r"[;\n]", raw or "")]
        entries = [item for item in entries if item]
        if not entries:
            raise RootsNotConfigured()

        roots = []
        for index, entry in enumerate(entries):
            alias, sep, source = entry.partition("=")
            if not sep or not alias.strip():
                alias, source = "", entry
            abs_path = os.path.realpath(os.path.expanduser(source.strip()))
            name = alias.strip() or os.path.basename(abs_path) or abs_path
            roots.append(Root(id=f"root-{index + 1}", name=name, path=abs_path))
        return cls(roots)

    def all(self) -> list[Root]:
        return list(self._roots.values())

    def get(self, root_id: str) -> Root:
        root = self._roots.get(root_id)
        if root is None:
            raise UnknownRoot(root_id)
        return root

    def resolve(self, root_id: str, relative_path: Optional[str] = None) -> ResolvedPath:
        root = self.get(root_id)
        safe_relative = normalize_relative_path(relative_path)
        abs_path = os.path.normpath(os.path.join(root.path, safe_relative))
        root_with_sep = root.path if root.path.endswith(os.sep) else root.path + os.sep

        if abs_path != root.path and not abs_path.startswith(root_with_sep):
            raise InvalidPath("Path is outside configured root")

        return ResolvedPath(root=root, relative_path=safe_relative, abs_path=abs_path)

    def resolve_child(self, parent: ResolvedPath, name: str) -> ResolvedPath:
        child = f"{parent.relative_path}/{name}" if parent.relative_path else name
        return self.resolve(parent.root.id, child)


def normalize_relative_path(raw_path: Optional[str]) -> str:
    """Normalize a client path to ``a/b/c`` form, rejecting anything that escapes."""
    value = (raw_path or "").strip().replace("\\", "/")
    if "\0" in value:
        raise InvalidPath("Path contains a NUL byte")
    if not value or value == ".":
        return ""
    if value.startswith("/") or _DRIVE_RE.match(value):
        raise InvalidPath("Absolute paths are not allowed")

    normalized = posixpath.normpath(value)
    if normalized == ".":
        return ""
    if normalized == ".." or normalized.startswith("../"):
        raise InvalidPath("Path traversal is not allowed")
    if normalized.startswith("./"):
        normalized = normalized[2:]
    return normalized.strip("/")


@lru_cache(maxsize=1)
def get_root_registry() -> RootRegistry:
    return RootRegistry.from_config(settings.roots)


def resolve(root_id: str, relative_path: Optional[str] = None) -> ResolvedPath:
    return get_root_registry().resolve(root_id, relative_path)


async def list_roots() -> list[Root]:
    """All configured roots; each must still be an existing directory."""
    roots = get_root_registry().all()
    for root in roots:
        if not await aiofiles.os.path.exists(root.path):
            raise RootsNotConfigured(f"Configured root does not exist: {root.path}")
        if not await aiofiles.os.path.isdir(root.path):
            raise RootsNotConfigured(f"Configured root is not a directory: {root.path}")
    return roots
