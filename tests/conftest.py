"""Shared fixtures: two configured roots under tmp_path."""

import asyncio
import os
from pathlib import Path

import httpx
import pytest

from paneo.app import create_app
from paneo.config import settings
from paneo.fs.roots import get_root_registry
from paneo.models.copy import CopyStatus


@pytest.fixture
def roots(tmp_path, monkeypatch):
    left = tmp_path / "left"
    right = tmp_path / "right"
    left.mkdir()
    right.mkdir()
    monkeypatch.setattr(settings, "roots", f"Left={left};{right}")
    get_root_registry.cache_clear()
    yield Path(os.path.realpath(left)), Path(os.path.realpath(right))
    get_root_registry.cache_clear()


@pytest.fixture
def docs_tree(roots):
    """left/docs with a.txt (10 bytes) and sub/b.txt (20 bytes)."""
    left, _ = roots
    docs = left / "docs"
    (docs / "sub").mkdir(parents=True)
    (docs / "a.txt").write_bytes(b"A" * 10)
    (docs / "sub" / "b.txt").write_bytes(b"B" * 20)
    return docs


@pytest.fixture
async def client(roots):
    transport = httpx.ASGITransport(app=create_app())
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


async def wait_until_done(manager, job_id, timeout=10.0):
    await asyncio.wait_for(manager._tasks[job_id], timeout)
    return manager.get_job(job_id)


async def poll_until(manager, job_id, predicate, max_polls=100_000):
    """Poll like a client would until predicate(job) holds, yielding to the loop in between."""
    for _ in range(max_polls):
        job = manager.get_job(job_id)
        if predicate(job):
            return job
        if job.status != CopyStatus.RUNNING:
            raise AssertionError(f"job finished as {job.status} before condition was met")
        await asyncio.sleep(0)
    raise AssertionError("condition not met while polling")
