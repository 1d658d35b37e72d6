"""Root and directory listing endpoints."""

from typing import Optional

from fastapi import APIRouter, Query

from ..fs.operations import list_directory
from ..fs.roots import list_roots

router = APIRouter(prefix="/fs", tags=["fs"])


@router.get("/roots")
async def get_roots():
    return {"roots": await list_roots()}


@router.get("/list")
async def get_listing(root_id: str = Query(..., min_length=1), path: Optional[str] = None):
    return await list_directory(root_id, path)
