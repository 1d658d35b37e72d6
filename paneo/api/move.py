"""Move API endpoint."""

from fastapi import APIRouter

from ..fs.operations import move_path
from ..models.copy import MoveRequest

router = APIRouter(prefix="/move", tags=["move"])


@router.post("")
async def move(request: MoveRequest):
    await move_path(request)
    return {"ok": True}
