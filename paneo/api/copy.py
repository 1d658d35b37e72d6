"""Copy API endpoints."""

from fastapi import APIRouter

from ..fs.operations import copy_path
from ..models.copy import CopyRequest
from ..services.copy_manager import copy_manager

router = APIRouter(prefix="/copy", tags=["copy"])


@router.post("/start")
async def start_copy(request: CopyRequest):
    job = await copy_manager.start_copy(request)
    return {"job_id": job.id, "status": job.status}


@router.get("/jobs/{job_id}")
async def get_copy_job(job_id: str):
    return copy_manager.get_job(job_id)


@router.post("/jobs/{job_id}/cancel")
async def cancel_copy(job_id: str):
    job = await copy_manager.cancel_copy(job_id)
    return {"job_id": job.id, "status": job.status}


@router.post("")
async def copy_now(request: CopyRequest):
    """Copy without a job; the response arrives once the copy is finished."""
    result = await copy_path(request)
    return {"ok": True, "result": result}
