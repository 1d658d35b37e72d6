"""Copy job lifecycle."""

import asyncio
import logging
from datetime import datetime, timezone

from ..errors import CopyCanceled, JobNotFound
from ..fs.cancellation import CancellationToken
from ..fs.engine import CopyEngine
from ..fs.operations import TransferPlan, plan_copy
from ..models.copy import CopyJob, CopyProgress, CopyRequest, CopyResult, CopyStatus

logger = logging.getLogger(__name__)


class CopyManager:
    def __init__(self, engine_cls: type[CopyEngine] = CopyEngine):
        self.engine_cls = engine_cls
        self._jobs: dict[str, CopyJob] = {}
        self._tasks: dict[str, asyncio.Task] = {}
        self._tokens: dict[str, CancellationToken] = {}

    async def start_copy(self, request: CopyRequest) -> CopyJob:
        """Validate the request, then run the copy in the background.

        Path and name errors are raised here, before anything is registered or
        written; everything after this point is reported through the job.
        """
        plan = await plan_copy(request)

        job = CopyJob(request=request)
        token = CancellationToken()
        self._jobs[job.id] = job
        self._tokens[job.id] = token
        self._tasks[job.id] = asyncio.create_task(self._run_copy(job, plan, token))
        logger.info(f"Copy job {job.id} started: {plan.source.abs_path} -> {plan.destination.abs_path}")
        return job

    def get_job(self, job_id: str) -> CopyJob:
        job = self._jobs.get(job_id)
        if not job:
            raise JobNotFound()
        return job.model_copy(deep=True)

    async def cancel_copy(self, job_id: str) -> CopyJob:
        job = self._jobs.get(job_id)
        if not job:
            raise JobNotFound()
        if job.status == CopyStatus.RUNNING:
            self._mark_canceled(job)
            self._tokens[job_id].cancel()
            logger.info(f"Copy job {job_id} cancel requested")
        return job.model_copy(deep=True)

    async def _run_copy(self, job: CopyJob, plan: TransferPlan, token: CancellationToken) -> None:
        def on_progress(progress: CopyProgress) -> None:
            if job.status == CopyStatus.RUNNING:
                job.progress = progress

        engine = self.engine_cls(
            overwrite_existing=job.request.overwrite_existing,
            token=token,
            on_progress=on_progress,
        )

        try:
            result = await engine.copy(plan.source, plan.destination)
        except (CopyCanceled, asyncio.CancelledError):
            self._mark_canceled(job)
        except Exception as e:
            if token.cancelled:
                self._mark_canceled(job)
            else:
                self._mark_failed(job, e)
        else:
            if token.cancelled or job.status != CopyStatus.RUNNING:
                self._mark_canceled(job)
            else:
                self._mark_completed(job, result)

    def _mark_completed(self, job: CopyJob, result: CopyResult) -> None:
        job.status = CopyStatus.COMPLETED
        job.result = result
        job.completed_at = datetime.now(tz=timezone.utc)
        logger.info(
            f"Copy job {job.id} completed: {result.copied_files} files, "
            f"{result.copied_directories} directories, {result.skipped} skipped"
        )

    def _mark_failed(self, job: CopyJob, error: Exception) -> None:
        job.status = CopyStatus.FAILED
        job.error = str(error) or "Copy failed"
        job.completed_at = datetime.now(tz=timezone.utc)
        logger.warning(f"Copy job {job.id} failed: {job.error}")

    def _mark_canceled(self, job: CopyJob) -> None:
        if job.status == CopyStatus.CANCELED:
            return
        job.status = CopyStatus.CANCELED
        job.result = None
        job.error = None
        job.completed_at = datetime.now(tz=timezone.utc)
        logger.info(f"Copy job {job.id} canceled")


# Singleton
copy_manager = CopyManager()
