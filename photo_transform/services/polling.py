"""Status polling for long-running generation jobs.

``PollingStateMachine`` drives a task from submission to a terminal state by
checking its status at a fixed interval:

- ``pending`` / ``processing`` update progress and wait for the next poll.
- ``completed`` triggers the download step; a failed download fails the task.
- ``failed`` or any unknown status ends the task immediately.
- A failed status check is retried within the same attempt budget.
- When the budget runs out the task is ``timed_out``.

Every terminal state carries an ``Error`` whose code tells these outcomes
apart. Nothing here retries the initial submission.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from typing import Any, Protocol

from loguru import logger

from ..schema import DownloadInfo, Error, PollingTask, StatusReport
from ..settings import Settings, get_settings
from ..shard import constants as C
from ..shard.enums import TaskStatus

ProgressCallback = Callable[[PollingTask], Any]


class GenerationService(Protocol):
    async def submit(self, **payload: Any) -> str: ...

    async def check_status(self, task_id: str) -> StatusReport: ...

    async def download(self, task_id: str) -> DownloadInfo: ...


_SERVICE_STATUSES: dict[str, TaskStatus] = {
    "pending": TaskStatus.PENDING,
    "processing": TaskStatus.PROCESSING,
    "completed": TaskStatus.COMPLETED,
    "failed": TaskStatus.FAILED,
}


class PollingStateMachine:
    def __init__(
        self,
        service: GenerationService,
        interval: float = 3.0,
        max_attempts: int = 60,
        *,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self.service = service
        self.interval = interval
        self.max_attempts = max_attempts
        self._sleep = sleep

    @classmethod
    def from_settings(cls, service: GenerationService, settings: Settings | None = None) -> PollingStateMachine:
        s = settings or get_settings()
        return cls(service, s.poll_interval_seconds, s.max_poll_attempts)

    @staticmethod
    def _finish(task: PollingTask, status: TaskStatus, code: str, message: str) -> PollingTask:
        task.status = status
        task.message = message
        task.error = Error(code=code, message=message)
        logger.info(f"Generation task {task.id} ended {status.value}: {message}")
        return task

    @staticmethod
    async def _notify(callback: ProgressCallback | None, task: PollingTask) -> None:
        if callback is None:
            return
        result = callback(task.model_copy())
        if asyncio.iscoroutine(result):
            await result

    async def run(
        self,
        task_id: str,
        cancel_event: asyncio.Event | None = None,
        on_progress: ProgressCallback | None = None,
    ) -> PollingTask:
        """Poll ``task_id`` until it reaches a terminal state and return it."""
        task = PollingTask(id=task_id)
        last_error: Exception | None = None

        while task.attempt_count < self.max_attempts:
            if cancel_event is not None and cancel_event.is_set():
                return self._finish(task, TaskStatus.CANCELLED, C.ERROR_CODE_CANCELLED, "Generation cancelled")

            task.attempt_count += 1
            try:
                report = await self.service.check_status(task_id)
            except asyncio.CancelledError:
                raise
            except Exception as e:
                last_error = e
                logger.debug(f"Status check {task.attempt_count}/{self.max_attempts} for {task_id} failed: {e}")
            else:
                last_error = None
                status = _SERVICE_STATUSES.get(report.status.strip().lower())
                if status is None:
                    return self._finish(task, TaskStatus.FAILED, C.ERROR_CODE_UNKNOWN_STATUS, f"Unknown status: {report.status}")
                if status == TaskStatus.FAILED:
                    return self._finish(task, TaskStatus.FAILED, C.ERROR_CODE_GENERATION_FAILED, report.error or "Generation failed")

                task.status = status
                task.progress = min(max(report.progress, 0), 100)
                task.message = report.message
                if status == TaskStatus.COMPLETED:
                    return await self._complete(task, cancel_event)

                logger.debug(f"Task {task_id} {status.value} at {task.progress}% (poll {task.attempt_count}/{self.max_attempts})")
                await self._notify(on_progress, task)

            if task.attempt_count < self.max_attempts:
                await self._sleep(self.interval)

        if last_error is not None:
            return self._finish(task, TaskStatus.FAILED, C.ERROR_CODE_POLL_ERROR, f"Status check failed: {last_error}")
        return self._finish(task, TaskStatus.TIMED_OUT, C.ERROR_CODE_TIMEOUT, C.GENERATION_TIMEOUT_MESSAGE)

    async def _complete(self, task: PollingTask, cancel_event: asyncio.Event | None) -> PollingTask:
        try:
            info = await self.service.download(task.id)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.warning(f"Download for completed task {task.id} failed: {e}")
            return self._finish(task, TaskStatus.FAILED, C.ERROR_CODE_DOWNLOAD_FAILED, f"Download failed: {e}")
        # A cancel that raced the download must not hand back the result
        if cancel_event is not None and cancel_event.is_set():
            return self._finish(task, TaskStatus.CANCELLED, C.ERROR_CODE_CANCELLED, "Generation cancelled")
        task.result = info
        task.progress = 100
        task.message = task.message or "Generation completed"
        logger.info(f"Generation task {task.id} completed: {info.file_name}")
        return task

    async def submit_and_track(
        self,
        cancel_event: asyncio.Event | None = None,
        on_progress: ProgressCallback | None = None,
        **payload: Any,
    ) -> PollingTask:
        """Submit once (no retry) and poll the new task to completion."""
        task_id = await self.service.submit(**payload)
        logger.info(f"Submitted generation task {task_id}")
        return await self.run(task_id, cancel_event=cancel_event, on_progress=on_progress)


__all__ = ["GenerationService", "PollingStateMachine", "ProgressCallback"]
