"""Background task runner for the startup data load.

Tracks named asyncio tasks so the query layer can tell whether the
precinct/result tables are fully loaded and, when required, wait for it.
"""

import asyncio
import enum
from collections.abc import Coroutine
from typing import Any

from loguru import logger


class JobStatus(enum.StrEnum):
    """Status of a background job."""

    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


class InProcessTaskRunner:
    """In-process background task runner using asyncio.

    Tasks run in the same event loop as the API server via
    ``asyncio.create_task()``. A job that raises is logged and marked
    failed; the exception does not reach the event loop.
    """

    def __init__(self) -> None:
        self._jobs: dict[str, JobStatus] = {}
        self._tasks: dict[str, asyncio.Task[Any]] = {}

    def submit_task(self, name: str, coro: Coroutine[Any, Any, Any]) -> str:
        """Submit an async task for background execution.

        Args:
            name: Job name, unique per runner.
            coro: The coroutine to execute.

        Returns:
            The job name, for status lookups.

        Raises:
            ValueError: If a job with the same name was already submitted.
        """
        if name in self._jobs:
            coro.close()
            msg = f"Job '{name}' already submitted"
            raise ValueError(msg)
        self._jobs[name] = JobStatus.PENDING

        async def _run() -> None:
            self._jobs[name] = JobStatus.RUNNING
            try:
                await coro
            except asyncio.CancelledError:
                self._jobs[name] = JobStatus.FAILED
                raise
            except Exception:
                self._jobs[name] = JobStatus.FAILED
                logger.exception(f"Background job '{name}' failed")
                return
            self._jobs[name] = JobStatus.COMPLETED
            logger.info(f"Background job '{name}' completed")

        self._tasks[name] = asyncio.create_task(_run(), name=name)
        return name

    def get_status(self, name: str) -> JobStatus:
        """Get the current status of a background job.

        Raises:
            KeyError: If the job name is not found.
        """
        return self._jobs[name]

    @property
    def statuses(self) -> dict[str, JobStatus]:
        return dict(self._jobs)

    @property
    def is_idle(self) -> bool:
        """True when every submitted job has finished (completed or failed)."""
        return all(status in (JobStatus.COMPLETED, JobStatus.FAILED) for status in self._jobs.values())

    async def wait_idle(self) -> None:
        """Wait until every submitted job has finished."""
        pending = [task for task in self._tasks.values() if not task.done()]
        if pending:
            await asyncio.wait(pending)

    async def cancel_all(self) -> None:
        """Cancel unfinished jobs and wait for them to unwind."""
        for task in self._tasks.values():
            task.cancel()
        if self._tasks:
            await asyncio.gather(*self._tasks.values(), return_exceptions=True)
