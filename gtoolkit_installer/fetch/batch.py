"""All-or-nothing execution of independent blocking jobs.

Members of a batch run on worker threads, at most ``max_concurrency`` at a
time. The first failure sets a shared cancel event: members still waiting
for a slot never start and running members are expected to stop early. Once
every member has settled the first failure is re-raised; results are only
returned when every member succeeded.
"""

from __future__ import annotations

import asyncio
import logging
import threading
from collections.abc import Callable, Sequence
from typing import TypeVar

from gtoolkit_installer.errors import InstallerError

logger = logging.getLogger(__name__)

T = TypeVar("T")

# A job receives the batch cancel event and should stop early once it is set.
Job = Callable[[threading.Event], T]


class BatchCancelledError(InstallerError):
    """Raised by a batch member that stopped because a sibling failed."""

    def __init__(self, message: str = "Cancelled after a sibling failed") -> None:
        super().__init__(message, code="cancelled")


async def run_batch(jobs: Sequence[Job[T]], max_concurrency: int = 2) -> list[T]:
    """Run jobs concurrently and return their results in submission order.

    Args:
        jobs: Blocking callables, each taking the batch cancel event.
        max_concurrency: Maximum number of jobs running at once.

    Returns:
        Results of all jobs, in the order the jobs were given.

    Raises:
        Exception: The first failure of any job.
    """
    if not jobs:
        return []

    semaphore = asyncio.Semaphore(max(1, max_concurrency))
    cancel = threading.Event()
    failures: list[Exception] = []

    async def run(job: Job[T]) -> T:
        async with semaphore:
            if cancel.is_set():
                raise BatchCancelledError()
            try:
                return await asyncio.to_thread(job, cancel)
            except Exception as e:
                # Set before the slot is released so waiting jobs see it
                failures.append(e)
                cancel.set()
                raise

    tasks = [asyncio.create_task(run(job)) for job in jobs]
    await asyncio.gather(*tasks, return_exceptions=True)

    if failures:
        logger.debug("Batch of %d job(s) failed: %s", len(tasks), failures[0])
        raise failures[0]

    return [t.result() for t in tasks]


__all__ = ["BatchCancelledError", "Job", "run_batch"]
