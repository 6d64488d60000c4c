"""Registry of the active job per logical slot.

Starting a job for a slot supersedes whatever was running there: the old
job is flagged as cancelled and its task receives ``cancel()``. Anything
the old job produces afterwards is discarded by its consumer.

The registry is only touched from the event loop thread, so a plain dict
is enough.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Coroutine
from dataclasses import dataclass
from typing import Any

_logger = logging.getLogger(__name__)


@dataclass(eq=False, slots=True)
class Job:
    """Handle on one invocation running in a slot."""

    slot: str
    task: asyncio.Task[Any]
    cancelled: bool = False

    @property
    def done(self) -> bool:
        return self.task.done()

    def cancel(self) -> bool:
        """Signal the job to stop. Returns ``False`` if it had already finished."""
        if self.task.done():
            return False
        self.cancelled = True
        self.task.cancel()
        return True


class JobRegistry:
    """Keyed table of cancellation handles, one live job per slot."""

    def __init__(self) -> None:
        self._jobs: dict[str, Job] = {}

    def start(self, slot: str, work: Coroutine[Any, Any, Any]) -> Job:
        """Cancel the current job for *slot* (if any) and run *work* in its place."""
        previous = self._jobs.pop(slot, None)
        if previous is not None and previous.cancel():
            _logger.debug("Superseded running job in slot %s", slot)

        job = Job(slot=slot, task=asyncio.create_task(work, name=f"boundflow:{slot}"))
        self._jobs[slot] = job
        job.task.add_done_callback(lambda _task: self._discard(job))
        return job

    def _discard(self, job: Job) -> None:
        if self._jobs.get(job.slot) is job:
            del self._jobs[job.slot]

    def cancel(self, slot: str) -> bool:
        """Cancel the job in *slot* without starting a replacement."""
        job = self._jobs.pop(slot, None)
        if job is None:
            return False
        _logger.debug("Cancelling job in slot %s", slot)
        return job.cancel()

    def cancel_job(self, job: Job) -> bool:
        """Cancel *job* only if it is still the active job of its slot."""
        if self._jobs.get(job.slot) is not job:
            return False
        return self.cancel(job.slot)

    def cancel_all(self) -> int:
        """Cancel every active job. Returns how many were still running."""
        jobs = list(self._jobs.values())
        self._jobs.clear()
        if jobs:
            _logger.debug("Cancelling %d active job(s)", len(jobs))
        return sum(1 for job in jobs if job.cancel())

    def active(self, slot: str) -> Job | None:
        return self._jobs.get(slot)

    def __contains__(self, slot: object) -> bool:
        return slot in self._jobs

    def __len__(self) -> int:
        return len(self._jobs)
