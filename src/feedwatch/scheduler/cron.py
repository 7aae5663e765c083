"""Cron scheduler for periodic check runs.

Runs a job once at start-up and then on a crontab schedule, using
APScheduler's asyncio scheduler. Runs never overlap: the job has
``max_instances=1``, so a trigger that fires while the previous run is
still going is skipped, and missed fire times are coalesced into one.

Example:
    >>> from feedwatch.scheduler.cron import CronScheduler
    >>> async def job():
    ...     pass
    >>> scheduler = CronScheduler(job, "0 */6 * * *")
    >>> scheduler.cron_schedule
    '0 */6 * * *'
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from datetime import datetime
from typing import Any

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger

logger = logging.getLogger(__name__)

JOB_ID = "feedwatch-check"
STARTUP_JOB_ID = "feedwatch-check-startup"


class CronScheduler:
    """Start-up run plus crontab-driven runs of a single async job.

    Args:
        job: Coroutine function to run.
        cron_schedule: Five-field crontab expression.
        timezone: Timezone the crontab is evaluated in.
        misfire_grace_time: Seconds a late run may still start.
    """

    def __init__(
        self,
        job: Callable[[], Awaitable[Any]],
        cron_schedule: str,
        *,
        timezone: str = "UTC",
        misfire_grace_time: int = 3600,
    ) -> None:
        self._job = job
        self.cron_schedule = cron_schedule
        self.timezone = timezone
        self.misfire_grace_time = misfire_grace_time
        self._trigger = CronTrigger.from_crontab(cron_schedule, timezone=timezone)
        self._scheduler: AsyncIOScheduler | None = None
        self._stopped: asyncio.Event | None = None

    @property
    def running(self) -> bool:
        return self._scheduler is not None and self._scheduler.running

    async def _run_job(self) -> None:
        """Run the job and log, never raise, whatever it raises."""
        try:
            await self._job()
        except Exception:
            logger.exception("scheduled check failed")

    def start(self, *, run_immediately: bool = True) -> None:
        """Start the scheduler. Must be called from a running event loop."""
        if self.running:
            return

        self._scheduler = AsyncIOScheduler(timezone=self.timezone)
        self._stopped = asyncio.Event()
        job_options = {
            "max_instances": 1,
            "coalesce": True,
            "misfire_grace_time": self.misfire_grace_time,
        }
        self._scheduler.add_job(
            self._run_job,
            trigger=self._trigger,
            id=JOB_ID,
            replace_existing=True,
            **job_options,
        )
        if run_immediately:
            # Separate job id; FeedWatch.check() itself skips overlapping calls
            self._scheduler.add_job(
                self._run_job,
                id=STARTUP_JOB_ID,
                next_run_time=datetime.now(self._trigger.timezone),
                **job_options,
            )
        self._scheduler.start()
        logger.info(f"scheduler started ({self.cron_schedule}, next run {self.next_run_time()})")

    def next_run_time(self) -> datetime | None:
        """When the crontab job fires next."""
        if self._scheduler is None:
            return None
        job = self._scheduler.get_job(JOB_ID)
        return job.next_run_time if job is not None else None

    def shutdown(self) -> None:
        """Stop scheduling; a run in progress is not awaited."""
        if self._scheduler is not None and self._scheduler.running:
            self._scheduler.shutdown(wait=False)
        self._scheduler = None
        if self._stopped is not None:
            self._stopped.set()

    async def run_forever(self, *, run_immediately: bool = True) -> None:
        """Start and block until ``shutdown()`` or cancellation."""
        self.start(run_immediately=run_immediately)
        assert self._stopped is not None
        try:
            await self._stopped.wait()
        finally:
            self.shutdown()
