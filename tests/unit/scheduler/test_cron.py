"""Tests for feedwatch.scheduler.cron - APScheduler-driven check runs."""

from __future__ import annotations

import asyncio
import logging

import pytest

from feedwatch.scheduler.cron import JOB_ID, CronScheduler

# Never fires during a test run
YEARLY = "0 0 1 1 *"


class TestCreation:
    """Tests for construction."""

    def test_valid_crontab(self) -> None:
        async def job():
            pass

        scheduler = CronScheduler(job, "0 */6 * * *")
        assert scheduler.cron_schedule == "0 */6 * * *"
        assert scheduler.timezone == "UTC"
        assert not scheduler.running
        assert scheduler.next_run_time() is None

    def test_invalid_crontab(self) -> None:
        async def job():
            pass

        with pytest.raises(ValueError):
            CronScheduler(job, "not a crontab")


class TestRunning:
    """Tests for start/shutdown."""

    async def test_runs_immediately_on_start(self) -> None:
        ran = asyncio.Event()

        async def job():
            ran.set()

        scheduler = CronScheduler(job, YEARLY)
        scheduler.start()
        try:
            await asyncio.wait_for(ran.wait(), timeout=5)
            assert scheduler.running
            assert scheduler.next_run_time() is not None
        finally:
            scheduler.shutdown()
        assert not scheduler.running

    async def test_no_initial_run(self) -> None:
        calls: list[int] = []

        async def job():
            calls.append(1)

        scheduler = CronScheduler(job, YEARLY)
        scheduler.start(run_immediately=False)
        try:
            await asyncio.sleep(0.1)
            assert calls == []
            assert scheduler._scheduler.get_job(JOB_ID).max_instances == 1
        finally:
            scheduler.shutdown()

    async def test_job_errors_are_logged(self, caplog) -> None:
        caplog.set_level(logging.ERROR, logger="feedwatch")

        async def job():
            raise RuntimeError("boom")

        scheduler = CronScheduler(job, YEARLY)
        await scheduler._run_job()
        assert "scheduled check failed" in caplog.text

    async def test_run_forever_until_shutdown(self) -> None:
        async def job():
            pass

        scheduler = CronScheduler(job, YEARLY)
        task = asyncio.create_task(scheduler.run_forever(run_immediately=False))
        while not scheduler.running:
            await asyncio.sleep(0)
        scheduler.shutdown()
        await asyncio.wait_for(task, timeout=5)
        assert not scheduler.running
