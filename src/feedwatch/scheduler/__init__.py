"""Scheduler for periodic check runs.

Example:
    >>> from feedwatch.scheduler import CronScheduler
    >>> # scheduler = CronScheduler(watch.check, "0 */6 * * *")
    >>> # await scheduler.run_forever()
"""

from feedwatch.scheduler.cron import CronScheduler

__all__ = ["CronScheduler"]
