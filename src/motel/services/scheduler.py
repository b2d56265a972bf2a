"""Service for scheduling background jobs."""

from __future__ import annotations

import logging
from datetime import date

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger

from motel.services.rooms import RoomService

logger = logging.getLogger(__name__)


class SchedulerService:
    """Manages scheduled tasks for the application."""

    def __init__(
        self,
        room_service: RoomService,
        scheduler: AsyncIOScheduler,
        hour: int = 8,
        minute: int = 0,
    ):
        self._room_service = room_service
        self._scheduler = scheduler
        self._hour = hour
        self._minute = minute

    def start(self):
        """Starts the scheduler and adds jobs."""
        logger.info("Starting scheduler...")
        self._scheduler.add_job(
            self._run_payment_reminders,
            trigger=CronTrigger(hour=self._hour, minute=self._minute),
            id="payment_reminders",
            replace_existing=True,
        )
        self._scheduler.start()
        logger.info("Scheduler started.")

    def shutdown(self):
        self._scheduler.shutdown(wait=False)
        logger.info("Scheduler stopped.")

    async def _run_payment_reminders(self):
        """Logs a reminder for every unpaid bill that is due or overdue."""
        logger.info("Starting payment reminder job.")
        try:
            notifications = self._room_service.notifications(date.today())
        except Exception as e:
            logger.error(f"Failed to build payment reminders: {e}", exc_info=True)
            return

        for notification in notifications:
            logger.info(f"Reminder: {notification.message}")
        logger.info(
            f"Payment reminder job finished, {len(notifications)} bills due or overdue."
        )
