"""Main entry point: loads the stored rooms and runs the reminder scheduler."""

import asyncio
import logging

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from tortoise import Tortoise

from motel.config import settings
from motel.core.calculations import Rates
from motel.core.db import TORTOISE_ORM
from motel.core.repositories.state import StateRepository
from motel.services.rooms import RoomService
from motel.services.scheduler import SchedulerService

logger = logging.getLogger(__name__)


async def on_startup() -> RoomService:
    """Actions on startup."""
    logger.info("Initializing database...")
    await Tortoise.init(config=TORTOISE_ORM)
    await Tortoise.generate_schemas(safe=True)
    logger.info("Database initialized.")

    room_service = RoomService(
        state_repo=StateRepository(),
        rates=Rates(electric=settings.ELECTRIC_RATE, water=settings.WATER_RATE),
    )
    report = await room_service.load()
    if report:
        logger.warning(f"{len(report)} rooms have inconsistent usage ledgers.")
    return room_service


async def on_shutdown(scheduler_service: SchedulerService | None):
    """Actions on shutdown."""
    logger.info("Closing connections...")
    if scheduler_service is not None:
        scheduler_service.shutdown()
    await Tortoise.close_connections()
    logger.info("Connections closed.")


async def main():
    """Initializes services and keeps the scheduler running."""
    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format="%(asctime)s - %(levelname)s - %(name)s - %(message)s",
    )
    logger.info("Starting motel ledger...")

    scheduler_service = None
    try:
        room_service = await on_startup()
        scheduler_service = SchedulerService(
            room_service,
            AsyncIOScheduler(),
            hour=settings.REMINDER_HOUR,
            minute=settings.REMINDER_MINUTE,
        )
        scheduler_service.start()
        await asyncio.Event().wait()
    finally:
        await on_shutdown(scheduler_service)


def run():
    try:
        asyncio.run(main())
    except (KeyboardInterrupt, SystemExit):
        logger.info("Stopped manually.")


if __name__ == "__main__":
    run()
