'''
Weekly rollover scheduler.

Runs WeekService.scheduled_rollover() once per calendar week
(Monday 00:00 in the configured timezone by default).
'''
from zoneinfo import ZoneInfo

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger

from ..database import engine as db_engine
from ..common.config import settings
from ..common.logger import log
from .week_service import WeekService

ROLLOVER_JOB_ID = "weekly_rollover"


class RolloverScheduler:
    """
    Owns the AsyncIOScheduler and the single weekly rollover job.
    """
    def __init__(
        self,
        day_of_week: str | None = None,
        hour: int | None = None,
        timezone: str | None = None,
    ) -> None:
        self.day_of_week = day_of_week or settings.ROLLOVER_DAY_OF_WEEK
        self.hour = settings.ROLLOVER_HOUR if hour is None else hour
        self.timezone = ZoneInfo(timezone or settings.ROLLOVER_TIMEZONE)

        self.scheduler = AsyncIOScheduler(timezone=self.timezone)

    def build_trigger(self) -> CronTrigger:
        return CronTrigger(
            day_of_week=self.day_of_week,
            hour=self.hour,
            minute=0,
            timezone=self.timezone,
        )

    def start(self) -> None:
        """Register the rollover job and start the scheduler."""
        self.scheduler.add_job(
            self.run_rollover,
            trigger=self.build_trigger(),
            id=ROLLOVER_JOB_ID,
            name="Weekly voting rollover",
            replace_existing=True,
            max_instances=1,  # Never two rollovers at once
            coalesce=True,
        )
        self.scheduler.start()
        log.info(
            f"Rollover scheduler started: every {self.day_of_week} at "
            f"{self.hour:02d}:00 ({self.timezone.key})"
        )

    def stop(self) -> None:
        if self.scheduler.running:
            self.scheduler.shutdown(wait=False)
            log.info("Rollover scheduler stopped")

    async def run_rollover(self) -> None:
        """
        The scheduled job: one session, one transaction, one new week.
        Failures are logged and rolled back so the next run still fires.
        """
        if db_engine.AsyncSessionLocal is None:
            log.error("Rollover skipped: database session factory is not available.")
            return

        async with db_engine.AsyncSessionLocal() as session:
            try:
                new_week = await WeekService(db=session).scheduled_rollover()
                await session.commit()
                log.info(f"Scheduled rollover committed, active week is now {new_week.id}")
            except Exception as e:
                await session.rollback()
                log.error(f"Scheduled rollover failed: {e}", exc_info=True)
