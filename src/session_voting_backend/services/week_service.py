'''
Week Lifecycle Service
'''
from typing import Annotated, Optional
from datetime import date, datetime
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from fastapi import Depends
from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from ..database.engine import get_db_session
from ..database import models as db_models
from ..core.slot_generator import generate_time_slots, next_deadline
from ..common.config import settings
from ..common.exceptions import WeekNotFoundError
from ..common.logger import log


class WeekService:
    """
    Owns creation, activation and retrieval of voting weeks.
    Exactly one week is active at a time; rollover swaps it inside the
    caller's transaction.
    """
    def __init__(
        self,
        db: Annotated[AsyncSession, Depends(get_db_session)]
    ):
        self.db = db

    # --- Date Helper ---

    def _today(self) -> date:
        """Today's date in the rollover timezone."""
        try:
            tz = ZoneInfo(settings.ROLLOVER_TIMEZONE)
        except (ZoneInfoNotFoundError, ValueError):
            log.warning(f"Invalid timezone '{settings.ROLLOVER_TIMEZONE}', defaulting to UTC.")
            tz = ZoneInfo("UTC")
        return datetime.now(tz).date()

    # --- Reads ---

    async def _get_active_week(self) -> Optional[db_models.VotingWeeks]:
        stmt = select(db_models.VotingWeeks).options(
            selectinload(db_models.VotingWeeks.time_slots)
        ).filter(db_models.VotingWeeks.active.is_(True))

        result = await self.db.execute(stmt)
        return result.scalars().first()

    async def get_current_week(self) -> db_models.VotingWeeks:
        """
        Returns the active week with its slots loaded.
        If there is none yet, one is created on the spot.
        """
        week = await self._get_active_week()
        if week is None:
            log.info("No active voting week found, creating one.")
            week = await self.create_new_week()
        return week

    async def get_week(self, week_id: int) -> db_models.VotingWeeks:
        """
        Fetches a single week by ID with its slots loaded.
        Raises WeekNotFoundError if it does not exist.
        """
        stmt = select(db_models.VotingWeeks).options(
            selectinload(db_models.VotingWeeks.time_slots)
        ).filter(db_models.VotingWeeks.id == week_id)

        result = await self.db.execute(stmt)
        week = result.scalars().first()
        if not week:
            log.warning(f"Tried to fetch non-existing voting week: {week_id}")
            raise WeekNotFoundError(f"Voting week with ID {week_id} not found.")
        return week

    async def list_weeks(self) -> list[db_models.VotingWeeks]:
        """All weeks, newest deadline first."""
        stmt = select(db_models.VotingWeeks).options(
            selectinload(db_models.VotingWeeks.time_slots)
        ).order_by(
            db_models.VotingWeeks.deadline.desc(),
            db_models.VotingWeeks.id.desc()
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def list_past_weeks(self, today: Optional[date] = None) -> list[db_models.VotingWeeks]:
        """Weeks whose deadline lies strictly before today, newest first."""
        today = today or self._today()
        stmt = select(db_models.VotingWeeks).options(
            selectinload(db_models.VotingWeeks.time_slots)
        ).filter(
            db_models.VotingWeeks.deadline < today
        ).order_by(
            db_models.VotingWeeks.deadline.desc(),
            db_models.VotingWeeks.id.desc()
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    # --- Rollover ---

    async def create_new_week(self, today: Optional[date] = None) -> db_models.VotingWeeks:
        """
        Deactivates the current week and creates a fresh active one with its
        generated time slots.

        Everything happens in the session's open transaction: lock the active
        rows, flip them off, insert the new week and its slots, flush. Readers
        on other connections see either the old active week or the new one.
        """
        today = today or self._today()

        # 1. Lock the currently active rows so concurrent rollovers queue up
        lock_stmt = select(db_models.VotingWeeks.id).filter(
            db_models.VotingWeeks.active.is_(True)
        ).with_for_update()
        locked_ids = (await self.db.execute(lock_stmt)).scalars().all()

        # 2. Deactivate (no-op when nothing is active)
        await self.db.execute(
            update(db_models.VotingWeeks)
            .where(db_models.VotingWeeks.active.is_(True))
            .values(active=False)
        )
        if locked_ids:
            log.info(f"Deactivated voting week(s): {list(locked_ids)}")

        # 3. Build the new week together with its slots
        deadline = next_deadline(today)
        new_week = db_models.VotingWeeks(
            deadline=deadline,
            active=True,
            time_slots=[
                db_models.TimeSlots(datetime=slot_datetime)
                for slot_datetime in generate_time_slots(deadline)
            ]
        )

        self.db.add(new_week)
        await self.db.flush()

        log.info(f"Created new voting week with ID {new_week.id} and deadline {deadline}")
        return new_week

    async def reset_week(self) -> db_models.VotingWeeks:
        """Manually triggered rollover."""
        log.info("Manually triggering week reset")
        return await self.create_new_week()

    async def scheduled_rollover(self) -> db_models.VotingWeeks:
        """Entry point for the weekly timer."""
        log.info(f"Scheduled week reset triggered at {datetime.now()}")
        return await self.create_new_week()
