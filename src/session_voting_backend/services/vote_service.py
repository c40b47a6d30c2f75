'''
Vote Store Service
'''
from typing import Annotated, Optional, Sequence

from fastapi import Depends
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from ..database.engine import get_db_session
from ..database import models as db_models
from ..common.exceptions import (
    WeekNotFoundError,
    InvalidSlotReferenceError,
    InvalidPreferredSlotError,
    SlotNotFoundError,
    ConcurrentVoteError
)
from ..common.logger import log
from .week_service import WeekService


def _unique_ids(ids: Optional[Sequence[int]]) -> list[int]:
    """Drops duplicates while keeping the submitted order."""
    return list(dict.fromkeys(ids or []))


class VoteService:
    """
    Stores one ballot per voter per week.
    Resubmitting replaces the previous ballot instead of adding a second one.
    """
    def __init__(
        self,
        db: Annotated[AsyncSession, Depends(get_db_session)],
        week_service: Annotated[WeekService, Depends(WeekService)]
    ):
        self.db = db
        self.week_service = week_service

    # --- Reads ---

    def _vote_query(self):
        return select(db_models.Votes).options(
            selectinload(db_models.Votes.time_slots),
            selectinload(db_models.Votes.preferred_time_slots)
        )

    async def find_vote(self, voter_name: str, week_id: int) -> Optional[db_models.Votes]:
        """Returns the voter's ballot for the week, or None."""
        stmt = self._vote_query().filter(
            db_models.Votes.voter_name == voter_name,
            db_models.Votes.voting_week_id == week_id
        )
        result = await self.db.execute(stmt)
        return result.scalars().first()

    async def find_votes_for_week(self, week_id: int) -> list[db_models.Votes]:
        """All ballots cast for the week, in submission order."""
        stmt = self._vote_query().filter(
            db_models.Votes.voting_week_id == week_id
        ).order_by(db_models.Votes.id)
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    # --- Validation Helpers ---

    async def _resolve_selected_slots(self, week_id: int, slot_ids: list[int]) -> list[db_models.TimeSlots]:
        """
        Loads the selected slots. Every ID must resolve to a slot of `week_id`.
        """
        stmt = select(db_models.TimeSlots).filter(db_models.TimeSlots.id.in_(slot_ids))
        result = await self.db.execute(stmt)
        slots_by_id = {slot.id: slot for slot in result.scalars().all()}

        foreign_ids = [
            slot_id for slot_id in slot_ids
            if slot_id not in slots_by_id or slots_by_id[slot_id].voting_week_id != week_id
        ]
        if foreign_ids:
            log.warning(f"Vote referenced timeslots {foreign_ids} outside voting week {week_id}")
            raise InvalidSlotReferenceError(
                "Some timeslots do not belong to the current voting week"
            )
        return sorted((slots_by_id[slot_id] for slot_id in slot_ids), key=lambda s: s.datetime)

    def _resolve_preferred_slots(
        self,
        selected_slots: list[db_models.TimeSlots],
        preferred_ids: list[int]
    ) -> list[db_models.TimeSlots]:
        """
        Preferred slots must be a subset of the selected ones.
        """
        if not preferred_ids:
            return []

        selected_by_id = {slot.id: slot for slot in selected_slots}
        if not set(preferred_ids).issubset(selected_by_id):
            raise InvalidPreferredSlotError(
                "All preferred timeslots must be among the selected timeslots"
            )

        preferred_slots = [selected_by_id[slot_id] for slot_id in preferred_ids if slot_id in selected_by_id]
        if len(preferred_slots) != len(preferred_ids):
            raise SlotNotFoundError("Some preferred timeslots not found")
        return sorted(preferred_slots, key=lambda s: s.datetime)

    # --- Writes ---

    async def upsert_vote(
        self,
        voter_name: str,
        week_id: int,
        selected_slot_ids: Sequence[int],
        preferred_slot_ids: Optional[Sequence[int]] = None
    ) -> db_models.Votes:
        """
        Creates or fully replaces the voter's ballot for the given week.
        The week must be the currently active one.
        """
        # 1. The target week has to be the active one
        week = await self.db.get(db_models.VotingWeeks, week_id)
        if week is None or not week.active:
            log.warning(f"Vote by {voter_name} targeted inactive or missing week {week_id}")
            raise WeekNotFoundError(f"No active voting week with ID {week_id}.")

        selected_ids = _unique_ids(selected_slot_ids)
        preferred_ids = _unique_ids(preferred_slot_ids)

        # 2. + 3. Resolve and validate both slot sets
        selected_slots = await self._resolve_selected_slots(week_id, selected_ids)
        preferred_slots = self._resolve_preferred_slots(selected_slots, preferred_ids)

        # 4. Overwrite an existing ballot, or 5. create a new one
        vote = await self.find_vote(voter_name, week_id)
        if vote is not None:
            vote.time_slots = selected_slots
            vote.preferred_time_slots = preferred_slots
            log.info(f"Updated vote for {voter_name} with {len(selected_slots)} timeslots, preferred: {len(preferred_slots)}")
        else:
            vote = db_models.Votes(
                voter_name=voter_name,
                voting_week_id=week_id,
                time_slots=selected_slots,
                preferred_time_slots=preferred_slots
            )
            self.db.add(vote)
            log.info(f"Created new vote for {voter_name} with {len(selected_slots)} timeslots, preferred: {len(preferred_slots)}")

        # 6. Persist
        try:
            await self.db.flush()
        except IntegrityError as e:
            # Another request inserted this voter's ballot between our read and our write.
            log.warning(f"Concurrent vote submission for {voter_name} in week {week_id}: {e}")
            raise ConcurrentVoteError(
                "Your vote was submitted concurrently, please retry."
            ) from e

        return vote

    async def submit_vote(
        self,
        voter_name: str,
        selected_slot_ids: Sequence[int],
        preferred_slot_ids: Optional[Sequence[int]] = None
    ) -> db_models.Votes:
        """Submits a ballot for whatever week is currently active."""
        current_week = await self.week_service.get_current_week()
        return await self.upsert_vote(
            voter_name,
            current_week.id,
            selected_slot_ids,
            preferred_slot_ids
        )
