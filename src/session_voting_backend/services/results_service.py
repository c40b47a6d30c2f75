'''
Results Service
'''
from typing import Annotated, Optional

from fastapi import Depends

from ..database import models as db_models
from ..models import voting as voting_models
from ..core.tally import Ballot, SlotRef, tally
from ..common.exceptions import WeekNotFoundError
from ..common.logger import log
from .week_service import WeekService
from .vote_service import VoteService


class ResultsService:
    """
    Read-only composition of tally output and per-voter ballots into the
    week result view.
    """
    def __init__(
        self,
        week_service: Annotated[WeekService, Depends(WeekService)],
        vote_service: Annotated[VoteService, Depends(VoteService)]
    ):
        self.week_service = week_service
        self.vote_service = vote_service

    # --- Formatting Helpers ---

    def _format_vote_result(self, vote: db_models.Votes) -> voting_models.VoteResult:
        return voting_models.VoteResult(
            voter_name=vote.voter_name,
            voted_time_slots=sorted(slot.datetime for slot in vote.time_slots),
            preferred_time_slots=sorted(slot.datetime for slot in vote.preferred_time_slots)
        )

    def assemble_week_result(
        self,
        week: db_models.VotingWeeks,
        votes: list[db_models.Votes]
    ) -> voting_models.WeekResultRead:
        """
        Pure composition: no queries, no writes.
        `week.time_slots` and both slot sets of every vote must be loaded.
        """
        slots = [SlotRef.model_validate(slot) for slot in week.time_slots]
        tally_result = tally(slots, [Ballot.from_vote(vote) for vote in votes])

        return voting_models.WeekResultRead(
            week_id=week.id,
            deadline=week.deadline,
            time_slots=tally_result.time_slots,
            votes=[self._format_vote_result(vote) for vote in votes],
            winner_time_slots=tally_result.winners
        )

    async def build_week_result(self, week: db_models.VotingWeeks) -> voting_models.WeekResultRead:
        votes = await self.vote_service.find_votes_for_week(week.id)
        return self.assemble_week_result(week, votes)

    # --- Public Read Methods (API-Facing) ---

    async def get_week_results(self, week_id: int) -> Optional[voting_models.WeekResultRead]:
        """
        Results for a specific week.
        Returns None when the week does not exist rather than raising.
        """
        try:
            week = await self.week_service.get_week(week_id)
        except WeekNotFoundError:
            log.info(f"No results for missing voting week {week_id}")
            return None
        return await self.build_week_result(week)

    async def get_current_week_results(self) -> voting_models.WeekResultRead:
        week = await self.week_service.get_current_week()
        return await self.build_week_result(week)

    async def get_all_weeks_results(self) -> list[voting_models.WeekResultRead]:
        """Results for every week, newest deadline first."""
        weeks = await self.week_service.list_weeks()
        return [await self.build_week_result(week) for week in weeks]

    async def get_past_weeks_results(self) -> list[voting_models.WeekResultRead]:
        """Results for every week whose deadline has passed, newest first."""
        weeks = await self.week_service.list_past_weeks()
        return [await self.build_week_result(week) for week in weeks]
