'''
API endpoints for the weekly session vote.
'''
from typing import Annotated, Any
from fastapi import APIRouter, Depends, HTTPException, status

from ..models import voting as voting_models
from ..services.security import verify_token_and_get_voter
from ..services.week_service import WeekService
from ..services.vote_service import VoteService
from ..services.results_service import ResultsService
from ..common.exceptions import (
    VotingError,
    WeekNotFoundError,
    InvalidSlotReferenceError,
    InvalidPreferredSlotError,
    ConcurrentVoteError
)
from ..common.logger import log


def _to_http_exception(error: VotingError) -> HTTPException:
    """Maps a core error to the status code the client should see."""
    if isinstance(error, WeekNotFoundError):
        code = status.HTTP_404_NOT_FOUND
    elif isinstance(error, (InvalidSlotReferenceError, InvalidPreferredSlotError)):
        code = status.HTTP_400_BAD_REQUEST
    elif isinstance(error, ConcurrentVoteError):
        code = status.HTTP_409_CONFLICT
    else:
        code = status.HTTP_400_BAD_REQUEST
    return HTTPException(status_code=code, detail=str(error))


class VotingAPI:
    """
    A class to encapsulate the voting endpoints.
    Reads are public; submitting a vote and resetting the week need a token.
    """
    def __init__(self):
        self.router = APIRouter(
            prefix="/voting",
            tags=["Voting"]
        )
        self._register_routes()

    def _register_routes(self):
        """Registers all the API routes for this class."""
        self.router.add_api_route(
                "/current-week",
                self.get_current_week,
                methods=["GET"],
                response_model=voting_models.VotingWeekRead)

        self.router.add_api_route(
                "/current-results",
                self.get_current_week_results,
                methods=["GET"],
                response_model=voting_models.WeekResultRead)

        self.router.add_api_route(
                "/week/{week_id}/results",
                self.get_week_results,
                methods=["GET"],
                response_model=voting_models.WeekResultRead)

        self.router.add_api_route(
                "/past-weeks",
                self.get_past_weeks,
                methods=["GET"],
                response_model=list[voting_models.WeekResultRead])

        self.router.add_api_route(
                "/all-weeks",
                self.get_all_weeks,
                methods=["GET"],
                response_model=list[voting_models.WeekResultRead])

        self.router.add_api_route(
                "/vote",
                self.submit_vote,
                methods=["POST"],
                response_model=voting_models.VoteRead)

        self.router.add_api_route(
                "/reset-week",
                self.reset_week,
                methods=["POST"],
                response_model=voting_models.VotingWeekRead)

    async def get_current_week(
        self,
        week_service: Annotated[WeekService, Depends(WeekService)]
    ) -> Any:
        """
        Returns the active voting week and its candidate time slots.
        """
        week = await week_service.get_current_week()
        return voting_models.VotingWeekRead.model_validate(week)

    async def get_current_week_results(
        self,
        results_service: Annotated[ResultsService, Depends(ResultsService)]
    ) -> Any:
        """
        Returns the live results (counts, ballots, winners) of the active week.
        """
        return await results_service.get_current_week_results()

    async def get_week_results(
        self,
        week_id: int,
        results_service: Annotated[ResultsService, Depends(ResultsService)]
    ) -> Any:
        """
        Returns the results of a specific week, or 404 if it does not exist.
        """
        result = await results_service.get_week_results(week_id)
        if result is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Voting week not found.")
        return result

    async def get_past_weeks(
        self,
        results_service: Annotated[ResultsService, Depends(ResultsService)]
    ) -> Any:
        """
        Returns the results of every week whose deadline has passed.
        """
        return await results_service.get_past_weeks_results()

    async def get_all_weeks(
        self,
        results_service: Annotated[ResultsService, Depends(ResultsService)]
    ) -> Any:
        """
        Returns the results of every week, including the current one.
        """
        return await results_service.get_all_weeks_results()

    async def submit_vote(
        self,
        vote_data: voting_models.VoteCreate,
        voter_name: Annotated[str, Depends(verify_token_and_get_voter)],
        vote_service: Annotated[VoteService, Depends(VoteService)]
    ) -> Any:
        """
        Submits (or replaces) the caller's ballot for the current week.
        The voter name is taken from the access token.
        """
        try:
            vote = await vote_service.submit_vote(
                voter_name,
                vote_data.time_slot_ids,
                vote_data.preferred_time_slot_ids
            )
        except VotingError as e:
            raise _to_http_exception(e) from e
        return voting_models.VoteRead.model_validate(vote)

    async def reset_week(
        self,
        voter_name: Annotated[str, Depends(verify_token_and_get_voter)],
        week_service: Annotated[WeekService, Depends(WeekService)]
    ) -> Any:
        """
        Manually closes the current week and opens a fresh one.
        """
        log.info(f"Week reset requested by {voter_name}")
        week = await week_service.reset_week()
        return voting_models.VotingWeekRead.model_validate(week)

# Instantiate the class and export its router
voting_api = VotingAPI()
router = voting_api.router
