'''
Voting API Models
'''
from datetime import date, datetime
from pydantic import BaseModel, ConfigDict, Field

# --- Read Models (ORM backed) ---

class TimeSlotRead(BaseModel):
    """
    Pydantic model for reading a candidate time slot.
    Corresponds to db_models.TimeSlots.
    """
    id: int
    datetime: datetime

    model_config = ConfigDict(from_attributes=True)

class VotingWeekRead(BaseModel):
    """
    Pydantic model for reading a voting week and its candidate slots.
    Corresponds to db_models.VotingWeeks.
    """
    id: int
    deadline: date
    active: bool
    time_slots: list[TimeSlotRead] = Field(default_factory=list)

    model_config = ConfigDict(from_attributes=True)

class VoteRead(BaseModel):
    """
    Pydantic model for reading a stored ballot.
    Corresponds to db_models.Votes.
    """
    id: int
    voter_name: str
    voting_week_id: int
    time_slots: list[TimeSlotRead] = Field(default_factory=list)
    preferred_time_slots: list[TimeSlotRead] = Field(default_factory=list)

    model_config = ConfigDict(from_attributes=True)

# --- Write Models ---

class VoteCreate(BaseModel):
    """
    Payload for submitting (or resubmitting) a vote for the current week.
    The voter name comes from the access token, never from the body.
    """
    time_slot_ids: list[int] = Field(..., min_length=1)
    preferred_time_slot_ids: list[int] = Field(
        default_factory=list,
        description="Subset of time_slot_ids the voter prefers. Used only to break ties."
    )

# --- Result Models (computed) ---

class TimeSlotStats(BaseModel):
    """Vote statistics for a single time slot of a week."""
    time_slot_id: int
    datetime: datetime
    vote_count: int = 0
    preferred_vote_count: int = 0
    is_winner: bool = False

class VoteResult(BaseModel):
    """Who voted for what, with both slot lists sorted ascending."""
    voter_name: str
    voted_time_slots: list[datetime] = Field(default_factory=list)
    preferred_time_slots: list[datetime] = Field(default_factory=list)

class WeekResultRead(BaseModel):
    """
    Complete result view for one week: per-slot stats, every ballot,
    and the winner set (possibly several slots on a genuine tie).
    """
    week_id: int
    deadline: date
    time_slots: list[TimeSlotStats] = Field(default_factory=list)
    votes: list[VoteResult] = Field(default_factory=list)
    winner_time_slots: list[TimeSlotStats] = Field(default_factory=list)
