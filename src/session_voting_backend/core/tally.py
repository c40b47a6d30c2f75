'''
Tally engine: per-slot vote counts and winner resolution.
'''
from datetime import datetime
from typing import Iterable, Sequence

from pydantic import BaseModel, ConfigDict, Field

from ..models.voting import TimeSlotStats


class SlotRef(BaseModel):
    """The two fields of a time slot the tally needs."""
    id: int
    datetime: datetime

    model_config = ConfigDict(from_attributes=True)


class Ballot(BaseModel):
    """
    One voter's choices as plain slot IDs.
    `preferred_ids` is expected to be a subset of `selected_ids`.
    """
    selected_ids: frozenset[int] = Field(default_factory=frozenset)
    preferred_ids: frozenset[int] = Field(default_factory=frozenset)

    @classmethod
    def from_vote(cls, vote) -> "Ballot":
        """Builds a ballot from a db_models.Votes with both slot sets loaded."""
        return cls(
            selected_ids=frozenset(slot.id for slot in vote.time_slots),
            preferred_ids=frozenset(slot.id for slot in vote.preferred_time_slots),
        )


class TallyResult(BaseModel):
    time_slots: list[TimeSlotStats] = Field(default_factory=list)
    winners: list[TimeSlotStats] = Field(default_factory=list)

    @property
    def total_votes(self) -> int:
        return sum(stats.vote_count for stats in self.time_slots)


def count_votes(slots: Sequence[SlotRef], ballots: Iterable[Ballot]) -> list[TimeSlotStats]:
    """
    Counts, per slot, how many ballots selected it and how many preferred it.
    Returns the stats sorted by slot datetime.
    """
    stats_by_id = {
        slot.id: TimeSlotStats(time_slot_id=slot.id, datetime=slot.datetime)
        for slot in slots
    }

    for ballot in ballots:
        for slot_id in ballot.selected_ids:
            if slot_id in stats_by_id:
                stats_by_id[slot_id].vote_count += 1
        for slot_id in ballot.preferred_ids:
            if slot_id in stats_by_id:
                stats_by_id[slot_id].preferred_vote_count += 1

    return sorted(stats_by_id.values(), key=lambda s: (s.datetime, s.time_slot_id))


def resolve_winners(slot_stats: Sequence[TimeSlotStats]) -> list[TimeSlotStats]:
    """
    Two-stage winner resolution.

    1. Candidates are the slots with the highest vote count; nothing wins
       when no vote was cast at all.
    2. A single candidate wins outright. Otherwise the candidates with the
       highest preferred count win, which may still be several slots.
    """
    max_votes = max((s.vote_count for s in slot_stats), default=0)
    if max_votes == 0:
        return []

    top_by_votes = [s for s in slot_stats if s.vote_count == max_votes]
    if len(top_by_votes) == 1:
        return top_by_votes

    max_preferred = max(s.preferred_vote_count for s in top_by_votes)
    return [s for s in top_by_votes if s.preferred_vote_count == max_preferred]


def tally(slots: Sequence[SlotRef], ballots: Iterable[Ballot]) -> TallyResult:
    """Counts the ballots and flags the winner set."""
    slot_stats = count_votes(slots, ballots)
    winners = resolve_winners(slot_stats)
    for stats in winners:
        stats.is_winner = True
    return TallyResult(time_slots=slot_stats, winners=winners)
