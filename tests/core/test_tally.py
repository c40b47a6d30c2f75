'''
testing core/tally.py
'''
from datetime import datetime

from src.session_voting_backend.core.tally import Ballot, SlotRef, tally, resolve_winners, count_votes

SLOT_A = SlotRef(id=1, datetime=datetime(2026, 10, 26, 18, 0))
SLOT_B = SlotRef(id=2, datetime=datetime(2026, 10, 27, 18, 0))
SLOT_C = SlotRef(id=3, datetime=datetime(2026, 10, 28, 18, 0))
SLOTS = [SLOT_A, SLOT_B, SLOT_C]


def ballot(selected, preferred=()):
    return Ballot(selected_ids=frozenset(selected), preferred_ids=frozenset(preferred))


def winner_ids(result):
    return {stats.time_slot_id for stats in result.winners}


class TestCountVotes:

    def test_counts_selected_and_preferred(self):
        stats = count_votes(SLOTS, [
            ballot({1, 2}, {2}),
            ballot({2}),
            ballot({1, 3}, {1, 3}),
        ])
        by_id = {s.time_slot_id: s for s in stats}
        assert (by_id[1].vote_count, by_id[1].preferred_vote_count) == (2, 1)
        assert (by_id[2].vote_count, by_id[2].preferred_vote_count) == (2, 1)
        assert (by_id[3].vote_count, by_id[3].preferred_vote_count) == (1, 1)

    def test_sorted_by_datetime_regardless_of_input_order(self):
        stats = count_votes([SLOT_C, SLOT_A, SLOT_B], [])
        assert [s.time_slot_id for s in stats] == [1, 2, 3]

    def test_ignores_unknown_slot_ids(self):
        stats = count_votes(SLOTS, [ballot({1, 42}, {42})])
        assert sum(s.vote_count for s in stats) == 1
        assert sum(s.preferred_vote_count for s in stats) == 0


class TestWinnerResolution:

    def test_preferred_votes_break_a_tie(self):
        """A (3 votes, 1 preferred), B (3, 2), C (1, 0) -> exactly {B}."""
        ballots = [
            ballot({1, 2, 3}, {1, 2}),
            ballot({1, 2}, {2}),
            ballot({1, 2}),
        ]
        result = tally(SLOTS, ballots)
        by_id = {s.time_slot_id: s for s in result.time_slots}
        assert (by_id[1].vote_count, by_id[1].preferred_vote_count) == (3, 1)
        assert (by_id[2].vote_count, by_id[2].preferred_vote_count) == (3, 2)
        assert (by_id[3].vote_count, by_id[3].preferred_vote_count) == (1, 0)

        assert winner_ids(result) == {2}

    def test_exhausted_tie_break_keeps_every_winner(self):
        """A (3, 1), B (3, 1) -> both win."""
        ballots = [
            ballot({1, 2}, {1}),
            ballot({1, 2}, {2}),
            ballot({1, 2}),
        ]
        result = tally(SLOTS[:2], ballots)
        assert winner_ids(result) == {1, 2}

    def test_single_top_slot_wins_despite_fewer_preferred(self):
        ballots = [
            ballot({1}),
            ballot({1, 2}, {2}),
        ]
        result = tally(SLOTS, ballots)
        assert winner_ids(result) == {1}

    def test_zero_vote_week_has_no_winner(self):
        result = tally(SLOTS, [])
        assert all(s.vote_count == 0 for s in result.time_slots)
        assert result.winners == []
        assert not any(s.is_winner for s in result.time_slots)

    def test_winner_flag_set_on_slot_list(self):
        result = tally(SLOTS, [ballot({3})])
        flagged = [s.time_slot_id for s in result.time_slots if s.is_winner]
        assert flagged == [3]
        assert result.winners[0].is_winner is True

    def test_resolve_winners_on_empty_input(self):
        assert resolve_winners([]) == []


class TestRoundTrip:

    def test_vote_counts_sum_to_ballot_cardinalities(self):
        ballots = [
            ballot({1}),
            ballot({1, 2, 3}, {3}),
            ballot({2, 3}, {2, 3}),
        ]
        result = tally(SLOTS, ballots)
        assert result.total_votes == sum(len(b.selected_ids) for b in ballots)
        assert sum(s.preferred_vote_count for s in result.time_slots) == \
            sum(len(b.preferred_ids) for b in ballots)
