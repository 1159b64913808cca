"""Tests for the check-in ledger."""

import pytest

from habit_hero.errors import InvalidDateError
from habit_hero.ledger import Participant, add_check_in, refresh_stats, remove_check_in

TODAY = "2024-01-03"


@pytest.fixture
def participant():
    return Participant(username="alice")


class TestAddCheckIn:
    def test_adds_and_recomputes(self, participant):
        assert add_check_in(participant, TODAY, TODAY) is True
        assert participant.check_ins == [TODAY]
        assert participant.total_check_ins == 1
        assert participant.current_streak == 1

    def test_keeps_sorted_order(self, participant):
        for day in ["2024-01-03", "2024-01-01", "2024-01-02"]:
            add_check_in(participant, day, TODAY)
        assert participant.check_ins == ["2024-01-01", "2024-01-02", "2024-01-03"]
        assert participant.current_streak == 3

    def test_duplicate_is_noop(self, participant):
        add_check_in(participant, TODAY, TODAY)
        snapshot = (list(participant.check_ins), participant.total_check_ins, participant.current_streak)
        assert add_check_in(participant, TODAY, TODAY) is False
        assert (participant.check_ins, participant.total_check_ins, participant.current_streak) == snapshot

    def test_permissive_out_of_range_date(self, participant):
        # The ledger itself stores future and ancient dates as given.
        add_check_in(participant, "2030-06-01", TODAY)
        add_check_in(participant, "1999-12-31", TODAY)
        assert participant.total_check_ins == 2
        assert participant.current_streak == 0

    def test_malformed_date_leaves_state_untouched(self, participant):
        add_check_in(participant, TODAY, TODAY)
        with pytest.raises(InvalidDateError):
            add_check_in(participant, "03/01/2024", TODAY)
        assert participant.check_ins == [TODAY]
        assert participant.total_check_ins == 1

    def test_malformed_today_leaves_state_untouched(self, participant):
        with pytest.raises(InvalidDateError):
            add_check_in(participant, TODAY, "not-a-date")
        assert participant.check_ins == []

    def test_normalizes_date_objects(self, participant):
        from datetime import date
        add_check_in(participant, date(2024, 1, 3), TODAY)
        assert participant.check_ins == ["2024-01-03"]


class TestRemoveCheckIn:
    def test_removes_and_recomputes(self, participant):
        add_check_in(participant, "2024-01-02", TODAY)
        add_check_in(participant, TODAY, TODAY)
        assert remove_check_in(participant, TODAY, TODAY) is True
        assert participant.check_ins == ["2024-01-02"]
        assert participant.total_check_ins == 1
        assert participant.current_streak == 1

    def test_absent_date_is_noop(self, participant):
        add_check_in(participant, TODAY, TODAY)
        assert remove_check_in(participant, "2024-01-01", TODAY) is False
        assert participant.check_ins == [TODAY]

    def test_undo_restores_previous_stats(self, participant):
        add_check_in(participant, "2024-01-01", TODAY)
        add_check_in(participant, "2024-01-02", TODAY)
        before = (participant.total_check_ins, participant.current_streak)
        add_check_in(participant, TODAY, TODAY)
        assert (participant.total_check_ins, participant.current_streak) == (3, 3)
        remove_check_in(participant, TODAY, TODAY)
        assert (participant.total_check_ins, participant.current_streak) == before

    def test_malformed_date_raises(self, participant):
        with pytest.raises(InvalidDateError):
            remove_check_in(participant, "2024/01/03", TODAY)


class TestRefreshStats:
    def test_streak_expires_without_mutation(self, participant):
        add_check_in(participant, "2024-01-02", TODAY)
        add_check_in(participant, TODAY, TODAY)
        assert participant.current_streak == 2
        refresh_stats(participant, "2024-01-06")
        assert participant.current_streak == 0
        assert participant.total_check_ins == 2
        assert participant.longest_streak == 2

    def test_has_checked_in(self, participant):
        add_check_in(participant, TODAY, TODAY)
        assert participant.has_checked_in(TODAY)
        assert not participant.has_checked_in("2024-01-02")


class TestStatsConsistency:
    def test_total_matches_set_size_over_mixed_sequence(self, participant):
        ops = [
            ("add", "2024-01-01"), ("add", "2024-01-02"), ("add", "2024-01-02"),
            ("remove", "2024-01-05"), ("add", "2024-01-03"), ("remove", "2024-01-02"),
            ("add", "2024-01-02"), ("remove", "2024-01-01"),
        ]
        for op, day in ops:
            fn = add_check_in if op == "add" else remove_check_in
            fn(participant, day, TODAY)
            assert participant.total_check_ins == len(set(participant.check_ins))
            assert participant.check_ins == sorted(set(participant.check_ins))
        assert participant.check_ins == ["2024-01-02", "2024-01-03"]
        assert participant.current_streak == 2
