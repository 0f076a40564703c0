"""
tests/test_choice_ring.py

Outcome rule over all nine choice pairs, randomness reduction and rewards.
"""

import itertools

import pytest

from triad.core.choice import (
    Choice,
    Outcome,
    choice_from_randomness,
    resolve_outcome,
    reward_for,
)


ALL_PAIRS = list(itertools.product(Choice, Choice))


class TestResolveOutcome:

    @pytest.mark.parametrize("participant,opponent", ALL_PAIRS)
    def test_rule_holds_for_every_pair(self, participant, opponent):
        outcome = resolve_outcome(participant, opponent)

        if participant == opponent:
            assert outcome == Outcome.DRAW
        elif opponent == (participant + 2) % 3:
            assert outcome == Outcome.WIN
        else:
            assert opponent == (participant + 1) % 3
            assert outcome == Outcome.LOSE

    def test_adjacency_is_not_mirrored(self):
        """PAPER beats ROCK; swapping the adjacency would flip this."""
        assert resolve_outcome(Choice.ROCK, Choice.PAPER) == Outcome.LOSE
        assert resolve_outcome(Choice.PAPER, Choice.ROCK) == Outcome.WIN
        assert resolve_outcome(Choice.ROCK, Choice.SCISSORS) == Outcome.WIN
        assert resolve_outcome(Choice.SCISSORS, Choice.ROCK) == Outcome.LOSE

    def test_outcome_counts_are_balanced(self):
        outcomes = [resolve_outcome(a, b) for a, b in ALL_PAIRS]
        assert outcomes.count(Outcome.WIN) == 3
        assert outcomes.count(Outcome.LOSE) == 3
        assert outcomes.count(Outcome.DRAW) == 3

    def test_accepts_plain_ints(self):
        assert resolve_outcome(0, 2) == Outcome.WIN

    def test_rejects_values_off_the_ring(self):
        with pytest.raises(ValueError):
            resolve_outcome(3, 0)

    def test_wire_values(self):
        assert [int(o) for o in (Outcome.WIN, Outcome.LOSE, Outcome.DRAW)] == [0, 1, 2]


class TestRandomnessReduction:

    @pytest.mark.parametrize("value,expected", [
        (0, Choice.ROCK),
        (3, Choice.ROCK),
        (4, Choice.PAPER),
        (5, Choice.SCISSORS),
        (2**256 - 1, Choice((2**256 - 1) % 3)),
    ])
    def test_modulo_three(self, value, expected):
        assert choice_from_randomness(value) == expected

    def test_negative_rejected(self):
        with pytest.raises(ValueError):
            choice_from_randomness(-1)


class TestReward:

    def test_win_pays_double(self):
        assert reward_for(Outcome.WIN, 7) == 14

    def test_draw_returns_stake(self):
        assert reward_for(Outcome.DRAW, 7) == 7

    def test_lose_pays_nothing(self):
        assert reward_for(Outcome.LOSE, 7) == 0

    def test_zero_stake(self):
        assert reward_for(Outcome.WIN, 0) == 0
