"""
triad/core/choice.py

The choice ring: three cyclic options and the rule that compares them.

Adjacency (locked):
    opponent == (participant + 1) % 3   → participant LOSES
    opponent == (participant + 2) % 3   → participant WINS
    opponent == participant             → DRAW

PAPER beats ROCK, SCISSORS beats PAPER, ROCK beats SCISSORS.
Mirroring the adjacency swaps WIN and LOSE for six of the nine pairs.
"""

from enum import IntEnum


class Choice(IntEnum):
    """A committed option. The integer value is its position on the ring."""
    ROCK     = 0
    PAPER    = 1
    SCISSORS = 2


class Outcome(IntEnum):
    """Result from the participant's side. Values are the wire values in GameEnded."""
    WIN  = 0
    LOSE = 1
    DRAW = 2


_RING_SIZE = len(Choice)


def resolve_outcome(participant: Choice, opponent: Choice) -> Outcome:
    """Compare two choices under the cyclic rule. Total, pure."""
    participant = Choice(participant)
    opponent    = Choice(opponent)

    if participant == opponent:
        return Outcome.DRAW
    if opponent == (participant + 1) % _RING_SIZE:
        return Outcome.LOSE
    return Outcome.WIN


def choice_from_randomness(random_value: int) -> Choice:
    """
    Derive the opponent's choice from one oracle word.

    The oracle delivers unsigned integers; a negative value is a caller bug.
    """
    if not isinstance(random_value, int) or random_value < 0:
        raise ValueError(
            f"random_value must be a non-negative int, got {random_value!r}"
        )
    return Choice(random_value % _RING_SIZE)


def reward_for(outcome: Outcome, stake: int) -> int:
    """Amount owed to the participant: double on WIN, stake back on DRAW."""
    if outcome == Outcome.WIN:
        return 2 * stake
    if outcome == Outcome.DRAW:
        return stake
    return 0
