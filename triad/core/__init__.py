"""
Triad core - choice ring, records, errors and the canonical/crypto primitives
shared by the journal.
"""

from triad.core.choice import (
    Choice,
    Outcome,
    resolve_outcome,
    choice_from_randomness,
    reward_for,
)
from triad.core.models import (
    Match,
    EventType,
    Submitted,
    GameEnded,
    Claimed,
    Funded,
    LiabilityRecorded,
)

__all__ = [
    "Choice",
    "Outcome",
    "resolve_outcome",
    "choice_from_randomness",
    "reward_for",
    "Match",
    "EventType",
    "Submitted",
    "GameEnded",
    "Claimed",
    "Funded",
    "LiabilityRecorded",
]
