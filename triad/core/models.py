"""
triad/core/models.py

Match record and engine events.

Match fields participant, choice and stake are fixed at submission.
Resolution produces a new record with resolved=True; the old one is
never edited in place and no record is ever removed.

Events are plain frozen dataclasses. Every event serializes with
to_dict(), which is the payload written to the audit journal.
"""

from dataclasses import dataclass, field, replace
from typing import Any, Dict, Optional, Set

from triad.core.choice import Choice, Outcome


# ─────────────────────────────────────────────────────────────
# Event Type Vocabulary
# ─────────────────────────────────────────────────────────────

class EventType:
    """
    Event type string constants.

    These are the ONLY valid values for JournalEntry.event_type.
    """
    SUBMITTED          = "submitted"
    GAME_ENDED         = "game_ended"
    CLAIMED            = "claimed"
    FUNDED             = "funded"
    LIABILITY_RECORDED = "liability_recorded"


VALID_EVENT_TYPES: Set[str] = {
    EventType.SUBMITTED,
    EventType.GAME_ENDED,
    EventType.CLAIMED,
    EventType.FUNDED,
    EventType.LIABILITY_RECORDED,
}


# ─────────────────────────────────────────────────────────────
# Match
# ─────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class Match:
    """One submitted wager, awaiting or having received resolution."""

    match_id:    str
    participant: str
    choice:      Choice
    stake:       int
    resolved:    bool              = False
    outcome:     Optional[Outcome] = None

    @classmethod
    def empty(cls, match_id: str) -> "Match":
        """The zero-valued record returned for an unknown id."""
        return cls(
            match_id=    match_id,
            participant= "",
            choice=      Choice.ROCK,
            stake=       0,
        )

    def is_empty(self) -> bool:
        return not self.participant and self.stake == 0

    def settled(self, outcome: Outcome) -> "Match":
        """Return the terminal copy of this record."""
        return replace(self, resolved=True, outcome=Outcome(outcome))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "match_id":    self.match_id,
            "participant": self.participant,
            "choice":      int(self.choice),
            "stake":       self.stake,
            "resolved":    self.resolved,
            "outcome":     None if self.outcome is None else int(self.outcome),
        }


# ─────────────────────────────────────────────────────────────
# Events
# ─────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class Submitted:
    participant: str
    choice:      Choice
    stake:       int
    match_id:    str
    event_type:  str = field(default=EventType.SUBMITTED, init=False)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "participant": self.participant,
            "choice":      int(self.choice),
            "stake":       self.stake,
            "match_id":    self.match_id,
        }


@dataclass(frozen=True)
class GameEnded:
    match_id:   str
    outcome:    Outcome
    event_type: str = field(default=EventType.GAME_ENDED, init=False)

    def to_dict(self) -> Dict[str, Any]:
        return {"match_id": self.match_id, "outcome": int(self.outcome)}


@dataclass(frozen=True)
class Claimed:
    amount:     int
    account:    str
    event_type: str = field(default=EventType.CLAIMED, init=False)

    def to_dict(self) -> Dict[str, Any]:
        return {"amount": self.amount, "account": self.account}


@dataclass(frozen=True)
class Funded:
    amount:     int
    event_type: str = field(default=EventType.FUNDED, init=False)

    def to_dict(self) -> Dict[str, Any]:
        return {"amount": self.amount}


@dataclass(frozen=True)
class LiabilityRecorded:
    account:    str
    amount:     int
    match_id:   str
    event_type: str = field(default=EventType.LIABILITY_RECORDED, init=False)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "account":  self.account,
            "amount":   self.amount,
            "match_id": self.match_id,
        }
