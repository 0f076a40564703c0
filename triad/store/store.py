"""
Match record storage.
"""

from typing import Dict, List

from triad.core.choice import Choice, Outcome
from triad.core.exceptions import (
    DuplicateMatchError,
    InvalidAmountError,
    MatchAlreadyResolvedError,
    UnknownMatchError,
)
from triad.core.models import Match


class GameStore:
    """In-flight and resolved matches keyed by match id."""

    def __init__(self):
        self._matches: Dict[str, Match] = {}

    def create(
        self,
        participant: str,
        choice: Choice,
        stake: int,
        match_id: str,
    ) -> Match:
        """
        Store a new match under an id allocated by the randomness request.

        A zero stake is accepted.
        """
        if match_id in self._matches:
            raise DuplicateMatchError(
                "Match id already allocated",
                {"match_id": match_id},
            )
        if not isinstance(stake, int) or isinstance(stake, bool) or stake < 0:
            raise InvalidAmountError(
                "Stake must be a non-negative integer",
                {"stake": stake},
            )

        match = Match(
            match_id=match_id,
            participant=participant,
            choice=Choice(choice),
            stake=stake,
        )
        self._matches[match_id] = match
        return match

    def get(self, match_id: str) -> Match:
        """Lookup; an unknown id yields the empty record rather than an error."""
        return self._matches.get(match_id) or Match.empty(match_id)

    def exists(self, match_id: str) -> bool:
        return match_id in self._matches

    def mark_resolved(self, match_id: str, outcome: Outcome) -> Match:
        """Move a match to its terminal state. Allowed exactly once."""
        match = self._matches.get(match_id)
        if match is None:
            raise UnknownMatchError("Unknown match", {"match_id": match_id})
        if match.resolved:
            raise MatchAlreadyResolvedError(
                "Match already resolved",
                {"match_id": match_id, "outcome": match.outcome.name},
            )

        settled = match.settled(outcome)
        self._matches[match_id] = settled
        return settled

    def pending(self) -> List[str]:
        """Ids of matches still waiting for randomness, in submission order."""
        return [m.match_id for m in self._matches.values() if not m.resolved]

    def all_matches(self) -> List[Match]:
        return list(self._matches.values())

    def __len__(self) -> int:
        return len(self._matches)

    def __contains__(self, match_id: str) -> bool:
        return match_id in self._matches
