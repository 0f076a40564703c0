"""
triad/__init__.py

triad: settlement engine for a three-choice cyclic wager resolved by an
external randomness oracle.

A participant stakes value on ROCK, PAPER or SCISSORS. The oracle later
supplies the opponent's choice; the engine resolves the match, pays out
immediately as far as its funds reach, and records any shortfall as a
claimable balance the participant withdraws later.
"""

__version__ = "0.3.0"

from triad.core.choice import Choice, Outcome, resolve_outcome
from triad.core.models import (
    Match,
    EventType,
    Submitted,
    GameEnded,
    Claimed,
    Funded,
    LiabilityRecorded,
)
from triad.core.exceptions import (
    TriadError,
    AccessDeniedError,
    InvalidAmountError,
    InsufficientOracleFeeError,
    InsufficientClaimableError,
    InsufficientFundsError,
    TransferFailedError,
    UnknownMatchError,
    MatchAlreadyResolvedError,
)
from triad.ledger import Ledger, Wallets
from triad.store import GameStore
from triad.oracle import FeeToken, RandomnessCoordinator
from triad.settlement import SettlementEngine, FundingGate

__all__ = [
    # Choice ring
    "Choice",
    "Outcome",
    "resolve_outcome",
    # Records and events
    "Match",
    "EventType",
    "Submitted",
    "GameEnded",
    "Claimed",
    "Funded",
    "LiabilityRecorded",
    # Components
    "Ledger",
    "Wallets",
    "GameStore",
    "FeeToken",
    "RandomnessCoordinator",
    "SettlementEngine",
    "FundingGate",
    # Errors
    "TriadError",
    "AccessDeniedError",
    "InvalidAmountError",
    "InsufficientOracleFeeError",
    "InsufficientClaimableError",
    "InsufficientFundsError",
    "TransferFailedError",
    "UnknownMatchError",
    "MatchAlreadyResolvedError",
]
