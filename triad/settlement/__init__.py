"""
Triad Settlement Engine

The engine turns a committed choice plus one oracle word into an outcome
and moves the money:
- submit:  stake escrowed, randomness requested, match stored
- resolve: outcome computed, reward paid up to available funds
- claim:   deferred reward withdrawn later
- fund:    administrator top-up

Critical Invariants:
- Available funds never go negative
- Every resolve emits exactly one GameEnded
- A match resolves at most once
- A rejected payout during resolve becomes a claimable credit, never an error
"""

from triad.settlement.engine import SettlementEngine
from triad.settlement.funding import FundingGate

__all__ = ["SettlementEngine", "FundingGate"]
