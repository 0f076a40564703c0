"""
Triad Game Store - match records keyed by randomness request id

Records are never deleted; the store doubles as the match history.
"""

from triad.store.store import GameStore

__all__ = ["GameStore"]
