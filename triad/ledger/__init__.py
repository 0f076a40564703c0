"""
Triad Ledger - available funds, claimable liabilities and the wallets
value is transferred to and from.

The ledger is the only owner of engine balances.
"""

from triad.ledger.ledger import Ledger
from triad.ledger.wallets import Wallets

__all__ = ["Ledger", "Wallets"]
