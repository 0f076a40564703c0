"""
Administrator top-up of the engine's available funds.
"""

from triad.core.exceptions import AccessDeniedError, InvalidAmountError
from triad.ledger.ledger import Ledger
from triad.ledger.wallets import Wallets


class FundingGate:
    """Single-admin side door into the same balance the ledger pays from."""

    def __init__(self, admin: str, ledger: Ledger, transport: Wallets):
        self.admin = admin
        self.ledger = ledger
        self.transport = transport

    def is_administrator(self, caller: str) -> bool:
        return caller == self.admin

    def fund(self, caller: str, value: int) -> int:
        """
        Add value attached by the administrator.

        Returns:
            New available balance
        """
        if not self.is_administrator(caller):
            raise AccessDeniedError(
                "caller is not the administrator",
                {"caller": caller},
            )
        if not isinstance(value, int) or isinstance(value, bool) or value < 0:
            raise InvalidAmountError("Funding amount must be a non-negative integer", {"value": value})
        if value == 0:
            raise InvalidAmountError("Funding amount must be non-zero")

        self.transport.collect(caller, value)
        return self.ledger.deposit(value)
