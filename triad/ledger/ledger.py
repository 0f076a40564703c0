"""
Funds and claim ledger for triad.

Holds the engine's available balance and the claimable liabilities
owed to participants. Nothing else mutates either value.
"""

from typing import Callable, Dict

from triad.core.exceptions import (
    InsufficientClaimableError,
    InsufficientFundsError,
    InvalidAmountError,
    LedgerError,
    TransferFailedError,
)


# (account, amount) -> True if the value was delivered
Transfer = Callable[[str, int], bool]


def _require_amount(amount: int) -> None:
    if not isinstance(amount, int) or isinstance(amount, bool) or amount < 0:
        raise InvalidAmountError(
            "Amount must be a non-negative integer",
            {"amount": amount},
        )


class Ledger:
    """
    Available funds plus per-account claimable balances.

    Inflow and outflow are counted separately so that
    available == total_inflow - total_outflow can be checked at any time.
    """

    def __init__(self):
        self.available: int = 0
        self.total_inflow: int = 0
        self.total_outflow: int = 0
        self._claimable: Dict[str, int] = {}

    # ── Funds ─────────────────────────────────────────────────

    def deposit(self, amount: int) -> int:
        """Add incoming value (stakes, funding). Returns new available."""
        _require_amount(amount)
        self.available += amount
        self.total_inflow += amount
        return self.available

    def disburse(self, account: str, amount: int, transfer: Transfer) -> bool:
        """
        Send amount to account out of available funds.

        The amount is taken out of available before the transfer runs, so a
        re-entrant call made by the recipient cannot spend it twice. If the
        transfer is rejected the amount is put back and False is returned.
        """
        _require_amount(amount)
        if amount > self.available:
            raise InsufficientFundsError(
                "Insufficient available funds",
                {"requested": amount, "available": self.available},
            )

        self.available -= amount
        if not transfer(account, amount):
            self.available += amount
            return False

        self.total_outflow += amount
        return True

    # ── Claimable ─────────────────────────────────────────────

    def credit_shortfall(self, account: str, amount: int) -> int:
        """Increase what the engine owes account. Returns new claimable."""
        _require_amount(amount)
        self._claimable[account] = self._claimable.get(account, 0) + amount
        return self._claimable[account]

    def claim(self, account: str, amount: int, transfer: Transfer) -> None:
        """
        Pay out part of account's claimable balance.

        Ordering (locked):
            1. amount > claimable[account]   → InsufficientClaimableError
            2. amount > available            → InsufficientFundsError
            3. claimable[account] -= amount
            4. disburse(account, amount)

        The decrement happens before the transfer so that a re-entrant
        claim from the recipient sees the reduced balance. It is NOT
        restored when the transfer is rejected: the claim raises
        TransferFailedError and the decremented amount stays in available
        with no owner.
        """
        _require_amount(amount)

        owed = self._claimable.get(account, 0)
        if amount > owed:
            raise InsufficientClaimableError(amount, owed)
        if amount > self.available:
            raise InsufficientFundsError(
                "Insufficient available funds for claim",
                {"requested": amount, "available": self.available},
            )

        self._claimable[account] = owed - amount

        if not self.disburse(account, amount, transfer):
            raise TransferFailedError(
                "Claim transfer rejected by recipient",
                {"account": account, "amount": amount},
            )

    def claimable_of(self, account: str) -> int:
        return self._claimable.get(account, 0)

    @property
    def total_claimable(self) -> int:
        return sum(self._claimable.values())

    @property
    def uncovered_liability(self) -> int:
        """Claimable value the current balance could not pay out."""
        return max(0, self.total_claimable - self.available)

    # ── Introspection ─────────────────────────────────────────

    def snapshot(self) -> dict:
        """Get ledger state"""
        return {
            "available":           self.available,
            "total_inflow":        self.total_inflow,
            "total_outflow":       self.total_outflow,
            "total_claimable":     self.total_claimable,
            "uncovered_liability": self.uncovered_liability,
            "accounts_owed":       sum(1 for v in self._claimable.values() if v),
        }

    def verify_or_raise(self) -> None:
        """Verify ledger consistency or raise exception"""
        if self.available < 0:
            raise LedgerError(
                "Available funds went negative",
                {"available": self.available},
            )

        expected = self.total_inflow - self.total_outflow
        if self.available != expected:
            raise LedgerError(
                f"Available funds {self.available} do not match "
                f"inflow - outflow = {expected}"
            )

        for account, owed in self._claimable.items():
            if owed < 0:
                raise LedgerError(
                    "Negative claimable balance",
                    {"account": account, "claimable": owed},
                )
