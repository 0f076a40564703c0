"""
Native value transport.

Wallets hold participant balances outside the engine. Value attached to
an engine call is collected from the caller's wallet; payouts are sent
back with send(), which reports rejection by returning False instead of
raising so the engine decides what a failed transfer means.
"""

import threading
from typing import Callable, Dict, Set

from triad.core.exceptions import InsufficientFundsError, InvalidAmountError


# Called with (account, amount) before the value is credited.
ReceiveHook = Callable[[str, int], None]


class Wallets:
    """Per-account balances of the wagering asset."""

    def __init__(self):
        self._balances: Dict[str, int] = {}
        self._rejecting: Set[str] = set()
        self._hooks: Dict[str, ReceiveHook] = {}
        self._lock = threading.RLock()

    def credit(self, account: str, amount: int) -> int:
        """Seed an account balance (test setup, faucets)."""
        if amount < 0:
            raise InvalidAmountError("Credit must be non-negative", {"amount": amount})
        with self._lock:
            self._balances[account] = self._balances.get(account, 0) + amount
            return self._balances[account]

    def balance_of(self, account: str) -> int:
        return self._balances.get(account, 0)

    def total(self) -> int:
        return sum(self._balances.values())

    def collect(self, account: str, amount: int) -> None:
        """Take value attached to a call from the caller's wallet."""
        if amount < 0:
            raise InvalidAmountError("Attached value must be non-negative", {"amount": amount})
        with self._lock:
            balance = self._balances.get(account, 0)
            if amount > balance:
                raise InsufficientFundsError(
                    "Caller cannot cover attached value",
                    {"account": account, "value": amount, "balance": balance},
                )
            self._balances[account] = balance - amount

    def send(self, account: str, amount: int) -> bool:
        """
        Deliver value to account.

        Returns False if the account rejects value or its receive hook
        raises; the balance is only credited on success.
        """
        if account in self._rejecting:
            return False

        hook = self._hooks.get(account)
        if hook is not None:
            try:
                hook(account, amount)
            except Exception:
                return False

        with self._lock:
            self._balances[account] = self._balances.get(account, 0) + amount
        return True

    # ── Recipient behaviour ───────────────────────────────────

    def reject(self, account: str) -> None:
        """Make account refuse incoming value, like a non-payable contract."""
        self._rejecting.add(account)

    def accept(self, account: str) -> None:
        self._rejecting.discard(account)

    def on_receive(self, account: str, hook: ReceiveHook) -> None:
        """Run hook whenever account receives value. The hook may call back into the engine."""
        self._hooks[account] = hook
