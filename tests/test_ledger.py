"""
tests/test_ledger.py

Ledger: deposits, disbursement, shortfall credits, the claim ordering,
and value transport between wallets.
"""

import pytest

from triad.core.exceptions import (
    InsufficientClaimableError,
    InsufficientFundsError,
    InvalidAmountError,
    LedgerError,
    TransferFailedError,
)
from triad.ledger import Ledger, Wallets


def accept(account, amount):
    return True


def refuse(account, amount):
    return False


@pytest.fixture
def ledger():
    return Ledger()


class TestFunds:

    def test_deposit_increases_available_and_inflow(self, ledger):
        assert ledger.deposit(10) == 10
        assert ledger.deposit(5) == 15
        assert ledger.total_inflow == 15
        ledger.verify_or_raise()

    def test_negative_deposit_rejected(self, ledger):
        with pytest.raises(InvalidAmountError):
            ledger.deposit(-1)
        assert ledger.available == 0

    def test_disburse_success(self, ledger):
        ledger.deposit(10)
        assert ledger.disburse("alice", 4, accept) is True
        assert ledger.available == 6
        assert ledger.total_outflow == 4
        ledger.verify_or_raise()

    def test_disburse_rejected_restores_available(self, ledger):
        ledger.deposit(10)
        assert ledger.disburse("alice", 4, refuse) is False
        assert ledger.available == 10
        assert ledger.total_outflow == 0

    def test_disburse_overdraft_refused(self, ledger):
        ledger.deposit(3)
        with pytest.raises(InsufficientFundsError):
            ledger.disburse("alice", 4, accept)
        assert ledger.available == 3

    def test_available_is_reserved_while_transfer_runs(self, ledger):
        ledger.deposit(10)
        seen = []

        def observe(account, amount):
            seen.append(ledger.available)
            return True

        ledger.disburse("alice", 4, observe)
        assert seen == [6]


class TestClaim:

    def test_credit_accumulates(self, ledger):
        ledger.credit_shortfall("alice", 3)
        ledger.credit_shortfall("alice", 2)
        assert ledger.claimable_of("alice") == 5
        assert ledger.claimable_of("bob") == 0

    def test_claim_more_than_claimable(self, ledger):
        ledger.deposit(100)
        ledger.credit_shortfall("alice", 5)

        with pytest.raises(InsufficientClaimableError) as exc_info:
            ledger.claim("alice", 6, accept)

        assert exc_info.value.requested == 6
        assert ledger.claimable_of("alice") == 5
        assert ledger.available == 100

    def test_claimable_checked_before_funds(self, ledger):
        ledger.credit_shortfall("alice", 5)
        with pytest.raises(InsufficientClaimableError):
            ledger.claim("alice", 6, accept)

    def test_claim_more_than_available(self, ledger):
        ledger.deposit(2)
        ledger.credit_shortfall("alice", 5)

        with pytest.raises(InsufficientFundsError):
            ledger.claim("alice", 5, accept)

        assert ledger.claimable_of("alice") == 5
        assert ledger.available == 2

    def test_claim_success(self, ledger):
        ledger.deposit(10)
        ledger.credit_shortfall("alice", 5)

        ledger.claim("alice", 3, accept)

        assert ledger.claimable_of("alice") == 2
        assert ledger.available == 7
        ledger.verify_or_raise()

    def test_claimable_decremented_before_transfer(self, ledger):
        ledger.deposit(10)
        ledger.credit_shortfall("alice", 5)
        seen = []

        def observe(account, amount):
            seen.append(ledger.claimable_of(account))
            return True

        ledger.claim("alice", 5, observe)
        assert seen == [0]

    def test_rejected_claim_keeps_decrement(self, ledger):
        """The decrement is not reversed when the transfer is rejected."""
        ledger.deposit(10)
        ledger.credit_shortfall("alice", 5)

        with pytest.raises(TransferFailedError):
            ledger.claim("alice", 3, refuse)

        assert ledger.claimable_of("alice") == 2
        assert ledger.available == 10
        ledger.verify_or_raise()

    def test_uncovered_liability(self, ledger):
        ledger.deposit(4)
        ledger.credit_shortfall("alice", 6)
        assert ledger.total_claimable == 6
        assert ledger.uncovered_liability == 2
        assert ledger.snapshot()["accounts_owed"] == 1


class TestVerify:

    def test_detects_tampered_available(self, ledger):
        ledger.deposit(10)
        ledger.available = 11
        with pytest.raises(LedgerError):
            ledger.verify_or_raise()

    def test_detects_negative_available(self, ledger):
        ledger.available = -1
        with pytest.raises(LedgerError):
            ledger.verify_or_raise()


class TestWallets:

    def test_collect_and_send(self):
        w = Wallets()
        w.credit("alice", 10)
        w.collect("alice", 4)
        assert w.balance_of("alice") == 6
        assert w.send("alice", 2) is True
        assert w.balance_of("alice") == 8

    def test_collect_more_than_balance(self):
        w = Wallets()
        w.credit("alice", 1)
        with pytest.raises(InsufficientFundsError):
            w.collect("alice", 2)
        assert w.balance_of("alice") == 1

    def test_rejecting_account(self):
        w = Wallets()
        w.reject("vault")
        assert w.send("vault", 5) is False
        assert w.balance_of("vault") == 0
        w.accept("vault")
        assert w.send("vault", 5) is True

    def test_raising_hook_rejects_transfer(self):
        w = Wallets()

        def boom(account, amount):
            raise RuntimeError("no receive function")

        w.on_receive("vault", boom)
        assert w.send("vault", 5) is False
        assert w.balance_of("vault") == 0
