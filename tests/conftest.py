"""
Shared fixtures: one engine wired to an in-process coordinator, a fee
token and wallets, with the accounts admin / alice / bob.
"""

from decimal import Decimal

import pytest

from triad import (
    FeeToken,
    RandomnessCoordinator,
    SettlementEngine,
    Wallets,
)


ENGINE      = "rps-engine"
COORDINATOR = "vrf-coordinator"
ADMIN       = "admin"
ALICE       = "alice"
BOB         = "bob"

VRF_KEY_HASH = "0x6c3699283bda56ad74f6b855546325b68d482e983852a7a82979cc4807b641f4"
VRF_FEE      = 100_000_000_000_000_000
WALLET_START = 10_000 * 10**18


def ether(amount: str) -> int:
    """'1.5' → 1500000000000000000"""
    return int(Decimal(amount) * 10**18)


@pytest.fixture
def fee_token():
    token = FeeToken()
    token.mint(ADMIN, ether("1000"))
    return token


@pytest.fixture
def wallets():
    w = Wallets()
    for account in (ADMIN, ALICE, BOB):
        w.credit(account, WALLET_START)
    return w


@pytest.fixture
def coordinator(fee_token):
    return RandomnessCoordinator(COORDINATOR, fee_token)


@pytest.fixture
def engine(coordinator, fee_token, wallets):
    return SettlementEngine(
        address=     ENGINE,
        admin=       ADMIN,
        coordinator= coordinator,
        fee_token=   fee_token,
        fee=         VRF_FEE,
        key_hash=    VRF_KEY_HASH,
        transport=   wallets,
    )


@pytest.fixture
def fee_funded(engine, fee_token):
    """Engine holding enough fee asset for many requests."""
    fee_token.transfer(ADMIN, ENGINE, ether("100"))
    return engine
