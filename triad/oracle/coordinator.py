"""
In-process randomness coordinator and fee token.

Stands in for the external verifiable-randomness service: requests are
paid for in the fee asset, identified by a derived request id, and
fulfilled later by an explicit callback.
"""

import random
import secrets
from typing import Dict, List, Optional, Protocol, Tuple

from triad.core.canonical import canonical_hash
from triad.core.exceptions import (
    InsufficientFundsError,
    InvalidAmountError,
    MatchAlreadyResolvedError,
    UnknownMatchError,
)


class FeeToken:
    """Balances of the asset the coordinator charges per request."""

    def __init__(self, symbol: str = "LINK"):
        self.symbol = symbol
        self._balances: Dict[str, int] = {}

    def mint(self, account: str, amount: int) -> None:
        if amount < 0:
            raise InvalidAmountError("Mint must be non-negative", {"amount": amount})
        self._balances[account] = self._balances.get(account, 0) + amount

    def balance_of(self, account: str) -> int:
        return self._balances.get(account, 0)

    def transfer(self, sender: str, recipient: str, amount: int) -> None:
        if amount < 0:
            raise InvalidAmountError("Transfer must be non-negative", {"amount": amount})
        balance = self._balances.get(sender, 0)
        if amount > balance:
            raise InsufficientFundsError(
                f"Insufficient {self.symbol} balance",
                {"account": sender, "requested": amount, "balance": balance},
            )
        self._balances[sender] = balance - amount
        self._balances[recipient] = self._balances.get(recipient, 0) + amount


class RandomnessConsumer(Protocol):
    address: str

    def raw_fulfill_randomness(self, caller: str, request_id: str, randomness: int) -> None:
        ...


class RandomnessCoordinator:
    """
    Issues request ids and delivers one random word per request.

    request_id = sha256(JCS({key_hash, requester, nonce, seed}))
    The per-requester nonce makes ids unique even for equal seeds.
    """

    def __init__(self, address: str, fee_token: FeeToken):
        self.address = address
        self.fee_token = fee_token
        self._nonces: Dict[str, int] = {}
        self._consumers: Dict[str, RandomnessConsumer] = {}
        # request_id -> requester
        self._pending: Dict[str, str] = {}
        self._fulfilled: Dict[str, int] = {}

    def register(self, consumer: RandomnessConsumer) -> None:
        self._consumers[consumer.address] = consumer

    def request_randomness(
        self,
        requester: str,
        key_hash: str,
        fee: int,
        seed: Optional[int] = None,
    ) -> str:
        """Charge fee and return the request id the callback will carry."""
        self.fee_token.transfer(requester, self.address, fee)

        nonce = self._nonces.get(requester, 0)
        if seed is None:
            seed = secrets.randbits(64)
        request_id = canonical_hash({
            "key_hash":  key_hash,
            "requester": requester,
            "nonce":     nonce,
            "seed":      seed,
        })
        self._nonces[requester] = nonce + 1
        self._pending[request_id] = requester
        return request_id

    def call_back_with_randomness(
        self,
        request_id: str,
        randomness: int,
        consumer_address: str,
    ) -> None:
        """Deliver randomness for request_id to the consumer. Exactly once."""
        if request_id in self._fulfilled:
            raise MatchAlreadyResolvedError(
                "Randomness already delivered",
                {"request_id": request_id},
            )
        if self._pending.get(request_id) != consumer_address:
            raise UnknownMatchError(
                "No pending request for consumer",
                {"request_id": request_id, "consumer": consumer_address},
            )
        consumer = self._consumers.get(consumer_address)
        if consumer is None:
            raise UnknownMatchError(
                "Consumer not registered",
                {"consumer": consumer_address},
            )

        consumer.raw_fulfill_randomness(self.address, request_id, randomness)

        del self._pending[request_id]
        self._fulfilled[request_id] = randomness

    def fulfill_pending(self, rng: random.Random) -> List[Tuple[str, int]]:
        """Deliver a random word to every pending request, oldest first."""
        delivered = []
        for request_id, requester in list(self._pending.items()):
            randomness = rng.getrandbits(256)
            self.call_back_with_randomness(request_id, randomness, requester)
            delivered.append((request_id, randomness))
        return delivered

    def pending_requests(self) -> List[str]:
        return list(self._pending)
