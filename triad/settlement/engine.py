"""
Settlement engine: match submission, resolution and payout.
"""

import threading
import warnings
from contextlib import contextmanager
from typing import Callable, Iterator, List, Optional

from triad.core.choice import (
    Choice,
    Outcome,
    choice_from_randomness,
    resolve_outcome,
    reward_for,
)
from triad.core.exceptions import (
    AccessDeniedError,
    InsufficientFundsError,
    InsufficientOracleFeeError,
    InvalidAmountError,
    MatchAlreadyResolvedError,
    UnknownMatchError,
)
from triad.core.models import (
    Claimed,
    Funded,
    GameEnded,
    LiabilityRecorded,
    Match,
    Submitted,
)
from triad.ledger.ledger import Ledger
from triad.ledger.wallets import Wallets
from triad.oracle.coordinator import FeeToken, RandomnessCoordinator
from triad.settlement.funding import FundingGate
from triad.store.store import GameStore


EventListener = Callable[[object], None]


class SettlementEngine:
    """
    Two-party wager settlement against an external randomness source.

    Match lifecycle: SUBMITTED → RESOLVED (terminal).

    Every public mutating call holds one re-entrant lock for its whole
    duration, so calls never observe each other's partial updates. The
    lock is re-entrant because a payout recipient may call back into the
    engine while its transfer is in flight.

    Events are queued while a call runs and handed to listeners only once
    the outermost call has finished all of its state changes. A failing
    listener is reported as a RuntimeWarning; it never undoes or skips
    settlement.
    """

    def __init__(
        self,
        address: str,
        admin: str,
        coordinator: RandomnessCoordinator,
        fee_token: FeeToken,
        fee: int,
        key_hash: str,
        transport: Wallets,
        ledger: Optional[Ledger] = None,
        store: Optional[GameStore] = None,
    ):
        """
        Initialize settlement engine.

        Args:
            address: Engine's own account identity
            admin: The only account allowed to fund the engine
            coordinator: Randomness collaborator; its address is the only
                caller allowed to deliver randomness
            fee_token: Asset the coordinator charges per request
            fee: Fee charged per randomness request
            key_hash: Oracle key identifier forwarded with each request
            transport: Native value transfer between wallets and engine

        Raises:
            InvalidAmountError: fee is not a non-negative integer
        """
        if not isinstance(fee, int) or isinstance(fee, bool) or fee < 0:
            raise InvalidAmountError("Oracle fee must be a non-negative integer", {"fee": fee})

        self.address = address
        self.coordinator = coordinator
        self.fee_token = fee_token
        self.fee = fee
        self.key_hash = key_hash
        self.transport = transport
        self.ledger = ledger or Ledger()
        self.store = store or GameStore()
        self.funding = FundingGate(admin, self.ledger, transport)

        self._lock = threading.RLock()
        self._depth = 0
        self._events: List[object] = []
        self._undelivered: List[object] = []
        self._listeners: List[EventListener] = []

        coordinator.register(self)

    # ── Participant API ───────────────────────────────────────

    def submit(self, caller: str, choice: Choice, value: int) -> str:
        """
        Stake value on choice and request the opponent's randomness.

        Returns:
            Match id (the randomness request id)
        """
        choice = Choice(choice)
        if not isinstance(value, int) or isinstance(value, bool) or value < 0:
            raise InvalidAmountError("Stake must be a non-negative integer", {"stake": value})

        with self._operation():
            fee_balance = self.fee_token.balance_of(self.address)
            if fee_balance < self.fee:
                raise InsufficientOracleFeeError(
                    "Not enough fee balance to request randomness",
                    {"balance": fee_balance, "fee": self.fee},
                )

            balance = self.transport.balance_of(caller)
            if value > balance:
                raise InsufficientFundsError(
                    "Stake exceeds wallet balance",
                    {"account": caller, "stake": value, "balance": balance},
                )

            # The id is allocated before any value moves.
            match_id = self.coordinator.request_randomness(
                self.address, self.key_hash, self.fee,
            )
            self.transport.collect(caller, value)
            self.store.create(caller, choice, value, match_id)
            self.ledger.deposit(value)

            self._emit(Submitted(
                participant=caller,
                choice=choice,
                stake=value,
                match_id=match_id,
            ))
            return match_id

    def claim(self, caller: str, amount: int) -> None:
        """Withdraw part of caller's claimable balance."""
        with self._operation():
            self.ledger.claim(caller, amount, self.transport.send)
            self._emit(Claimed(amount=amount, account=caller))

    # ── Administrator API ─────────────────────────────────────

    def fund(self, caller: str, value: int) -> int:
        """Top up available funds. Administrator only."""
        with self._operation():
            available = self.funding.fund(caller, value)
            self._emit(Funded(amount=value))
            return available

    # ── Oracle API ────────────────────────────────────────────

    def raw_fulfill_randomness(self, caller: str, request_id: str, randomness: int) -> None:
        """Entry point for the randomness coordinator's callback."""
        if caller != self.coordinator.address:
            raise AccessDeniedError(
                "Only the randomness coordinator can fulfill",
                {"caller": caller},
            )
        self.resolve(request_id, randomness)

    def resolve(self, match_id: str, random_value: int) -> Outcome:
        """
        Settle a match with the opponent choice derived from random_value.

        GameEnded is emitted for every outcome. Rewards are paid from
        available funds as far as they reach; the rest becomes claimable.
        A rejected transfer never fails resolution: the whole reward is
        credited as claimable instead.
        """
        with self._operation():
            if not self.store.exists(match_id):
                raise UnknownMatchError("Unknown match", {"match_id": match_id})

            match = self.store.get(match_id)
            if match.resolved:
                raise MatchAlreadyResolvedError(
                    "Match already resolved",
                    {"match_id": match_id},
                )

            opponent = choice_from_randomness(random_value)
            outcome = resolve_outcome(match.choice, opponent)
            reward = reward_for(outcome, match.stake)

            self.store.mark_resolved(match_id, outcome)
            self._emit(GameEnded(match_id=match_id, outcome=outcome))

            if reward > 0:
                self._pay_out(match, reward)

            return outcome

    def _pay_out(self, match: Match, reward: int) -> None:
        remaining = reward
        pay_now = min(self.ledger.available, reward)

        if pay_now > 0:
            if self.ledger.disburse(match.participant, pay_now, self.transport.send):
                remaining = reward - pay_now
            else:
                warnings.warn(
                    f"SettlementEngine: payout of {pay_now} to {match.participant} "
                    f"rejected for match {match.match_id}; "
                    f"full reward {reward} recorded as claimable.",
                    RuntimeWarning,
                    stacklevel=4,
                )

        if remaining > 0:
            self.ledger.credit_shortfall(match.participant, remaining)
            self._emit(LiabilityRecorded(
                account=match.participant,
                amount=remaining,
                match_id=match.match_id,
            ))

    # ── Reads ─────────────────────────────────────────────────

    def match_by_id(self, match_id: str) -> Match:
        return self.store.get(match_id)

    def claimable_of(self, account: str) -> int:
        return self.ledger.claimable_of(account)

    @property
    def available_funds(self) -> int:
        return self.ledger.available

    @property
    def events(self) -> List[object]:
        return self._events.copy()

    def subscribe(self, listener: EventListener) -> None:
        """Call listener with every event emitted from now on, once the emitting call has finished."""
        self._listeners.append(listener)

    def get_settlement_stats(self) -> dict:
        """
        Get settlement statistics.

        Returns:
            Dict with match counts by outcome and a ledger snapshot
        """
        stats = {
            "total": len(self.store),
            "pending": len(self.store.pending()),
            "by_outcome": {},
            "ledger": self.ledger.snapshot(),
        }

        for match in self.store.all_matches():
            if match.outcome is not None:
                name = match.outcome.name
                stats["by_outcome"][name] = stats["by_outcome"].get(name, 0) + 1

        return stats

    # ── Internal ──────────────────────────────────────────────

    @contextmanager
    def _operation(self) -> Iterator[None]:
        """
        Hold the engine lock for one public call.

        Queued events go to listeners when the outermost call exits, after
        every store and ledger change of that call (and of any call nested
        inside it by a receive hook) has been applied.
        """
        with self._lock:
            self._depth += 1
            try:
                yield
            finally:
                self._depth -= 1
                if self._depth == 0:
                    self._dispatch()

    def _emit(self, event: object) -> None:
        self._events.append(event)
        self._undelivered.append(event)

    def _dispatch(self) -> None:
        pending, self._undelivered = self._undelivered, []
        for event in pending:
            for listener in self._listeners:
                try:
                    listener(event)
                except Exception as exc:
                    warnings.warn(
                        f"SettlementEngine: listener {listener!r} failed on "
                        f"{event.event_type} event: {exc}. Settlement state is unaffected.",
                        RuntimeWarning,
                        stacklevel=4,
                    )
