"""
Triad: Basic Usage Example

Demonstrates:
- Wiring an engine to an in-process randomness coordinator
- Funding, submitting and resolving matches
- Partial payout with the remainder left claimable
- Claiming, and verifying the signed journal
"""

import tempfile

from triad import Choice, FeeToken, RandomnessCoordinator, SettlementEngine, Wallets
from triad.core.crypto import JournalSigner
from triad.journal import EventJournal, verify_journal


ETHER = 10**18


def main():
    """Basic triad usage."""

    print("="*60)
    print("Triad: Basic Usage Example")
    print("="*60)
    print()

    # 1️⃣ Wire the engine
    print("1️⃣ Wiring engine, coordinator and wallets...")
    fee_token = FeeToken()
    wallets = Wallets()
    coordinator = RandomnessCoordinator("vrf-coordinator", fee_token)
    engine = SettlementEngine(
        address=     "rps-engine",
        admin=       "admin",
        coordinator= coordinator,
        fee_token=   fee_token,
        fee=         ETHER // 10,
        key_hash=    "0x00",
        transport=   wallets,
    )
    fee_token.mint("rps-engine", 10 * ETHER)
    wallets.credit("admin", 5 * ETHER)
    wallets.credit("alice", 5 * ETHER)

    journal_dir = tempfile.mkdtemp(prefix="triad-")
    journal = EventJournal(JournalSigner.generate(), engine.address, journal_dir)
    journal.attach(engine)
    print(f"✅ Engine ready, journal at {journal.file}")
    print()

    # 2️⃣ Fund a little, then lose a bet larger than the pot
    print("2️⃣ Funding 0.4 and playing ROCK for 1...")
    engine.fund("admin", 4 * ETHER // 10)
    match_id = engine.submit("alice", Choice.ROCK, ETHER)

    # Word 5 reduces to SCISSORS: ROCK wins
    coordinator.call_back_with_randomness(match_id, 5, engine.address)
    match = engine.match_by_id(match_id)
    print(f"  🎲 Outcome: {match.outcome.name}")
    print(f"  💰 Alice wallet:    {wallets.balance_of('alice') / ETHER}")
    print(f"  📝 Alice claimable: {engine.claimable_of('alice') / ETHER}")
    print(f"  🏦 Engine funds:    {engine.available_funds / ETHER}")
    print()

    # 3️⃣ Top up and claim the rest
    print("3️⃣ Topping up and claiming the remainder...")
    engine.fund("admin", ETHER)
    engine.claim("alice", engine.claimable_of("alice"))
    print(f"  💰 Alice wallet:    {wallets.balance_of('alice') / ETHER}")
    print(f"  📝 Alice claimable: {engine.claimable_of('alice') / ETHER}")
    print()

    # 4️⃣ Verify the journal
    print("4️⃣ Verifying journal...")
    report = verify_journal(journal.file)
    print(f"  Entries:    {report.total_entries}")
    print(f"  Signatures: {report.valid_signatures}/{report.total_entries}")
    print(f"  Totals:     {report.totals}")
    print("✅ Journal valid" if report.valid else "❌ Journal has violations")
    print()

    print("="*60)
    print("Example complete")
    print("="*60)


if __name__ == "__main__":
    main()
