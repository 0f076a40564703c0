"""
Triad Journal - signed, hash-chained audit record of engine events

Every Submitted, GameEnded, Claimed, Funded and LiabilityRecorded event
becomes one JSONL line, Ed25519-signed over its RFC 8785 canonical form
and chained to its predecessor by SHA-256.
"""

from triad.journal.entry import JournalEntry, JOURNAL_VERSION, GENESIS_HASH
from triad.journal.journal import EventJournal
from triad.journal.verify import JournalReport, Violation, load_journal, verify_journal

__all__ = [
    "JournalEntry",
    "EventJournal",
    "JournalReport",
    "Violation",
    "load_journal",
    "verify_journal",
    "JOURNAL_VERSION",
    "GENESIS_HASH",
]
