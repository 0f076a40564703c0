"""
triad/journal/verify.py

Journal verification and event totals.

Checks, per entry:
    1. Schema    → entry.validate_schema()
    2. Sequence  → entry.sequence == index
    3. Chain     → entry.verify_chain(prev)
    4. Signature → entry.verify_signature()
"""

import json
from collections import Counter
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

from triad.core.choice import Outcome
from triad.core.exceptions import JournalError
from triad.core.models import EventType
from triad.journal.entry import JournalEntry
from triad.journal.journal import JOURNAL_FILENAME


@dataclass
class Violation:
    """A single detected violation in the journal."""
    at_sequence:    int
    entry_id:       str
    violation_type: str   # "schema" | "sequence_gap" | "chain_break" | "invalid_signature"
    detail:         str


@dataclass
class JournalReport:
    """Aggregate result of a full journal verification pass."""
    total_entries:      int
    violations:         List[Violation]
    valid_signatures:   int
    event_counts:       Dict[str, int]
    outcome_counts:     Dict[str, int]
    totals:             Dict[str, int] = field(default_factory=dict)
    first_timestamp:    Optional[str] = None
    last_timestamp:     Optional[str] = None

    @property
    def valid(self) -> bool:
        return not self.violations

    def to_dict(self) -> dict:
        return {
            "valid":            self.valid,
            "total_entries":    self.total_entries,
            "valid_signatures": self.valid_signatures,
            "violations": [
                {
                    "at_sequence":    v.at_sequence,
                    "entry_id":       v.entry_id,
                    "violation_type": v.violation_type,
                    "detail":         v.detail,
                }
                for v in self.violations
            ],
            "event_counts":     self.event_counts,
            "outcome_counts":   self.outcome_counts,
            "totals":           self.totals,
            "first_timestamp":  self.first_timestamp,
            "last_timestamp":   self.last_timestamp,
        }


def resolve_journal_path(path: Path) -> Path:
    """Accept either the journal directory or the JSONL file itself."""
    path = Path(path)
    if path.is_dir():
        return path / JOURNAL_FILENAME
    return path


def load_journal(path: Path) -> List[JournalEntry]:
    """
    Read every entry from a journal file.

    Raises JournalError if the file is missing, a line is not JSON,
    or a required field is absent.
    """
    path = resolve_journal_path(path)
    if not path.exists():
        raise JournalError(f"Journal not found: {path}")

    entries: List[JournalEntry] = []
    with open(path, "r", encoding="utf-8") as f:
        for line_num, line in enumerate(f, 1):
            line = line.strip()
            if not line:
                continue
            try:
                entries.append(JournalEntry.from_dict(json.loads(line)))
            except json.JSONDecodeError as e:
                raise JournalError(f"Invalid JSON at line {line_num}: {e}")
            except KeyError as e:
                raise JournalError(f"Missing field {e} at line {line_num}")
    return entries


def verify_entries(entries: List[JournalEntry]) -> JournalReport:
    """Verify a loaded entry list and tally what it records."""
    violations: List[Violation] = []
    valid_signatures = 0
    totals = Counter(staked=0, funded=0, claimed=0, liabilities=0)
    outcomes: Counter = Counter()

    prev = None
    for index, entry in enumerate(entries):
        for error in entry.validate_schema():
            violations.append(Violation(index, entry.entry_id, "schema", error))

        if entry.sequence != index:
            violations.append(Violation(
                index, entry.entry_id, "sequence_gap",
                f"expected sequence {index}, got {entry.sequence}",
            ))

        if not entry.verify_chain(prev):
            violations.append(Violation(
                index, entry.entry_id, "chain_break",
                f"causal_hash ...{entry.causal_hash[-12:]} does not match predecessor",
            ))

        if entry.verify_signature():
            valid_signatures += 1
        else:
            violations.append(Violation(
                index, entry.entry_id, "invalid_signature",
                "signature does not verify over entry fields",
            ))

        payload = entry.payload if isinstance(entry.payload, dict) else {}
        if entry.event_type == EventType.SUBMITTED:
            totals["staked"] += payload.get("stake", 0)
        elif entry.event_type == EventType.FUNDED:
            totals["funded"] += payload.get("amount", 0)
        elif entry.event_type == EventType.CLAIMED:
            totals["claimed"] += payload.get("amount", 0)
        elif entry.event_type == EventType.LIABILITY_RECORDED:
            totals["liabilities"] += payload.get("amount", 0)
        elif entry.event_type == EventType.GAME_ENDED:
            try:
                outcomes[Outcome(payload.get("outcome")).name] += 1
            except ValueError:
                violations.append(Violation(
                    index, entry.entry_id, "schema",
                    f"unknown outcome {payload.get('outcome')!r}",
                ))

        prev = entry

    return JournalReport(
        total_entries=    len(entries),
        violations=       violations,
        valid_signatures= valid_signatures,
        event_counts=     dict(Counter(e.event_type for e in entries)),
        outcome_counts=   dict(outcomes),
        totals=           dict(totals),
        first_timestamp=  entries[0].timestamp if entries else None,
        last_timestamp=   entries[-1].timestamp if entries else None,
    )


def verify_journal(path: Path) -> JournalReport:
    """Load and verify the journal at path."""
    return verify_entries(load_journal(path))
