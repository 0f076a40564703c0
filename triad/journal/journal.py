"""
triad/journal/journal.py

Audit journal writer.

append() MUST, in this exact order:
  1. Acquire lock
  2. JournalEntry.create(..., prev=last_entry)
  3. entry.sign(signer)
  4. Append to JSONL file
  5. Advance internal state, only after the write succeeded
"""

import json
import threading
import warnings
from pathlib import Path
from typing import Any, Dict, Optional

from triad.core.crypto import JournalSigner
from triad.core.exceptions import JournalError
from triad.journal.entry import GENESIS_HASH, JournalEntry


JOURNAL_FILENAME = "journal.jsonl"


class EventJournal:
    """
    Signed, hash-chained record of one engine's events.

    Thread-safe via internal lock (single-process only).
    State survives process restart by reading the last line on __init__.
    """

    def __init__(
        self,
        signer: JournalSigner,
        engine: str,
        path:   str = ".triad/journal",
    ) -> None:
        self.signer = signer
        self.engine = engine

        self._lock:       threading.Lock         = threading.Lock()
        self._sequence:   int                    = 0
        self._last_entry: Optional[JournalEntry] = None

        self._dir  = Path(path)
        self._dir.mkdir(parents=True, exist_ok=True)
        self._file = self._dir / JOURNAL_FILENAME

        self._restore_state()

    @property
    def file(self) -> Path:
        return self._file

    # ── Public API ────────────────────────────────────────────

    def attach(self, engine) -> "EventJournal":
        """Record every event the engine emits from now on."""
        engine.subscribe(self.record)
        return self

    def record(self, event) -> JournalEntry:
        """Engine listener: journal one event object."""
        return self.append(event.event_type, event.to_dict())

    def append(self, event_type: str, payload: Dict[str, Any]) -> JournalEntry:
        """
        Append one signed entry.

        Raises JournalError on write failure; state does not advance.
        """
        with self._lock:
            entry = JournalEntry.create(
                event_type=        event_type,
                engine=            self.engine,
                signer_public_key= self.signer.public_key_hex,
                sequence=          self._sequence,
                payload=           payload,
                prev=              self._last_entry,
            ).sign(self.signer)

            try:
                with open(self._file, "a", encoding="utf-8") as f:
                    f.write(json.dumps(entry.to_dict()) + "\n")
            except OSError as exc:
                raise JournalError(
                    f"Journal write failed: {exc}",
                    {"file": str(self._file)},
                ) from exc

            self._sequence   += 1
            self._last_entry  = entry
            return entry

    def get_stats(self) -> Dict[str, Any]:
        """Return current journal state snapshot."""
        return {
            "engine":           self.engine,
            "next_sequence":    self._sequence,
            "last_causal_hash": (
                self._last_entry.causal_hash
                if self._last_entry else GENESIS_HASH
            ),
            "journal_file":     str(self._file),
        }

    # ── Internal ──────────────────────────────────────────────

    def _restore_state(self) -> None:
        """
        Restore sequence and last entry from an existing journal.
        If the last line is corrupted, state stays at genesis defaults
        and a RuntimeWarning is issued.
        """
        if not self._file.exists():
            return

        last_line = None
        with open(self._file, "r", encoding="utf-8") as f:
            for line in f:
                stripped = line.strip()
                if stripped:
                    last_line = stripped

        if not last_line:
            return

        try:
            entry  = JournalEntry.from_dict(json.loads(last_line))
            errors = entry.validate_schema()
            if errors:
                raise ValueError(f"Schema violation in last journal line: {errors}")

            self._sequence   = entry.sequence + 1
            self._last_entry = entry

        except (ValueError, KeyError, TypeError) as exc:
            warnings.warn(
                f"EventJournal: could not restore state from {self._file}: {exc}. "
                "Last line may be corrupted. Run `triad verify` before appending.",
                RuntimeWarning,
                stacklevel=3,
            )
