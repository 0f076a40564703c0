"""
triad/journal/entry.py

Audit journal entry.

Contracts:
    Signing   bytes_signed = canonicalize(entry.to_signing_dict()), Ed25519,
              base64url without padding
    Chain     causal_hash  = SHA-256(canonicalize(prev.to_signing_dict()))
              first entry  = GENESIS_HASH ("0" * 64)
    Timestamp YYYY-MM-DDTHH:MM:SS.mmmZ, UTC
    Nonce     32 hex characters of random entropy per entry
    Vocabulary event_type must be an EventType constant
"""

import re
import secrets
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from triad.core.canonical import canonical_hash, canonicalize
from triad.core.crypto import JournalSigner
from triad.core.models import VALID_EVENT_TYPES


JOURNAL_VERSION = "1.0"
GENESIS_HASH    = "0" * 64

_NONCE_HEX_LENGTH      = 32
_PUBLIC_KEY_HEX_LENGTH = 64

_TIMESTAMP_RE = re.compile(
    r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}\.\d{3}Z$"
)


def _timestamp() -> str:
    now = datetime.now(timezone.utc)
    return now.strftime("%Y-%m-%dT%H:%M:%S.") + f"{now.microsecond // 1000:03d}Z"


def _is_hex(value: Any, length: int) -> bool:
    if not isinstance(value, str) or len(value) != length:
        return False
    try:
        bytes.fromhex(value)
    except ValueError:
        return False
    return True


@dataclass
class JournalEntry:
    """One signed, chained engine event."""

    journal_version:   str
    entry_id:          str
    event_type:        str
    engine:            str
    signer_public_key: str
    sequence:          int
    nonce:             str
    timestamp:         str
    causal_hash:       str
    payload:           Dict[str, Any]
    signature:         Optional[str] = None

    @classmethod
    def create(
        cls,
        event_type:        str,
        engine:            str,
        signer_public_key: str,
        sequence:          int,
        payload:           Dict[str, Any],
        prev:              Optional["JournalEntry"] = None,
    ) -> "JournalEntry":
        """
        Create an unsigned entry chained onto prev.

        Call .sign(signer) immediately after.
        """
        if event_type not in VALID_EVENT_TYPES:
            raise ValueError(
                f"Invalid event_type '{event_type}'. "
                f"Valid: {sorted(VALID_EVENT_TYPES)}"
            )
        if not isinstance(payload, dict):
            raise TypeError(
                f"payload must be dict, got {type(payload).__name__}"
            )
        if not isinstance(sequence, int) or sequence < 0:
            raise ValueError(
                f"sequence must be non-negative int, got {sequence!r}"
            )
        if not _is_hex(signer_public_key, _PUBLIC_KEY_HEX_LENGTH):
            raise ValueError(
                f"signer_public_key must be {_PUBLIC_KEY_HEX_LENGTH}-char hex string"
            )

        return cls(
            journal_version=   JOURNAL_VERSION,
            entry_id=          f"evt-{uuid.uuid4()}",
            event_type=        event_type,
            engine=            engine,
            signer_public_key= signer_public_key,
            sequence=          sequence,
            nonce=             secrets.token_hex(_NONCE_HEX_LENGTH // 2),
            timestamp=         _timestamp(),
            causal_hash=       cls.expected_causal_hash_from(prev),
            payload=           payload,
            signature=         None,
        )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "JournalEntry":
        """
        Deserialize from a JSONL line dict.

        Trusts persisted data; callers must run validate_schema().
        Raises KeyError if a required field is missing.
        """
        return cls(
            journal_version=   data["journal_version"],
            entry_id=          data["entry_id"],
            event_type=        data["event_type"],
            engine=            data["engine"],
            signer_public_key= data["signer_public_key"],
            sequence=          data["sequence"],
            nonce=             data["nonce"],
            timestamp=         data["timestamp"],
            causal_hash=       data["causal_hash"],
            payload=           data.get("payload", {}),
            signature=         data.get("signature"),
        )

    def validate_schema(self) -> List[str]:
        """Return a list of schema violations; empty means valid."""
        errors: List[str] = []

        if self.journal_version != JOURNAL_VERSION:
            errors.append(
                f"journal_version: expected '{JOURNAL_VERSION}', got '{self.journal_version}'"
            )
        if self.event_type not in VALID_EVENT_TYPES:
            errors.append(f"event_type '{self.event_type}' not in valid set")
        if not isinstance(self.entry_id, str) or not self.entry_id.startswith("evt-"):
            errors.append(f"entry_id must start with 'evt-', got {self.entry_id!r}")
        if not isinstance(self.engine, str) or not self.engine:
            errors.append("engine must be a non-empty string")
        if not _is_hex(self.signer_public_key, _PUBLIC_KEY_HEX_LENGTH):
            errors.append("signer_public_key must be 64 hex chars")
        if not isinstance(self.sequence, int) or self.sequence < 0:
            errors.append(f"sequence must be non-negative int, got {self.sequence!r}")
        if not _is_hex(self.nonce, _NONCE_HEX_LENGTH):
            errors.append(f"nonce must be {_NONCE_HEX_LENGTH} hex chars")
        if not isinstance(self.timestamp, str) or not _TIMESTAMP_RE.match(self.timestamp):
            errors.append(f"timestamp {self.timestamp!r} is not YYYY-MM-DDTHH:MM:SS.mmmZ")
        if not _is_hex(self.causal_hash, 64):
            errors.append("causal_hash must be 64 hex chars")
        if not isinstance(self.payload, dict):
            errors.append(f"payload must be dict, got {type(self.payload).__name__}")

        return errors

    def to_signing_dict(self) -> Dict[str, Any]:
        """Every field except the signature. Signed, and hashed by the next entry."""
        return {
            "causal_hash":       self.causal_hash,
            "engine":            self.engine,
            "entry_id":          self.entry_id,
            "event_type":        self.event_type,
            "journal_version":   self.journal_version,
            "nonce":             self.nonce,
            "payload":           self.payload,
            "sequence":          self.sequence,
            "signer_public_key": self.signer_public_key,
            "timestamp":         self.timestamp,
        }

    def to_dict(self) -> Dict[str, Any]:
        """Full serialization including signature. Used for JSONL persistence only."""
        d = self.to_signing_dict()
        d["signature"] = self.signature
        return d

    @staticmethod
    def expected_causal_hash_from(prev: Optional["JournalEntry"]) -> str:
        if prev is None:
            return GENESIS_HASH
        return canonical_hash(prev.to_signing_dict())

    def sign(self, signer: JournalSigner) -> "JournalEntry":
        """Sign in place. Returns self for chaining."""
        self.signature = signer.sign(canonicalize(self.to_signing_dict()))
        return self

    def verify_signature(self) -> bool:
        """True iff the signature is valid over the current field values."""
        if not self.signature:
            return False
        return JournalSigner.verify(
            canonicalize(self.to_signing_dict()),
            self.signature,
            self.signer_public_key,
        )

    def verify_chain(self, prev: Optional["JournalEntry"]) -> bool:
        return self.causal_hash == self.expected_causal_hash_from(prev)
