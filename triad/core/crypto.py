"""
Journal signing keys.

One Ed25519 key signs every entry of a journal. Entries carry the raw
public key as hex and a base64url signature (no padding) over their
canonical bytes, so a journal can be checked from its own contents.
"""

import base64
from pathlib import Path

from cryptography.exceptions import InvalidSignature, UnsupportedAlgorithm
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric.ed25519 import (
    Ed25519PrivateKey,
    Ed25519PublicKey,
)

from triad.core.exceptions import JournalError


def _b64url(raw: bytes) -> str:
    return base64.urlsafe_b64encode(raw).rstrip(b"=").decode("ascii")


def _unb64url(text: str) -> bytes:
    return base64.urlsafe_b64decode(text + "=" * (-len(text) % 4))


class JournalSigner:
    """Ed25519 key that signs journal entries."""

    def __init__(self, private_key: Ed25519PrivateKey) -> None:
        self._private_key = private_key
        self.public_key_hex: str = (
            private_key.public_key()
            .public_bytes(serialization.Encoding.Raw, serialization.PublicFormat.Raw)
            .hex()
        )

    @classmethod
    def generate(cls) -> "JournalSigner":
        return cls(Ed25519PrivateKey.generate())

    @classmethod
    def load_or_generate(cls, path: Path) -> "JournalSigner":
        """
        Load the PEM key at path, or create and store one there on first use.

        Raises JournalError if the file holds no Ed25519 private key or a
        new key cannot be written.
        """
        path = Path(path)
        if path.exists():
            try:
                key = serialization.load_pem_private_key(path.read_bytes(), password=None)
            except (ValueError, TypeError, UnsupportedAlgorithm) as exc:
                raise JournalError(f"Unreadable journal key: {exc}", {"key": str(path)}) from exc
            if not isinstance(key, Ed25519PrivateKey):
                raise JournalError("Journal key is not an Ed25519 private key", {"key": str(path)})
            return cls(key)

        signer = cls.generate()
        pem = signer._private_key.private_bytes(
            encoding=             serialization.Encoding.PEM,
            format=               serialization.PrivateFormat.PKCS8,
            encryption_algorithm= serialization.NoEncryption(),
        )
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(pem)
        except OSError as exc:
            raise JournalError(f"Cannot store journal key: {exc}", {"key": str(path)}) from exc
        return signer

    def sign(self, data: bytes) -> str:
        return _b64url(self._private_key.sign(data))

    @staticmethod
    def verify(data: bytes, signature: str, public_key_hex: str) -> bool:
        """True iff signature is public_key_hex's signature over data. Never raises."""
        try:
            public_key = Ed25519PublicKey.from_public_bytes(bytes.fromhex(public_key_hex))
            public_key.verify(_unb64url(signature), data)
        except (InvalidSignature, ValueError, TypeError):
            return False
        return True

    def __repr__(self) -> str:
        return f"JournalSigner({self.public_key_hex[:16]}...)"
