"""
Canonical bytes and digests.

Journal signatures, causal hashes and randomness request ids are all
computed over RFC 8785 (JCS) output, so equal mappings hash equal
whatever their key order.
"""

import hashlib
from typing import Any, Mapping

try:
    import jcs
except ImportError as exc:
    raise ImportError(
        "triad needs the 'jcs' package for RFC 8785 canonical JSON "
        "(pip install jcs)"
    ) from exc


def canonicalize(obj: Mapping[str, Any]) -> bytes:
    return jcs.canonicalize(obj)


def canonical_hash(obj: Mapping[str, Any]) -> str:
    """Lowercase hex SHA-256 of canonicalize(obj)."""
    return hashlib.sha256(canonicalize(obj)).hexdigest()
