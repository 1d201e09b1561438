"""
Provenance Journal — Hash Computation
=======================================
Computes entry_hash using SHA-256.

Formula:
    entry_hash = SHA256(canonical_json(body) + previous_hash)

Rules:
- Canonical JSON: sorted keys, compact separators
- No salt, no randomness
- First entry uses GENESIS_HASH as previous_hash

This module ONLY computes. It does not verify or store.
"""

import hashlib
import json
from typing import Any

GENESIS_HASH = "GENESIS"


def canonical_serialize(body: Any) -> str:
    """
    Deterministic JSON string for hashing.

    bytes are rendered as lowercase hex; other non-JSON types via str().
    """
    return json.dumps(
        body,
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=True,
        default=_json_default,
    )


def _json_default(value: Any) -> str:
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).hex()
    return str(value)


def compute_entry_hash(body: Any, previous_hash: str) -> str:
    """64-character lowercase hex SHA-256 digest of body chained to previous_hash."""
    canonical = canonical_serialize(body)
    hash_input = canonical + previous_hash
    return hashlib.sha256(hash_input.encode("utf-8")).hexdigest()
