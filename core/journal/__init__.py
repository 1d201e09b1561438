"""
Provenance Journal — Public API
=================================
Hash-chained, append-only record of accepted transitions.
"""

from core.journal.errors import JournalChainBrokenError, JournalError
from core.journal.hasher import (
    GENESIS_HASH,
    canonical_serialize,
    compute_entry_hash,
)
from core.journal.journal import Journal, JournalEntry

__all__ = [
    "GENESIS_HASH",
    "canonical_serialize",
    "compute_entry_hash",
    "Journal",
    "JournalEntry",
    "JournalError",
    "JournalChainBrokenError",
]
