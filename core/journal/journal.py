"""
Provenance Journal — Append-Only Transition Journal
=====================================================
Every accepted ledger transition is recorded as one entry.

RULES (NON-NEGOTIABLE):
- Append only. No deletes, no overwrites.
- Sequence numbers are dense, starting at 1
- Each entry links to its predecessor by hash
- Rejected operations are never journaled

The journal does NOT interpret payloads. Engines build payloads;
the journal chains and stores them.
"""

from __future__ import annotations

import copy
import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Optional, Tuple

from core.journal.errors import JournalChainBrokenError
from core.journal.hasher import GENESIS_HASH, compute_entry_hash

logger = logging.getLogger("provenance.journal")


@dataclass(frozen=True)
class JournalEntry:
    """Immutable journal record."""
    sequence: int
    event_type: str
    block_height: int
    payload: Dict[str, Any]
    previous_hash: str
    entry_hash: str

    def hash_body(self) -> dict:
        return entry_body(self.sequence, self.event_type, self.block_height, self.payload)


def entry_body(sequence: int, event_type: str, block_height: int, payload: dict) -> dict:
    return {
        "sequence": sequence,
        "event_type": event_type,
        "block_height": block_height,
        "payload": payload,
    }


class Journal:
    """In-memory, hash-chained, append-only journal."""

    def __init__(self) -> None:
        self._entries: List[JournalEntry] = []

    def append(
        self,
        event_type: str,
        payload: Dict[str, Any],
        block_height: int,
    ) -> JournalEntry:
        if not event_type or not isinstance(event_type, str):
            raise ValueError("event_type must be a non-empty string.")

        sequence = len(self._entries) + 1
        previous_hash = self.head_hash
        # Stored payload is detached from the caller's dict.
        stored_payload = copy.deepcopy(payload)
        entry_hash = compute_entry_hash(
            entry_body(sequence, event_type, block_height, stored_payload),
            previous_hash,
        )
        entry = JournalEntry(
            sequence=sequence,
            event_type=event_type,
            block_height=block_height,
            payload=stored_payload,
            previous_hash=previous_hash,
            entry_hash=entry_hash,
        )
        self._entries.append(entry)
        logger.debug(f"Journal entry {sequence} appended: {event_type} ({entry_hash[:12]})")
        return entry

    @property
    def head_hash(self) -> str:
        if not self._entries:
            return GENESIS_HASH
        return self._entries[-1].entry_hash

    @property
    def entries(self) -> Tuple[JournalEntry, ...]:
        return tuple(self._entries)

    def get(self, sequence: int) -> Optional[JournalEntry]:
        if 1 <= sequence <= len(self._entries):
            return self._entries[sequence - 1]
        return None

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[JournalEntry]:
        return iter(tuple(self._entries))

    def verify(self) -> bool:
        """
        Recompute the full chain.

        Raises JournalChainBrokenError on the first inconsistency.
        Returns True if the chain is intact.
        """
        previous_hash = GENESIS_HASH
        for index, entry in enumerate(self._entries, start=1):
            if entry.sequence != index:
                raise JournalChainBrokenError(
                    index, f"expected sequence {index}, found {entry.sequence}."
                )
            if entry.previous_hash != previous_hash:
                raise JournalChainBrokenError(
                    index, "previous_hash does not match the preceding entry."
                )
            expected = compute_entry_hash(entry.hash_body(), previous_hash)
            if entry.entry_hash != expected:
                raise JournalChainBrokenError(
                    index, "entry_hash does not match computed hash."
                )
            previous_hash = entry.entry_hash
        return True
