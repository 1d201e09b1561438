"""
Provenance Engine — Journal Replay
====================================
Rebuilds ledger state from a journal of accepted transitions.

Replay doctrine:
- READ entries only, never append
- Verify the hash chain before applying anything
- Apply in sequence order through the same store.apply() path
- Never call the ledger environment (fees were charged when
  the audit was first accepted)
"""

from __future__ import annotations

import logging

from core.config import DEFAULT_LEDGER_DEFAULTS, LedgerDefaults
from core.environment import LedgerEnvironment
from core.journal import Journal

from engines.provenance.events import ALL_EVENT_TYPES
from engines.provenance.services import ProvenanceLedger, ProvenanceStateStore

logger = logging.getLogger("provenance.replay")


class ReplayError(Exception):
    """Journal contains an entry this engine cannot apply."""

    def __init__(self, sequence: int, event_type: str):
        self.sequence = sequence
        self.event_type = event_type
        super().__init__(
            f"Cannot replay entry {sequence}: unknown event type '{event_type}'."
        )


def replay_journal(
    journal: Journal,
    defaults: LedgerDefaults = DEFAULT_LEDGER_DEFAULTS,
) -> ProvenanceStateStore:
    """
    Build a fresh state store from journal entries.

    Raises JournalChainBrokenError if the chain is corrupted and
    ReplayError on an unknown event type. On failure no store is
    returned.
    """
    journal.verify()

    store = ProvenanceStateStore(defaults)
    for entry in journal:
        if entry.event_type not in ALL_EVENT_TYPES:
            logger.error(
                f"Replay aborted at entry {entry.sequence}: "
                f"unknown event type '{entry.event_type}'"
            )
            raise ReplayError(entry.sequence, entry.event_type)
        store.apply(entry.event_type, entry.payload)

    logger.info(f"Replayed {len(journal)} journal entries")
    return store


def restore_ledger(
    journal: Journal,
    environment: LedgerEnvironment,
    defaults: LedgerDefaults = DEFAULT_LEDGER_DEFAULTS,
) -> ProvenanceLedger:
    """Rebuild a live ledger that keeps appending to the same journal."""
    store = replay_journal(journal, defaults)
    return ProvenanceLedger(environment, store=store, journal=journal, defaults=defaults)
