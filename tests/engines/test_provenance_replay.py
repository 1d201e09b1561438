"""
Provenance Engine — Journal Replay Tests
==========================================
Rebuilding ledger state from the transition journal.
"""

import pytest

from core.commands import ErrorCode
from core.config import LedgerDefaults
from core.environment import InMemoryEnvironment
from core.identity import Principal
from core.journal import Journal, JournalChainBrokenError
from engines.provenance.replay import ReplayError, replay_journal, restore_ledger
from engines.provenance.services import ProvenanceLedger

OWNER = Principal("ST1TEST")
AUTHORITY = Principal("ST2TEST")
AUDITOR = Principal("ST3AUDITOR")
NEW_OWNER = Principal("ST4NEWOWNER")

HASH = bytes(range(32))


def build_history():
    env = InMemoryEnvironment(caller=OWNER)
    ledger = ProvenanceLedger(env)
    ledger.initialize_product(1, HASH, "Coffee Beans", 1000, "Fair Trade")
    ledger.initialize_product(2, HASH, "Cocoa", 20, "")
    env.advance(3)
    ledger.add_stage(1, "Harvesting", "Ethiopia", "Organic methods used")
    ledger.add_stage(1, "Roasting", "Kenya", "")
    ledger.set_authority(AUTHORITY)
    ledger.set_max_stages(10)
    ledger.set_audit_fee(250)
    env.caller = AUDITOR
    ledger.perform_audit(1, "All good", True)
    env.caller = OWNER
    ledger.transfer_ownership(2, NEW_OWNER)
    ledger.finalize_product(1)
    return ledger, env


class TestReplayJournal:
    def test_replay_reproduces_state(self):
        ledger, _ = build_history()
        store = replay_journal(ledger.journal)

        for pid in (1, 2):
            assert store.get_product(pid) == ledger.get_product(pid)
            assert store.stage_count(pid) == ledger.get_stage_count(pid)
            assert store.audit_count(pid) == ledger.get_audit_count(pid)
        assert store.get_stage(1, 1) == ledger.get_stage(1, 1)
        assert store.get_stage(1, 2) == ledger.get_stage(1, 2)
        assert store.get_audit(1, 1) == ledger.get_audit(1, 1)
        assert store.config() == ledger.get_config()
        assert store.get_product(1).content_hash == HASH
        assert store.get_product(2).owner == NEW_OWNER

    def test_replay_never_charges_fees(self):
        ledger, env = build_history()
        charged = list(env.transfers)
        replay_journal(ledger.journal)
        assert env.transfers == charged

    def test_empty_journal(self):
        store = replay_journal(Journal())
        assert store.product_count == 0
        assert store.config().authority is None

    def test_tampered_journal_refused(self):
        ledger, _ = build_history()
        ledger.journal.get(1).payload["quantity"] = 1
        with pytest.raises(JournalChainBrokenError):
            replay_journal(ledger.journal)

    def test_unknown_event_type_refused(self):
        journal = Journal()
        journal.append("other.engine.thing.v1", {}, block_height=0)
        with pytest.raises(ReplayError) as exc_info:
            replay_journal(journal)
        assert exc_info.value.sequence == 1


class TestRestoreLedger:
    def test_restored_ledger_continues_ids(self):
        ledger, _ = build_history()
        env = InMemoryEnvironment(caller=NEW_OWNER, block_height=50)
        restored = restore_ledger(ledger.journal, env)

        assert restored.add_stage(2, "Fermenting", "Ghana", "").value == 1
        env.caller = AUDITOR
        assert restored.perform_audit(1, "Second look", False).value == 2
        assert env.transfers[0].amount == 250
        assert restored.journal is ledger.journal
        assert restored.journal.verify()

    def test_restored_ledger_keeps_guards(self):
        ledger, _ = build_history()
        env = InMemoryEnvironment(caller=OWNER)
        restored = restore_ledger(ledger.journal, env)
        assert not restored.add_stage(1, "Late", "X", "").ok
        assert not restored.set_authority(AUDITOR).ok

    def test_restored_ledger_uses_given_defaults(self):
        ledger, _ = build_history()
        env = InMemoryEnvironment(caller=NEW_OWNER)
        restored = restore_ledger(
            ledger.journal, env, defaults=LedgerDefaults(max_stage_name_length=3),
        )
        result = restored.add_stage(2, "Fermenting", "Ghana", "")
        assert result.value == ErrorCode.INVALID_STAGE
        assert restored.add_stage(2, "Dry", "Ghana", "").value == 1
