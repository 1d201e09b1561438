"""
Tests for core.journal — Hash-chained append-only journal.
"""

import hashlib

import pytest

from core.journal import (
    GENESIS_HASH,
    Journal,
    JournalChainBrokenError,
    canonical_serialize,
    compute_entry_hash,
)


class TestHasher:
    def test_canonical_serialize_sorts_keys(self):
        assert canonical_serialize({"b": 1, "a": 2}) == '{"a":2,"b":1}'

    def test_canonical_serialize_bytes_as_hex(self):
        assert canonical_serialize({"h": b"\x01\xff"}) == '{"h":"01ff"}'

    def test_compute_entry_hash_formula(self):
        body = {"x": 1}
        expected = hashlib.sha256(('{"x":1}' + GENESIS_HASH).encode("utf-8")).hexdigest()
        assert compute_entry_hash(body, GENESIS_HASH) == expected

    def test_hash_depends_on_previous(self):
        body = {"x": 1}
        assert compute_entry_hash(body, "a") != compute_entry_hash(body, "b")


class TestJournal:
    def test_empty_journal(self):
        journal = Journal()
        assert len(journal) == 0
        assert journal.head_hash == GENESIS_HASH
        assert journal.verify()

    def test_append_links_entries(self):
        journal = Journal()
        first = journal.append("demo.thing.created.v1", {"n": 1}, block_height=0)
        second = journal.append("demo.thing.created.v1", {"n": 2}, block_height=3)

        assert first.sequence == 1
        assert second.sequence == 2
        assert first.previous_hash == GENESIS_HASH
        assert second.previous_hash == first.entry_hash
        assert journal.head_hash == second.entry_hash
        assert journal.get(2) is second
        assert journal.get(3) is None
        assert journal.verify()

    def test_payload_copied_on_append(self):
        journal = Journal()
        payload = {"n": 1}
        journal.append("demo.thing.created.v1", payload, block_height=0)
        payload["n"] = 99
        assert journal.get(1).payload == {"n": 1}
        assert journal.verify()

    def test_tampered_payload_detected(self):
        journal = Journal()
        journal.append("demo.thing.created.v1", {"n": 1}, block_height=0)
        journal.append("demo.thing.created.v1", {"n": 2}, block_height=0)
        journal.get(1).payload["n"] = 42

        with pytest.raises(JournalChainBrokenError) as exc_info:
            journal.verify()
        assert exc_info.value.sequence == 1

    def test_rejects_empty_event_type(self):
        journal = Journal()
        with pytest.raises(ValueError):
            journal.append("", {}, block_height=0)

    def test_entries_snapshot_is_tuple(self):
        journal = Journal()
        journal.append("demo.thing.created.v1", {}, block_height=0)
        assert isinstance(journal.entries, tuple)
        assert [e.sequence for e in journal] == [1]
