"""
Provenance Journal — Errors
=============================
"""


class JournalError(Exception):
    """Base error for journal operations."""
    pass


class JournalChainBrokenError(JournalError):
    """Stored entries no longer form a valid hash chain."""

    def __init__(self, sequence: int, detail: str):
        self.sequence = sequence
        self.detail = detail
        super().__init__(f"Journal chain broken at entry {sequence}: {detail}")
