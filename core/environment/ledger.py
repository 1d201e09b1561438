"""
Provenance Environment — Ledger Environment Protocol
======================================================
Doctrine: the state machine never reads ambient state.
Caller identity, logical time and value transfer are supplied
by the ledger environment that executes it.

This module provides the LedgerEnvironment protocol and the
in-memory implementation used by tests and local runs.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Protocol

from core.environment.errors import TransferFailedError
from core.identity import Principal


# ══════════════════════════════════════════════════════════════
# LEDGER ENVIRONMENT PROTOCOL
# ══════════════════════════════════════════════════════════════

class LedgerEnvironment(Protocol):
    """Injectable execution environment."""

    @property
    def caller(self) -> Principal:
        """Principal invoking the current operation."""
        ...  # pragma: no cover

    @property
    def block_height(self) -> int:
        """Current logical time. Non-decreasing across calls."""
        ...  # pragma: no cover

    def transfer(self, amount: int, sender: Principal, recipient: Principal) -> None:
        """Move value units. Raises TransferFailedError on failure."""
        ...  # pragma: no cover


# ══════════════════════════════════════════════════════════════
# TRANSFER RECORD
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class TransferRecord:
    """One executed value transfer."""
    amount: int
    sender: Principal
    recipient: Principal
    block_height: int


# ══════════════════════════════════════════════════════════════
# IN-MEMORY ENVIRONMENT
# ══════════════════════════════════════════════════════════════

class InMemoryEnvironment:
    """
    Test/dev environment: settable caller and manual block height.

    Usage:
        env = InMemoryEnvironment(caller=Principal("ST1TEST"))
        env.caller = Principal("ST3AUDITOR")
        env.advance(10)
        assert env.transfers == []
    """

    def __init__(
        self,
        caller: Principal,
        block_height: int = 0,
        fail_transfers: bool = False,
    ) -> None:
        if block_height < 0:
            raise ValueError(f"block_height cannot be negative, got {block_height}.")
        self.caller = caller
        self._block_height = block_height
        self.fail_transfers = fail_transfers
        self.transfers: List[TransferRecord] = []

    @property
    def caller(self) -> Principal:
        return self._caller

    @caller.setter
    def caller(self, principal: Principal) -> None:
        if not isinstance(principal, Principal):
            raise TypeError(
                f"caller must be Principal, got {type(principal).__name__}."
            )
        self._caller = principal

    @property
    def block_height(self) -> int:
        return self._block_height

    def advance(self, blocks: int = 1) -> int:
        """Move logical time forward. Time never goes backwards."""
        if blocks < 0:
            raise ValueError(f"Cannot advance by a negative amount, got {blocks}.")
        self._block_height += blocks
        return self._block_height

    def transfer(self, amount: int, sender: Principal, recipient: Principal) -> None:
        if self.fail_transfers:
            raise TransferFailedError(amount, sender, recipient, "Transfers disabled.")
        if amount < 0:
            raise TransferFailedError(amount, sender, recipient, "Negative amount.")
        self.transfers.append(TransferRecord(
            amount=amount,
            sender=sender,
            recipient=recipient,
            block_height=self._block_height,
        ))
