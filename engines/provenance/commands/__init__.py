"""
Provenance Engine — Commands
==============================
Frozen requests, one per mutating ledger operation.

A request captures the caller's intent together with the caller
identity and block height read from the ledger environment at
call time. Requests carry no validation: every rule lives in
engines.provenance.policies and fails with an ErrorCode.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar

from core.identity import Principal


# ── Configuration admin ───────────────────────────────────────

@dataclass(frozen=True)
class SetAuthorityRequest:
    """Configure the one-time ledger authority."""
    COMMAND_TYPE: ClassVar[str] = "provenance.authority.set.request"

    principal: Principal
    caller: Principal
    block_height: int


@dataclass(frozen=True)
class SetMaxStagesRequest:
    """Overwrite the per-product stage cap."""
    COMMAND_TYPE: ClassVar[str] = "provenance.max_stages.set.request"

    max_stages: int
    caller: Principal
    block_height: int


@dataclass(frozen=True)
class SetAuditFeeRequest:
    """Overwrite the fee charged per audit."""
    COMMAND_TYPE: ClassVar[str] = "provenance.audit_fee.set.request"

    audit_fee: int
    caller: Principal
    block_height: int


# ── Product lifecycle ─────────────────────────────────────────

@dataclass(frozen=True)
class InitializeProductRequest:
    """Register a new product owned by the caller."""
    COMMAND_TYPE: ClassVar[str] = "provenance.product.initialize.request"

    product_id: int
    content_hash: bytes
    description: str
    quantity: int
    certification: str
    caller: Principal
    block_height: int


@dataclass(frozen=True)
class AddStageRequest:
    """Append a handling stage to a product's provenance chain."""
    COMMAND_TYPE: ClassVar[str] = "provenance.stage.add.request"

    product_id: int
    stage_name: str
    location: str
    metadata: str
    caller: Principal
    block_height: int


@dataclass(frozen=True)
class PerformAuditRequest:
    """Record a third-party audit, paid to the authority."""
    COMMAND_TYPE: ClassVar[str] = "provenance.audit.perform.request"

    product_id: int
    findings: str
    passed: bool
    caller: Principal
    block_height: int


@dataclass(frozen=True)
class FinalizeProductRequest:
    """Freeze a product irreversibly."""
    COMMAND_TYPE: ClassVar[str] = "provenance.product.finalize.request"

    product_id: int
    caller: Principal
    block_height: int


@dataclass(frozen=True)
class TransferOwnershipRequest:
    """Hand a non-finalized product to a new owner."""
    COMMAND_TYPE: ClassVar[str] = "provenance.ownership.transfer.request"

    product_id: int
    new_owner: Principal
    caller: Principal
    block_height: int
