"""
Provenance Engine — Service Layer
===================================
Products, append-only stages and audits, per-product counters
and the ledger configuration, behind one state machine.

Every mutating operation:
1. Reads caller + block height from the ledger environment
2. Evaluates its policy chain (first rejection wins)
3. Performs its single external side effect (audit fee only)
4. Journals one event and applies it to the state store

Nothing is written before step 3 succeeds, so a rejected or
aborted operation leaves no trace.
"""

from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

from core.commands import LedgerResult, PolicyChain
from core.config import DEFAULT_LEDGER_DEFAULTS, LedgerDefaults
from core.environment import LedgerEnvironment
from core.identity import Principal
from core.journal import Journal

from engines.provenance.commands import (
    AddStageRequest,
    FinalizeProductRequest,
    InitializeProductRequest,
    PerformAuditRequest,
    SetAuditFeeRequest,
    SetAuthorityRequest,
    SetMaxStagesRequest,
    TransferOwnershipRequest,
)
from engines.provenance.events import (
    ALL_EVENT_TYPES,
    AUDIT_FEE_SET_V1,
    AUDIT_PERFORMED_V1,
    AUTHORITY_SET_V1,
    COMMAND_TO_EVENT_TYPE,
    MAX_STAGES_SET_V1,
    OWNERSHIP_TRANSFERRED_V1,
    PRODUCT_FINALIZED_V1,
    PRODUCT_INITIALIZED_V1,
    STAGE_ADDED_V1,
    audit_fee_set_payload,
    audit_performed_payload,
    authority_set_payload,
    max_stages_set_payload,
    ownership_transferred_payload,
    product_finalized_payload,
    product_initialized_payload,
    stage_added_payload,
)
from engines.provenance.policies import (
    ADD_STAGE_POLICIES,
    FINALIZE_PRODUCT_POLICIES,
    INITIALIZE_PRODUCT_POLICIES,
    PERFORM_AUDIT_POLICIES,
    SET_AUDIT_FEE_POLICIES,
    SET_AUTHORITY_POLICIES,
    SET_MAX_STAGES_POLICIES,
    TRANSFER_OWNERSHIP_POLICIES,
)

logger = logging.getLogger("provenance.ledger")


# ── Data Records ──────────────────────────────────────────────

@dataclass(frozen=True)
class Product:
    owner: Principal
    content_hash: bytes
    description: str
    quantity: int
    certification: str
    status: bool
    finalized: bool
    created_at: int


@dataclass(frozen=True)
class Stage:
    stage_name: str
    location: str
    metadata: str
    recorded_at: int
    recorded_by: Principal


@dataclass(frozen=True)
class Audit:
    verifier: Principal
    performed_at: int
    findings: str
    passed: bool


@dataclass(frozen=True)
class LedgerConfig:
    """Snapshot of runtime configuration."""
    authority: Optional[Principal]
    max_stages_per_product: int
    audit_fee: int


# ── State Store ───────────────────────────────────────────────

class ProvenanceStateStore:
    """
    Explicit state container: five tables plus configuration.

    Mutated only through apply(); one store per ledger, so tests
    get isolation by building a fresh store.
    """

    def __init__(self, defaults: LedgerDefaults = DEFAULT_LEDGER_DEFAULTS):
        self._defaults = defaults
        self._authority: Optional[Principal] = None
        self._max_stages_per_product = defaults.max_stages_per_product
        self._audit_fee = defaults.audit_fee
        self._products: Dict[int, Product] = {}
        self._stages: Dict[Tuple[int, int], Stage] = {}
        self._audits: Dict[Tuple[int, int], Audit] = {}
        self._stage_counts: Dict[int, int] = {}
        self._audit_counts: Dict[int, int] = {}

    def apply(self, event_type: str, payload: Dict[str, Any]) -> None:
        if event_type not in ALL_EVENT_TYPES:
            raise ValueError(f"Unknown provenance event type: {event_type}")

        if event_type == AUTHORITY_SET_V1:
            self._authority = Principal(payload["authority"])

        elif event_type == MAX_STAGES_SET_V1:
            self._max_stages_per_product = payload["max_stages_per_product"]

        elif event_type == AUDIT_FEE_SET_V1:
            self._audit_fee = payload["audit_fee"]

        elif event_type == PRODUCT_INITIALIZED_V1:
            pid = payload["product_id"]
            self._products[pid] = Product(
                owner=Principal(payload["owner"]),
                content_hash=bytes.fromhex(payload["content_hash"]),
                description=payload["description"],
                quantity=payload["quantity"],
                certification=payload["certification"],
                status=True,
                finalized=False,
                created_at=payload["created_at"],
            )
            self._stage_counts[pid] = 0
            self._audit_counts[pid] = 0

        elif event_type == STAGE_ADDED_V1:
            pid = payload["product_id"]
            sid = payload["stage_id"]
            self._stages[(pid, sid)] = Stage(
                stage_name=payload["stage_name"],
                location=payload["location"],
                metadata=payload["metadata"],
                recorded_at=payload["recorded_at"],
                recorded_by=Principal(payload["recorded_by"]),
            )
            self._stage_counts[pid] = sid

        elif event_type == AUDIT_PERFORMED_V1:
            pid = payload["product_id"]
            aid = payload["audit_id"]
            self._audits[(pid, aid)] = Audit(
                verifier=Principal(payload["verifier"]),
                performed_at=payload["performed_at"],
                findings=payload["findings"],
                passed=payload["passed"],
            )
            self._audit_counts[pid] = aid

        elif event_type == PRODUCT_FINALIZED_V1:
            pid = payload["product_id"]
            self._products[pid] = dataclasses.replace(
                self._products[pid], finalized=True,
            )

        elif event_type == OWNERSHIP_TRANSFERRED_V1:
            pid = payload["product_id"]
            self._products[pid] = dataclasses.replace(
                self._products[pid], owner=Principal(payload["new_owner"]),
            )

    # ── Queries ───────────────────────────────────────────────

    @property
    def defaults(self) -> LedgerDefaults:
        return self._defaults

    @property
    def authority(self) -> Optional[Principal]:
        return self._authority

    @property
    def max_stages_per_product(self) -> int:
        return self._max_stages_per_product

    @property
    def audit_fee(self) -> int:
        return self._audit_fee

    def config(self) -> LedgerConfig:
        return LedgerConfig(
            authority=self._authority,
            max_stages_per_product=self._max_stages_per_product,
            audit_fee=self._audit_fee,
        )

    def has_product(self, product_id: int) -> bool:
        return product_id in self._products

    def get_product(self, product_id: int) -> Optional[Product]:
        return self._products.get(product_id)

    def get_stage(self, product_id: int, stage_id: int) -> Optional[Stage]:
        return self._stages.get((product_id, stage_id))

    def get_audit(self, product_id: int, audit_id: int) -> Optional[Audit]:
        return self._audits.get((product_id, audit_id))

    def stage_count(self, product_id: int) -> int:
        return self._stage_counts.get(product_id, 0)

    def audit_count(self, product_id: int) -> int:
        return self._audit_counts.get(product_id, 0)

    @property
    def product_count(self) -> int:
        return len(self._products)


# ── Service ───────────────────────────────────────────────────

class ProvenanceLedger:
    """
    Supply-chain provenance state machine.

    Usage:
        env = InMemoryEnvironment(caller=Principal("ST1TEST"))
        ledger = ProvenanceLedger(env)
        result = ledger.initialize_product(1, b"\\x01" * 32, "Coffee", 1000, "Fair Trade")
        assert result.ok
    """

    def __init__(
        self,
        environment: LedgerEnvironment,
        *,
        store: Optional[ProvenanceStateStore] = None,
        journal: Optional[Journal] = None,
        defaults: LedgerDefaults = DEFAULT_LEDGER_DEFAULTS,
    ):
        self._env = environment
        self._store = store if store is not None else ProvenanceStateStore(defaults)
        self._journal = journal if journal is not None else Journal()
        self._chains = {
            SetAuthorityRequest: PolicyChain("set_authority", SET_AUTHORITY_POLICIES),
            SetMaxStagesRequest: PolicyChain("set_max_stages", SET_MAX_STAGES_POLICIES),
            SetAuditFeeRequest: PolicyChain("set_audit_fee", SET_AUDIT_FEE_POLICIES),
            InitializeProductRequest: PolicyChain(
                "initialize_product", INITIALIZE_PRODUCT_POLICIES,
            ),
            AddStageRequest: PolicyChain("add_stage", ADD_STAGE_POLICIES),
            PerformAuditRequest: PolicyChain("perform_audit", PERFORM_AUDIT_POLICIES),
            FinalizeProductRequest: PolicyChain(
                "finalize_product", FINALIZE_PRODUCT_POLICIES,
            ),
            TransferOwnershipRequest: PolicyChain(
                "transfer_ownership", TRANSFER_OWNERSHIP_POLICIES,
            ),
        }

    @property
    def store(self) -> ProvenanceStateStore:
        return self._store

    @property
    def journal(self) -> Journal:
        return self._journal

    # ── Configuration admin ───────────────────────────────────

    def set_authority(self, principal: Principal) -> LedgerResult:
        _require_principal(principal, "principal")
        request = SetAuthorityRequest(principal=principal, **self._context())
        rejected = self._evaluate(request)
        if rejected is not None:
            return rejected
        self._commit(request, authority_set_payload(request))
        logger.info(f"Authority set to '{principal}'")
        return LedgerResult.ok_with(True)

    def set_max_stages(self, max_stages: int) -> LedgerResult:
        request = SetMaxStagesRequest(max_stages=max_stages, **self._context())
        rejected = self._evaluate(request)
        if rejected is not None:
            return rejected
        self._commit(request, max_stages_set_payload(request))
        logger.info(f"Stage cap set to {max_stages}")
        return LedgerResult.ok_with(True)

    def set_audit_fee(self, audit_fee: int) -> LedgerResult:
        request = SetAuditFeeRequest(audit_fee=audit_fee, **self._context())
        rejected = self._evaluate(request)
        if rejected is not None:
            return rejected
        self._commit(request, audit_fee_set_payload(request))
        logger.info(f"Audit fee set to {audit_fee}")
        return LedgerResult.ok_with(True)

    # ── Product lifecycle ─────────────────────────────────────

    def initialize_product(
        self,
        product_id: int,
        content_hash: bytes,
        description: str,
        quantity: int,
        certification: str,
    ) -> LedgerResult:
        request = InitializeProductRequest(
            product_id=product_id,
            content_hash=content_hash,
            description=description,
            quantity=quantity,
            certification=certification,
            **self._context(),
        )
        rejected = self._evaluate(request)
        if rejected is not None:
            return rejected
        self._commit(request, product_initialized_payload(request))
        logger.info(f"Product {product_id} registered by '{request.caller}'")
        return LedgerResult.ok_with(True)

    def add_stage(
        self,
        product_id: int,
        stage_name: str,
        location: str,
        metadata: str,
    ) -> LedgerResult:
        request = AddStageRequest(
            product_id=product_id,
            stage_name=stage_name,
            location=location,
            metadata=metadata,
            **self._context(),
        )
        rejected = self._evaluate(request)
        if rejected is not None:
            return rejected
        stage_id = self._store.stage_count(product_id) + 1
        self._commit(request, stage_added_payload(request, stage_id))
        logger.info(f"Stage {stage_id} '{stage_name}' recorded for product {product_id}")
        return LedgerResult.ok_with(stage_id)

    def perform_audit(
        self,
        product_id: int,
        findings: str,
        passed: bool,
    ) -> LedgerResult:
        """
        Record an audit and charge the audit fee.

        The fee transfer runs before any write. If the environment
        raises, the exception propagates and nothing is recorded.
        """
        if not isinstance(passed, bool):
            raise TypeError(f"passed must be bool, got {type(passed).__name__}.")
        request = PerformAuditRequest(
            product_id=product_id,
            findings=findings,
            passed=passed,
            **self._context(),
        )
        rejected = self._evaluate(request)
        if rejected is not None:
            return rejected

        authority = self._store.authority
        fee = self._store.audit_fee
        self._env.transfer(fee, request.caller, authority)

        audit_id = self._store.audit_count(product_id) + 1
        self._commit(
            request, audit_performed_payload(request, audit_id, fee, authority),
        )
        logger.info(
            f"Audit {audit_id} recorded for product {product_id} by "
            f"'{request.caller}' (passed={request.passed}, fee={fee})"
        )
        return LedgerResult.ok_with(audit_id)

    def finalize_product(self, product_id: int) -> LedgerResult:
        request = FinalizeProductRequest(product_id=product_id, **self._context())
        rejected = self._evaluate(request)
        if rejected is not None:
            return rejected
        self._commit(request, product_finalized_payload(request))
        logger.info(f"Product {product_id} finalized")
        return LedgerResult.ok_with(True)

    def transfer_ownership(self, product_id: int, new_owner: Principal) -> LedgerResult:
        _require_principal(new_owner, "new_owner")
        request = TransferOwnershipRequest(
            product_id=product_id,
            new_owner=new_owner,
            **self._context(),
        )
        rejected = self._evaluate(request)
        if rejected is not None:
            return rejected
        previous_owner = self._store.get_product(product_id).owner
        self._commit(request, ownership_transferred_payload(request, previous_owner))
        logger.info(
            f"Product {product_id} ownership moved "
            f"'{previous_owner}' -> '{new_owner}'"
        )
        return LedgerResult.ok_with(True)

    # ── Read accessors ────────────────────────────────────────

    def get_product(self, product_id: int) -> Optional[Product]:
        return self._store.get_product(product_id)

    def get_stage(self, product_id: int, stage_id: int) -> Optional[Stage]:
        return self._store.get_stage(product_id, stage_id)

    def get_audit(self, product_id: int, audit_id: int) -> Optional[Audit]:
        return self._store.get_audit(product_id, audit_id)

    def get_stage_count(self, product_id: int) -> int:
        return self._store.stage_count(product_id)

    def get_audit_count(self, product_id: int) -> int:
        return self._store.audit_count(product_id)

    def get_provenance(self, product_id: int) -> Tuple[Stage, ...]:
        """Stages of one product in recording order."""
        count = self._store.stage_count(product_id)
        return tuple(
            self._store.get_stage(product_id, stage_id)
            for stage_id in range(1, count + 1)
        )

    def get_config(self) -> LedgerConfig:
        return self._store.config()

    # ── Internals ─────────────────────────────────────────────

    def _context(self) -> dict:
        return {
            "caller": self._env.caller,
            "block_height": self._env.block_height,
        }

    def _evaluate(self, request) -> Optional[LedgerResult]:
        rejection = self._chains[type(request)].evaluate(request, self._store)
        if rejection is None:
            return None
        return LedgerResult.rejected(rejection)

    def _commit(self, request, payload: Dict[str, Any]) -> None:
        event_type = COMMAND_TO_EVENT_TYPE[request.COMMAND_TYPE]
        self._journal.append(event_type, payload, request.block_height)
        self._store.apply(event_type, payload)


def _require_principal(value, name: str) -> None:
    if not isinstance(value, Principal):
        raise TypeError(f"{name} must be Principal, got {type(value).__name__}.")
