"""
Provenance Engine — Event Types
=================================
One event per accepted transition. Payloads are plain JSON-ready
dicts: principals as addresses, hashes as lowercase hex.

Payloads carry everything the state store needs, so a journal of
these events rebuilds the ledger without the environment.
"""

# ── Event Types ───────────────────────────────────────────────

AUTHORITY_SET_V1 = "provenance.authority.set.v1"
MAX_STAGES_SET_V1 = "provenance.max_stages.set.v1"
AUDIT_FEE_SET_V1 = "provenance.audit_fee.set.v1"
PRODUCT_INITIALIZED_V1 = "provenance.product.initialized.v1"
STAGE_ADDED_V1 = "provenance.stage.added.v1"
AUDIT_PERFORMED_V1 = "provenance.audit.performed.v1"
PRODUCT_FINALIZED_V1 = "provenance.product.finalized.v1"
OWNERSHIP_TRANSFERRED_V1 = "provenance.ownership.transferred.v1"

ALL_EVENT_TYPES = (
    AUTHORITY_SET_V1,
    MAX_STAGES_SET_V1,
    AUDIT_FEE_SET_V1,
    PRODUCT_INITIALIZED_V1,
    STAGE_ADDED_V1,
    AUDIT_PERFORMED_V1,
    PRODUCT_FINALIZED_V1,
    OWNERSHIP_TRANSFERRED_V1,
)


# ── Payload Builders ──────────────────────────────────────────

def _base_fields(req):
    return {
        "actor": req.caller.address,
        "block_height": req.block_height,
    }


def authority_set_payload(req):
    base = _base_fields(req)
    base.update({"authority": req.principal.address})
    return base


def max_stages_set_payload(req):
    base = _base_fields(req)
    base.update({"max_stages_per_product": req.max_stages})
    return base


def audit_fee_set_payload(req):
    base = _base_fields(req)
    base.update({"audit_fee": req.audit_fee})
    return base


def product_initialized_payload(req):
    base = _base_fields(req)
    base.update({
        "product_id": req.product_id,
        "owner": req.caller.address,
        "content_hash": bytes(req.content_hash).hex(),
        "description": req.description,
        "quantity": req.quantity,
        "certification": req.certification,
        "created_at": req.block_height,
    })
    return base


def stage_added_payload(req, stage_id: int):
    base = _base_fields(req)
    base.update({
        "product_id": req.product_id,
        "stage_id": stage_id,
        "stage_name": req.stage_name,
        "location": req.location,
        "metadata": req.metadata,
        "recorded_at": req.block_height,
        "recorded_by": req.caller.address,
    })
    return base


def audit_performed_payload(req, audit_id: int, fee: int, authority):
    base = _base_fields(req)
    base.update({
        "product_id": req.product_id,
        "audit_id": audit_id,
        "verifier": req.caller.address,
        "findings": req.findings,
        "passed": req.passed,
        "performed_at": req.block_height,
        "fee": fee,
        "fee_recipient": authority.address,
    })
    return base


def product_finalized_payload(req):
    base = _base_fields(req)
    base.update({"product_id": req.product_id})
    return base


def ownership_transferred_payload(req, previous_owner):
    base = _base_fields(req)
    base.update({
        "product_id": req.product_id,
        "previous_owner": previous_owner.address,
        "new_owner": req.new_owner.address,
    })
    return base


COMMAND_TO_EVENT_TYPE = {
    "provenance.authority.set.request": AUTHORITY_SET_V1,
    "provenance.max_stages.set.request": MAX_STAGES_SET_V1,
    "provenance.audit_fee.set.request": AUDIT_FEE_SET_V1,
    "provenance.product.initialize.request": PRODUCT_INITIALIZED_V1,
    "provenance.stage.add.request": STAGE_ADDED_V1,
    "provenance.audit.perform.request": AUDIT_PERFORMED_V1,
    "provenance.product.finalize.request": PRODUCT_FINALIZED_V1,
    "provenance.ownership.transfer.request": OWNERSHIP_TRANSFERRED_V1,
}
