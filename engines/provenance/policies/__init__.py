"""
Provenance Engine — Policies
==============================
One policy per validation rule. Each policy takes
(request, store) and returns a RejectionReason or None.

Operation chains at the bottom of this module fix the
evaluation order. First failing policy wins.
"""

from typing import Optional

from core.commands.rejection import ErrorCode, RejectionReason
from core.identity import is_null_principal


def _is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _text_within(value, max_length: int, allow_empty: bool = True) -> bool:
    if not isinstance(value, str):
        return False
    if not allow_empty and not value:
        return False
    return len(value) <= max_length


# ── Configuration admin ───────────────────────────────────────

def authority_not_null_policy(request, store) -> Optional[RejectionReason]:
    """The reserved null principal can never become the authority."""
    if is_null_principal(request.principal):
        return RejectionReason(
            code=ErrorCode.INVALID_OWNER,
            message="The null principal cannot be the authority.",
            policy_name="authority_not_null_policy",
        )
    return None


def authority_not_set_policy(request, store) -> Optional[RejectionReason]:
    """Authority is set once and never replaced."""
    if store.authority is not None:
        return RejectionReason(
            code=ErrorCode.NOT_AUTHORIZED,
            message=f"Authority already set to '{store.authority}'.",
            policy_name="authority_not_set_policy",
        )
    return None


def authority_configured_policy(request, store) -> Optional[RejectionReason]:
    if store.authority is None:
        return RejectionReason(
            code=ErrorCode.NOT_AUTHORIZED,
            message="No authority configured.",
            policy_name="authority_configured_policy",
        )
    return None


def max_stages_positive_policy(request, store) -> Optional[RejectionReason]:
    if not _is_int(request.max_stages) or request.max_stages <= 0:
        return RejectionReason(
            code=ErrorCode.INVALID_STAGE,
            message=f"Stage cap must be positive, got {request.max_stages!r}.",
            policy_name="max_stages_positive_policy",
        )
    return None


def audit_fee_non_negative_policy(request, store) -> Optional[RejectionReason]:
    if not _is_int(request.audit_fee) or request.audit_fee < 0:
        return RejectionReason(
            code=ErrorCode.INVALID_QUANTITY,
            message=f"Audit fee cannot be negative, got {request.audit_fee!r}.",
            policy_name="audit_fee_non_negative_policy",
        )
    return None


# ── Product registration ──────────────────────────────────────

def product_id_positive_policy(request, store) -> Optional[RejectionReason]:
    if not _is_int(request.product_id) or request.product_id <= 0:
        return RejectionReason(
            code=ErrorCode.INVALID_PRODUCT_ID,
            message=f"Product id must be a positive integer, got {request.product_id!r}.",
            policy_name="product_id_positive_policy",
        )
    return None


def content_hash_length_policy(request, store) -> Optional[RejectionReason]:
    expected = store.defaults.hash_length
    value = request.content_hash
    if not isinstance(value, (bytes, bytearray)) or len(value) != expected:
        return RejectionReason(
            code=ErrorCode.INVALID_HASH,
            message=f"Content hash must be exactly {expected} bytes.",
            policy_name="content_hash_length_policy",
        )
    return None


def description_length_policy(request, store) -> Optional[RejectionReason]:
    limit = store.defaults.max_description_length
    if not _text_within(request.description, limit):
        return RejectionReason(
            code=ErrorCode.INVALID_DESCRIPTION,
            message=f"Description must be text of at most {limit} characters.",
            policy_name="description_length_policy",
        )
    return None


def quantity_positive_policy(request, store) -> Optional[RejectionReason]:
    if not _is_int(request.quantity) or request.quantity <= 0:
        return RejectionReason(
            code=ErrorCode.INVALID_QUANTITY,
            message=f"Quantity must be positive, got {request.quantity!r}.",
            policy_name="quantity_positive_policy",
        )
    return None


def certification_length_policy(request, store) -> Optional[RejectionReason]:
    limit = store.defaults.max_certification_length
    if not _text_within(request.certification, limit):
        return RejectionReason(
            code=ErrorCode.INVALID_CERTIFICATION,
            message=f"Certification must be text of at most {limit} characters.",
            policy_name="certification_length_policy",
        )
    return None


def product_not_registered_policy(request, store) -> Optional[RejectionReason]:
    if store.has_product(request.product_id):
        return RejectionReason(
            code=ErrorCode.PRODUCT_ALREADY_EXISTS,
            message=f"Product {request.product_id} is already registered.",
            policy_name="product_not_registered_policy",
        )
    return None


def caller_not_null_policy(request, store) -> Optional[RejectionReason]:
    """The reserved null principal can never own a product."""
    if is_null_principal(request.caller):
        return RejectionReason(
            code=ErrorCode.INVALID_OWNER,
            message="The null principal cannot register a product.",
            policy_name="caller_not_null_policy",
        )
    return None


# ── Product guards (shared) ───────────────────────────────────

def product_exists_policy(request, store) -> Optional[RejectionReason]:
    if not _is_int(request.product_id) or not store.has_product(request.product_id):
        return RejectionReason(
            code=ErrorCode.PRODUCT_NOT_FOUND,
            message=f"Product {request.product_id!r} not found.",
            policy_name="product_exists_policy",
        )
    return None


def caller_is_owner_policy(request, store) -> Optional[RejectionReason]:
    product = store.get_product(request.product_id)
    if product.owner != request.caller:
        return RejectionReason(
            code=ErrorCode.NOT_AUTHORIZED,
            message=f"Caller '{request.caller}' does not own product {request.product_id}.",
            policy_name="caller_is_owner_policy",
        )
    return None


def product_not_finalized_policy(request, store) -> Optional[RejectionReason]:
    if store.get_product(request.product_id).finalized:
        return RejectionReason(
            code=ErrorCode.PRODUCT_ALREADY_FINALIZED,
            message=f"Product {request.product_id} is finalized.",
            policy_name="product_not_finalized_policy",
        )
    return None


# ── Stage recording ───────────────────────────────────────────

def stage_capacity_policy(request, store) -> Optional[RejectionReason]:
    count = store.stage_count(request.product_id)
    cap = store.max_stages_per_product
    if count >= cap:
        return RejectionReason(
            code=ErrorCode.MAX_STAGES_EXCEEDED,
            message=f"Product {request.product_id} already has {count} of {cap} stages.",
            policy_name="stage_capacity_policy",
        )
    return None


def stage_name_policy(request, store) -> Optional[RejectionReason]:
    limit = store.defaults.max_stage_name_length
    if not _text_within(request.stage_name, limit, allow_empty=False):
        return RejectionReason(
            code=ErrorCode.INVALID_STAGE,
            message=f"Stage name must be 1-{limit} characters.",
            policy_name="stage_name_policy",
        )
    return None


def stage_location_policy(request, store) -> Optional[RejectionReason]:
    limit = store.defaults.max_location_length
    if not _text_within(request.location, limit, allow_empty=False):
        return RejectionReason(
            code=ErrorCode.INVALID_LOCATION,
            message=f"Location must be 1-{limit} characters.",
            policy_name="stage_location_policy",
        )
    return None


def stage_metadata_policy(request, store) -> Optional[RejectionReason]:
    limit = store.defaults.max_metadata_length
    if not _text_within(request.metadata, limit):
        return RejectionReason(
            code=ErrorCode.INVALID_METADATA,
            message=f"Metadata must be at most {limit} characters.",
            policy_name="stage_metadata_policy",
        )
    return None


# ── Audit recording ───────────────────────────────────────────

def caller_not_owner_policy(request, store) -> Optional[RejectionReason]:
    """Owners cannot audit their own products."""
    product = store.get_product(request.product_id)
    if product.owner == request.caller:
        return RejectionReason(
            code=ErrorCode.NOT_AUTHORIZED,
            message=f"Owner '{request.caller}' cannot audit own product.",
            policy_name="caller_not_owner_policy",
        )
    return None


def findings_length_policy(request, store) -> Optional[RejectionReason]:
    limit = store.defaults.max_metadata_length
    if not _text_within(request.findings, limit):
        return RejectionReason(
            code=ErrorCode.INVALID_METADATA,
            message=f"Findings must be at most {limit} characters.",
            policy_name="findings_length_policy",
        )
    return None


# ── Ownership transfer ────────────────────────────────────────

def new_owner_not_null_policy(request, store) -> Optional[RejectionReason]:
    if is_null_principal(request.new_owner):
        return RejectionReason(
            code=ErrorCode.INVALID_OWNER,
            message="The null principal cannot own a product.",
            policy_name="new_owner_not_null_policy",
        )
    return None


def transfer_allowed_policy(request, store) -> Optional[RejectionReason]:
    if store.get_product(request.product_id).finalized:
        return RejectionReason(
            code=ErrorCode.TRANSFER_NOT_ALLOWED,
            message=f"Product {request.product_id} is finalized; ownership is frozen.",
            policy_name="transfer_allowed_policy",
        )
    return None


# ══════════════════════════════════════════════════════════════
# OPERATION CHAINS (evaluation order)
# ══════════════════════════════════════════════════════════════

SET_AUTHORITY_POLICIES = (
    authority_not_null_policy,
    authority_not_set_policy,
)

SET_MAX_STAGES_POLICIES = (
    max_stages_positive_policy,
    authority_configured_policy,
)

SET_AUDIT_FEE_POLICIES = (
    audit_fee_non_negative_policy,
    authority_configured_policy,
)

INITIALIZE_PRODUCT_POLICIES = (
    product_id_positive_policy,
    content_hash_length_policy,
    description_length_policy,
    quantity_positive_policy,
    certification_length_policy,
    product_not_registered_policy,
    caller_not_null_policy,
)

ADD_STAGE_POLICIES = (
    product_exists_policy,
    caller_is_owner_policy,
    product_not_finalized_policy,
    stage_capacity_policy,
    stage_name_policy,
    stage_location_policy,
    stage_metadata_policy,
)

PERFORM_AUDIT_POLICIES = (
    product_exists_policy,
    caller_not_owner_policy,
    authority_configured_policy,
    findings_length_policy,
)

FINALIZE_PRODUCT_POLICIES = (
    product_exists_policy,
    caller_is_owner_policy,
    product_not_finalized_policy,
)

TRANSFER_OWNERSHIP_POLICIES = (
    product_exists_policy,
    caller_is_owner_policy,
    new_owner_not_null_policy,
    transfer_allowed_policy,
)
