"""
Provenance Command Layer — Rejection Model
============================================
Closed error-code taxonomy and structured rejection reasons.

A rejection is NOT an exception. It is the explanation carried
by a failed LedgerResult.

Every rejection must be:
- Deterministic (same state + same input → same rejection)
- Machine-readable (numeric code)
- Human-readable (message)
- Traceable (policy_name)
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum


# ══════════════════════════════════════════════════════════════
# ERROR CODES (closed enumeration)
# ══════════════════════════════════════════════════════════════

class ErrorCode(IntEnum):
    """
    Numeric failure codes returned by ledger operations.

    Values are stable and part of the public contract.
    """

    NOT_AUTHORIZED = 100
    INVALID_PRODUCT_ID = 101
    INVALID_STAGE = 102
    INVALID_LOCATION = 104
    PRODUCT_NOT_FOUND = 106
    INVALID_HASH = 109
    MAX_STAGES_EXCEEDED = 110
    INVALID_DESCRIPTION = 111
    INVALID_QUANTITY = 112
    INVALID_CERTIFICATION = 113
    PRODUCT_ALREADY_FINALIZED = 115
    INVALID_METADATA = 118
    INVALID_OWNER = 119
    TRANSFER_NOT_ALLOWED = 120
    PRODUCT_ALREADY_EXISTS = 121


# ══════════════════════════════════════════════════════════════
# REJECTION REASON (frozen explanation structure)
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class RejectionReason:
    """
    Structured reason for a rejected operation.

    Fields:
        code:        ErrorCode of the failed rule.
        message:     Human-readable explanation.
        policy_name: Name of the policy that caused rejection.
    """

    code: ErrorCode
    message: str
    policy_name: str

    def __post_init__(self):
        if not isinstance(self.code, ErrorCode):
            raise ValueError(
                f"code must be ErrorCode, got {type(self.code).__name__}."
            )

        if not self.message or not isinstance(self.message, str):
            raise ValueError("message must be a non-empty string.")

        if not self.policy_name or not isinstance(self.policy_name, str):
            raise ValueError("policy_name must be a non-empty string.")

    def to_dict(self) -> dict:
        return {
            "code": int(self.code),
            "name": self.code.name,
            "message": self.message,
            "policy_name": self.policy_name,
        }
