"""
Provenance Command Layer — Public API
=======================================
Every ledger operation produces exactly one LedgerResult.
Rejections are values, never exceptions.
"""

from core.commands.dispatcher import (
    PolicyChain,
    PolicyEvaluator,
)
from core.commands.outcomes import (
    LedgerResult,
    ResultStatus,
)
from core.commands.rejection import (
    ErrorCode,
    RejectionReason,
)

__all__ = [
    # ── Outcomes ──────────────────────────────────────────────
    "LedgerResult",
    "ResultStatus",
    # ── Rejection ─────────────────────────────────────────────
    "ErrorCode",
    "RejectionReason",
    # ── Policy chain ──────────────────────────────────────────
    "PolicyChain",
    "PolicyEvaluator",
]
