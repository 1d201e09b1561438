"""
Provenance Command Layer — Ledger Result Contract
===================================================
Every ledger operation produces exactly one LedgerResult.

OK  → transition applied, value is the produced value
      (True acknowledgment, or a newly assigned id).
ERR → nothing applied, value is the numeric error code
      and reason explains which rule failed.

Rules:
- Result is immutable (frozen dataclass)
- ERR must contain reason (RejectionReason)
- OK must NOT contain reason
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from core.commands.rejection import ErrorCode, RejectionReason


class ResultStatus(Enum):
    """Binary decision. No partial application."""
    OK = "OK"
    ERR = "ERR"


@dataclass(frozen=True)
class LedgerResult:
    """
    Discriminated success/failure result.

    Fields:
        status: OK or ERR.
        value:  Produced value (OK) or int error code (ERR).
        reason: RejectionReason (mandatory if ERR, None if OK).
    """

    status: ResultStatus
    value: Any
    reason: Optional[RejectionReason] = None

    def __post_init__(self):
        if not isinstance(self.status, ResultStatus):
            raise ValueError(
                f"status must be ResultStatus, got {type(self.status).__name__}."
            )

        if self.status == ResultStatus.ERR and self.reason is None:
            raise ValueError(
                "ERR result must include a RejectionReason. "
                "No silent rejections allowed."
            )

        if self.status == ResultStatus.OK and self.reason is not None:
            raise ValueError("OK result must NOT include a RejectionReason.")

    @classmethod
    def ok_with(cls, value: Any) -> LedgerResult:
        return cls(status=ResultStatus.OK, value=value)

    @classmethod
    def rejected(cls, reason: RejectionReason) -> LedgerResult:
        return cls(status=ResultStatus.ERR, value=int(reason.code), reason=reason)

    @property
    def ok(self) -> bool:
        return self.status == ResultStatus.OK

    @property
    def error_code(self) -> Optional[ErrorCode]:
        """The failing ErrorCode, or None on success."""
        if self.reason is None:
            return None
        return self.reason.code
