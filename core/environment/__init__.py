"""
Provenance Environment — Public API
=====================================
External ledger environment: caller, logical time, value transfer.
"""

from core.environment.errors import (
    LedgerEnvironmentError,
    TransferFailedError,
)
from core.environment.ledger import (
    InMemoryEnvironment,
    LedgerEnvironment,
    TransferRecord,
)

__all__ = [
    "LedgerEnvironment",
    "InMemoryEnvironment",
    "TransferRecord",
    "LedgerEnvironmentError",
    "TransferFailedError",
]
