"""
Provenance Core Config — Public API
=====================================
Ledger defaults and field limits.
"""

from core.config.defaults import DEFAULT_LEDGER_DEFAULTS, LedgerDefaults

__all__ = [
    "LedgerDefaults",
    "DEFAULT_LEDGER_DEFAULTS",
]
