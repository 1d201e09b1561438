"""
Provenance Identity — Public API
==================================
Principal identity type and the reserved null principal.
"""

from core.identity.principal import (
    NULL_PRINCIPAL,
    Principal,
    is_null_principal,
)

__all__ = [
    "NULL_PRINCIPAL",
    "Principal",
    "is_null_principal",
]
