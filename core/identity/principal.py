"""
Provenance Identity — Principal
=================================
Opaque, comparable identity of an actor on the ledger.

Owners, verifiers and the authority are all Principals.
Equality is by address only; callers never compare raw strings.

The reserved null/burn principal can never own a product
and can never become the authority.
"""

from __future__ import annotations

from dataclasses import dataclass


# ══════════════════════════════════════════════════════════════
# PRINCIPAL
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class Principal:
    """
    Ledger identity value object.

    Fields:
        address: Account address as issued by the ledger environment.
    """

    address: str

    def __post_init__(self):
        if not isinstance(self.address, str):
            raise TypeError(
                f"address must be str, got {type(self.address).__name__}."
            )
        if not self.address or self.address != self.address.strip():
            raise ValueError(
                "address must be a non-empty string without "
                "surrounding whitespace."
            )

    def __str__(self) -> str:
        return self.address


# ══════════════════════════════════════════════════════════════
# RESERVED PRINCIPALS
# ══════════════════════════════════════════════════════════════

NULL_PRINCIPAL = Principal("SP000000000000000000002Q6VF78")


def is_null_principal(principal: Principal) -> bool:
    return principal == NULL_PRINCIPAL
