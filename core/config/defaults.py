"""
Provenance Core Config — Ledger Defaults
==========================================
Doctrine: no magic numbers in policy code.
Initial cap, initial fee and field limits come from a
LedgerDefaults instance handed to the state store.

Runtime configuration (authority, cap, fee) lives in the state
store afterwards and changes only through admin operations.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class LedgerDefaults:
    """
    Defaults and field limits for a provenance ledger.

    Lengths are measured in characters, hash_length in bytes.
    """

    max_stages_per_product: int = 50
    audit_fee: int = 500
    hash_length: int = 32
    max_description_length: int = 256
    max_certification_length: int = 100
    max_stage_name_length: int = 100
    max_location_length: int = 100
    max_metadata_length: int = 512

    def __post_init__(self) -> None:
        if self.max_stages_per_product <= 0:
            raise ValueError(
                f"max_stages_per_product must be positive, "
                f"got {self.max_stages_per_product}."
            )
        if self.audit_fee < 0:
            raise ValueError(f"audit_fee cannot be negative, got {self.audit_fee}.")
        for name in (
            "hash_length",
            "max_description_length",
            "max_certification_length",
            "max_stage_name_length",
            "max_location_length",
            "max_metadata_length",
        ):
            if getattr(self, name) <= 0:
                raise ValueError(f"{name} must be positive, got {getattr(self, name)}.")


DEFAULT_LEDGER_DEFAULTS = LedgerDefaults()
