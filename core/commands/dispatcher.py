"""
Provenance Command Layer — Policy Chain
=========================================
Request → Evaluate Policies (in order) → first rejection or None.

A PolicyChain is the DECISION MAKER for one operation.
It decides whether a request may be applied.

The PolicyChain DOES NOT:
- Mutate state
- Call the ledger environment
- Append to the journal

Policies are callables returning Optional[RejectionReason].
Evaluation order is registration order. First rejection wins,
remaining policies are skipped.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Iterable, List, Optional

from core.commands.rejection import RejectionReason

logger = logging.getLogger("provenance.commands")


# A policy is a callable:
#   (request, state) → Optional[RejectionReason]
#   Returns None if policy passes, RejectionReason if it rejects.
PolicyEvaluator = Callable[[Any, Any], Optional[RejectionReason]]


class PolicyChain:
    """
    Ordered set of policies guarding one operation.

    Usage:
        chain = PolicyChain("add_stage", (product_exists_policy, ...))
        rejection = chain.evaluate(request, store)
        if rejection is not None:
            return LedgerResult.rejected(rejection)
    """

    def __init__(
        self,
        operation: str,
        policies: Iterable[PolicyEvaluator] = (),
    ):
        if not operation or not isinstance(operation, str):
            raise ValueError("operation must be a non-empty string.")
        self._operation = operation
        self._policies: List[PolicyEvaluator] = []
        for policy in policies:
            self.register_policy(policy)

    @property
    def operation(self) -> str:
        return self._operation

    @property
    def policy_names(self) -> tuple:
        return tuple(
            getattr(p, "__qualname__", str(p)) for p in self._policies
        )

    def register_policy(self, policy: PolicyEvaluator) -> None:
        """Append a policy. Policies run in registration order."""
        if not callable(policy):
            raise TypeError(
                f"Policy must be callable, got {type(policy).__name__}."
            )
        self._policies.append(policy)

        policy_name = getattr(policy, "__qualname__", str(policy))
        logger.debug(f"Policy registered for '{self._operation}': {policy_name}")

    def evaluate(self, request: Any, state: Any) -> Optional[RejectionReason]:
        for policy in self._policies:
            rejection = policy(request, state)
            if rejection is None:
                continue

            if not isinstance(rejection, RejectionReason):
                raise TypeError(
                    f"Policy must return RejectionReason or None, "
                    f"got {type(rejection).__name__}."
                )

            logger.info(
                f"{self._operation} rejected by policy "
                f"'{rejection.policy_name}': "
                f"[{rejection.code.name}] {rejection.message}"
            )
            return rejection

        return None
