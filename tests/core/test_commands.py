"""
Provenance Command Layer — Tests
==================================
Rejection reasons, ledger results and policy chains.
"""

from __future__ import annotations

from dataclasses import dataclass

import pytest

from core.commands import (
    ErrorCode,
    LedgerResult,
    PolicyChain,
    RejectionReason,
    ResultStatus,
)


def make_reason(code=ErrorCode.NOT_AUTHORIZED, policy_name="test_policy"):
    return RejectionReason(code=code, message="Denied.", policy_name=policy_name)


@dataclass(frozen=True)
class StubRequest:
    amount: int


# ══════════════════════════════════════════════════════════════
# ERROR CODES
# ══════════════════════════════════════════════════════════════

class TestErrorCode:
    def test_numeric_values_are_stable(self):
        assert ErrorCode.NOT_AUTHORIZED == 100
        assert ErrorCode.INVALID_PRODUCT_ID == 101
        assert ErrorCode.INVALID_STAGE == 102
        assert ErrorCode.INVALID_LOCATION == 104
        assert ErrorCode.PRODUCT_NOT_FOUND == 106
        assert ErrorCode.INVALID_HASH == 109
        assert ErrorCode.MAX_STAGES_EXCEEDED == 110
        assert ErrorCode.INVALID_DESCRIPTION == 111
        assert ErrorCode.INVALID_QUANTITY == 112
        assert ErrorCode.INVALID_CERTIFICATION == 113
        assert ErrorCode.PRODUCT_ALREADY_FINALIZED == 115
        assert ErrorCode.INVALID_METADATA == 118
        assert ErrorCode.INVALID_OWNER == 119
        assert ErrorCode.TRANSFER_NOT_ALLOWED == 120
        assert ErrorCode.PRODUCT_ALREADY_EXISTS == 121

    def test_codes_are_unique(self):
        values = [int(c) for c in ErrorCode]
        assert len(values) == len(set(values))


# ══════════════════════════════════════════════════════════════
# REJECTION REASON
# ══════════════════════════════════════════════════════════════

class TestRejectionReason:
    def test_to_dict(self):
        reason = make_reason(ErrorCode.INVALID_HASH, "content_hash_length_policy")
        assert reason.to_dict() == {
            "code": 109,
            "name": "INVALID_HASH",
            "message": "Denied.",
            "policy_name": "content_hash_length_policy",
        }

    def test_rejects_plain_int_code(self):
        with pytest.raises(ValueError, match="ErrorCode"):
            RejectionReason(code=100, message="x", policy_name="p")

    def test_rejects_empty_message(self):
        with pytest.raises(ValueError, match="message"):
            RejectionReason(code=ErrorCode.NOT_AUTHORIZED, message="", policy_name="p")

    def test_rejects_empty_policy_name(self):
        with pytest.raises(ValueError, match="policy_name"):
            RejectionReason(code=ErrorCode.NOT_AUTHORIZED, message="x", policy_name="")


# ══════════════════════════════════════════════════════════════
# LEDGER RESULT
# ══════════════════════════════════════════════════════════════

class TestLedgerResult:
    def test_ok_result(self):
        result = LedgerResult.ok_with(3)
        assert result.ok
        assert result.value == 3
        assert result.reason is None
        assert result.error_code is None

    def test_rejected_result_carries_numeric_code(self):
        result = LedgerResult.rejected(make_reason(ErrorCode.PRODUCT_NOT_FOUND))
        assert not result.ok
        assert result.status == ResultStatus.ERR
        assert result.value == 106
        assert type(result.value) is int
        assert result.error_code == ErrorCode.PRODUCT_NOT_FOUND

    def test_err_without_reason_forbidden(self):
        with pytest.raises(ValueError, match="No silent rejections"):
            LedgerResult(status=ResultStatus.ERR, value=100)

    def test_ok_with_reason_forbidden(self):
        with pytest.raises(ValueError, match="must NOT include"):
            LedgerResult(status=ResultStatus.OK, value=True, reason=make_reason())

    def test_frozen(self):
        result = LedgerResult.ok_with(True)
        with pytest.raises(AttributeError):
            result.value = False


# ══════════════════════════════════════════════════════════════
# POLICY CHAIN
# ══════════════════════════════════════════════════════════════

class TestPolicyChain:
    def test_all_pass_returns_none(self):
        chain = PolicyChain("op", (lambda r, s: None, lambda r, s: None))
        assert chain.evaluate(StubRequest(1), None) is None

    def test_first_rejection_wins(self):
        calls = []

        def first(request, state):
            calls.append("first")
            return make_reason(ErrorCode.INVALID_QUANTITY, "first")

        def second(request, state):
            calls.append("second")
            return make_reason(ErrorCode.NOT_AUTHORIZED, "second")

        chain = PolicyChain("op", (first, second))
        rejection = chain.evaluate(StubRequest(1), None)
        assert rejection.policy_name == "first"
        assert calls == ["first"]

    def test_policies_receive_request_and_state(self):
        def needs_balance(request, state):
            if state["balance"] < request.amount:
                return make_reason(ErrorCode.INVALID_QUANTITY, "needs_balance")
            return None

        chain = PolicyChain("spend", (needs_balance,))
        assert chain.evaluate(StubRequest(5), {"balance": 10}) is None
        assert chain.evaluate(StubRequest(50), {"balance": 10}) is not None

    def test_register_policy_appends_in_order(self):
        def a(request, state):
            return None

        def b(request, state):
            return None

        chain = PolicyChain("op", (a,))
        chain.register_policy(b)
        names = chain.policy_names
        assert len(names) == 2
        assert names[0].endswith(".a")
        assert names[1].endswith(".b")

    def test_non_callable_policy_rejected(self):
        chain = PolicyChain("op")
        with pytest.raises(TypeError, match="callable"):
            chain.register_policy("not-a-policy")

    def test_bad_policy_return_type(self):
        chain = PolicyChain("op", (lambda r, s: "nope",))
        with pytest.raises(TypeError, match="RejectionReason or None"):
            chain.evaluate(StubRequest(1), None)

    def test_operation_name_required(self):
        with pytest.raises(ValueError):
            PolicyChain("")
