"""
Tests for core.identity — Principal value type.
"""

import pytest

from core.identity import NULL_PRINCIPAL, Principal, is_null_principal


class TestPrincipal:
    def test_equality_by_address(self):
        assert Principal("ST1TEST") == Principal("ST1TEST")
        assert Principal("ST1TEST") != Principal("ST2TEST")

    def test_hashable(self):
        seen = {Principal("ST1TEST"), Principal("ST1TEST")}
        assert len(seen) == 1

    def test_not_equal_to_raw_string(self):
        assert Principal("ST1TEST") != "ST1TEST"

    def test_str_is_address(self):
        assert str(Principal("ST3AUDITOR")) == "ST3AUDITOR"

    def test_rejects_empty(self):
        with pytest.raises(ValueError):
            Principal("")

    def test_rejects_padded(self):
        with pytest.raises(ValueError):
            Principal(" ST1TEST")

    def test_rejects_non_string(self):
        with pytest.raises(TypeError):
            Principal(42)

    def test_frozen(self):
        p = Principal("ST1TEST")
        with pytest.raises(AttributeError):
            p.address = "ST2TEST"


class TestNullPrincipal:
    def test_null_principal_detected(self):
        assert is_null_principal(NULL_PRINCIPAL)
        assert is_null_principal(Principal("SP000000000000000000002Q6VF78"))

    def test_regular_principal_not_null(self):
        assert not is_null_principal(Principal("ST1TEST"))
