import pytest

from pawsi.core.errors import UnauthorizedError
from pawsi.core.operators import OperatorPolicy


def test_policy_is_case_insensitive():
    policy = OperatorPolicy(["Mod@Pawsi.com"])
    assert policy.is_operator("mod@pawsi.com")
    assert policy.is_operator(" MOD@PAWSI.COM ")
    assert not policy.is_operator("someone@pawsi.com")
    assert not policy.is_operator(None)


def test_empty_policy_denies_everyone():
    with pytest.raises(UnauthorizedError):
        OperatorPolicy([]).ensure_operator("mod@pawsi.com")


def test_malformed_address_fails_fast():
    with pytest.raises(RuntimeError):
        OperatorPolicy(["not-an-email"])
