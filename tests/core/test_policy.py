# [TESTER] v1

from __future__ import annotations

from pathlib import Path

import pytest

from sendswap.core.policy import (
    HARDENED_POLICY,
    NAIVE_POLICY,
    ArithmeticMode,
    BurnAuthority,
    FeeRouting,
    IssuancePolicy,
    SwapPricing,
    load_policy,
    policy_from_mapping,
)
from sendswap.errors import PolicyConfigError


def test_presets_describe_both_designs() -> None:
    assert NAIVE_POLICY.issuance is IssuancePolicy.NAIVE
    assert NAIVE_POLICY.pricing is SwapPricing.DIRECT
    assert NAIVE_POLICY.fee_routing is FeeRouting.RETAIN_IN_RESERVE
    assert NAIVE_POLICY.burn_authority is BurnAuthority.POOL

    assert HARDENED_POLICY.issuance is IssuancePolicy.DECIMAL_NORMALIZED
    assert HARDENED_POLICY.pricing is SwapPricing.OVERFLOW_SCALED
    assert HARDENED_POLICY.fee_routing is FeeRouting.ROUTE_TO_RECIPIENT
    assert HARDENED_POLICY.burn_authority is BurnAuthority.OWNER

    for policy in (NAIVE_POLICY, HARDENED_POLICY):
        assert policy.arithmetic is ArithmeticMode.CHECKED
        assert not policy.panic_on_overflow
        assert policy.bootstrap_lp_amount == 1_000_000
        assert policy.precision_scale == 1_000_000_000


def test_mapping_overrides_a_preset() -> None:
    policy = policy_from_mapping({"preset": "naive", "arithmetic": "LEGACY_PANIC"})
    assert policy.issuance is IssuancePolicy.NAIVE
    assert policy.arithmetic is ArithmeticMode.LEGACY_PANIC
    assert policy.panic_on_overflow

    policy = policy_from_mapping({"fee_routing": "retain_in_reserve", "precision_scale": 1_000_000})
    assert policy.issuance is IssuancePolicy.DECIMAL_NORMALIZED
    assert policy.fee_routing is FeeRouting.RETAIN_IN_RESERVE
    assert policy.precision_scale == 1_000_000

    assert policy_from_mapping({}) == HARDENED_POLICY


@pytest.mark.parametrize(
    "obj",
    [
        {"preset": "aggressive"},
        {"slippage": "none"},
        {"pricing": "cubic"},
        {"bootstrap_lp_amount": 0},
        {"precision_scale": "1e9"},
        ["naive"],
    ],
)
def test_invalid_policy_mappings(obj) -> None:
    with pytest.raises(PolicyConfigError):
        policy_from_mapping(obj)


def test_load_policy_from_yaml(tmp_path: Path) -> None:
    path = tmp_path / "policy.yaml"
    path.write_text(
        "preset: naive\n"
        "arithmetic: legacy_panic\n"
        "bootstrap_lp_amount: 5000\n",
        encoding="utf-8",
    )
    policy = load_policy(path)
    assert policy.issuance is IssuancePolicy.NAIVE
    assert policy.panic_on_overflow
    assert policy.bootstrap_lp_amount == 5_000

    empty = tmp_path / "empty.yaml"
    empty.write_text("", encoding="utf-8")
    assert load_policy(empty) == HARDENED_POLICY
