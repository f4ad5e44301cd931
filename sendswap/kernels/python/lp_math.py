"""
Liquidity math kernel: share issuance, redemption and decimal normalization.

All functions are pure and integer-only. Rounding is always floor, so every
rounding remainder stays in the pool.

Issuance rules:
- naive: bootstrap when reserve_a == 0; otherwise
  min(amount_a * supply / reserve_a, amount_b * supply / reserve_b)
- decimal-normalized: bootstrap when both reserves are zero; otherwise the same
  minimum, computed on amounts rescaled to the share token's decimals, with a
  zero normalized reserve contributing 0 for its side.
"""

from __future__ import annotations

from dataclasses import dataclass

from ...errors import ArithmeticOverflow, InvalidAmount
from .u64 import (
    MAX_U64_POW10,
    checked_div,
    checked_mul,
    checked_pow10,
    legacy_unwrap,
    mul_would_overflow,
    require_u64,
    require_u8,
)


BOOTSTRAP_LP_AMOUNT = 1_000_000  # 1.0 share token at 6 decimals


@dataclass(frozen=True)
class IssuanceResult:
    mint_amount: int
    lp_for_a: int
    lp_for_b: int
    bootstrap: bool


@dataclass(frozen=True)
class RedemptionResult:
    amount_a: int
    amount_b: int


def normalize_amount(amount: int, *, from_decimals: int, to_decimals: int) -> int:
    """
    Rescale a raw amount between decimal scales.

    Scaling down floors (never amplifies); scaling up multiplies and raises
    ArithmeticOverflow past u64.
    """
    require_u64("amount", amount)
    require_u8("from_decimals", from_decimals)
    require_u8("to_decimals", to_decimals)

    if from_decimals == to_decimals:
        return amount
    if from_decimals > to_decimals:
        diff = from_decimals - to_decimals
        # 10^20 already exceeds any u64 amount.
        if diff > MAX_U64_POW10:
            return 0
        return amount // checked_pow10(diff)
    diff = to_decimals - from_decimals
    if amount == 0:
        return 0
    return checked_mul(amount, checked_pow10(diff))


def issue_naive(
    *,
    amount_a: int,
    amount_b: int,
    reserve_a: int,
    reserve_b: int,
    supply: int,
    bootstrap_amount: int = BOOTSTRAP_LP_AMOUNT,
) -> IssuanceResult:
    """
    Naive share issuance.

    A zero reserve B with a non-zero reserve A divides by zero and is reported
    as ArithmeticOverflow.
    """
    for name, v in (
        ("amount_a", amount_a),
        ("amount_b", amount_b),
        ("reserve_a", reserve_a),
        ("reserve_b", reserve_b),
        ("supply", supply),
        ("bootstrap_amount", bootstrap_amount),
    ):
        require_u64(name, v)

    if reserve_a == 0:
        return IssuanceResult(
            mint_amount=bootstrap_amount,
            lp_for_a=bootstrap_amount,
            lp_for_b=bootstrap_amount,
            bootstrap=True,
        )

    lp_for_a = checked_div(checked_mul(amount_a, supply), reserve_a)
    lp_for_b = checked_div(checked_mul(amount_b, supply), reserve_b)
    return IssuanceResult(
        mint_amount=min(lp_for_a, lp_for_b),
        lp_for_a=lp_for_a,
        lp_for_b=lp_for_b,
        bootstrap=False,
    )


def _side_issuance(amount: int, reserve: int, supply: int) -> int:
    if reserve == 0:
        return 0
    if mul_would_overflow(amount, supply):
        raise ArithmeticOverflow(f"issuance overflow: {amount} * {supply}")
    return (amount * supply) // reserve


def issue_normalized(
    *,
    amount_a: int,
    amount_b: int,
    reserve_a: int,
    reserve_b: int,
    supply: int,
    decimals_a: int,
    decimals_b: int,
    share_decimals: int,
    bootstrap_amount: int = BOOTSTRAP_LP_AMOUNT,
) -> IssuanceResult:
    """Decimal-normalized share issuance with pre-multiplication overflow checks."""
    require_u64("supply", supply)
    require_u64("bootstrap_amount", bootstrap_amount)
    for name, v in (
        ("amount_a", amount_a),
        ("amount_b", amount_b),
        ("reserve_a", reserve_a),
        ("reserve_b", reserve_b),
    ):
        require_u64(name, v)

    if reserve_a == 0 and reserve_b == 0:
        return IssuanceResult(
            mint_amount=bootstrap_amount,
            lp_for_a=bootstrap_amount,
            lp_for_b=bootstrap_amount,
            bootstrap=True,
        )

    norm_amount_a = normalize_amount(amount_a, from_decimals=decimals_a, to_decimals=share_decimals)
    norm_amount_b = normalize_amount(amount_b, from_decimals=decimals_b, to_decimals=share_decimals)
    norm_reserve_a = normalize_amount(reserve_a, from_decimals=decimals_a, to_decimals=share_decimals)
    norm_reserve_b = normalize_amount(reserve_b, from_decimals=decimals_b, to_decimals=share_decimals)

    lp_for_a = _side_issuance(norm_amount_a, norm_reserve_a, supply)
    lp_for_b = _side_issuance(norm_amount_b, norm_reserve_b, supply)
    return IssuanceResult(
        mint_amount=min(lp_for_a, lp_for_b),
        lp_for_a=lp_for_a,
        lp_for_b=lp_for_b,
        bootstrap=False,
    )


def redeem(
    *,
    lp_amount: int,
    reserve_a: int,
    reserve_b: int,
    supply: int,
    panic_on_overflow: bool = False,
) -> RedemptionResult:
    """
    Proportional redemption:
        amount_x = floor(lp_amount * reserve_x / supply)

    Raises InvalidAmount for a zero burn, an empty supply or a burn larger than
    the supply; ArithmeticOverflow when `lp_amount > MAX / reserve_x`.
    """
    for name, v in (
        ("lp_amount", lp_amount),
        ("reserve_a", reserve_a),
        ("reserve_b", reserve_b),
        ("supply", supply),
    ):
        require_u64(name, v)
    if lp_amount == 0:
        raise InvalidAmount("lp_amount must be positive")
    if supply == 0:
        raise InvalidAmount("share supply is zero")
    if lp_amount > supply:
        raise InvalidAmount(f"cannot burn more shares than supply: {lp_amount} > {supply}")

    with legacy_unwrap(panic_on_overflow):
        if mul_would_overflow(lp_amount, reserve_a):
            raise ArithmeticOverflow(f"redemption overflow: {lp_amount} * {reserve_a}")
        if mul_would_overflow(lp_amount, reserve_b):
            raise ArithmeticOverflow(f"redemption overflow: {lp_amount} * {reserve_b}")

    return RedemptionResult(
        amount_a=(lp_amount * reserve_a) // supply,
        amount_b=(lp_amount * reserve_b) // supply,
    )
