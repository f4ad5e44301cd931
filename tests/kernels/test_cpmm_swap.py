# [TESTER] v1

from __future__ import annotations

import pytest

from sendswap.errors import ArithmeticOverflow, ArithmeticPanic, InvalidAmount
from sendswap.kernels.python.cpmm_swap import (
    PRECISION_SCALE,
    amount_out_exact,
    amount_out_scaled,
    compute_fee,
    quote_swap_direct,
    quote_swap_guarded,
)
from sendswap.kernels.python.u64 import U64_MAX


def test_reference_swap_scenario_both_pricing_rules() -> None:
    for quote_fn in (quote_swap_direct, quote_swap_guarded):
        q = quote_fn(
            reserve_in=1_000_000,
            reserve_out=1_000_000,
            amount_in=10_000,
            fee_numerator=3,
            fee_denominator=1000,
        )
        assert q.fee == 30
        assert q.amount_in_after_fee == 9_970
        assert q.amount_out == 9_871
        assert not q.scaled


def test_fee_floors() -> None:
    assert compute_fee(amount_in=333, fee_numerator=3, fee_denominator=1000) == 0
    assert compute_fee(amount_in=334, fee_numerator=3, fee_denominator=1000) == 1
    assert compute_fee(amount_in=10_000, fee_numerator=30, fee_denominator=10_000) == 30


def test_zero_amount_in_is_invalid() -> None:
    with pytest.raises(InvalidAmount):
        quote_swap_direct(reserve_in=10, reserve_out=10, amount_in=0, fee_numerator=0, fee_denominator=1)
    with pytest.raises(InvalidAmount):
        quote_swap_guarded(reserve_in=10, reserve_out=10, amount_in=0, fee_numerator=0, fee_denominator=1)


def test_guarded_pricing_rejects_empty_reserves_direct_does_not() -> None:
    with pytest.raises(InvalidAmount, match="empty reserve"):
        quote_swap_guarded(reserve_in=0, reserve_out=1_000, amount_in=10, fee_numerator=0, fee_denominator=1)
    with pytest.raises(InvalidAmount, match="empty reserve"):
        quote_swap_guarded(reserve_in=1_000, reserve_out=0, amount_in=10, fee_numerator=0, fee_denominator=1)

    q = quote_swap_direct(reserve_in=1_000, reserve_out=0, amount_in=10, fee_numerator=0, fee_denominator=1)
    assert q.amount_out == 0


def test_overflowing_product_uses_scaled_fallback() -> None:
    reserve = 10**12
    amount_in = 10**8
    assert reserve * amount_in > U64_MAX

    q = quote_swap_guarded(
        reserve_in=reserve,
        reserve_out=reserve,
        amount_in=amount_in,
        fee_numerator=0,
        fee_denominator=1,
    )
    assert q.scaled
    assert q.amount_out == 99_990_000
    assert q.amount_out <= (reserve * amount_in) // (reserve + amount_in)


def test_direct_pricing_overflows_where_guarded_scales() -> None:
    kwargs = dict(reserve_in=10**12, reserve_out=10**12, amount_in=10**8, fee_numerator=0, fee_denominator=1)
    with pytest.raises(ArithmeticOverflow):
        quote_swap_direct(**kwargs)
    with pytest.raises(ArithmeticPanic):
        quote_swap_direct(**kwargs, panic_on_overflow=True)


def test_scaled_fallback_never_exceeds_exact_floor() -> None:
    reserve_in = 3 * 10**12 + 7
    reserve_out = 10**13
    after_fee = 3 * 10**7 + 11
    exact = (reserve_out * after_fee) // (reserve_in + after_fee)
    scaled = amount_out_scaled(reserve_in=reserve_in, reserve_out=reserve_out, amount_in_after_fee=after_fee)
    assert scaled <= exact
    assert exact - scaled <= reserve_out // PRECISION_SCALE + 1


def test_scaled_fallback_can_still_overflow() -> None:
    with pytest.raises(ArithmeticOverflow):
        quote_swap_guarded(
            reserve_in=1,
            reserve_out=U64_MAX,
            amount_in=U64_MAX // 2,
            fee_numerator=0,
            fee_denominator=1,
        )


def test_full_fee_quotes_zero_output() -> None:
    q = quote_swap_guarded(reserve_in=100, reserve_out=100, amount_in=50, fee_numerator=1, fee_denominator=1)
    assert q.fee == 50
    assert q.amount_in_after_fee == 0
    assert q.amount_out == 0


def test_exact_output_divides_by_zero_on_empty_pool() -> None:
    with pytest.raises(ArithmeticOverflow):
        amount_out_exact(reserve_in=0, reserve_out=0, amount_in_after_fee=0)


def test_fee_above_one_is_invalid() -> None:
    with pytest.raises(InvalidAmount):
        quote_swap_direct(reserve_in=10, reserve_out=10, amount_in=5, fee_numerator=2, fee_denominator=1)
