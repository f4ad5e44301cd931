# [TESTER] v1

from __future__ import annotations

import importlib.util

import pytest

if importlib.util.find_spec("hypothesis") is None:  # pragma: no cover
    pytest.skip("hypothesis not installed", allow_module_level=True)

import hypothesis.strategies as st
from hypothesis import given, settings

from sendswap.kernels.python.cpmm_swap import PRECISION_SCALE, amount_out_scaled, quote_swap_guarded
from sendswap.kernels.python.lp_math import normalize_amount, redeem


reserves = st.integers(min_value=1, max_value=10**10)
amounts = st.integers(min_value=1, max_value=10**9)
fee_rates = st.tuples(st.integers(min_value=0, max_value=1_000), st.just(10_000))


@settings(max_examples=300, deadline=None)
@given(reserve_in=reserves, reserve_out=reserves, amount_in=amounts, fee=fee_rates)
def test_swap_never_decreases_reserve_product(reserve_in: int, reserve_out: int, amount_in: int, fee) -> None:
    fee_num, fee_den = fee
    q = quote_swap_guarded(
        reserve_in=reserve_in,
        reserve_out=reserve_out,
        amount_in=amount_in,
        fee_numerator=fee_num,
        fee_denominator=fee_den,
    )
    assert q.fee + q.amount_in_after_fee == amount_in
    assert q.amount_out < reserve_out
    # Only the post-fee input enters the reserve; the product still cannot shrink.
    k_before = reserve_in * reserve_out
    k_after = (reserve_in + q.amount_in_after_fee) * (reserve_out - q.amount_out)
    assert k_after >= k_before


@settings(max_examples=300, deadline=None)
@given(
    reserve_in=st.integers(min_value=1, max_value=10**13),
    reserve_out=st.integers(min_value=1, max_value=10**10),
    after_fee=st.integers(min_value=0, max_value=10**9),
)
def test_scaled_output_is_a_floor_of_the_exact_output(reserve_in: int, reserve_out: int, after_fee: int) -> None:
    exact = (reserve_out * after_fee) // (reserve_in + after_fee)
    scaled = amount_out_scaled(reserve_in=reserve_in, reserve_out=reserve_out, amount_in_after_fee=after_fee)
    assert scaled <= exact
    assert exact - scaled <= reserve_out // PRECISION_SCALE + 1


@settings(max_examples=300, deadline=None)
@given(
    amount=st.integers(min_value=0, max_value=10**9),
    d1=st.integers(min_value=0, max_value=9),
    d2=st.integers(min_value=0, max_value=9),
)
def test_normalization_round_trip_never_amplifies(amount: int, d1: int, d2: int) -> None:
    there = normalize_amount(amount, from_decimals=d1, to_decimals=d2)
    back = normalize_amount(there, from_decimals=d2, to_decimals=d1)
    assert back <= amount
    if d1 <= d2:
        assert back == amount
    else:
        assert amount - back < 10 ** (d1 - d2)


@settings(max_examples=300, deadline=None)
@given(
    supply=st.integers(min_value=1, max_value=10**12),
    reserve_a=st.integers(min_value=0, max_value=10**6),
    reserve_b=st.integers(min_value=0, max_value=10**6),
    data=st.data(),
)
def test_redemption_never_exceeds_reserves(supply: int, reserve_a: int, reserve_b: int, data) -> None:
    lp_amount = data.draw(st.integers(min_value=1, max_value=supply))
    out = redeem(lp_amount=lp_amount, reserve_a=reserve_a, reserve_b=reserve_b, supply=supply)
    assert out.amount_a <= reserve_a
    assert out.amount_b <= reserve_b
    if lp_amount == supply:
        assert (out.amount_a, out.amount_b) == (reserve_a, reserve_b)
