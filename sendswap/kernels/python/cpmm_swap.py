"""
Constant-product swap kernel.

Two pricing rules share the same fee and output formula:
- fee = floor(amount_in * fee_numerator / fee_denominator)
- amount_in_after_fee = amount_in - fee
- amount_out = floor(reserve_out * amount_in_after_fee / (reserve_in + amount_in_after_fee))

`quote_swap_direct` evaluates the product straight through checked u64 ops.
`quote_swap_guarded` additionally rejects empty reserves and, when the product
would leave the u64 range, switches to a scaled evaluation that divides before
multiplying. The scaled path trades a little rounding precision for overflow
safety and never returns more than the exact floor.

Where fees go is not decided here; the engine routes them per policy.
"""

from __future__ import annotations

from dataclasses import dataclass

from ...errors import InvalidAmount
from .u64 import (
    checked_add,
    checked_div,
    checked_mul,
    checked_sub,
    legacy_unwrap,
    mul_div_floor,
    mul_would_overflow,
    require_u64,
)


PRECISION_SCALE = 1_000_000_000


@dataclass(frozen=True)
class SwapQuote:
    amount_in: int
    fee: int
    amount_in_after_fee: int
    amount_out: int
    reserve_in: int
    reserve_out: int
    scaled: bool = False


def compute_fee(*, amount_in: int, fee_numerator: int, fee_denominator: int) -> int:
    """`floor(amount_in * fee_numerator / fee_denominator)` with checked u64 ops."""
    return mul_div_floor(amount_in, fee_numerator, fee_denominator)


def amount_out_exact(*, reserve_in: int, reserve_out: int, amount_in_after_fee: int) -> int:
    denominator = checked_add(reserve_in, amount_in_after_fee)
    return checked_div(checked_mul(reserve_out, amount_in_after_fee), denominator)


def amount_out_scaled(
    *,
    reserve_in: int,
    reserve_out: int,
    amount_in_after_fee: int,
    precision_scale: int = PRECISION_SCALE,
) -> int:
    """
    Divide-first evaluation of the output formula.

        ratio = floor(amount_in_after_fee * scale / (reserve_in + amount_in_after_fee))
        amount_out = floor(ratio * reserve_out / scale)
    """
    scaled_in = checked_mul(amount_in_after_fee, precision_scale)
    denominator = checked_add(reserve_in, amount_in_after_fee)
    ratio = checked_div(scaled_in, denominator)
    return checked_mul(ratio, reserve_out) // precision_scale


def _validate(amount_in: int, reserve_in: int, reserve_out: int, fee_numerator: int, fee_denominator: int) -> None:
    for name, v in (
        ("amount_in", amount_in),
        ("reserve_in", reserve_in),
        ("reserve_out", reserve_out),
        ("fee_numerator", fee_numerator),
        ("fee_denominator", fee_denominator),
    ):
        require_u64(name, v)
    if amount_in == 0:
        raise InvalidAmount("amount_in must be positive")
    if fee_denominator == 0:
        raise InvalidAmount("fee_denominator must be positive")
    if fee_numerator > fee_denominator:
        raise InvalidAmount(f"fee_numerator exceeds fee_denominator: {fee_numerator} > {fee_denominator}")


def quote_swap_direct(
    *,
    reserve_in: int,
    reserve_out: int,
    amount_in: int,
    fee_numerator: int,
    fee_denominator: int,
    panic_on_overflow: bool = False,
) -> SwapQuote:
    """
    Exact-in quote evaluated directly, trusting the product to fit in u64.

    Empty reserves are not rejected: an empty output reserve simply quotes zero,
    and an empty pool with a fully-fee'd input divides by zero (overflow).
    """
    _validate(amount_in, reserve_in, reserve_out, fee_numerator, fee_denominator)

    with legacy_unwrap(panic_on_overflow):
        fee = compute_fee(amount_in=amount_in, fee_numerator=fee_numerator, fee_denominator=fee_denominator)
        after_fee = checked_sub(amount_in, fee)
        amount_out = amount_out_exact(
            reserve_in=reserve_in,
            reserve_out=reserve_out,
            amount_in_after_fee=after_fee,
        )

    return SwapQuote(
        amount_in=amount_in,
        fee=fee,
        amount_in_after_fee=after_fee,
        amount_out=amount_out,
        reserve_in=reserve_in,
        reserve_out=reserve_out,
    )


def quote_swap_guarded(
    *,
    reserve_in: int,
    reserve_out: int,
    amount_in: int,
    fee_numerator: int,
    fee_denominator: int,
    precision_scale: int = PRECISION_SCALE,
) -> SwapQuote:
    """
    Exact-in quote with empty-reserve rejection and the scaled overflow fallback.

    Raises InvalidAmount for a zero input or an empty reserve, ArithmeticOverflow
    when even the scaled evaluation cannot stay inside u64.
    """
    _validate(amount_in, reserve_in, reserve_out, fee_numerator, fee_denominator)
    if not isinstance(precision_scale, int) or isinstance(precision_scale, bool) or precision_scale <= 0:
        raise ValueError("precision_scale must be a positive int")

    fee = compute_fee(amount_in=amount_in, fee_numerator=fee_numerator, fee_denominator=fee_denominator)
    after_fee = checked_sub(amount_in, fee)

    if reserve_in == 0 or reserve_out == 0:
        raise InvalidAmount(f"cannot swap against an empty reserve: ({reserve_in}, {reserve_out})")

    scaled = mul_would_overflow(reserve_out, after_fee)
    if scaled:
        amount_out = amount_out_scaled(
            reserve_in=reserve_in,
            reserve_out=reserve_out,
            amount_in_after_fee=after_fee,
            precision_scale=precision_scale,
        )
    else:
        amount_out = amount_out_exact(
            reserve_in=reserve_in,
            reserve_out=reserve_out,
            amount_in_after_fee=after_fee,
        )

    return SwapQuote(
        amount_in=amount_in,
        fee=fee,
        amount_in_after_fee=after_fee,
        amount_out=amount_out,
        reserve_in=reserve_in,
        reserve_out=reserve_out,
        scaled=scaled,
    )
