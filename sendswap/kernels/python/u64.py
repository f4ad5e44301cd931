"""
Checked unsigned 64-bit arithmetic.

Python ints never wrap, so the u64 domain of the on-chain program is enforced
explicitly here: every helper either returns a value in [0, U64_MAX] or raises
`ArithmeticOverflow`. Division by zero is reported the same way, matching the
`checked_div` semantics the pricing rules were written against.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator

from ...errors import ArithmeticOverflow, ArithmeticPanic, InvalidAmount


U64_MAX = (1 << 64) - 1
U8_MAX = 255
MAX_U64_POW10 = 19  # largest e with 10^e <= U64_MAX


def require_u64(name: str, value: int) -> int:
    if not isinstance(value, int) or isinstance(value, bool):
        raise TypeError(f"{name} must be an int")
    if value < 0 or value > U64_MAX:
        raise InvalidAmount(f"{name} must be a u64: {value}")
    return value


def require_u8(name: str, value: int) -> int:
    if not isinstance(value, int) or isinstance(value, bool):
        raise TypeError(f"{name} must be an int")
    if not (0 <= value <= U8_MAX):
        raise ValueError(f"{name} must be in [0, {U8_MAX}]: {value}")
    return value


def checked_add(a: int, b: int) -> int:
    out = a + b
    if out > U64_MAX:
        raise ArithmeticOverflow(f"u64 add overflow: {a} + {b}")
    return out


def checked_sub(a: int, b: int) -> int:
    if b > a:
        raise ArithmeticOverflow(f"u64 sub underflow: {a} - {b}")
    return a - b


def checked_mul(a: int, b: int) -> int:
    out = a * b
    if out > U64_MAX:
        raise ArithmeticOverflow(f"u64 mul overflow: {a} * {b}")
    return out


def checked_div(a: int, b: int) -> int:
    if b == 0:
        raise ArithmeticOverflow(f"u64 division by zero: {a} / 0")
    return a // b


def checked_pow10(exponent: int) -> int:
    if exponent < 0:
        raise ValueError("exponent must be non-negative")
    out = 10**exponent
    if out > U64_MAX:
        raise ArithmeticOverflow(f"10^{exponent} exceeds u64")
    return out


def mul_would_overflow(a: int, b: int) -> bool:
    """True iff `a * b` leaves the u64 range, tested without multiplying (`a > MAX / b`)."""
    if b == 0:
        return False
    return a > U64_MAX // b


def mul_div_floor(a: int, b: int, denominator: int) -> int:
    """`floor(a * b / denominator)` with the product checked before dividing."""
    return checked_div(checked_mul(a, b), denominator)


@contextmanager
def legacy_unwrap(panic: bool) -> Iterator[None]:
    """
    Re-raise overflow as `ArithmeticPanic` when emulating `.unwrap()` on checked math.

    With `panic=False` the block is transparent and `ArithmeticOverflow` propagates.
    """
    if not panic:
        yield
        return
    try:
        yield
    except ArithmeticOverflow as exc:
        raise ArithmeticPanic(f"called unwrap on a failed checked operation: {exc}") from exc
