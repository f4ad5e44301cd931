"""Data types shared by the engine and the authorization shell.

All types are frozen dataclasses. Amounts are raw u64 integer units in each
asset's native decimal scale.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class PoolSigner:
    """Capability to sign for a pool's custody address.

    Issued by the authorization layer after it re-derives `pool_address` from
    the pool's seeds and `bump`. The engine only checks that the capability
    matches the pool it acts on.
    """

    pool_address: str
    bump: int


@dataclass(frozen=True)
class AddLiquidityResult:
    amount_a: int
    amount_b: int
    lp_tokens_minted: int
    lp_for_a: int
    lp_for_b: int
    bootstrap: bool
    reserve_a_after: int
    reserve_b_after: int


@dataclass(frozen=True)
class SwapResult:
    asset_in_id: str
    asset_out_id: str
    amount_in: int
    amount_out: int
    fee: int
    fee_routed: bool            # True when the fee was paid to a recipient account
    scaled: bool                # True when the overflow-scaled path priced the swap
    reserve_in_after: int
    reserve_out_after: int


@dataclass(frozen=True)
class RemoveLiquidityResult:
    amount_a: int
    amount_b: int
    lp_amount: int
    reserve_a_after: int
    reserve_b_after: int
