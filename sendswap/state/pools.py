"""
Pool record and registry.

The pool record is immutable and holds identifiers and the fee rate only.
Reserve balances and share supply are always read live from the asset ledger.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterator

from ..errors import InvalidAmount, PoolAlreadyExists, PoolNotFound
from ..kernels.python.u64 import require_u64, require_u8


# Type aliases
AssetId = str
PoolAddress = str


@dataclass(frozen=True)
class Pool:
    """
    State of a constant-product pool.

    Attributes:
        address: Deterministic custody address of the pool
        asset_a_id: Mint of the first tradable asset
        asset_b_id: Mint of the second tradable asset
        reserve_a_account_id: Pool-owned token account holding asset A
        reserve_b_account_id: Pool-owned token account holding asset B
        share_token_id: Mint of the pool-share (LP) token
        fee_numerator: Fee rate numerator
        fee_denominator: Fee rate denominator (positive)
        authority_id: Account that created the pool
        bump: Derivation nonce of `address`
    """
    address: PoolAddress
    asset_a_id: AssetId
    asset_b_id: AssetId
    reserve_a_account_id: str
    reserve_b_account_id: str
    share_token_id: str
    fee_numerator: int
    fee_denominator: int
    authority_id: str
    bump: int

    def __post_init__(self) -> None:
        if self.asset_a_id == self.asset_b_id:
            raise InvalidAmount(f"pool assets must differ: {self.asset_a_id}")
        if self.reserve_a_account_id == self.reserve_b_account_id:
            raise InvalidAmount("pool reserve accounts must differ")
        require_u64("fee_numerator", self.fee_numerator)
        require_u64("fee_denominator", self.fee_denominator)
        if self.fee_denominator == 0:
            raise InvalidAmount("fee_denominator must be positive")
        if self.fee_numerator > self.fee_denominator:
            raise InvalidAmount(
                f"fee_numerator exceeds fee_denominator: {self.fee_numerator} > {self.fee_denominator}"
            )
        require_u8("bump", self.bump)

    @property
    def fee(self) -> float:
        """Human-readable fee ratio. Display only; never used in arithmetic."""
        return self.fee_numerator / self.fee_denominator

    def has_asset(self, asset: AssetId) -> bool:
        return asset == self.asset_a_id or asset == self.asset_b_id

    def reserve_account(self, asset: AssetId) -> str:
        if asset == self.asset_a_id:
            return self.reserve_a_account_id
        elif asset == self.asset_b_id:
            return self.reserve_b_account_id
        else:
            raise InvalidAmount(f"asset {asset} not in pool {self.address}")

    def __repr__(self) -> str:
        return (
            f"Pool(address={self.address[:18]}..., "
            f"assets=({self.asset_a_id}, {self.asset_b_id}), "
            f"fee={self.fee_numerator}/{self.fee_denominator})"
        )


class PoolRegistry:
    """Pools keyed by address. A pool is created once and never deleted."""

    def __init__(self) -> None:
        self._pools: Dict[PoolAddress, Pool] = {}

    def create(self, pool: Pool) -> None:
        if pool.address in self._pools:
            raise PoolAlreadyExists(f"pool already exists at {pool.address}")
        self._pools[pool.address] = pool

    def get(self, address: PoolAddress) -> Pool:
        pool = self._pools.get(address)
        if pool is None:
            raise PoolNotFound(f"no pool at {address}")
        return pool

    def __contains__(self, address: object) -> bool:
        return address in self._pools

    def __iter__(self) -> Iterator[Pool]:
        for address in sorted(self._pools):
            yield self._pools[address]

    def __len__(self) -> int:
        return len(self._pools)
