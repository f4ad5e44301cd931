# [TESTER] v1

from __future__ import annotations

import pytest

from sendswap.errors import InvalidAmount, PoolAlreadyExists, PoolNotFound
from sendswap.state.pools import Pool, PoolRegistry


def _pool(address: str = "pool-1", **overrides) -> Pool:
    fields = dict(
        address=address,
        asset_a_id="A",
        asset_b_id="B",
        reserve_a_account_id="pool-a",
        reserve_b_account_id="pool-b",
        share_token_id="LP",
        fee_numerator=3,
        fee_denominator=1000,
        authority_id="deployer",
        bump=255,
    )
    fields.update(overrides)
    return Pool(**fields)


def test_pool_record_validation() -> None:
    pool = _pool()
    assert pool.fee == 0.003
    assert pool.reserve_account("A") == "pool-a"
    assert pool.reserve_account("B") == "pool-b"
    assert pool.has_asset("B") and not pool.has_asset("C")
    with pytest.raises(InvalidAmount):
        pool.reserve_account("C")

    with pytest.raises(InvalidAmount):
        _pool(asset_b_id="A")
    with pytest.raises(InvalidAmount):
        _pool(reserve_b_account_id="pool-a")
    with pytest.raises(InvalidAmount):
        _pool(fee_denominator=0)
    with pytest.raises(InvalidAmount):
        _pool(fee_numerator=1001)
    with pytest.raises(ValueError):
        _pool(bump=256)


def test_full_and_zero_fee_are_valid() -> None:
    assert _pool(fee_numerator=0).fee == 0.0
    assert _pool(fee_numerator=1000).fee == 1.0


def test_registry_creates_once_and_iterates_sorted() -> None:
    registry = PoolRegistry()
    registry.create(_pool("pool-2"))
    registry.create(_pool("pool-1"))
    with pytest.raises(PoolAlreadyExists):
        registry.create(_pool("pool-1", fee_numerator=5))

    assert len(registry) == 2
    assert "pool-1" in registry
    assert [p.address for p in registry] == ["pool-1", "pool-2"]
    assert registry.get("pool-1").fee_numerator == 3
    with pytest.raises(PoolNotFound):
        registry.get("pool-3")
