# [TESTER] v1

from __future__ import annotations

from dataclasses import replace

import pytest

from sendswap.errors import ConstraintViolation
from sendswap.integration.authority import (
    CANONICAL_BUMP,
    derive_pool_address,
    find_pool_address,
    issue_pool_signer,
)
from sendswap.state.pools import Pool


def _pool(program_id: str = "sendswap") -> Pool:
    address, bump = find_pool_address("A", "B", program_id=program_id)
    return Pool(
        address=address,
        asset_a_id="A",
        asset_b_id="B",
        reserve_a_account_id="ra",
        reserve_b_account_id="rb",
        share_token_id="LP",
        fee_numerator=3,
        fee_denominator=1000,
        authority_id="deployer",
        bump=bump,
    )


def test_pool_address_is_deterministic_and_ordered() -> None:
    address, bump = find_pool_address("A", "B", program_id="sendswap")
    assert bump == CANONICAL_BUMP == 255
    assert address == derive_pool_address("A", "B", 255, program_id="sendswap")
    assert address.startswith("0x")
    assert len(address) == 66

    assert address != find_pool_address("B", "A", program_id="sendswap")[0]
    assert address != find_pool_address("A", "B", program_id="other")[0]
    assert address != derive_pool_address("A", "B", 254, program_id="sendswap")


def test_seed_fields_are_length_prefixed() -> None:
    # Concatenation ambiguity: ("AB", "C") must not collide with ("A", "BC").
    assert derive_pool_address("AB", "C", 255, program_id="p") != derive_pool_address("A", "BC", 255, program_id="p")


def test_derivation_rejects_bad_inputs() -> None:
    with pytest.raises(ValueError):
        derive_pool_address("A", "B", 256, program_id="sendswap")
    with pytest.raises(ValueError):
        derive_pool_address("A", "B", 255, program_id="")


def test_signer_is_issued_only_for_matching_seeds() -> None:
    pool = _pool()
    signer = issue_pool_signer(pool, program_id="sendswap")
    assert (signer.pool_address, signer.bump) == (pool.address, 255)

    with pytest.raises(ConstraintViolation):
        issue_pool_signer(pool, program_id="other")
    with pytest.raises(ConstraintViolation):
        issue_pool_signer(replace(pool, bump=254), program_id="sendswap")
