"""
Pool custody addresses and signing capabilities.

A pool's custody address is derived from its ordered asset pair, a one-byte
bump and the program id:

    address = H(domain || program_id || "pool" || asset_a || asset_b || bump)

The authorization layer is the only place that derives addresses. It hands the
engine a `PoolSigner` capability after checking that the stored pool record
re-derives to its own address.
"""

from __future__ import annotations

from typing import Tuple

from ..core.types import PoolSigner
from ..errors import ConstraintViolation
from ..kernels.python.u64 import require_u8
from ..state.canonical import domain_sep_bytes, encode_bytes, encode_str, sha256_hex
from ..state.pools import Pool


POOL_SEED = b"pool"
CANONICAL_BUMP = 255


def derive_pool_address(asset_a_id: str, asset_b_id: str, bump: int, *, program_id: str) -> str:
    require_u8("bump", bump)
    if not isinstance(program_id, str) or not program_id:
        raise ValueError("program_id must be a non-empty string")
    data = (
        domain_sep_bytes("PoolAddress")
        + encode_str(program_id)
        + encode_bytes(POOL_SEED)
        + encode_str(asset_a_id)
        + encode_str(asset_b_id)
        + bytes([bump])
    )
    return sha256_hex(data)


def find_pool_address(asset_a_id: str, asset_b_id: str, *, program_id: str) -> Tuple[str, int]:
    """
    Return `(address, bump)` for a new pool.

    Hash-derived addresses carry no curve restriction, so the canonical bump
    (255) is always usable. The pair is ordered: (A, B) and (B, A) are distinct pools.
    """
    return derive_pool_address(asset_a_id, asset_b_id, CANONICAL_BUMP, program_id=program_id), CANONICAL_BUMP


def issue_pool_signer(pool: Pool, *, program_id: str) -> PoolSigner:
    """Re-derive the pool's address from its seeds and grant a signing capability."""
    expected = derive_pool_address(pool.asset_a_id, pool.asset_b_id, pool.bump, program_id=program_id)
    if expected != pool.address:
        raise ConstraintViolation(f"pool address {pool.address} does not match its seeds")
    return PoolSigner(pool_address=pool.address, bump=pool.bump)
