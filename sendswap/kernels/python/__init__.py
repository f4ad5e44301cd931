"""
Integer pool kernels.

- `u64`: checked unsigned 64-bit helpers and the legacy unwrap emulation.
- `cpmm_swap`: exact-in constant-product quotes (direct and overflow-scaled).
- `lp_math`: share issuance, redemption and decimal normalization.

Every function is pure and returns typed results; callers decide what moves.
"""
