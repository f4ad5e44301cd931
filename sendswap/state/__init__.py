"""
State management for SendSwap pools
"""

from .ledger import AssetLedger, Mint, TokenAccount, TokenLedger
from .pools import Pool, PoolRegistry

__all__ = [
    "AssetLedger",
    "Mint",
    "TokenAccount",
    "TokenLedger",
    "Pool",
    "PoolRegistry",
]
