"""
Authorization shell: pool addresses, signing capabilities and account checks
"""

from .authority import derive_pool_address, find_pool_address, issue_pool_signer
from .gateway import (
    GatewayConfig,
    InitializePoolAccounts,
    LiquidityAccounts,
    SwapAccounts,
    SwapGateway,
)

__all__ = [
    "derive_pool_address",
    "find_pool_address",
    "issue_pool_signer",
    "GatewayConfig",
    "InitializePoolAccounts",
    "LiquidityAccounts",
    "SwapAccounts",
    "SwapGateway",
]
