"""
Authorization shell around the pool engine.

This is an imperative-shell wrapper around the functional core:
- Checks every account handed in by a caller against its declared constraints
  (right mint, right owner, no stray delegation).
- Derives the pool address and issues the pool's signing capability.
- Delegates the accounting to `PoolEngine`.

Callers are identified by `signer`, the account id whose signature the host
already verified.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.engine import PoolEngine
from ..core.events import EventSink, InMemoryEventSink
from ..core.policy import HARDENED_POLICY, BurnAuthority, EnginePolicy, FeeRouting
from ..core.types import AddLiquidityResult, RemoveLiquidityResult, SwapResult
from ..errors import ConstraintViolation, InvalidAmount
from ..state.ledger import AssetLedger
from ..state.pools import Pool, PoolRegistry
from .authority import find_pool_address, issue_pool_signer


@dataclass(frozen=True)
class GatewayConfig:
    program_id: str = "sendswap"
    policy: EnginePolicy = HARDENED_POLICY


@dataclass(frozen=True)
class InitializePoolAccounts:
    asset_a_id: str
    asset_b_id: str
    reserve_a_account: str
    reserve_b_account: str
    share_token_id: str


@dataclass(frozen=True)
class LiquidityAccounts:
    pool: str
    user_account_a: str
    user_account_b: str
    user_share_account: str


@dataclass(frozen=True)
class SwapAccounts:
    pool: str
    asset_in_id: str
    asset_out_id: str
    user_account_in: str
    user_account_out: str
    fee_recipient_account: Optional[str] = None


class SwapGateway:
    def __init__(
        self,
        ledger: AssetLedger,
        *,
        registry: Optional[PoolRegistry] = None,
        events: Optional[EventSink] = None,
        config: GatewayConfig = GatewayConfig(),
    ) -> None:
        self.config = config
        self.ledger = ledger
        self.registry = registry if registry is not None else PoolRegistry()
        self.events = events if events is not None else InMemoryEventSink()
        self.engine = PoolEngine(ledger, self.registry, self.events, config.policy)

    # -- constraint checks -----------------------------------------------------

    def _require_token_account(self, account_id: str, *, mint_id: str, owner: str, label: str) -> None:
        acct = self.ledger.account(account_id)
        if acct.mint_id != mint_id:
            raise ConstraintViolation(f"{label} {account_id} holds {acct.mint_id}, expected {mint_id}")
        if acct.owner != owner:
            raise ConstraintViolation(f"{label} {account_id} is owned by {acct.owner}, expected {owner}")

    def _require_share_account(self, pool: Pool, account_id: str, signer: str, *, burning: bool) -> None:
        self._require_token_account(account_id, mint_id=pool.share_token_id, owner=signer, label="user share account")
        if self.ledger.mint_authority(pool.share_token_id) != pool.address:
            raise ConstraintViolation(f"share token {pool.share_token_id} mint authority must be the pool")
        delegate = self.ledger.account(account_id).delegate
        if burning and self.config.policy.burn_authority is BurnAuthority.POOL:
            if delegate != pool.address:
                raise ConstraintViolation(f"share account {account_id} must delegate burn rights to the pool")
        elif delegate is not None:
            raise ConstraintViolation(f"share account {account_id} must not have a delegate")

    def _require_user_accounts(self, pool: Pool, accounts: LiquidityAccounts, signer: str) -> None:
        self._require_token_account(
            accounts.user_account_a, mint_id=pool.asset_a_id, owner=signer, label="user account A"
        )
        self._require_token_account(
            accounts.user_account_b, mint_id=pool.asset_b_id, owner=signer, label="user account B"
        )

    # -- entry points ----------------------------------------------------------

    def initialize_pool(
        self,
        signer: str,
        accounts: InitializePoolAccounts,
        fee_numerator: int,
        fee_denominator: int,
    ) -> Pool:
        if accounts.asset_a_id == accounts.asset_b_id:
            raise InvalidAmount(f"pool assets must differ: {accounts.asset_a_id}")
        for mint_id in (accounts.asset_a_id, accounts.asset_b_id, accounts.share_token_id):
            if not self.ledger.has_mint(mint_id):
                raise ConstraintViolation(f"unknown mint: {mint_id}")

        address, bump = find_pool_address(
            accounts.asset_a_id, accounts.asset_b_id, program_id=self.config.program_id
        )
        self._require_token_account(
            accounts.reserve_a_account, mint_id=accounts.asset_a_id, owner=address, label="reserve A"
        )
        self._require_token_account(
            accounts.reserve_b_account, mint_id=accounts.asset_b_id, owner=address, label="reserve B"
        )

        return self.engine.initialize_pool(
            address=address,
            bump=bump,
            asset_a_id=accounts.asset_a_id,
            asset_b_id=accounts.asset_b_id,
            reserve_a_account_id=accounts.reserve_a_account,
            reserve_b_account_id=accounts.reserve_b_account,
            share_token_id=accounts.share_token_id,
            fee_numerator=fee_numerator,
            fee_denominator=fee_denominator,
            authority_id=signer,
        )

    def add_liquidity(
        self,
        signer: str,
        accounts: LiquidityAccounts,
        amount_a: int,
        amount_b: int,
        min_lp_tokens: int,
    ) -> AddLiquidityResult:
        pool = self.registry.get(accounts.pool)
        self._require_user_accounts(pool, accounts, signer)
        self._require_share_account(pool, accounts.user_share_account, signer, burning=False)
        return self.engine.add_liquidity(
            pool.address,
            issue_pool_signer(pool, program_id=self.config.program_id),
            user=signer,
            user_account_a=accounts.user_account_a,
            user_account_b=accounts.user_account_b,
            user_share_account=accounts.user_share_account,
            amount_a=amount_a,
            amount_b=amount_b,
            min_lp_tokens=min_lp_tokens,
        )

    def swap(
        self,
        signer: str,
        accounts: SwapAccounts,
        amount_in: int,
        min_amount_out: int,
    ) -> SwapResult:
        pool = self.registry.get(accounts.pool)
        if not pool.has_asset(accounts.asset_in_id) or not pool.has_asset(accounts.asset_out_id):
            raise InvalidAmount(f"swap assets must belong to pool {pool.address}")
        if accounts.asset_in_id == accounts.asset_out_id:
            raise InvalidAmount(f"input and output assets must differ: {accounts.asset_in_id}")
        self._require_token_account(
            accounts.user_account_in, mint_id=accounts.asset_in_id, owner=signer, label="user input account"
        )
        self._require_token_account(
            accounts.user_account_out, mint_id=accounts.asset_out_id, owner=signer, label="user output account"
        )
        if self.config.policy.fee_routing is FeeRouting.ROUTE_TO_RECIPIENT and accounts.fee_recipient_account is None:
            raise ConstraintViolation("fee routing requires a fee recipient account")

        return self.engine.swap(
            pool.address,
            issue_pool_signer(pool, program_id=self.config.program_id),
            user=signer,
            asset_in_id=accounts.asset_in_id,
            asset_out_id=accounts.asset_out_id,
            user_account_in=accounts.user_account_in,
            user_account_out=accounts.user_account_out,
            amount_in=amount_in,
            min_amount_out=min_amount_out,
            fee_recipient_account=accounts.fee_recipient_account,
        )

    def remove_liquidity(
        self,
        signer: str,
        accounts: LiquidityAccounts,
        lp_amount: int,
        min_amount_a: int,
        min_amount_b: int,
    ) -> RemoveLiquidityResult:
        pool = self.registry.get(accounts.pool)
        self._require_user_accounts(pool, accounts, signer)
        self._require_share_account(pool, accounts.user_share_account, signer, burning=True)
        return self.engine.remove_liquidity(
            pool.address,
            issue_pool_signer(pool, program_id=self.config.program_id),
            user=signer,
            user_account_a=accounts.user_account_a,
            user_account_b=accounts.user_account_b,
            user_share_account=accounts.user_share_account,
            lp_amount=lp_amount,
            min_amount_a=min_amount_a,
            min_amount_b=min_amount_b,
        )
