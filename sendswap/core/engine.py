"""Pool accounting engine.

``PoolEngine`` owns the four state transitions of a constant-product pool:

1. ``initialize_pool``: register an immutable pool record.
2. ``add_liquidity``: issue share tokens for a two-sided deposit.
3. ``swap``: price an exact-in trade and route its fee.
4. ``remove_liquidity``: redeem share tokens for a proportional slice of reserves.

Every operation follows the same shape: read one snapshot of balances, compute
with the integer kernels, check slippage floors, and only then move assets
and emit one event inside ``ledger.atomic()``. Nothing is moved before every
check has passed, and a ledger or event-sink failure mid-block rolls back the
whole block.

Which issuance, pricing, fee-routing and burn rules apply is decided by the
``EnginePolicy`` the engine was built with.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator, Optional

from ..errors import AmmError, ConstraintViolation, InvalidAmount, PoolAlreadyExists, SlippageExceeded
from ..kernels.python.cpmm_swap import SwapQuote, quote_swap_direct, quote_swap_guarded
from ..kernels.python.lp_math import IssuanceResult, issue_naive, issue_normalized, redeem
from ..kernels.python.u64 import require_u64
from ..state.ledger import AssetLedger
from ..state.pools import Pool, PoolRegistry
from .events import EventSink, LiquidityAdded, LiquidityRemoved, PoolCreated, SwapExecuted
from .policy import (
    HARDENED_POLICY,
    BurnAuthority,
    EnginePolicy,
    FeeRouting,
    IssuancePolicy,
    SwapPricing,
)
from .types import AddLiquidityResult, PoolSigner, RemoveLiquidityResult, SwapResult

logger = logging.getLogger(__name__)


class PoolEngine:
    def __init__(
        self,
        ledger: AssetLedger,
        registry: PoolRegistry,
        events: EventSink,
        policy: EnginePolicy = HARDENED_POLICY,
    ) -> None:
        self.ledger = ledger
        self.registry = registry
        self.events = events
        self.policy = policy

    # -- helpers ---------------------------------------------------------------

    @contextmanager
    def _operation(self, name: str, pool_address: str) -> Iterator[None]:
        try:
            yield
        except AmmError as exc:
            logger.info("%s rejected on %s: %s: %s", name, pool_address, exc.code, exc)
            raise

    def _pool_for(self, pool_address: str, signer: PoolSigner) -> Pool:
        pool = self.registry.get(pool_address)
        if signer.pool_address != pool.address or signer.bump != pool.bump:
            raise ConstraintViolation(f"signer capability does not match pool {pool.address}")
        return pool

    def _reserves(self, pool: Pool) -> tuple[int, int]:
        return (
            self.ledger.balance(pool.reserve_a_account_id),
            self.ledger.balance(pool.reserve_b_account_id),
        )

    # -- initialize_pool -------------------------------------------------------

    def initialize_pool(
        self,
        *,
        address: str,
        bump: int,
        asset_a_id: str,
        asset_b_id: str,
        reserve_a_account_id: str,
        reserve_b_account_id: str,
        share_token_id: str,
        fee_numerator: int,
        fee_denominator: int,
        authority_id: str,
    ) -> Pool:
        """Create the pool record. Reserves may be empty at creation."""
        with self._operation("initialize_pool", address):
            pool = Pool(
                address=address,
                asset_a_id=asset_a_id,
                asset_b_id=asset_b_id,
                reserve_a_account_id=reserve_a_account_id,
                reserve_b_account_id=reserve_b_account_id,
                share_token_id=share_token_id,
                fee_numerator=fee_numerator,
                fee_denominator=fee_denominator,
                authority_id=authority_id,
                bump=bump,
            )
            if pool.address in self.registry:
                raise PoolAlreadyExists(f"pool already exists at {pool.address}")
            # Registered only once the event is out; a failing sink leaves no pool behind.
            self.events.emit(
                PoolCreated(pool=pool.address, asset_a_id=pool.asset_a_id, asset_b_id=pool.asset_b_id, fee=pool.fee)
            )
            self.registry.create(pool)

        logger.debug("pool created %r", pool)
        return pool

    # -- add_liquidity ---------------------------------------------------------

    def _issue(self, pool: Pool, amount_a: int, amount_b: int, reserve_a: int, reserve_b: int) -> IssuanceResult:
        supply = self.ledger.supply(pool.share_token_id)
        if self.policy.issuance is IssuancePolicy.NAIVE:
            return issue_naive(
                amount_a=amount_a,
                amount_b=amount_b,
                reserve_a=reserve_a,
                reserve_b=reserve_b,
                supply=supply,
                bootstrap_amount=self.policy.bootstrap_lp_amount,
            )
        return issue_normalized(
            amount_a=amount_a,
            amount_b=amount_b,
            reserve_a=reserve_a,
            reserve_b=reserve_b,
            supply=supply,
            decimals_a=self.ledger.decimals(pool.asset_a_id),
            decimals_b=self.ledger.decimals(pool.asset_b_id),
            share_decimals=self.ledger.decimals(pool.share_token_id),
            bootstrap_amount=self.policy.bootstrap_lp_amount,
        )

    def add_liquidity(
        self,
        pool_address: str,
        signer: PoolSigner,
        *,
        user: str,
        user_account_a: str,
        user_account_b: str,
        user_share_account: str,
        amount_a: int,
        amount_b: int,
        min_lp_tokens: int,
    ) -> AddLiquidityResult:
        with self._operation("add_liquidity", pool_address):
            pool = self._pool_for(pool_address, signer)
            for name, v in (("amount_a", amount_a), ("amount_b", amount_b), ("min_lp_tokens", min_lp_tokens)):
                require_u64(name, v)
            if amount_a == 0 and amount_b == 0:
                raise InvalidAmount("deposit must include at least one asset")

            reserve_a, reserve_b = self._reserves(pool)
            issued = self._issue(pool, amount_a, amount_b, reserve_a, reserve_b)
            if issued.mint_amount < min_lp_tokens:
                raise SlippageExceeded("lp_tokens", issued.mint_amount, min_lp_tokens)

            with self.ledger.atomic():
                self.ledger.transfer(user_account_a, pool.reserve_a_account_id, amount_a, user)
                self.ledger.transfer(user_account_b, pool.reserve_b_account_id, amount_b, user)
                self.ledger.mint_to(pool.share_token_id, user_share_account, issued.mint_amount, signer.pool_address)

                reserve_a_after, reserve_b_after = self._reserves(pool)
                self.events.emit(
                    LiquidityAdded(
                        pool=pool.address,
                        user=user,
                        amount_a=amount_a,
                        amount_b=amount_b,
                        lp_tokens_minted=issued.mint_amount,
                        reserve_a_balance=reserve_a_after,
                        reserve_b_balance=reserve_b_after,
                    )
                )

        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                "add_liquidity pool=%s user=%s amounts=(%d, %d) minted=%d bootstrap=%s",
                pool.address, user, amount_a, amount_b, issued.mint_amount, issued.bootstrap,
            )
        return AddLiquidityResult(
            amount_a=amount_a,
            amount_b=amount_b,
            lp_tokens_minted=issued.mint_amount,
            lp_for_a=issued.lp_for_a,
            lp_for_b=issued.lp_for_b,
            bootstrap=issued.bootstrap,
            reserve_a_after=reserve_a_after,
            reserve_b_after=reserve_b_after,
        )

    # -- swap ------------------------------------------------------------------

    def _quote(self, pool: Pool, reserve_in: int, reserve_out: int, amount_in: int) -> SwapQuote:
        if self.policy.pricing is SwapPricing.DIRECT:
            return quote_swap_direct(
                reserve_in=reserve_in,
                reserve_out=reserve_out,
                amount_in=amount_in,
                fee_numerator=pool.fee_numerator,
                fee_denominator=pool.fee_denominator,
                panic_on_overflow=self.policy.panic_on_overflow,
            )
        return quote_swap_guarded(
            reserve_in=reserve_in,
            reserve_out=reserve_out,
            amount_in=amount_in,
            fee_numerator=pool.fee_numerator,
            fee_denominator=pool.fee_denominator,
            precision_scale=self.policy.precision_scale,
        )

    def swap(
        self,
        pool_address: str,
        signer: PoolSigner,
        *,
        user: str,
        asset_in_id: str,
        asset_out_id: str,
        user_account_in: str,
        user_account_out: str,
        amount_in: int,
        min_amount_out: int,
        fee_recipient_account: Optional[str] = None,
    ) -> SwapResult:
        with self._operation("swap", pool_address):
            pool = self._pool_for(pool_address, signer)
            if asset_in_id == asset_out_id:
                raise InvalidAmount(f"input and output assets must differ: {asset_in_id}")
            reserve_in_account = pool.reserve_account(asset_in_id)
            reserve_out_account = pool.reserve_account(asset_out_id)
            require_u64("amount_in", amount_in)
            require_u64("min_amount_out", min_amount_out)
            if amount_in == 0:
                raise InvalidAmount("amount_in must be positive")

            route_fee = self.policy.fee_routing is FeeRouting.ROUTE_TO_RECIPIENT
            if route_fee:
                if fee_recipient_account is None:
                    raise ConstraintViolation("fee routing requires a fee recipient account")
                recipient = self.ledger.account(fee_recipient_account)
                if recipient.mint_id != asset_in_id:
                    raise ConstraintViolation(f"fee recipient {fee_recipient_account} does not hold {asset_in_id}")
                # Fees belong to the pool authority, never to an account the trader picks.
                if recipient.owner != pool.authority_id:
                    raise ConstraintViolation(
                        f"fee recipient {fee_recipient_account} is not owned by pool authority {pool.authority_id}"
                    )

            reserve_in = self.ledger.balance(reserve_in_account)
            reserve_out = self.ledger.balance(reserve_out_account)
            quote = self._quote(pool, reserve_in, reserve_out, amount_in)
            if quote.amount_out < min_amount_out:
                raise SlippageExceeded("amount_out", quote.amount_out, min_amount_out)

            with self.ledger.atomic():
                if route_fee:
                    if quote.fee > 0:
                        self.ledger.transfer(user_account_in, fee_recipient_account, quote.fee, user)
                    self.ledger.transfer(user_account_in, reserve_in_account, quote.amount_in_after_fee, user)
                else:
                    self.ledger.transfer(user_account_in, reserve_in_account, amount_in, user)
                self.ledger.transfer(reserve_out_account, user_account_out, quote.amount_out, signer.pool_address)

                reserve_in_after = self.ledger.balance(reserve_in_account)
                reserve_out_after = self.ledger.balance(reserve_out_account)
                self.events.emit(
                    SwapExecuted(
                        pool=pool.address,
                        user=user,
                        asset_in_id=asset_in_id,
                        asset_out_id=asset_out_id,
                        amount_in=amount_in,
                        amount_out=quote.amount_out,
                        fee=quote.fee,
                    )
                )

        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                "swap pool=%s user=%s %s->%s in=%d out=%d fee=%d scaled=%s",
                pool.address, user, asset_in_id, asset_out_id, amount_in, quote.amount_out, quote.fee, quote.scaled,
            )
        return SwapResult(
            asset_in_id=asset_in_id,
            asset_out_id=asset_out_id,
            amount_in=amount_in,
            amount_out=quote.amount_out,
            fee=quote.fee,
            fee_routed=route_fee,
            scaled=quote.scaled,
            reserve_in_after=reserve_in_after,
            reserve_out_after=reserve_out_after,
        )

    # -- remove_liquidity ------------------------------------------------------

    def remove_liquidity(
        self,
        pool_address: str,
        signer: PoolSigner,
        *,
        user: str,
        user_account_a: str,
        user_account_b: str,
        user_share_account: str,
        lp_amount: int,
        min_amount_a: int,
        min_amount_b: int,
    ) -> RemoveLiquidityResult:
        with self._operation("remove_liquidity", pool_address):
            pool = self._pool_for(pool_address, signer)
            for name, v in (("min_amount_a", min_amount_a), ("min_amount_b", min_amount_b)):
                require_u64(name, v)

            reserve_a, reserve_b = self._reserves(pool)
            out = redeem(
                lp_amount=lp_amount,
                reserve_a=reserve_a,
                reserve_b=reserve_b,
                supply=self.ledger.supply(pool.share_token_id),
                panic_on_overflow=self.policy.panic_on_overflow,
            )
            if out.amount_a < min_amount_a:
                raise SlippageExceeded("amount_a", out.amount_a, min_amount_a)
            if out.amount_b < min_amount_b:
                raise SlippageExceeded("amount_b", out.amount_b, min_amount_b)

            if self.policy.burn_authority is BurnAuthority.POOL:
                burn_authority = signer.pool_address
            else:
                burn_authority = user

            with self.ledger.atomic():
                self.ledger.transfer(pool.reserve_a_account_id, user_account_a, out.amount_a, signer.pool_address)
                self.ledger.transfer(pool.reserve_b_account_id, user_account_b, out.amount_b, signer.pool_address)
                self.ledger.burn(pool.share_token_id, user_share_account, lp_amount, burn_authority)

                reserve_a_after, reserve_b_after = self._reserves(pool)
                self.events.emit(
                    LiquidityRemoved(
                        pool=pool.address,
                        user=user,
                        amount_a=out.amount_a,
                        amount_b=out.amount_b,
                        lp_amount=lp_amount,
                        reserve_a_balance=reserve_a_after,
                        reserve_b_balance=reserve_b_after,
                    )
                )

        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                "remove_liquidity pool=%s user=%s burned=%d out=(%d, %d)",
                pool.address, user, lp_amount, out.amount_a, out.amount_b,
            )
        return RemoveLiquidityResult(
            amount_a=out.amount_a,
            amount_b=out.amount_b,
            lp_amount=lp_amount,
            reserve_a_after=reserve_a_after,
            reserve_b_after=reserve_b_after,
        )
