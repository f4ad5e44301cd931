"""
Asset ledger: mints, token accounts and the transfer/mint/burn primitives.

`AssetLedger` is the interface the engine depends on. `TokenLedger` is the
in-memory reference implementation used by tests and local tooling:
- balances and supplies stay within u64,
- every primitive validates fully before mutating,
- `atomic()` snapshots state and restores it if the block raises.

Note: like the balance tables it replaces, this class stores records in plain
dicts. Do not rely on dict iteration order; sort at serialization boundaries.
"""

from __future__ import annotations

import copy
from contextlib import contextmanager
from dataclasses import dataclass
from typing import ContextManager, Dict, Iterator, Optional, Protocol

from ..errors import (
    ArithmeticOverflow,
    InsufficientFunds,
    LedgerAuthorityError,
    LedgerError,
    MintMismatch,
    UnknownAccount,
)
from ..kernels.python.u64 import U64_MAX, require_u64, require_u8


# Type aliases
AccountId = str
MintId = str
Amount = int  # u64


@dataclass
class Mint:
    mint_id: MintId
    decimals: int
    mint_authority: Optional[str]
    supply: Amount = 0


@dataclass
class TokenAccount:
    """
    A balance of one mint held by `owner`.

    `delegate` may move or burn up to `delegated_amount` on the owner's behalf.
    """

    account_id: AccountId
    mint_id: MintId
    owner: str
    amount: Amount = 0
    delegate: Optional[str] = None
    delegated_amount: Amount = 0


class AssetLedger(Protocol):
    def account(self, account_id: AccountId) -> TokenAccount: ...

    def balance(self, account_id: AccountId) -> Amount: ...

    def supply(self, mint_id: MintId) -> Amount: ...

    def decimals(self, mint_id: MintId) -> int: ...

    def mint_authority(self, mint_id: MintId) -> Optional[str]: ...

    def has_mint(self, mint_id: MintId) -> bool: ...

    def transfer(self, source: AccountId, destination: AccountId, amount: Amount, authority: str) -> None: ...

    def mint_to(self, mint_id: MintId, destination: AccountId, amount: Amount, authority: str) -> None: ...

    def burn(self, mint_id: MintId, source: AccountId, amount: Amount, authority: str) -> None: ...

    def atomic(self) -> ContextManager[None]: ...


class TokenLedger:
    """In-memory `AssetLedger` with snapshot/rollback atomicity."""

    def __init__(self) -> None:
        self._mints: Dict[MintId, Mint] = {}
        self._accounts: Dict[AccountId, TokenAccount] = {}

    # -- setup -----------------------------------------------------------------

    def create_mint(self, mint_id: MintId, *, decimals: int, mint_authority: Optional[str]) -> Mint:
        require_u8("decimals", decimals)
        if mint_id in self._mints:
            raise LedgerError(f"mint already exists: {mint_id}")
        mint = Mint(mint_id=mint_id, decimals=decimals, mint_authority=mint_authority)
        self._mints[mint_id] = mint
        return mint

    def create_account(self, account_id: AccountId, *, mint_id: MintId, owner: str) -> TokenAccount:
        self.get_mint(mint_id)
        if account_id in self._accounts:
            raise LedgerError(f"account already exists: {account_id}")
        acct = TokenAccount(account_id=account_id, mint_id=mint_id, owner=owner)
        self._accounts[account_id] = acct
        return acct

    def set_mint_authority(self, mint_id: MintId, new_authority: Optional[str], *, current_authority: str) -> None:
        mint = self.get_mint(mint_id)
        if mint.mint_authority is None or mint.mint_authority != current_authority:
            raise LedgerAuthorityError(f"{current_authority} is not the mint authority of {mint_id}")
        mint.mint_authority = new_authority

    def approve(self, account_id: AccountId, delegate: str, amount: Amount, *, owner: str) -> None:
        require_u64("amount", amount)
        acct = self.account(account_id)
        if acct.owner != owner:
            raise LedgerAuthorityError(f"{owner} does not own {account_id}")
        acct.delegate = delegate
        acct.delegated_amount = amount

    def revoke(self, account_id: AccountId, *, owner: str) -> None:
        acct = self.account(account_id)
        if acct.owner != owner:
            raise LedgerAuthorityError(f"{owner} does not own {account_id}")
        acct.delegate = None
        acct.delegated_amount = 0

    # -- reads -----------------------------------------------------------------

    def get_mint(self, mint_id: MintId) -> Mint:
        mint = self._mints.get(mint_id)
        if mint is None:
            raise UnknownAccount(f"unknown mint: {mint_id}")
        return mint

    def has_mint(self, mint_id: MintId) -> bool:
        return mint_id in self._mints

    def account(self, account_id: AccountId) -> TokenAccount:
        acct = self._accounts.get(account_id)
        if acct is None:
            raise UnknownAccount(f"unknown token account: {account_id}")
        return acct

    def balance(self, account_id: AccountId) -> Amount:
        return self.account(account_id).amount

    def supply(self, mint_id: MintId) -> Amount:
        return self.get_mint(mint_id).supply

    def decimals(self, mint_id: MintId) -> int:
        return self.get_mint(mint_id).decimals

    def mint_authority(self, mint_id: MintId) -> Optional[str]:
        return self.get_mint(mint_id).mint_authority

    # -- primitives ------------------------------------------------------------

    def _spend_authority(self, acct: TokenAccount, amount: Amount, authority: str) -> bool:
        """Return True if the spend draws down a delegation; raise if not allowed at all."""
        if authority == acct.owner:
            return False
        if acct.delegate is not None and authority == acct.delegate:
            if amount > acct.delegated_amount:
                raise LedgerAuthorityError(
                    f"delegated amount exceeded on {acct.account_id}: {amount} > {acct.delegated_amount}"
                )
            return True
        raise LedgerAuthorityError(f"{authority} may not spend from {acct.account_id}")

    def transfer(self, source: AccountId, destination: AccountId, amount: Amount, authority: str) -> None:
        require_u64("amount", amount)
        src = self.account(source)
        dst = self.account(destination)
        if src.mint_id != dst.mint_id:
            raise MintMismatch(f"cannot transfer {src.mint_id} into an account of {dst.mint_id}")
        via_delegate = self._spend_authority(src, amount, authority)
        if src.amount < amount:
            raise InsufficientFunds(source, src.amount, amount)
        if source != destination and dst.amount + amount > U64_MAX:
            raise ArithmeticOverflow(f"balance overflow in {destination}")

        src.amount -= amount
        dst.amount += amount
        if via_delegate:
            src.delegated_amount -= amount

    def mint_to(self, mint_id: MintId, destination: AccountId, amount: Amount, authority: str) -> None:
        require_u64("amount", amount)
        mint = self.get_mint(mint_id)
        dst = self.account(destination)
        if dst.mint_id != mint_id:
            raise MintMismatch(f"{destination} does not hold {mint_id}")
        if mint.mint_authority is None or mint.mint_authority != authority:
            raise LedgerAuthorityError(f"{authority} is not the mint authority of {mint_id}")
        if mint.supply + amount > U64_MAX or dst.amount + amount > U64_MAX:
            raise ArithmeticOverflow(f"mint overflow on {mint_id}")

        mint.supply += amount
        dst.amount += amount

    def burn(self, mint_id: MintId, source: AccountId, amount: Amount, authority: str) -> None:
        require_u64("amount", amount)
        mint = self.get_mint(mint_id)
        src = self.account(source)
        if src.mint_id != mint_id:
            raise MintMismatch(f"{source} does not hold {mint_id}")
        via_delegate = self._spend_authority(src, amount, authority)
        if src.amount < amount:
            raise InsufficientFunds(source, src.amount, amount)

        src.amount -= amount
        mint.supply -= amount
        if via_delegate:
            src.delegated_amount -= amount

    @contextmanager
    def atomic(self) -> Iterator[None]:
        """All-or-nothing block: any exception restores the pre-block records."""
        mints = copy.deepcopy(self._mints)
        accounts = copy.deepcopy(self._accounts)
        try:
            yield
        except BaseException:
            self._mints = mints
            self._accounts = accounts
            raise

    def __repr__(self) -> str:
        return f"TokenLedger({len(self._mints)} mints, {len(self._accounts)} accounts)"
