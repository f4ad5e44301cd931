"""Exception types for the SendSwap pool accounting engine.

Engine errors share the `AmmError` base so callers can reject a whole operation
with one `except` clause. Ledger failures have their own `LedgerError` base so
they never look like pricing errors.
"""

from __future__ import annotations


class AmmError(Exception):
    """Base class for errors reported by a pool operation."""

    code: str = "AmmError"


class SlippageExceeded(AmmError):
    """A computed output or issuance amount fell below the caller's floor."""

    code = "SlippageExceeded"

    def __init__(self, what: str, computed: int, minimum: int) -> None:
        self.what = what
        self.computed = computed
        self.minimum = minimum
        super().__init__(f"slippage tolerance exceeded: {what} {computed} < {minimum}")


class ArithmeticOverflow(AmmError):
    """A checked arithmetic step would leave the u64 range (or divide by zero)."""

    code = "ArithmeticOverflow"


class InvalidAmount(AmmError):
    """A zero or otherwise nonsensical input amount, reserve, supply or fee."""

    code = "InvalidAmount"


class ConstraintViolation(AmmError):
    """An account handed to an operation does not satisfy its declared constraints."""

    code = "ConstraintViolation"


class PoolAlreadyExists(AmmError):
    code = "PoolAlreadyExists"


class PoolNotFound(AmmError):
    code = "PoolNotFound"


class ArithmeticPanic(RuntimeError):
    """Fatal error raised in legacy mode where the naive program unwrapped unchecked math.

    Deliberately not an `AmmError`: it stands for a trap, not a recoverable rejection.
    """


class PolicyConfigError(ValueError):
    """Raised when a policy mapping or YAML file names unknown keys or variants."""


class LedgerError(Exception):
    """Base class for failures reported by the asset ledger."""


class UnknownAccount(LedgerError):
    pass


class InsufficientFunds(LedgerError):
    def __init__(self, account_id: str, balance: int, amount: int) -> None:
        self.account_id = account_id
        self.balance = balance
        self.amount = amount
        super().__init__(f"insufficient funds in {account_id}: {balance} < {amount}")


class LedgerAuthorityError(LedgerError):
    """The acting authority may not move, mint or burn the requested balance."""


class MintMismatch(LedgerError):
    pass
