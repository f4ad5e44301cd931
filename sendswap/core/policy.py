"""
Engine policy: which issuance, pricing, fee-routing and burn rules apply.

Both deployed designs are expressible as one `EnginePolicy`:
- `NAIVE_POLICY`: bootstrap on reserve A alone, direct pricing, fees retained
  in the input reserve (LP revenue), burns signed by the pool.
- `HARDENED_POLICY`: decimal-normalized issuance, overflow-scaled pricing,
  fees paid out to a recipient account (protocol revenue), burns signed by the
  share owner.

Policies may also be loaded from YAML:

    preset: hardened
    fee_routing: retain_in_reserve
    precision_scale: 1000000000
"""

from __future__ import annotations

from dataclasses import dataclass, fields, replace
from enum import Enum, unique
from pathlib import Path
from typing import Any, Mapping, Union

import yaml

from ..errors import PolicyConfigError
from ..kernels.python.cpmm_swap import PRECISION_SCALE
from ..kernels.python.lp_math import BOOTSTRAP_LP_AMOUNT


@unique
class IssuancePolicy(Enum):
    NAIVE = "naive"
    DECIMAL_NORMALIZED = "decimal_normalized"


@unique
class SwapPricing(Enum):
    DIRECT = "direct"
    OVERFLOW_SCALED = "overflow_scaled"


@unique
class FeeRouting(Enum):
    RETAIN_IN_RESERVE = "retain_in_reserve"
    ROUTE_TO_RECIPIENT = "route_to_recipient"


@unique
class BurnAuthority(Enum):
    POOL = "pool"
    OWNER = "owner"


@unique
class ArithmeticMode(Enum):
    CHECKED = "checked"
    # Overflow where the naive program unwrapped becomes ArithmeticPanic.
    LEGACY_PANIC = "legacy_panic"


@dataclass(frozen=True)
class EnginePolicy:
    """Runtime policy for `PoolEngine`."""

    issuance: IssuancePolicy = IssuancePolicy.DECIMAL_NORMALIZED
    pricing: SwapPricing = SwapPricing.OVERFLOW_SCALED
    fee_routing: FeeRouting = FeeRouting.ROUTE_TO_RECIPIENT
    burn_authority: BurnAuthority = BurnAuthority.OWNER
    arithmetic: ArithmeticMode = ArithmeticMode.CHECKED
    bootstrap_lp_amount: int = BOOTSTRAP_LP_AMOUNT
    precision_scale: int = PRECISION_SCALE

    def __post_init__(self) -> None:
        for name, v in (
            ("bootstrap_lp_amount", self.bootstrap_lp_amount),
            ("precision_scale", self.precision_scale),
        ):
            if not isinstance(v, int) or isinstance(v, bool):
                raise TypeError(f"{name} must be an int")
            if v <= 0:
                raise ValueError(f"{name} must be positive: {v}")

    @property
    def panic_on_overflow(self) -> bool:
        return self.arithmetic is ArithmeticMode.LEGACY_PANIC


HARDENED_POLICY = EnginePolicy()

NAIVE_POLICY = EnginePolicy(
    issuance=IssuancePolicy.NAIVE,
    pricing=SwapPricing.DIRECT,
    fee_routing=FeeRouting.RETAIN_IN_RESERVE,
    burn_authority=BurnAuthority.POOL,
)

PRESETS: dict[str, EnginePolicy] = {
    "hardened": HARDENED_POLICY,
    "naive": NAIVE_POLICY,
}

_ENUM_FIELDS: dict[str, type[Enum]] = {
    "issuance": IssuancePolicy,
    "pricing": SwapPricing,
    "fee_routing": FeeRouting,
    "burn_authority": BurnAuthority,
    "arithmetic": ArithmeticMode,
}


def policy_from_mapping(obj: Mapping[str, Any]) -> EnginePolicy:
    """Build a policy from `preset` plus per-field overrides (enum values by name)."""
    if not isinstance(obj, Mapping):
        raise PolicyConfigError("policy must be a mapping")

    preset_name = obj.get("preset", "hardened")
    if not isinstance(preset_name, str) or preset_name.strip().lower() not in PRESETS:
        raise PolicyConfigError(f"unknown policy preset: {preset_name!r}")
    base = PRESETS[preset_name.strip().lower()]

    known = {f.name for f in fields(EnginePolicy)}
    overrides: dict[str, Any] = {}
    for key, raw in obj.items():
        if key == "preset":
            continue
        if key not in known:
            raise PolicyConfigError(f"unknown policy key: {key!r}")
        enum_cls = _ENUM_FIELDS.get(key)
        if enum_cls is None:
            overrides[key] = raw
            continue
        try:
            overrides[key] = enum_cls(str(raw).strip().lower())
        except ValueError as exc:
            raise PolicyConfigError(f"invalid {key}: {raw!r}") from exc

    try:
        return replace(base, **overrides)
    except (TypeError, ValueError) as exc:
        raise PolicyConfigError(str(exc)) from exc


def load_policy(path: Union[str, Path]) -> EnginePolicy:
    obj = yaml.safe_load(Path(path).read_text(encoding="utf-8"))
    if obj is None:
        obj = {}
    return policy_from_mapping(obj)
