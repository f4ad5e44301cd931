"""
Core pool accounting: engine, policies, events.
"""

from .engine import PoolEngine
from .events import (
    EventKind,
    EventSink,
    InMemoryEventSink,
    LiquidityAdded,
    LiquidityRemoved,
    LoggingEventSink,
    PoolCreated,
    SwapExecuted,
    encode_event,
    event_to_dict,
)
from .policy import (
    HARDENED_POLICY,
    NAIVE_POLICY,
    ArithmeticMode,
    BurnAuthority,
    EnginePolicy,
    FeeRouting,
    IssuancePolicy,
    SwapPricing,
    load_policy,
    policy_from_mapping,
)
from .types import AddLiquidityResult, PoolSigner, RemoveLiquidityResult, SwapResult

__all__ = [
    "PoolEngine",
    "EventKind",
    "EventSink",
    "InMemoryEventSink",
    "LoggingEventSink",
    "PoolCreated",
    "LiquidityAdded",
    "SwapExecuted",
    "LiquidityRemoved",
    "encode_event",
    "event_to_dict",
    "HARDENED_POLICY",
    "NAIVE_POLICY",
    "ArithmeticMode",
    "BurnAuthority",
    "EnginePolicy",
    "FeeRouting",
    "IssuancePolicy",
    "SwapPricing",
    "load_policy",
    "policy_from_mapping",
    "AddLiquidityResult",
    "PoolSigner",
    "RemoveLiquidityResult",
    "SwapResult",
]
