"""
Domain events and event sinks.

One frozen dataclass per event type; `event_to_dict` gives the canonical payload
that `encode_event` turns into bytes for off-engine indexers.
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from enum import Enum, unique
from typing import Any, ClassVar, Dict, List, Protocol, Union

from ..state.canonical import CANONICAL_ENCODING_VERSION, canonical_json_bytes

logger = logging.getLogger(__name__)


@unique
class EventKind(Enum):
    POOL_CREATED = "PoolCreated"
    LIQUIDITY_ADDED = "LiquidityAdded"
    SWAP_EXECUTED = "SwapExecuted"
    LIQUIDITY_REMOVED = "LiquidityRemoved"


@dataclass(frozen=True)
class PoolCreated:
    pool: str
    asset_a_id: str
    asset_b_id: str
    fee: float  # display only

    kind: ClassVar[EventKind] = EventKind.POOL_CREATED


@dataclass(frozen=True)
class LiquidityAdded:
    pool: str
    user: str
    amount_a: int
    amount_b: int
    lp_tokens_minted: int
    reserve_a_balance: int
    reserve_b_balance: int

    kind: ClassVar[EventKind] = EventKind.LIQUIDITY_ADDED


@dataclass(frozen=True)
class SwapExecuted:
    pool: str
    user: str
    asset_in_id: str
    asset_out_id: str
    amount_in: int
    amount_out: int
    fee: int

    kind: ClassVar[EventKind] = EventKind.SWAP_EXECUTED


@dataclass(frozen=True)
class LiquidityRemoved:
    pool: str
    user: str
    amount_a: int
    amount_b: int
    lp_amount: int
    reserve_a_balance: int
    reserve_b_balance: int

    kind: ClassVar[EventKind] = EventKind.LIQUIDITY_REMOVED


PoolEvent = Union[PoolCreated, LiquidityAdded, SwapExecuted, LiquidityRemoved]


def event_to_dict(event: PoolEvent) -> Dict[str, Any]:
    payload: Dict[str, Any] = asdict(event)
    if isinstance(event, PoolCreated):
        # Canonical encoding rejects floats; the ratio travels as its repr.
        payload["fee"] = repr(event.fee)
    payload["event"] = event.kind.value
    payload["v"] = CANONICAL_ENCODING_VERSION
    return payload


def encode_event(event: PoolEvent) -> bytes:
    return canonical_json_bytes(event_to_dict(event))


class EventSink(Protocol):
    def emit(self, event: PoolEvent) -> None: ...


class InMemoryEventSink:
    """Ordered, append-only event list."""

    def __init__(self) -> None:
        self.events: List[PoolEvent] = []

    def emit(self, event: PoolEvent) -> None:
        self.events.append(event)

    def of_kind(self, kind: EventKind) -> List[PoolEvent]:
        return [e for e in self.events if e.kind is kind]

    def last(self) -> PoolEvent:
        if not self.events:
            raise IndexError("no events emitted")
        return self.events[-1]

    def __len__(self) -> int:
        return len(self.events)


class LoggingEventSink:
    """Forwards each event's canonical payload to the module logger."""

    def __init__(self, level: int = logging.INFO) -> None:
        self.level = level

    def emit(self, event: PoolEvent) -> None:
        if logger.isEnabledFor(self.level):
            logger.log(self.level, "%s %s", event.kind.value, encode_event(event).decode("utf-8"))
