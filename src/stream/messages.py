"""Typed events produced from market-data websocket frames."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional, Union

from common.models import RawModel, WireStr, WireUInt

PRICE_SCALE = 100.0


@dataclass(frozen=True)
class Ping:
    """Keepalive ping; ``data`` must be echoed back verbatim in a pong."""

    data: bytes


@dataclass(frozen=True)
class Pong:
    pass


@dataclass(frozen=True)
class UnauthenticatedSessionEstablished:
    pass


@dataclass(frozen=True)
class SessionId:
    session_id: str


@dataclass(frozen=True)
class BookTop:
    """Best bid/ask for one contract with prices in display units."""

    bid: float
    bid_size: int
    ask: float
    ask_size: int
    contract_id: int
    contract_type: int
    clock: int


@dataclass(frozen=True)
class Heartbeat:
    timestamp: int
    ticks: int
    run_id: int
    interval_ms: int


DomainEvent = Union[
    Ping,
    Pong,
    BookTop,
    Heartbeat,
    UnauthenticatedSessionEstablished,
    SessionId,
]


class RawBookTop(RawModel):
    """``book_top`` payload with prices in hundredths."""

    bid: WireUInt
    bid_size: WireUInt
    ask: WireUInt
    ask_size: WireUInt
    contract_id: WireUInt
    contract_type: WireUInt
    clock: WireUInt

    def sanitize(self) -> BookTop:
        return BookTop(
            bid=self.bid / PRICE_SCALE,
            bid_size=self.bid_size,
            ask=self.ask / PRICE_SCALE,
            ask_size=self.ask_size,
            contract_id=self.contract_id,
            contract_type=self.contract_type,
            clock=self.clock,
        )


class RawHeartbeat(RawModel):
    timestamp: WireUInt
    ticks: WireUInt
    run_id: WireUInt
    interval_ms: WireUInt

    def sanitize(self) -> Heartbeat:
        return Heartbeat(
            timestamp=self.timestamp,
            ticks=self.ticks,
            run_id=self.run_id,
            interval_ms=self.interval_ms,
        )


class RawMeta(RawModel):
    """``meta`` payload; the session id is top level or nested under ``data``."""

    session_id: Optional[WireStr] = None
    data: Optional[dict[str, Any]] = None

    def resolve_session_id(self) -> Optional[str]:
        if self.session_id:
            return self.session_id
        if self.data:
            nested = self.data.get("session_id")
            if isinstance(nested, str) and nested:
                return nested
        return None


__all__ = [
    "BookTop",
    "DomainEvent",
    "Heartbeat",
    "Ping",
    "Pong",
    "RawBookTop",
    "RawHeartbeat",
    "RawMeta",
    "SessionId",
    "UnauthenticatedSessionEstablished",
]
