"""Market-data websocket stream: frame parser, event model and pull client."""

from .client import WS_URL, MarketDataClient  # noqa: F401
from .messages import (  # noqa: F401
    BookTop,
    DomainEvent,
    Heartbeat,
    Ping,
    Pong,
    SessionId,
    UnauthenticatedSessionEstablished,
)
from .parser import MessageParser  # noqa: F401

__all__ = [
    "BookTop",
    "DomainEvent",
    "Heartbeat",
    "MarketDataClient",
    "MessageParser",
    "Ping",
    "Pong",
    "SessionId",
    "UnauthenticatedSessionEstablished",
    "WS_URL",
]
