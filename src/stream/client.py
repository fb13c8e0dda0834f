"""Pull-one/return-one market-data websocket client."""

from __future__ import annotations

import asyncio
import logging
from types import TracebackType
from typing import Optional, Type

import aiohttp
from yarl import URL

from common.errors import ConnectionFailedError

from .messages import DomainEvent, Ping
from .parser import MessageParser

logger = logging.getLogger(__name__)

WS_URL = "wss://api.ledgerx.com/ws"


def _validate_endpoint(endpoint: str) -> URL:
    try:
        url = URL(endpoint)
    except (TypeError, ValueError) as exc:
        raise ConnectionFailedError(endpoint, f"invalid url: {exc}") from exc
    if url.scheme not in ("ws", "wss") or not url.host:
        raise ConnectionFailedError(endpoint, "expected a ws:// or wss:// url with a host")
    return url


class MarketDataClient:
    """One persistent websocket connection decoded into :data:`DomainEvent` values.

    Keepalive pings are answered inside :meth:`next_event`, so a caller that
    stops pulling events also stops acknowledging pings.
    """

    def __init__(
        self,
        endpoint: str,
        ws: aiohttp.ClientWebSocketResponse,
        session: aiohttp.ClientSession,
        owns_session: bool,
    ) -> None:
        self.endpoint = endpoint
        self._ws = ws
        self._session = session
        self._owns_session = owns_session
        # Reserved for liveness/ordering checks; nothing reads these yet.
        self._exhaustion_counter = 0
        self._last_clock = 0

    @classmethod
    async def connect(
        cls,
        endpoint: str = WS_URL,
        session: aiohttp.ClientSession | None = None,
    ) -> "MarketDataClient":
        """Open the websocket and return once the handshake has completed.

        Raises:
            ConnectionFailedError: The URL is invalid or the handshake failed.
        """

        url = _validate_endpoint(endpoint)
        owns_session = session is None
        http = session or aiohttp.ClientSession()
        try:
            # Pings must reach next_event so they are answered by the caller's own pull.
            ws = await http.ws_connect(url, autoping=False, heartbeat=None)
        except (aiohttp.ClientError, asyncio.TimeoutError, OSError) as exc:
            if owns_session:
                await http.close()
            raise ConnectionFailedError(endpoint, str(exc) or type(exc).__name__) from exc

        logger.info("Connected to %s", endpoint)
        return cls(endpoint, ws, http, owns_session)

    @property
    def closed(self) -> bool:
        return self._ws.closed

    async def next_event(self) -> DomainEvent:
        """Wait for one frame, decode it and answer it if it is a ping.

        Decoding errors from :class:`MessageParser` propagate unchanged.

        Raises:
            ConnectionFailedError: The connection was lost or already closed,
                or the pong could not be sent.
        """

        message = await self._ws.receive()
        if message.type in (aiohttp.WSMsgType.CLOSED, aiohttp.WSMsgType.ERROR):
            cause = message.data if isinstance(message.data, BaseException) else None
            logger.warning("Connection to %s lost (%s)", self.endpoint, message.type.name)
            raise ConnectionFailedError(
                self.endpoint, f"connection lost ({message.type.name})"
            ) from cause

        event = MessageParser.parse(message)
        if isinstance(event, Ping):
            try:
                await self._ws.pong(event.data)
            except (aiohttp.ClientError, ConnectionResetError) as exc:
                raise ConnectionFailedError(self.endpoint, f"pong failed: {exc}") from exc
            logger.debug("Answered ping with %d byte payload", len(event.data))
        return event

    async def close(self) -> None:
        if not self._ws.closed:
            await self._ws.close()
        if self._owns_session and not self._session.closed:
            await self._session.close()
        logger.info("Disconnected from %s", self.endpoint)

    async def __aenter__(self) -> "MarketDataClient":
        return self

    async def __aexit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc: Optional[BaseException],
        tb: Optional[TracebackType],
    ) -> None:
        await self.close()


__all__ = ["MarketDataClient", "WS_URL"]
