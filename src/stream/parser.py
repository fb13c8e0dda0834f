"""Classify websocket frames by their type tag and decode them into events."""

from __future__ import annotations

import logging
import re

import aiohttp

from common.errors import (
    MessageParsingError,
    UnimplementedWireFrameError,
    UnknownMessageTypeError,
)
from common.models import end_position

from .messages import (
    DomainEvent,
    Ping,
    Pong,
    RawBookTop,
    RawHeartbeat,
    RawMeta,
    SessionId,
    UnauthenticatedSessionEstablished,
)

logger = logging.getLogger(__name__)


def _tag_pattern(tag: str) -> re.Pattern[str]:
    return re.compile(r'"type"\s*:\s*"' + re.escape(tag) + '"')


# Checked in order; the first tag found in the payload wins.
BOOK_TOP_TAG = _tag_pattern("book_top")
HEARTBEAT_TAG = _tag_pattern("heartbeat")
UNAUTH_SUCCESS_TAG = _tag_pattern("unauth_success")
META_TAG = _tag_pattern("meta")


class MessageParser:
    """Stateless decoder from :class:`aiohttp.WSMessage` to :data:`DomainEvent`."""

    @staticmethod
    def parse(message: aiohttp.WSMessage) -> DomainEvent:
        if message.type == aiohttp.WSMsgType.TEXT:
            return MessageParser.parse_text(message.data)
        if message.type == aiohttp.WSMsgType.PING:
            return Ping(bytes(message.data or b""))
        if message.type == aiohttp.WSMsgType.PONG:
            return Pong()

        logger.error("Unhandled websocket frame: %r", message)
        raise UnimplementedWireFrameError(message.type.name)

    @staticmethod
    def parse_text(text: str) -> DomainEvent:
        if BOOK_TOP_TAG.search(text):
            return RawBookTop.parse(text).sanitize()
        if HEARTBEAT_TAG.search(text):
            return RawHeartbeat.parse(text).sanitize()
        if UNAUTH_SUCCESS_TAG.search(text):
            return UnauthenticatedSessionEstablished()
        if META_TAG.search(text):
            session_id = RawMeta.parse(text).resolve_session_id()
            if session_id is None:
                line, column = end_position(text)
                raise MessageParsingError("meta payload has no session_id", line, column)
            return SessionId(session_id)

        raise UnknownMessageTypeError(text)


__all__ = ["MessageParser"]
