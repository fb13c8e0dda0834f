"""Order submission, edit and cancel over the venue's trading REST API."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from types import TracebackType
from typing import Any, Optional, Type

import aiohttp
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from common.config import DEFAULT_TRADE_URL
from common.errors import OrderRequestError

logger = logging.getLogger(__name__)

PRICE_SCALE = 100


class Order(BaseModel):
    """Limit order payload; ``price`` is in hundredths of the display unit."""

    model_config = ConfigDict(frozen=True)

    order_type: str = "limit"
    contract_id: int
    is_ask: bool
    swap_purpose: str = "undisclosed"
    size: int
    price: int
    volatile: bool = False

    @classmethod
    def new(cls, contract_id: int, is_ask: bool, price: float, size: int) -> "Order":
        return cls(
            contract_id=contract_id,
            is_ask=is_ask,
            size=size,
            price=round(price * PRICE_SCALE),
        )

    def with_swap_purpose(self, purpose: str) -> "Order":
        """Declare whether the trade is a bona fide hedge."""

        return self.model_copy(update={"swap_purpose": purpose})

    def with_auto_cancel(self, enabled: bool) -> "Order":
        """Auto-cancel the order at the 4pm close when ``enabled``."""

        return self.model_copy(update={"volatile": enabled})


class OrderResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    order_id: str = Field(..., alias="mid")


@dataclass(frozen=True)
class OrderEdit:
    order_id: str
    contract_id: int
    price: int
    size: int


@dataclass(frozen=True)
class Cancel:
    """Cancel one resting order, or every order when ``order_id`` is ``None``."""

    order_id: Optional[str] = None
    contract_id: Optional[int] = None

    @classmethod
    def one(cls, order_id: str, contract_id: int) -> "Cancel":
        return cls(order_id=order_id, contract_id=contract_id)

    @classmethod
    def all(cls) -> "Cancel":
        return cls()


class OrderManager:
    """Thin wrapper around one HTTP session plus the history of accepted orders."""

    def __init__(
        self,
        api_key: str,
        base_url: str = DEFAULT_TRADE_URL,
        session: aiohttp.ClientSession | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._authorization = f"JWT {api_key}"
        self._session = session
        self._owns_session = session is None
        self.order_history: list[tuple[OrderResponse, Order]] = []

    def _http(self) -> aiohttp.ClientSession:
        if self._session is None:
            self._session = aiohttp.ClientSession()
        return self._session

    def _headers(self, with_body: bool) -> dict[str, str]:
        headers = {"Authorization": self._authorization, "Accept": "application/json"}
        if with_body:
            headers["Content-Type"] = "application/json"
        return headers

    async def _request(
        self, method: str, path: str, payload: Optional[dict[str, Any]] = None
    ) -> str:
        url = f"{self.base_url}{path}"
        try:
            async with self._http().request(
                method,
                url,
                json=payload,
                headers=self._headers(payload is not None),
            ) as resp:
                body = await resp.text()
                if resp.status >= 400:
                    raise OrderRequestError(resp.status, body)
                return body
        except (aiohttp.ClientError, asyncio.TimeoutError) as exc:
            raise OrderRequestError(None, str(exc) or type(exc).__name__) from exc

    async def send_order(self, order: Order) -> OrderResponse:
        body = await self._request("POST", "/orders", order.model_dump())
        try:
            response = OrderResponse.model_validate_json(body)
        except ValidationError as exc:
            raise OrderRequestError(None, f"unexpected order response: {body}") from exc
        self.order_history.append((response, order))
        logger.info(
            "Order %s accepted: %s %d @ %d on contract %d",
            response.order_id,
            "ask" if order.is_ask else "bid",
            order.size,
            order.price,
            order.contract_id,
        )
        return response

    async def send_edit(self, edit: OrderEdit) -> None:
        await self._request(
            "POST",
            f"/orders/{edit.order_id}/edit",
            {"contract_id": edit.contract_id, "size": edit.size, "price": edit.price},
        )
        logger.info("Order %s edited", edit.order_id)

    async def send_cancel(self, cancel: Cancel) -> None:
        if cancel.order_id is None:
            await self._request("DELETE", "/orders")
            logger.info("Cancelled all orders")
            return
        await self._request(
            "DELETE", f"/orders/{cancel.order_id}", {"contract_id": cancel.contract_id}
        )
        logger.info("Order %s cancelled", cancel.order_id)

    async def close(self) -> None:
        if self._owns_session and self._session is not None:
            await self._session.close()
            self._session = None

    async def __aenter__(self) -> "OrderManager":
        return self

    async def __aexit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc: Optional[BaseException],
        tb: Optional[TracebackType],
    ) -> None:
        await self.close()


__all__ = ["Cancel", "Order", "OrderEdit", "OrderManager", "OrderResponse"]
