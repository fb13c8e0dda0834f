"""REST fetch of the venue contract list."""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime
from typing import Optional

import aiohttp

from common.config import DEFAULT_API_URL
from common.errors import ContractFetchError

from .models import RawContractSpecTable
from .normalize import normalize
from .table import ContractSpecTable

logger = logging.getLogger(__name__)

CONTRACTS_PATH = "/trading/contracts"


async def fetch_raw_contracts(
    session: aiohttp.ClientSession | None = None,
    api_url: Optional[str] = None,
    timeout: float = 30.0,
) -> RawContractSpecTable:
    """GET the unauthenticated contract list and decode it.

    Raises:
        ContractFetchError: Transport failure or non-2xx response.
        MessageParsingError: The body does not match the contract schema.
    """

    url = (api_url or DEFAULT_API_URL).rstrip("/") + CONTRACTS_PATH
    http = session or aiohttp.ClientSession()
    try:
        async with http.get(
            url,
            headers={"Accept": "application/json"},
            timeout=aiohttp.ClientTimeout(total=timeout),
        ) as resp:
            body = await resp.text()
            if resp.status >= 400:
                raise ContractFetchError(resp.status, body)
    except (aiohttp.ClientError, asyncio.TimeoutError) as exc:
        raise ContractFetchError(None, str(exc) or type(exc).__name__) from exc
    finally:
        if session is None:
            await http.close()

    raw_table = RawContractSpecTable.parse(body)
    logger.info("Fetched %d contracts from %s", len(raw_table.data), url)
    return raw_table


async def build_contract_table(
    session: aiohttp.ClientSession | None = None,
    api_url: Optional[str] = None,
    now: Optional[datetime] = None,
    unknown_contract_policy: str = "raise",
) -> ContractSpecTable:
    raw_table = await fetch_raw_contracts(session=session, api_url=api_url)
    return normalize(raw_table, now=now, unknown_contract_policy=unknown_contract_policy)


__all__ = ["CONTRACTS_PATH", "build_contract_table", "fetch_raw_contracts"]
