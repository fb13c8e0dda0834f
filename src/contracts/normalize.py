"""Transform raw contract rows into typed contract specs."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Iterator, Optional

from common.errors import ContractNormalizationError, UnimplementedContractTypeError

from .models import (
    ContractSpec,
    FutureContractSpec,
    OptionContractSpec,
    RawContractSpec,
    RawContractSpecTable,
    SwapSpec,
)
from .table import ContractSpecTable

logger = logging.getLogger(__name__)

VENUE_DATETIME_FORMAT = "%Y-%m-%d %H:%M:%S%z"
SECONDS_PER_JULIAN_YEAR = 31_556_926
PRICE_SCALE = 100.0


def parse_venue_datetime(value: str) -> datetime:
    """Parse a venue timestamp such as ``2024-06-28 21:00:00+0000``."""

    try:
        return datetime.strptime(value, VENUE_DATETIME_FORMAT)
    except ValueError as exc:
        raise ContractNormalizationError(f"invalid venue datetime {value!r}") from exc


def years_until(expires: datetime, now: datetime) -> float:
    return (expires - now).total_seconds() / SECONDS_PER_JULIAN_YEAR


def _option_spec(raw: RawContractSpec, now: datetime) -> OptionContractSpec:
    if raw.strike_price is None or raw.is_call is None:
        raise ContractNormalizationError(
            f"options contract {raw.id} ({raw.label}) is missing strike_price or is_call"
        )

    date_expires = parse_venue_datetime(raw.date_expires)
    return OptionContractSpec(
        id=raw.id,
        label=raw.label,
        underlying=raw.underlying_asset,
        strike_price=raw.strike_price / PRICE_SCALE,
        is_call=raw.is_call,
        time_to_expiry=years_until(date_expires, now),
        open_interest=raw.open_interest or 0,
        multiplier=float(raw.multiplier),
        min_increment=raw.min_increment / PRICE_SCALE,
        active=raw.active,
        date_live=parse_venue_datetime(raw.date_live),
        date_expires=date_expires,
        collateral_asset=raw.collateral_asset,
        is_ecp_only=raw.is_ecp_only,
    )


def _contract_spec(raw: RawContractSpec, now: datetime) -> ContractSpec:
    if raw.derivative_type == "day_ahead_swap":
        return SwapSpec(raw)
    if raw.derivative_type == "future_contract":
        return FutureContractSpec(raw)
    if raw.derivative_type == "options_contract":
        return _option_spec(raw, now)
    raise UnimplementedContractTypeError(raw.derivative_type, raw.id)


def _iter_specs(
    raw_table: RawContractSpecTable, now: datetime, unknown_contract_policy: str
) -> Iterator[ContractSpec]:
    for raw in raw_table.data:
        try:
            yield _contract_spec(raw, now)
        except UnimplementedContractTypeError as exc:
            if unknown_contract_policy != "skip":
                raise
            logger.warning("Skipping contract %s (%s): %s", raw.id, raw.label, exc)


def normalize(
    raw_table: RawContractSpecTable,
    *,
    now: Optional[datetime] = None,
    unknown_contract_policy: str = "raise",
) -> ContractSpecTable:
    """Build the reference table from a raw snapshot.

    Args:
        raw_table: Decoded ``/trading/contracts`` response.
        now: Reference time for ``time_to_expiry``. Defaults to the current
            UTC time, captured once for the whole table. Must be timezone
            aware, since contract dates carry an offset.
        unknown_contract_policy: ``"raise"`` aborts on an unrecognised
            ``derivative_type``; ``"skip"`` logs and leaves the record out.

    Raises:
        ValueError: ``now`` is a naive datetime, or the policy is unknown.
        UnimplementedContractTypeError: Unknown ``derivative_type`` under the
            ``"raise"`` policy.
        ContractNormalizationError: An options row lacks its strike or
            call/put flag, or carries an unparseable date.
    """

    if unknown_contract_policy not in ("raise", "skip"):
        raise ValueError(f"unknown contract policy {unknown_contract_policy!r}")

    if now is not None and now.tzinfo is None:
        raise ValueError("now must be timezone aware")

    snapshot_time = now or datetime.now(tz=timezone.utc)
    table = ContractSpecTable.from_specs(
        _iter_specs(raw_table, snapshot_time, unknown_contract_policy)
    )
    logger.info("Normalised %d of %d contracts", len(table), len(raw_table.data))
    return table


__all__ = [
    "SECONDS_PER_JULIAN_YEAR",
    "normalize",
    "parse_venue_datetime",
    "years_until",
]
