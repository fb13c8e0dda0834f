"""Raw and normalised contract specifications."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Union

from common.models import RawModel, WireBool, WireStr, WireUInt


class RawContractSpec(RawModel):
    """One row of the ``/trading/contracts`` response, untouched.

    Price-bearing integers (``strike_price``, ``min_increment``) are in
    hundredths of the display unit.
    """

    id: WireUInt
    label: WireStr
    is_call: Optional[WireBool] = None
    active: WireBool
    strike_price: Optional[WireUInt] = None
    min_increment: WireUInt
    date_live: WireStr
    date_expires: WireStr
    date_exercise: Optional[WireStr] = None
    underlying_asset: WireStr
    collateral_asset: WireStr
    derivative_type: WireStr
    open_interest: Optional[WireUInt] = None
    is_next_day: WireBool
    multiplier: WireUInt
    is_ecp_only: WireBool


class RawContractSpecTable(RawModel):
    data: list[RawContractSpec]


@dataclass(frozen=True)
class OptionContractSpec:
    id: int
    label: str
    underlying: str
    strike_price: float
    is_call: bool
    # Annualised, captured when the table was built.
    time_to_expiry: float
    open_interest: int
    multiplier: float
    min_increment: float
    active: bool
    date_live: datetime
    date_expires: datetime
    collateral_asset: str
    is_ecp_only: bool


@dataclass(frozen=True)
class FutureContractSpec:
    raw: RawContractSpec

    @property
    def id(self) -> int:
        return self.raw.id

    @property
    def label(self) -> str:
        return self.raw.label


@dataclass(frozen=True)
class SwapSpec:
    raw: RawContractSpec

    @property
    def id(self) -> int:
        return self.raw.id

    @property
    def label(self) -> str:
        return self.raw.label


ContractSpec = Union[FutureContractSpec, OptionContractSpec, SwapSpec]


def as_option(spec: ContractSpec | None) -> OptionContractSpec | None:
    """Return ``spec`` if it is an option, otherwise ``None``."""

    if isinstance(spec, OptionContractSpec):
        return spec
    return None


__all__ = [
    "ContractSpec",
    "FutureContractSpec",
    "OptionContractSpec",
    "RawContractSpec",
    "RawContractSpecTable",
    "SwapSpec",
    "as_option",
]
