"""Contract reference data: raw REST rows, normaliser and dual-indexed table."""

from .fetch import build_contract_table, fetch_raw_contracts  # noqa: F401
from .models import (  # noqa: F401
    ContractSpec,
    FutureContractSpec,
    OptionContractSpec,
    RawContractSpec,
    RawContractSpecTable,
    SwapSpec,
    as_option,
)
from .normalize import normalize, parse_venue_datetime  # noqa: F401
from .table import ContractSpecTable  # noqa: F401

__all__ = [
    "ContractSpec",
    "ContractSpecTable",
    "FutureContractSpec",
    "OptionContractSpec",
    "RawContractSpec",
    "RawContractSpecTable",
    "SwapSpec",
    "as_option",
    "build_contract_table",
    "fetch_raw_contracts",
    "normalize",
    "parse_venue_datetime",
]
