"""Common utilities shared across the market-data client."""

from .config import VenueSettings, load_config  # noqa: F401
from .errors import (  # noqa: F401
    ConnectionFailedError,
    ContractFetchError,
    ContractNormalizationError,
    DerivsClientError,
    DuplicateContractError,
    MessageParsingError,
    OrderRequestError,
    UnimplementedContractTypeError,
    UnimplementedError,
    UnimplementedWireFrameError,
    UnknownMessageTypeError,
)
from .logging import log_level_from_config, setup_logging  # noqa: F401
from .models import RawModel  # noqa: F401

__all__ = [
    "ConnectionFailedError",
    "ContractFetchError",
    "ContractNormalizationError",
    "DerivsClientError",
    "DuplicateContractError",
    "MessageParsingError",
    "OrderRequestError",
    "RawModel",
    "UnimplementedContractTypeError",
    "UnimplementedError",
    "UnimplementedWireFrameError",
    "UnknownMessageTypeError",
    "VenueSettings",
    "load_config",
    "log_level_from_config",
    "setup_logging",
]
