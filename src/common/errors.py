"""Exception types raised by the market-data client, contract table and order API."""

from __future__ import annotations

from typing import Optional


class DerivsClientError(Exception):
    """Base class for every error raised by this package."""


class ConnectionFailedError(DerivsClientError):
    """Raised when the websocket URL is invalid, the handshake fails or the connection drops."""

    def __init__(self, endpoint: str, reason: str) -> None:
        super().__init__(f"connecting to {endpoint} failed: {reason}")
        self.endpoint = endpoint
        self.reason = reason


class MessageParsingError(DerivsClientError):
    """Raised when a payload does not match its expected schema."""

    def __init__(self, detail: str, line: int, column: int) -> None:
        super().__init__(f"{detail} at line {line} column {column}")
        self.detail = detail
        self.line = line
        self.column = column


class UnknownMessageTypeError(DerivsClientError):
    """Raised when a text frame carries none of the known type tags."""

    def __init__(self, payload: str) -> None:
        super().__init__(f"unknown message type: {payload}")
        self.payload = payload


class UnimplementedError(DerivsClientError, NotImplementedError):
    """A well-formed input whose kind this client has not been taught to handle."""


class UnimplementedWireFrameError(UnimplementedError):
    def __init__(self, frame_type: str) -> None:
        super().__init__(f"unimplemented websocket frame type: {frame_type}")
        self.frame_type = frame_type


class UnimplementedContractTypeError(UnimplementedError):
    def __init__(self, derivative_type: str, contract_id: Optional[int] = None) -> None:
        super().__init__(
            f"unimplemented derivative type {derivative_type!r} (contract {contract_id})"
        )
        self.derivative_type = derivative_type
        self.contract_id = contract_id


class ContractNormalizationError(DerivsClientError):
    """Raised when a raw contract record cannot be turned into a typed spec."""


class DuplicateContractError(DerivsClientError):
    """Raised when a contract snapshot repeats an id or a label."""


class ContractFetchError(DerivsClientError):
    """Raised when the contract list cannot be fetched."""

    def __init__(self, status: Optional[int], detail: str) -> None:
        super().__init__(f"contract fetch failed ({status}): {detail}")
        self.status = status
        self.detail = detail


class OrderRequestError(DerivsClientError):
    """Raised when the order API rejects a request."""

    def __init__(self, status: Optional[int], detail: str) -> None:
        super().__init__(f"order request failed ({status}): {detail}")
        self.status = status
        self.detail = detail


__all__ = [
    "ConnectionFailedError",
    "ContractFetchError",
    "ContractNormalizationError",
    "DerivsClientError",
    "DuplicateContractError",
    "MessageParsingError",
    "OrderRequestError",
    "UnimplementedContractTypeError",
    "UnimplementedError",
    "UnimplementedWireFrameError",
    "UnknownMessageTypeError",
]
