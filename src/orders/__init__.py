"""Order submission against the venue's trading API."""

from .manager import Cancel, Order, OrderEdit, OrderManager, OrderResponse  # noqa: F401

__all__ = ["Cancel", "Order", "OrderEdit", "OrderManager", "OrderResponse"]
