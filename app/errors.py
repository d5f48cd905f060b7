"""Domain errors raised by the Shopify stock services.

Every error carries the HTTP status it maps to, so request handlers never
have to inspect message text to pick a response code.
"""
import json
from typing import Any, Dict, List, Optional


class BridgeError(Exception):
    """Base class for failures reported back to the caller."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(BridgeError):
    """Malformed or missing request fields."""

    status_code = 400


class NotFoundError(BridgeError):
    """Variant, product or custom stock value could not be found."""

    status_code = 404


class InsufficientStockError(BridgeError):
    """A decrement would drive the custom stock below zero."""

    status_code = 409

    def __init__(self, current_stock: int, decrease_by: int):
        super().__init__(
            f"Insufficient stock (Current: {current_stock}) to decrease by {decrease_by}."
        )
        self.current_stock = current_stock
        self.decrease_by = decrease_by


class RemoteCommunicationError(BridgeError):
    """A call to one of the Shopify GraphQL endpoints failed."""

    def __init__(self, message: str, detail: Optional[str] = None):
        super().__init__(message)
        self.detail = detail


class MetafieldUpdateError(BridgeError):
    """Shopify rejected a metafield write."""

    def __init__(self, user_errors: List[Dict[str, Any]], message: Optional[str] = None):
        super().__init__(message or "Shopify Metafield Update Error: " + json.dumps(user_errors))
        self.user_errors = user_errors
