"""
Application exceptions raised by the ordering core and services.

Routes translate them into JSON error responses through the handlers
registered in ``main.py``.
"""

from typing import Any, Dict, Optional


class BaseApplicationError(Exception):
    """Base class for all application errors."""

    status_code = 400

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)


class ValidationError(BaseApplicationError):
    """Input rejected before any write happened."""
    status_code = 422


class NotFoundError(BaseApplicationError):
    status_code = 404


class MenuItemNotFoundError(NotFoundError):
    pass


class OrderNotFoundError(NotFoundError):
    pass


class EmptyCartError(BaseApplicationError):
    status_code = 400


class StoreClosedError(BaseApplicationError):
    """Checkout attempted while the store does not accept orders."""
    status_code = 409


class InvalidTransitionError(BaseApplicationError):
    """Requested status change is not an edge of the order workflow."""
    status_code = 409


class StaleOrderStatusError(BaseApplicationError):
    """The order moved on since the caller last saw it."""
    status_code = 409


class PersistenceError(BaseApplicationError):
    status_code = 500
