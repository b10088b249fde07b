"""Cart error types"""

from enum import Enum


class ErrorKind(str, Enum):
    NOT_FOUND = "not_found"
    VALIDATION = "validation"
    BACKEND = "backend"


class CartError(Exception):
    """Base error for cart operations"""

    kind: ErrorKind = ErrorKind.BACKEND

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(CartError):
    """Product, company, cart item or coupon could not be resolved"""

    kind = ErrorKind.NOT_FOUND


class CartValidationError(CartError):
    """Request rejected by a business rule"""

    kind = ErrorKind.VALIDATION


class BackendError(CartError):
    """Persistence call failed"""

    kind = ErrorKind.BACKEND
