# Core modules

from .config import settings, get_settings, Settings
from .errors import CartError, NotFoundError, CartValidationError, BackendError, ErrorKind

__all__ = [
    "settings",
    "get_settings",
    "Settings",
    "CartError",
    "NotFoundError",
    "CartValidationError",
    "BackendError",
    "ErrorKind",
]
