"""コアモジュール.

例外階層を提供します。
"""

from storefront.core.exceptions import (
    AuthorizationError,
    DataIntegrityError,
    NetworkError,
    NotFoundError,
    RemoteValidationError,
    StorefrontError,
    ValidationError,
)


__all__ = [
    "AuthorizationError",
    "DataIntegrityError",
    "NetworkError",
    "NotFoundError",
    "RemoteValidationError",
    "StorefrontError",
    "ValidationError",
]
