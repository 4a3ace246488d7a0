"""Custom exceptions for the storefront state container."""


class StorefrontError(Exception):
    """Base exception for all storefront errors."""


class ValidationError(StorefrontError):
    """Raised when a required selection or input is missing or invalid.

    Recovered locally by the store and surfaced as a transient notification.
    """


class RemoteValidationError(ValidationError):
    """Raised when the remote API rejects a payload (HTTP 400/422)."""


class NetworkError(StorefrontError):
    """Raised when a remote call fails to complete (transport error, timeout, 5xx)."""


class NotFoundError(StorefrontError):
    """Raised when the remote API reports a missing resource."""

    def __init__(self, resource: str) -> None:
        """Initialize NotFoundError.

        Args:
            resource: Description of the resource that was not found.
        """
        super().__init__(f"Not found: {resource}")
        self.resource = resource


class AuthorizationError(StorefrontError):
    """Raised when a privileged call is made with a missing or expired token."""


class DataIntegrityError(StorefrontError):
    """Raised when persisted state is malformed.

    Never surfaced to the user; the offending slice is discarded.
    """
