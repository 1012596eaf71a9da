# storefront/domain/errors.py


class StorefrontError(Exception):
    """Base class for errors raised by storefront services."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(StorefrontError):
    pass


class InvalidRequestError(StorefrontError):
    pass


class ConflictError(StorefrontError):
    pass


class UpstreamUnavailableError(StorefrontError):
    """Chat or payment provider is not configured or did not answer."""


class StorageError(StorefrontError):
    """Storage backend failed; nothing from the failed operation was kept."""
