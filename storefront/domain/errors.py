# storefront/domain/errors.py


class StorefrontError(Exception):
    """Base class for errors raised by the storefront core."""


class NotFoundError(StorefrontError, LookupError):
    """A product, user or cart item does not exist."""


class InvalidQuantityError(StorefrontError, ValueError):
    """A quantity reached the core with the wrong type or range."""


class InUseError(StorefrontError):
    """A product cannot be deleted while a cart still references it."""


class PersistenceError(StorefrontError):
    """The database rejected or failed a write."""
