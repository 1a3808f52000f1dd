"""Custom domain exceptions for the application."""

# Stable, machine-readable error codes for API consumers.
NOT_FOUND = "NOT_FOUND"
DUPLICATE_RESOURCE = "DUPLICATE_RESOURCE"
VALIDATION_ERROR = "VALIDATION_ERROR"
MARKETPLACE_ERROR = "MARKETPLACE_ERROR"


class DomainError(Exception):
    """Base exception for domain/business logic errors."""

    pass


class NotFoundError(DomainError):
    """Raised when a requested resource does not exist."""

    pass


class DuplicateResourceError(DomainError):
    """Raised when attempting to create a resource that would violate a uniqueness constraint."""

    pass


class DomainValidationError(DomainError):
    """Raised when business rules or domain validation fail."""

    pass


class ConfigInvalidError(DomainError):
    """Raised at startup when the marketplace configuration cannot be honoured."""

    pass


class MarketplaceError(DomainError):
    """Base exception for failures of marketplace operations.

    The lower-layer error is always attached as ``__cause__``.
    """

    pass


class UnknownBundleError(NotFoundError, MarketplaceError):
    """Raised when no configured source serves the requested bundle."""

    pass


class BundleFetchError(MarketplaceError):
    """Raised when a bundle source fails to list or return a bundle."""

    pass


class QueryError(MarketplaceError):
    """Raised when reading subscriptions from the store fails."""

    pass


class BundleUpsertError(MarketplaceError):
    """Raised when the bundle row cannot be ensured in the store."""

    pass


class SubscriptionCreateError(MarketplaceError):
    """Raised when the subscription row cannot be inserted (including uniqueness races)."""

    pass


class RulesCreateError(MarketplaceError):
    """Raised when importing the rule types of a bundle into a project fails."""

    pass


class NotSubscribedError(DomainValidationError, MarketplaceError):
    """Raised when installing a profile from a bundle the project is not subscribed to."""

    pass


class BundleProfileError(NotFoundError, MarketplaceError):
    """Raised when a profile cannot be read from the bundle."""

    pass


class ProfileCreateError(MarketplaceError):
    """Raised when the profile cannot be created in the project."""

    pass
