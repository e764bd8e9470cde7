"""
Domain exceptions.

Domain exceptions represent business rule violations
and domain-specific error conditions.
"""


class DomainException(Exception):
    """Base exception for all domain exceptions."""

    def __init__(self, message: str, code: str = None):
        """
        Initialize domain exception.

        Args:
            message: Human-readable error message
            code: Machine-readable error code
        """
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__


class DomainValidationError(DomainException):
    """Raised when a request carries malformed or disallowed values."""

    def __init__(self, message: str = "Invalid request"):
        super().__init__(message, code="VALIDATION_ERROR")


class NotFoundError(DomainException):
    """Base exception for missing owners, products, features or keys."""

    pass


class AccountNotFoundError(NotFoundError):
    """Raised when an account is not found."""

    def __init__(self, message: str = "Account not found"):
        super().__init__(message, code="ACCOUNT_NOT_FOUND")


class ProductNotFoundError(NotFoundError):
    """Raised when a product is not found."""

    def __init__(self, message: str = "Product not found"):
        super().__init__(message, code="PRODUCT_NOT_FOUND")


class FeatureNotFoundError(NotFoundError):
    """Raised when a catalog feature is not found."""

    def __init__(self, message: str = "Feature not found"):
        super().__init__(message, code="FEATURE_NOT_FOUND")


class LicenseNotFoundError(NotFoundError):
    """Raised when a license key is not found."""

    def __init__(self, message: str = "License not found"):
        super().__init__(message, code="LICENSE_NOT_FOUND")


class FeatureNotEntitledError(NotFoundError):
    """Raised when a license key holds no grant for a feature."""

    def __init__(self, message: str = "License key does not apply to this feature"):
        super().__init__(message, code="FEATURE_NOT_ENTITLED")


class ConflictError(DomainException):
    """Base exception for state conflicts."""

    pass


class DuplicateLicenseError(ConflictError):
    """Raised when an owner already holds a license for a product."""

    def __init__(self, message: str = "Owner already has a license for this product"):
        super().__init__(message, code="LICENSE_ALREADY_EXISTS")


class DuplicateLicenseSecretError(ConflictError):
    """Raised when a generated license secret collides with a stored one."""

    def __init__(self, message: str = "License key collision"):
        super().__init__(message, code="LICENSE_KEY_COLLISION")


class ConcurrentUpdateError(ConflictError):
    """Raised when a license key was modified by another request."""

    def __init__(self, message: str = "License key was modified concurrently"):
        super().__init__(message, code="CONCURRENT_UPDATE")


class FeatureStateConflictError(ConflictError):
    """Raised when restoring a feature that is still allowed."""

    def __init__(self, message: str = "Feature is already allowed"):
        super().__init__(message, code="FEATURE_STATE_CONFLICT")


class InvalidLicenseKeyError(DomainException):
    """Raised when a license secret does not verify."""

    def __init__(self, message: str = "Invalid license key"):
        super().__init__(message, code="INVALID_LICENSE_KEY")


class LicenseAlreadyActiveError(DomainException):
    """Raised when activating a key that is already active."""

    def __init__(self, message: str = "License key is already active"):
        super().__init__(message, code="LICENSE_ALREADY_ACTIVE")


class LicenseSuspendedError(DomainException):
    """Raised when a license is suspended."""

    def __init__(self, message: str = "License is suspended"):
        super().__init__(message, code="LICENSE_SUSPENDED")


class LicenseNotActiveError(DomainException):
    """Raised when feature usage is requested on a key that is not active."""

    def __init__(self, message: str = "The license key has not been activated", status: str = None):
        super().__init__(message, code="LICENSE_NOT_ACTIVE")
        self.status = status


class QuotaExceededError(DomainException):
    """Raised when a feature exceeds its daily usage limit."""

    def __init__(self, message: str = "Feature has exceeded its usage limit"):
        super().__init__(message, code="QUOTA_EXCEEDED")


class FeatureSuspendedError(DomainException):
    """Raised when a feature is disabled until restored."""

    def __init__(self, message: str = "Feature disabled due to repeated violations"):
        super().__init__(message, code="FEATURE_SUSPENDED")
