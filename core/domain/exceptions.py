"""
Domain exceptions.

Domain exceptions represent business rule violations
and domain-specific error conditions. Each family maps to
one HTTP status in api.exceptions.
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


class UnauthorizedError(DomainException):
    """Missing, malformed, invalid or expired credential, or unknown principal."""

    def __init__(self, message: str = "Unauthorized", code: str = "UNAUTHORIZED"):
        super().__init__(message, code=code)


class InvalidTokenError(UnauthorizedError):
    """Raised when an access token fails signature, expiry or issuer checks."""

    def __init__(self, message: str = "Invalid or expired token"):
        super().__init__(message, code="INVALID_TOKEN")


class MalformedClaimsError(UnauthorizedError):
    """Raised when verified claims carry a subject that is not a user id."""

    def __init__(self, message: str = "Invalid user id in token"):
        super().__init__(message, code="MALFORMED_CLAIMS")


class InvalidCredentialsError(UnauthorizedError):
    """Raised when email/password or a refresh token does not check out."""

    def __init__(self, message: str = "Invalid email or password"):
        super().__init__(message, code="INVALID_CREDENTIALS")


class ForbiddenError(DomainException):
    """Valid principal without the required role or ownership."""

    def __init__(self, message: str = "Access denied", code: str = "FORBIDDEN"):
        super().__init__(message, code=code)


class BadRequestError(DomainException):
    """Raised for malformed input payloads."""

    def __init__(self, message: str = "Invalid request body", code: str = "BAD_REQUEST"):
        super().__init__(message, code=code)


class NotFoundError(DomainException):
    """Base exception for missing resources."""

    def __init__(self, message: str = "Resource not found", code: str = "NOT_FOUND"):
        super().__init__(message, code=code)


class ConflictError(DomainException):
    """Base exception for state conflicts."""

    def __init__(self, message: str = "Conflict", code: str = "CONFLICT"):
        super().__init__(message, code=code)


class StorageError(DomainException):
    """Raised when the datastore is unavailable or rejects a write."""

    def __init__(self, message: str = "Storage unavailable"):
        super().__init__(message, code="INTERNAL_ERROR")


class DeadlineExceededError(DomainException):
    """Raised when an operation outlives the caller's deadline."""

    def __init__(self, message: str = "Request deadline exceeded"):
        super().__init__(message, code="DEADLINE_EXCEEDED")


class UserNotFoundError(NotFoundError):
    """Raised when a user is not found."""

    def __init__(self, message: str = "User not found"):
        super().__init__(message, code="USER_NOT_FOUND")


class UserExistsError(ConflictError):
    """Raised when registering an email that is already taken."""

    def __init__(self, message: str = "User with this email already exists"):
        super().__init__(message, code="USER_EXISTS")


class LicenseNotFoundError(NotFoundError):
    """Raised when a license is not found."""

    def __init__(self, message: str = "License not found"):
        super().__init__(message, code="LICENSE_NOT_FOUND")


class LicenseExpiredError(ForbiddenError):
    """Raised when a license has expired."""

    def __init__(self, message: str = "License has expired"):
        super().__init__(message, code="LICENSE_EXPIRED")


class LicenseRevokedError(ForbiddenError):
    """Raised when a license has been revoked."""

    def __init__(self, message: str = "License has been revoked"):
        super().__init__(message, code="LICENSE_REVOKED")


class HardwareMismatchError(ConflictError):
    """Raised when a bound license is presented by different hardware."""

    def __init__(self, message: str = "License is bound to different hardware"):
        super().__init__(message, code="HARDWARE_MISMATCH")


class QuotaExceededError(ConflictError):
    """Raised when a license limit would be exceeded."""

    def __init__(self, message: str = "Activation limit reached"):
        super().__init__(message, code="QUOTA_EXCEEDED")


class ActivationNotFoundError(NotFoundError):
    """Raised when an activation is not found."""

    def __init__(self, message: str = "Activation not found"):
        super().__init__(message, code="ACTIVATION_NOT_FOUND")
