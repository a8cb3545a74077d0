"""Exceptions for the short link service layer.

Four kinds are caller-facing and expected: invalid input, code collision,
unknown code and expired code. ShortCodeGenerationError signals an internal
failure and is surfaced as a generic server error.
"""


class ServiceError(Exception):
    """Base exception for all service-level errors."""
    pass


class InvalidInputError(ServiceError):
    """The request arguments failed validation."""
    pass


class InvalidURLError(InvalidInputError):
    """The target URL is empty or not an absolute URL."""
    pass


class InvalidValidityError(InvalidInputError):
    """The validity is not a positive integer number of minutes."""
    pass


class CodeCollisionError(ServiceError):
    """The requested custom code is already in use."""
    pass


class URLNotFoundError(ServiceError):
    """No entry exists for the short code."""
    pass


class URLExpiredError(ServiceError):
    """The entry exists but its validity has lapsed."""
    pass


class ShortCodeGenerationError(ServiceError):
    """Failed to generate a unique short code within the retry budget."""
    pass
