class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class ConfigurationError(DomainError):
    """Raised when a boundary is misconfigured (bad ring, bad radius, bad window)."""


class PersistenceError(DomainError):
    """Raised when a decided attendance event could not be stored."""


class SubmissionError(DomainError):
    """Raised when a sample could not reach the backend (network, timeout, 5xx)."""


class SampleRejectedError(SubmissionError):
    """Raised when the backend definitively refuses a sample (4xx)."""


class LocationUnavailableError(DomainError):
    """Raised when the location provider cannot produce a fix."""


class LocationPermissionError(LocationUnavailableError):
    """Raised when the user has not granted location permission."""
