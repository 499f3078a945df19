"""Custom exceptions for resource loading and validation."""


class DataError(Exception):
    """Base exception for the data layer."""


class DataLoadError(DataError):
    """Raised when a resource is missing, unreachable or not valid JSON."""


class DataValidationError(DataError):
    """Raised when JSON content fails structural validation."""
