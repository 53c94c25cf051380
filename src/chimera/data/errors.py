"""Exceptions raised while loading catalog definitions."""


class DataError(Exception):
    """Base exception for the catalog data layer."""


class DataLoadError(DataError):
    """Raised when a definition file is missing or is not valid JSON."""


class DataValidationError(DataError):
    """Raised when a definition fails structural validation."""


class DataReferenceError(DataError):
    """Raised when a definition references a body-part type or item that does not exist."""
