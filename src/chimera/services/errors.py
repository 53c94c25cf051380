"""Service-layer exceptions."""


class FactoryError(Exception):
    """Raised when a runtime entity cannot be created from a catalog id."""


class ProgressionError(Exception):
    """Raised when a progression request cannot be honoured (e.g. too few skill points)."""
