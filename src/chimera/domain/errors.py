"""Validation errors raised before any die is rolled or any state changes."""
from __future__ import annotations

from typing import Sequence


class ValidationError(Exception):
    """Base class for recoverable precondition failures."""


class NoWeapon(ValidationError):
    """Raised when an attacker has no equipped or natural weapon to attack with."""


class NoMainHandDesignated(ValidationError):
    """Raised when several parts bear weapons and none is designated as main hand."""


class InvalidTarget(ValidationError):
    """Raised when an attack target is missing or cannot be attacked."""


class InvalidBodyPart(ValidationError):
    """Raised when a body-part id does not exist on the creature."""


class InvalidParent(ValidationError):
    """Raised when a new part would be attached to a parent that does not exist."""


class InvalidBodyPartType(ValidationError):
    """Raised when a body-part type is missing from the type catalog.

    ``added_ids`` lists parts that were already added by the same call; they
    are left in place.
    """

    def __init__(self, message: str, added_ids: Sequence[str] = ()) -> None:
        super().__init__(message)
        self.added_ids = list(added_ids)
