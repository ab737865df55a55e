"""
Domain errors for the ordering core.
"""


class OrderingError(ValueError):
    """Base error for rejected ordering operations."""
    code = "VALIDATION_ERROR"

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class InvalidInputError(OrderingError):
    """Missing or malformed input (empty cart, bad quantity, missing client fields)."""
    code = "VALIDATION_ERROR"


class UnknownReferenceError(OrderingError):
    """Referenced product, client, order or user does not exist."""
    code = "NOT_FOUND"


class InvalidTransitionError(OrderingError):
    """Order status change not allowed from the current status."""
    code = "INVALID_STATE"


class SnapshotVersionError(OrderingError):
    """Stored snapshot has a version this code cannot read."""
    code = "INVALID_SNAPSHOT"
