"""
Typed exceptions raised by the service layer.

Every error carries a machine-readable ``code`` so API handlers and callers
can branch on type instead of parsing messages:

    RestaurantError
    |
    +-- ValidationError       malformed or missing input, raised before any write
    +-- NotFoundError         referenced row absent for the account
    +-- PersistenceError      the database rejected a read or write
    +-- PartialFailureError   first write of a multi-step operation committed,
                              a later write failed; reported as a warning
"""

from typing import Any, Optional


class RestaurantError(Exception):
    code: str = "RESTAURANT_ERROR"

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class ValidationError(RestaurantError):
    code = "VALIDATION_ERROR"

    def __init__(self, message: str, field: Optional[str] = None):
        self.field = field
        super().__init__(message)


class NotFoundError(RestaurantError):
    code = "NOT_FOUND"

    def __init__(self, entity: str, entity_id: Any):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} not found: {entity_id}")


class PersistenceError(RestaurantError):
    code = "PERSISTENCE_ERROR"


class PartialFailureError(RestaurantError):
    """The primary effect succeeded; ``result`` holds what was committed."""

    code = "PARTIAL_FAILURE"

    def __init__(self, message: str, result: Any = None):
        self.result = result
        super().__init__(message)
