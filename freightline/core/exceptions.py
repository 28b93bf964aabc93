"""
Domain Errors

    FreightlineError (base)
    |
    +-- NotFound
    +-- InvalidState
    +-- DuplicateEntry
    +-- InsufficientStock
    +-- InsufficientBalance
    +-- DriverUnavailable
    +-- MissingDriver

Every error carries a machine-readable `code` so the API layer can map it
to a response without parsing the message.
"""


class FreightlineError(Exception):
    """Base class for all domain errors"""
    code: str = "FREIGHTLINE_ERROR"

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class NotFound(FreightlineError):
    """A referenced id does not resolve"""
    code = "NOT_FOUND"

    def __init__(self, entity: str, entity_id, message: str = None):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(message or f"{entity} with ID {entity_id} not found")


class InvalidState(FreightlineError):
    """Operation is illegal in the current lifecycle state"""
    code = "INVALID_STATE"


class DuplicateEntry(FreightlineError):
    """Uniqueness violation on a business key"""
    code = "DUPLICATE_ENTRY"


class InsufficientStock(FreightlineError):
    code = "INSUFFICIENT_STOCK"

    def __init__(self, message: str, available: int = 0, requested: int = 0):
        self.available = available
        self.requested = requested
        super().__init__(message)


class InsufficientBalance(FreightlineError):
    code = "INSUFFICIENT_BALANCE"

    def __init__(self, message: str, balance=None, amount=None):
        self.balance = balance
        self.amount = amount
        super().__init__(message)


class DriverUnavailable(FreightlineError):
    code = "DRIVER_UNAVAILABLE"


class MissingDriver(FreightlineError):
    code = "MISSING_DRIVER"
