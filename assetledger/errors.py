"""
Domain exceptions.

Services raise these; main.py maps every DomainError to a JSON response using
its ``status_code``. Each failure is scoped to the single requested action.
"""


class DomainError(Exception):
    """Base class for all domain failures"""

    status_code = 400

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class ValidationError(DomainError):
    """Caller-supplied data violates an invariant; nothing was written"""

    status_code = 422


class NotFound(DomainError):
    """Referenced record does not exist"""

    status_code = 404


class InsufficientStock(DomainError):
    """Issue quantity exceeds the stock on hand; consumable untouched"""

    status_code = 409


class AlreadyReversed(DomainError):
    """Issue log entry was already revoked; stock is not credited twice"""

    status_code = 409


class ConflictError(DomainError):
    """Unique constraint violated (duplicate tag, serial or code)"""

    status_code = 409


class ConcurrentModification(DomainError):
    """Record changed since it was read; the write was rejected"""

    status_code = 409


class StoreUnavailable(DomainError):
    """Record store timed out or lost its connection. Already committed steps stay committed."""

    status_code = 503


class PartialCascadeFailure(DomainError):
    """Some but not all primary steps of a cascade succeeded"""

    status_code = 207

    def __init__(self, detail: str, report: dict):
        super().__init__(detail)
        self.report = report
