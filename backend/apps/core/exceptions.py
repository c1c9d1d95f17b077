"""Error taxonomy shared by every ledger service.

Services raise these; the API exception handler renders them. Each carries an
HTTP status so views never have to translate them by hand.
"""

from contextlib import contextmanager

from django.db import DataError, OperationalError, transaction
from rest_framework import status
from rest_framework.exceptions import APIException


class LedgerError(APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Ledger operation failed."
    default_code = "ledger_error"


class ValidationError(LedgerError):
    default_detail = "Invalid input."
    default_code = "validation_error"

    def __init__(self, detail=None, field: str | None = None):
        super().__init__(detail)
        self.field = field


class NotFound(LedgerError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Not found."
    default_code = "not_found"


class InsufficientStock(LedgerError):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "Not enough stock for this exit."
    default_code = "insufficient_stock"


class InvalidTransition(LedgerError):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "Illegal status change."
    default_code = "invalid_transition"


class ConcurrencyConflict(LedgerError):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "The record was changed concurrently, try again."
    default_code = "concurrency_conflict"


# serialization_failure, deadlock_detected, lock_not_available
CONFLICT_SQLSTATES = {"40001", "40P01", "55P03"}


def is_conflict(exc: OperationalError) -> bool:
    cause = exc.__cause__
    sqlstate = getattr(cause, "sqlstate", None) or getattr(cause, "pgcode", None)
    if sqlstate in CONFLICT_SQLSTATES:
        return True
    return "database is locked" in str(exc).lower()


@contextmanager
def ledger_transaction():
    """transaction.atomic() that reports write conflicts as ConcurrencyConflict and out-of-range values as ValidationError."""
    try:
        with transaction.atomic():
            yield
    except DataError as exc:
        raise ValidationError("A value is out of range for the ledger.") from exc
    except OperationalError as exc:
        if is_conflict(exc):
            raise ConcurrencyConflict() from exc
        raise
