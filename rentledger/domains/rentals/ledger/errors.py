"""Ledger error taxonomy.

Controllers never catch these individually; the app factory maps each class
to a JSON response (see ``rentledger._register_error_handlers``).
"""

from __future__ import annotations


class LedgerError(Exception):
    """Base class for ledger failures."""

    code = "ledger_error"
    status_code = 500
    message = "Ledger operation failed"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.message)


class InvalidAmount(LedgerError, ValueError):
    """Increment is non-numeric, non-finite, zero or negative."""

    code = "invalid_amount"
    status_code = 400
    message = "Invalid payment amount"


class NotFound(LedgerError, LookupError):
    """Obligation does not exist under the caller's owner scope."""

    code = "not_found"
    status_code = 404
    message = "Obligation not found"


class StorageFailure(LedgerError, RuntimeError):
    """The persistence layer raised; the original error is chained."""

    code = "storage_failure"
    status_code = 500
    message = "The ledger could not be updated, please try again"
