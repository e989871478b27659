"""Payment and expense ledger reconciliation."""

from rentledger.domains.rentals.ledger.errors import (  # noqa: F401
    InvalidAmount,
    LedgerError,
    NotFound,
    StorageFailure,
)
from rentledger.domains.rentals.ledger.reconciliation import (  # noqa: F401
    STATUS_OVERDUE,
    STATUS_PAID,
    STATUS_PENDING,
    LedgerMetrics,
    PaymentMetadata,
    derive_status,
)
from rentledger.domains.rentals.ledger.registry import Ledgers, build_ledgers, get_ledgers  # noqa: F401
from rentledger.domains.rentals.ledger.service import LedgerService  # noqa: F401
