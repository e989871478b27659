"""Ledger reconciliation service.

Wraps one ``ObligationRepository`` (payments or expenses) with the status
rules from ``reconciliation``. Reads sweep first, so a listing never shows a
stale ``pending`` for an item whose due date has passed.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Any, Callable, Dict, Hashable, List, Mapping, Optional

from rentledger.domains.rentals.ledger import reconciliation
from rentledger.domains.rentals.ledger.errors import InvalidAmount, NotFound
from rentledger.domains.rentals.ledger.reconciliation import LedgerMetrics, PaymentMetadata
from rentledger.domains.rentals.ledger.repository import ObligationRepository

logger = logging.getLogger(__name__)

# Fields callers may never write directly; paid_amount only moves through
# record_payment.
_PROTECTED_FIELDS = {"id", "user_id", "paid_amount", "status", "created_at"}


class LedgerService:
    def __init__(self, repository: ObligationRepository, clock: Callable[[], date] = date.today) -> None:
        self.repository = repository
        self.clock = clock

    @property
    def kind(self) -> str:
        return self.repository.kind

    def today(self) -> date:
        return self.clock()

    def derive_status(self, obligation: Any, as_of: Optional[date] = None) -> str:
        return reconciliation.derive_status(obligation, as_of or self.today())

    # --- CRUD ---

    def create(self, user_id: int, values: Mapping[str, Any]):
        data = {k: v for k, v in values.items() if k not in _PROTECTED_FIELDS}
        amount = reconciliation.to_money(data.get("amount"))
        if amount <= reconciliation.ZERO:
            raise InvalidAmount("Amount must be greater than zero")
        data["amount"] = amount
        data["paid_amount"] = reconciliation.ZERO
        data["status"] = reconciliation.status_for(amount, reconciliation.ZERO, data["due_date"], self.today())
        obligation = self.repository.insert(user_id, data)
        logger.info("Created %s %s for user %s (status=%s)", self.kind, obligation.id, user_id, obligation.status)
        return obligation

    def update(self, user_id: int, obligation_id: int, values: Mapping[str, Any]):
        """Apply an edit, then re-derive status from the edited amounts."""
        data = {k: v for k, v in values.items() if k not in _PROTECTED_FIELDS}
        if "amount" in data:
            data["amount"] = reconciliation.to_money(data["amount"])
            if data["amount"] <= reconciliation.ZERO:
                raise InvalidAmount("Amount must be greater than zero")
        obligation = self.repository.update(user_id, obligation_id, data)
        if obligation is None:
            raise NotFound()
        changes = reconciliation.reconcile_fields(obligation, self.today())
        if any(getattr(obligation, key) != value for key, value in changes.items()):
            obligation = self.repository.update(user_id, obligation_id, changes)
        return obligation

    def get(self, user_id: int, obligation_id: int):
        self.sweep_overdue(user_id)
        obligation = self.repository.get(user_id, obligation_id)
        if obligation is None:
            raise NotFound()
        return obligation

    def list(self, user_id: int, **filters) -> List[Any]:
        self.sweep_overdue(user_id)
        return self.repository.list(user_id, **filters)

    def delete(self, user_id: int, obligation_id: int) -> None:
        if not self.repository.delete(user_id, obligation_id):
            raise NotFound()
        logger.info("Deleted %s %s for user %s", self.kind, obligation_id, user_id)

    # --- Reconciliation ---

    def record_payment(
        self,
        user_id: int,
        obligation_id: int,
        payment_amount: Any,
        metadata: Optional[PaymentMetadata] = None,
        on_applied: Optional[Callable[[Any], None]] = None,
    ):
        """Add ``payment_amount`` to the obligation's paid total.

        The amount is an increment. Validation happens before storage is
        touched, so an invalid amount never changes state. ``on_applied``
        receives the updated obligation before the increment is committed;
        anything it stages commits with it, and if it raises the increment
        is rolled back.
        """
        increment = reconciliation.validate_increment(payment_amount)
        metadata = metadata or PaymentMetadata()
        today = self.today()
        obligation = self.repository.apply_increment(
            user_id,
            obligation_id,
            increment,
            as_of=today,
            settle_date=metadata.paid_date or today,
            metadata=metadata.provided_fields(),
            on_applied=on_applied,
        )
        if obligation is None:
            raise NotFound()
        logger.info(
            "Recorded %s against %s %s for user %s (paid %s of %s, status=%s)",
            increment,
            self.kind,
            obligation_id,
            user_id,
            obligation.paid_amount,
            obligation.amount,
            obligation.status,
        )
        if reconciliation.is_overpaid(obligation):
            logger.warning("%s %s is overpaid by %s", self.kind, obligation_id, -reconciliation.balance(obligation))
        return obligation

    def sweep_overdue(self, user_id: int, as_of: Optional[date] = None) -> int:
        """Flip this owner's past-due unpaid ``pending`` items to ``overdue``.

        Idempotent: a second call with the same ``as_of`` changes nothing.
        """
        count = self.repository.mark_overdue(user_id, as_of or self.today())
        if count:
            logger.info("Marked %d %s item(s) overdue for user %s", count, self.kind, user_id)
        return count

    def sweep_all(self, as_of: Optional[date] = None) -> Dict[int, int]:
        as_of = as_of or self.today()
        results = {}
        for user_id in self.repository.owners_with_open_items():
            results[user_id] = self.sweep_overdue(user_id, as_of)
        return results

    def aggregate_metrics(self, user_id: int, as_of: Optional[date] = None, **filters) -> LedgerMetrics:
        as_of = as_of or self.today()
        return reconciliation.summarize(self.repository.list(user_id, **filters), as_of)

    def aggregate_by(
        self,
        user_id: int,
        key: Callable[[Any], Hashable],
        as_of: Optional[date] = None,
        **filters,
    ) -> Dict[Hashable, LedgerMetrics]:
        as_of = as_of or self.today()
        return reconciliation.summarize_by(self.repository.list(user_id, **filters), key, as_of)

    def entries(self, user_id: int, obligation_id: int) -> List[Any]:
        if self.repository.get(user_id, obligation_id) is None:
            raise NotFound()
        return self.repository.list_entries(user_id, obligation_id)

    def entries_between(self, user_id: int, start: date, end: date) -> List[Any]:
        return self.repository.entries_between(user_id, start, end)
