"""Pure reconciliation rules for payments and expenses.

Nothing in this module touches storage. Every function takes an obligation
(anything exposing ``amount``, ``paid_amount``, ``due_date``, ``paid_date`` and
``status``) and returns plain values, so the same rules back the in-memory
store, the SQL store and the dashboard folds.
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from datetime import date
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Callable, Dict, Hashable, Iterable, Optional, Protocol

from rentledger.domains.rentals.ledger.errors import InvalidAmount

STATUS_PENDING = "pending"
STATUS_OVERDUE = "overdue"
STATUS_PAID = "paid"
STATUSES = (STATUS_PENDING, STATUS_OVERDUE, STATUS_PAID)

CENT = Decimal("0.01")
ZERO = Decimal("0")


class Obligation(Protocol):
    amount: Any
    paid_amount: Any
    due_date: Any
    paid_date: Any
    status: str


@dataclass(frozen=True)
class PaymentMetadata:
    """Optional details that travel with a recorded payment."""

    paid_date: Optional[date] = None
    method: Optional[str] = None
    reference: Optional[str] = None
    notes: Optional[str] = None

    @classmethod
    def from_mapping(cls, data: Optional[dict]) -> "PaymentMetadata":
        data = data or {}
        return cls(
            paid_date=coerce_date(data.get("paid_date")) if data.get("paid_date") else None,
            method=data.get("method"),
            reference=data.get("reference"),
            notes=data.get("notes"),
        )

    def provided_fields(self) -> Dict[str, str]:
        """method/reference/notes that were supplied, persisted verbatim."""
        fields = {"method": self.method, "reference": self.reference, "notes": self.notes}
        return {k: v for k, v in fields.items() if v is not None}


def to_money(value: Any) -> Decimal:
    """Normalise a stored amount (Decimal, float, int or str) to cents."""
    if value is None:
        return ZERO
    if isinstance(value, Decimal):
        return value.quantize(CENT, rounding=ROUND_HALF_UP)
    return Decimal(str(value)).quantize(CENT, rounding=ROUND_HALF_UP)


def coerce_date(value: Any) -> date:
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value))


def validate_increment(payment_amount: Any) -> Decimal:
    """Return the increment as cents or raise ``InvalidAmount``.

    Rejects booleans, non-numeric input, NaN/infinity and anything that is
    not strictly positive once rounded to cents.
    """
    if payment_amount is None or isinstance(payment_amount, bool):
        raise InvalidAmount()
    try:
        raw = Decimal(str(payment_amount).strip())
    except (InvalidOperation, ValueError, TypeError):
        raise InvalidAmount() from None
    if not raw.is_finite():
        raise InvalidAmount()
    amount = raw.quantize(CENT, rounding=ROUND_HALF_UP)
    if amount <= ZERO:
        raise InvalidAmount()
    return amount


def status_for(amount: Any, paid_amount: Any, due_date: Any, as_of: Optional[date] = None) -> str:
    """The status rule itself: paid beats overdue, overdue beats pending."""
    as_of = as_of or date.today()
    if to_money(paid_amount) >= to_money(amount):
        return STATUS_PAID
    if coerce_date(due_date) < as_of:
        return STATUS_OVERDUE
    return STATUS_PENDING


def derive_status(obligation: Obligation, as_of: Optional[date] = None) -> str:
    return status_for(obligation.amount, obligation.paid_amount, obligation.due_date, as_of)


def is_sweepable(obligation: Obligation, as_of: Optional[date] = None) -> bool:
    """True when an overdue sweep at ``as_of`` would flip this obligation."""
    as_of = as_of or date.today()
    return (
        obligation.status == STATUS_PENDING
        and to_money(obligation.paid_amount) < to_money(obligation.amount)
        and coerce_date(obligation.due_date) < as_of
    )


def balance(obligation: Obligation) -> Decimal:
    """Amount still owed; negative when the obligation is overpaid."""
    return to_money(obligation.amount) - to_money(obligation.paid_amount)


def is_overpaid(obligation: Obligation) -> bool:
    return to_money(obligation.paid_amount) > to_money(obligation.amount)


def apply_payment(
    obligation: Obligation,
    payment_amount: Any,
    metadata: Optional[PaymentMetadata] = None,
    today: Optional[date] = None,
) -> Dict[str, Any]:
    """Compute the field changes produced by paying ``payment_amount`` now.

    ``payment_amount`` is an increment, never the new total. ``paid_date`` is
    only written when the obligation becomes paid.
    """
    increment = validate_increment(payment_amount)
    metadata = metadata or PaymentMetadata()
    today = today or date.today()

    new_paid = to_money(obligation.paid_amount) + increment
    new_status = status_for(obligation.amount, new_paid, obligation.due_date, today)
    changes: Dict[str, Any] = {"paid_amount": new_paid, "status": new_status}
    if new_status == STATUS_PAID:
        changes["paid_date"] = metadata.paid_date or today
    changes.update(metadata.provided_fields())
    return changes


def reconcile_fields(obligation: Obligation, today: Optional[date] = None) -> Dict[str, Any]:
    """Status (and settle date) an obligation should carry after an edit."""
    today = today or date.today()
    status = derive_status(obligation, today)
    changes: Dict[str, Any] = {"status": status}
    if status == STATUS_PAID and not obligation.paid_date:
        changes["paid_date"] = today
    return changes


@dataclass
class LedgerMetrics:
    total_amount: Decimal = ZERO
    paid_amount: Decimal = ZERO
    pending_count: int = 0
    overdue_count: int = 0
    count: int = 0

    @property
    def paid_count(self) -> int:
        return self.count - self.pending_count - self.overdue_count

    @property
    def outstanding(self) -> Decimal:
        return self.total_amount - self.paid_amount

    @property
    def percent_paid(self) -> float:
        if self.total_amount == ZERO:
            return 0.0
        return float((self.paid_amount / self.total_amount * 100).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))

    def add(self, obligation: Obligation, as_of: date) -> None:
        self.total_amount += to_money(obligation.amount)
        self.paid_amount += to_money(obligation.paid_amount)
        self.count += 1
        status = derive_status(obligation, as_of)
        if status == STATUS_PENDING:
            self.pending_count += 1
        elif status == STATUS_OVERDUE:
            self.overdue_count += 1

    def to_dict(self) -> dict:
        return {
            "total_amount": float(self.total_amount),
            "paid_amount": float(self.paid_amount),
            "outstanding": float(self.outstanding),
            "pending_count": self.pending_count,
            "overdue_count": self.overdue_count,
            "paid_count": self.paid_count,
            "count": self.count,
            "percent_paid": self.percent_paid,
        }


def summarize(obligations: Iterable[Obligation], as_of: Optional[date] = None) -> LedgerMetrics:
    as_of = as_of or date.today()
    metrics = LedgerMetrics()
    for obligation in obligations:
        metrics.add(obligation, as_of)
    return metrics


def summarize_by(
    obligations: Iterable[Obligation],
    key: Callable[[Obligation], Hashable],
    as_of: Optional[date] = None,
) -> Dict[Hashable, LedgerMetrics]:
    as_of = as_of or date.today()
    groups: Dict[Hashable, LedgerMetrics] = defaultdict(LedgerMetrics)
    for obligation in obligations:
        groups[key(obligation)].add(obligation, as_of)
    return dict(groups)
