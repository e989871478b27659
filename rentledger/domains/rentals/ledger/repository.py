"""Obligation storage.

Two interchangeable implementations of ``ObligationRepository``:

* ``SqlAlchemyObligationRepository`` persists ``Payment`` / ``Expense`` rows.
  Payment increments run as a single UPDATE
  (``paid_amount = paid_amount + :delta``) so concurrent payments against the
  same row cannot lose an increment.
* ``InMemoryObligationRepository`` keeps dataclass records behind a lock, for
  tests and demos.

Every method is scoped by ``user_id``.
"""

from __future__ import annotations

import itertools
import logging
import threading
from contextlib import contextmanager
from dataclasses import dataclass, field, fields as dataclass_fields, replace
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Callable, Dict, Iterator, List, Mapping, Optional, Protocol

from sqlalchemy import case, delete, func, select, update
from sqlalchemy.exc import SQLAlchemyError

from rentledger.domains.rentals.ledger.errors import StorageFailure
from rentledger.domains.rentals.ledger.reconciliation import (
    STATUS_OVERDUE,
    STATUS_PAID,
    STATUS_PENDING,
    PaymentMetadata,
    apply_payment,
    coerce_date,
    is_sweepable,
    to_money,
)
from rentledger.domains.rentals.models.ledger_models import LedgerEntry
from rentledger.extensions import db

logger = logging.getLogger(__name__)


class ObligationRepository(Protocol):
    kind: str

    def get(self, user_id: int, obligation_id: int) -> Optional[Any]: ...

    def list(
        self,
        user_id: int,
        *,
        status: Optional[str] = None,
        category: Optional[str] = None,
        tenant_id: Optional[int] = None,
        due_from: Optional[date] = None,
        due_to: Optional[date] = None,
    ) -> List[Any]: ...

    def insert(self, user_id: int, values: Mapping[str, Any]) -> Any: ...

    def update(self, user_id: int, obligation_id: int, values: Mapping[str, Any]) -> Optional[Any]: ...

    def delete(self, user_id: int, obligation_id: int) -> bool: ...

    def apply_increment(
        self,
        user_id: int,
        obligation_id: int,
        delta: Decimal,
        *,
        as_of: date,
        settle_date: date,
        metadata: Mapping[str, str],
        on_applied: Optional[Callable[[Any], None]] = None,
    ) -> Optional[Any]: ...

    def mark_overdue(self, user_id: int, as_of: date) -> int: ...

    def owners_with_open_items(self) -> List[int]: ...

    def list_entries(self, user_id: int, obligation_id: int) -> List[Any]: ...

    def entries_between(self, user_id: int, start: date, end: date) -> List[Any]: ...


# --- In-memory implementation ---


@dataclass
class ObligationRecord:
    """Plain record mirroring the columns of ``Payment`` and ``Expense``."""

    id: int
    user_id: int
    amount: Decimal
    due_date: date
    paid_amount: Decimal = Decimal("0.00")
    paid_date: Optional[date] = None
    status: str = STATUS_PENDING
    method: Optional[str] = None
    reference: Optional[str] = None
    notes: Optional[str] = None
    tenant_id: Optional[int] = None
    property_id: Optional[int] = None
    title: Optional[str] = None
    category: Optional[str] = None
    is_recurring: bool = False
    frequency: Optional[str] = None
    expiry_date: Optional[date] = None
    created_at: datetime = field(default_factory=datetime.utcnow)


@dataclass
class LedgerEntryRecord:
    id: int
    user_id: int
    kind: str
    obligation_id: int
    amount: Decimal
    entry_date: date
    method: Optional[str] = None
    reference: Optional[str] = None
    notes: Optional[str] = None
    created_at: datetime = field(default_factory=datetime.utcnow)


_RECORD_FIELDS = {f.name for f in dataclass_fields(ObligationRecord)}


class InMemoryObligationRepository:
    """Thread-safe dict-backed store. Returned records are copies."""

    def __init__(self, kind: str) -> None:
        self.kind = kind
        self._rows: Dict[int, ObligationRecord] = {}
        self._entries: List[LedgerEntryRecord] = []
        self._ids = itertools.count(1)
        self._entry_ids = itertools.count(1)
        self._lock = threading.RLock()

    def _owned(self, user_id: int, obligation_id: int) -> Optional[ObligationRecord]:
        row = self._rows.get(obligation_id)
        if row is None or row.user_id != user_id:
            return None
        return row

    def get(self, user_id: int, obligation_id: int) -> Optional[ObligationRecord]:
        with self._lock:
            row = self._owned(user_id, obligation_id)
            return replace(row) if row else None

    def list(
        self,
        user_id: int,
        *,
        status: Optional[str] = None,
        category: Optional[str] = None,
        tenant_id: Optional[int] = None,
        due_from: Optional[date] = None,
        due_to: Optional[date] = None,
    ) -> List[ObligationRecord]:
        with self._lock:
            rows = [replace(r) for r in self._rows.values() if r.user_id == user_id]
        if status:
            rows = [r for r in rows if r.status == status]
        if category:
            rows = [r for r in rows if r.category == category]
        if tenant_id is not None:
            rows = [r for r in rows if r.tenant_id == tenant_id]
        if due_from:
            rows = [r for r in rows if r.due_date >= due_from]
        if due_to:
            rows = [r for r in rows if r.due_date <= due_to]
        rows.sort(key=lambda r: (r.due_date, r.id))
        return rows

    def insert(self, user_id: int, values: Mapping[str, Any]) -> ObligationRecord:
        data = self._clean(values)
        with self._lock:
            record = ObligationRecord(id=next(self._ids), user_id=user_id, **data)
            self._rows[record.id] = record
            return replace(record)

    def update(self, user_id: int, obligation_id: int, values: Mapping[str, Any]) -> Optional[ObligationRecord]:
        data = self._clean(values)
        with self._lock:
            row = self._owned(user_id, obligation_id)
            if row is None:
                return None
            for key, value in data.items():
                setattr(row, key, value)
            return replace(row)

    def delete(self, user_id: int, obligation_id: int) -> bool:
        with self._lock:
            if self._owned(user_id, obligation_id) is None:
                return False
            del self._rows[obligation_id]
            self._entries = [e for e in self._entries if e.obligation_id != obligation_id]
            return True

    def apply_increment(
        self,
        user_id: int,
        obligation_id: int,
        delta: Decimal,
        *,
        as_of: date,
        settle_date: date,
        metadata: Mapping[str, str],
        on_applied: Optional[Callable[[Any], None]] = None,
    ) -> Optional[ObligationRecord]:
        with self._lock:
            row = self._owned(user_id, obligation_id)
            if row is None:
                return None
            changes = apply_payment(
                row,
                delta,
                PaymentMetadata(paid_date=settle_date, **dict(metadata)),
                today=as_of,
            )
            updated = replace(row, **changes)
            entry = LedgerEntryRecord(
                id=next(self._entry_ids),
                user_id=user_id,
                kind=self.kind,
                obligation_id=obligation_id,
                amount=delta,
                entry_date=settle_date,
                **dict(metadata),
            )
            # The hook runs before the store changes; if it raises, nothing is applied.
            if on_applied is not None:
                on_applied(replace(updated))
            self._rows[obligation_id] = updated
            self._entries.append(entry)
            return replace(updated)

    def mark_overdue(self, user_id: int, as_of: date) -> int:
        count = 0
        with self._lock:
            for row in self._rows.values():
                if row.user_id == user_id and is_sweepable(row, as_of):
                    row.status = STATUS_OVERDUE
                    count += 1
        return count

    def owners_with_open_items(self) -> List[int]:
        with self._lock:
            return sorted({r.user_id for r in self._rows.values() if r.status != STATUS_PAID})

    def list_entries(self, user_id: int, obligation_id: int) -> List[LedgerEntryRecord]:
        with self._lock:
            entries = [
                replace(e)
                for e in self._entries
                if e.user_id == user_id and e.obligation_id == obligation_id
            ]
        entries.sort(key=lambda e: (e.entry_date, e.id), reverse=True)
        return entries

    def entries_between(self, user_id: int, start: date, end: date) -> List[LedgerEntryRecord]:
        with self._lock:
            entries = [
                replace(e)
                for e in self._entries
                if e.user_id == user_id and start <= e.entry_date <= end
            ]
        entries.sort(key=lambda e: (e.entry_date, e.id))
        return entries

    @staticmethod
    def _clean(values: Mapping[str, Any]) -> Dict[str, Any]:
        data = {k: v for k, v in values.items() if k in _RECORD_FIELDS and k not in ("id", "user_id")}
        for key in ("amount", "paid_amount"):
            if key in data:
                data[key] = to_money(data[key])
        for key in ("due_date", "paid_date", "expiry_date"):
            if data.get(key) is not None:
                data[key] = coerce_date(data[key])
        return data


# --- SQLAlchemy implementation ---


def _cents(expr):
    """Round to cents in SQL; SQLite adds NUMERIC columns as floats."""
    return func.round(expr, 2, type_=db.Numeric(12, 2))


class SqlAlchemyObligationRepository:
    """Repository over a ``Payment``-shaped model class."""

    def __init__(self, model, kind: str) -> None:
        self.model = model
        self.kind = kind

    @property
    def session(self):
        return db.session

    @contextmanager
    def _guard(self, action: str) -> Iterator[None]:
        try:
            yield
        except SQLAlchemyError as exc:
            self.session.rollback()
            logger.exception("Ledger storage failure during %s on %s", action, self.kind)
            raise StorageFailure() from exc

    def _owned_query(self, user_id: int):
        return select(self.model).where(self.model.user_id == user_id).execution_options(populate_existing=True)

    def get(self, user_id: int, obligation_id: int):
        with self._guard("get"):
            stmt = self._owned_query(user_id).where(self.model.id == obligation_id)
            return self.session.execute(stmt).scalar_one_or_none()

    def list(
        self,
        user_id: int,
        *,
        status: Optional[str] = None,
        category: Optional[str] = None,
        tenant_id: Optional[int] = None,
        due_from: Optional[date] = None,
        due_to: Optional[date] = None,
    ) -> list:
        m = self.model
        stmt = self._owned_query(user_id)
        if status:
            stmt = stmt.where(m.status == status)
        if category and hasattr(m, "category"):
            stmt = stmt.where(m.category == category)
        if tenant_id is not None and hasattr(m, "tenant_id"):
            stmt = stmt.where(m.tenant_id == tenant_id)
        if due_from:
            stmt = stmt.where(m.due_date >= due_from)
        if due_to:
            stmt = stmt.where(m.due_date <= due_to)
        stmt = stmt.order_by(m.due_date.asc(), m.id.asc())
        with self._guard("list"):
            return list(self.session.execute(stmt).scalars())

    def insert(self, user_id: int, values: Mapping[str, Any]):
        with self._guard("insert"):
            row = self.model(user_id=user_id, **dict(values))
            self.session.add(row)
            self.session.commit()
            return row

    def update(self, user_id: int, obligation_id: int, values: Mapping[str, Any]):
        with self._guard("update"):
            row = self.get(user_id, obligation_id)
            if row is None:
                return None
            for key, value in values.items():
                setattr(row, key, value)
            self.session.commit()
            return row

    def delete(self, user_id: int, obligation_id: int) -> bool:
        with self._guard("delete"):
            row = self.get(user_id, obligation_id)
            if row is None:
                return False
            self.session.execute(
                delete(LedgerEntry).where(
                    LedgerEntry.kind == self.kind,
                    LedgerEntry.obligation_id == obligation_id,
                    LedgerEntry.user_id == user_id,
                )
            )
            self.session.delete(row)
            self.session.commit()
            return True

    def apply_increment(
        self,
        user_id: int,
        obligation_id: int,
        delta: Decimal,
        *,
        as_of: date,
        settle_date: date,
        metadata: Mapping[str, str],
        on_applied: Optional[Callable[[Any], None]] = None,
    ):
        m = self.model
        new_paid = _cents(m.paid_amount + delta)
        settled = new_paid >= _cents(m.amount)
        # SET expressions read the pre-update row, so status and paid_date
        # follow from the same increment.
        stmt = (
            update(m)
            .where(m.id == obligation_id, m.user_id == user_id)
            .values(
                paid_amount=new_paid,
                status=case(
                    (settled, STATUS_PAID),
                    (m.due_date < as_of, STATUS_OVERDUE),
                    else_=STATUS_PENDING,
                ),
                paid_date=case((settled, settle_date), else_=m.paid_date),
                **dict(metadata),
            )
            .execution_options(synchronize_session=False)
        )
        with self._guard("apply_increment"):
            result = self.session.execute(stmt)
            if result.rowcount == 0:
                self.session.rollback()
                return None
            self.session.add(
                LedgerEntry(
                    user_id=user_id,
                    kind=self.kind,
                    obligation_id=obligation_id,
                    amount=delta,
                    entry_date=settle_date,
                    **dict(metadata),
                )
            )
            row = self.get(user_id, obligation_id)
            # Whatever the hook stages commits with the increment.
            if on_applied is not None:
                try:
                    on_applied(row)
                except Exception:
                    self.session.rollback()
                    raise
            self.session.commit()
            return row

    def mark_overdue(self, user_id: int, as_of: date) -> int:
        m = self.model
        stmt = (
            update(m)
            .where(
                m.user_id == user_id,
                m.status == STATUS_PENDING,
                _cents(m.paid_amount) < _cents(m.amount),
                m.due_date < as_of,
            )
            .values(status=STATUS_OVERDUE)
            .execution_options(synchronize_session=False)
        )
        with self._guard("mark_overdue"):
            result = self.session.execute(stmt)
            self.session.commit()
            return result.rowcount or 0

    def owners_with_open_items(self) -> List[int]:
        m = self.model
        stmt = select(m.user_id).where(m.status != STATUS_PAID).distinct().order_by(m.user_id)
        with self._guard("owners_with_open_items"):
            return list(self.session.execute(stmt).scalars())

    def list_entries(self, user_id: int, obligation_id: int) -> List[LedgerEntry]:
        stmt = (
            select(LedgerEntry)
            .where(
                LedgerEntry.user_id == user_id,
                LedgerEntry.kind == self.kind,
                LedgerEntry.obligation_id == obligation_id,
            )
            .order_by(LedgerEntry.entry_date.desc(), LedgerEntry.id.desc())
        )
        with self._guard("list_entries"):
            return list(self.session.execute(stmt).scalars())

    def entries_between(self, user_id: int, start: date, end: date) -> List[LedgerEntry]:
        stmt = (
            select(LedgerEntry)
            .where(
                LedgerEntry.user_id == user_id,
                LedgerEntry.kind == self.kind,
                LedgerEntry.entry_date >= start,
                LedgerEntry.entry_date <= end,
            )
            .order_by(LedgerEntry.entry_date.asc(), LedgerEntry.id.asc())
        )
        with self._guard("entries_between"):
            return list(self.session.execute(stmt).scalars())
