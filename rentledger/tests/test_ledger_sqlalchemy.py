"""LedgerService over the SQL repository, against the migrated schema."""

from datetime import date
from decimal import Decimal

import pytest
from sqlalchemy import select
from sqlalchemy.exc import OperationalError

from rentledger.core.activity import services as activity
from rentledger.core.activity.models import ActivityRecord
from rentledger.domains.rentals.ledger import InvalidAmount, LedgerService, NotFound, PaymentMetadata, StorageFailure
from rentledger.domains.rentals.ledger.repository import SqlAlchemyObligationRepository
from rentledger.domains.rentals.models.ledger_models import Expense, LedgerEntry, Payment
from rentledger.extensions import db

pytestmark = pytest.mark.integration

AS_OF = date(2024, 2, 1)


@pytest.fixture
def payments(app):
    return LedgerService(SqlAlchemyObligationRepository(Payment, "payment"), clock=lambda: AS_OF)


@pytest.fixture
def expenses(app):
    return LedgerService(SqlAlchemyObligationRepository(Expense, "expense"), clock=lambda: AS_OF)


def _rent(ledger, user, amount="5000", due="2024-01-01"):
    return ledger.create(
        user.id,
        {"tenant_id": 1, "property_id": 1, "amount": Decimal(amount), "due_date": date.fromisoformat(due)},
    )


def test_scenarios_persist(payments, user):
    ob = _rent(payments, user)
    assert ob.status == "overdue"

    payments.record_payment(user.id, ob.id, 2000)
    db.session.expire_all()
    stored = db.session.get(Payment, ob.id)
    assert stored.paid_amount == Decimal("2000.00")
    assert stored.status == "overdue"
    assert stored.paid_date is None

    paid = payments.record_payment(user.id, ob.id, "3000", PaymentMetadata(paid_date=date(2024, 2, 5), method="bank"))
    assert paid.paid_amount == Decimal("5000.00")
    assert paid.status == "paid"
    assert paid.paid_date == date(2024, 2, 5)
    assert paid.method == "bank"


def test_cent_increments_settle_exactly(payments, user):
    ob = _rent(payments, user, amount="0.80", due="2024-03-01")
    payments.record_payment(user.id, ob.id, "0.10")
    paid = payments.record_payment(user.id, ob.id, "0.70")
    assert paid.paid_amount == Decimal("0.80")
    assert paid.status == "paid"
    assert paid.paid_date == AS_OF

    db.session.expire_all()
    stored = db.session.get(Payment, ob.id)
    assert stored.status == "paid"
    assert stored.paid_amount == Decimal("0.80")


def test_sweep_leaves_cent_settled_items_alone(payments, user):
    early = LedgerService(payments.repository, clock=lambda: date(2023, 12, 1))
    ob = _rent(early, user, amount="0.30", due="2024-01-01")
    early.record_payment(user.id, ob.id, "0.10")
    early.record_payment(user.id, ob.id, "0.20")
    assert payments.sweep_overdue(user.id, AS_OF) == 0
    db.session.expire_all()
    assert db.session.get(Payment, ob.id).status == "paid"

def test_each_increment_writes_one_entry(payments, user):
    ob = _rent(payments, user)
    payments.record_payment(user.id, ob.id, 1500, PaymentMetadata(reference="R-1"))
    payments.record_payment(user.id, ob.id, 500)
    rows = db.session.execute(select(LedgerEntry).where(LedgerEntry.obligation_id == ob.id)).scalars().all()
    assert sorted(r.amount for r in rows) == [Decimal("500.00"), Decimal("1500.00")]
    assert {r.kind for r in rows} == {"payment"}
    assert [e.reference for e in payments.entries(user.id, ob.id) if e.reference] == ["R-1"]


def test_invalid_amount_writes_nothing(payments, user):
    ob = _rent(payments, user)
    with pytest.raises(InvalidAmount):
        payments.record_payment(user.id, ob.id, "-100")
    assert db.session.get(Payment, ob.id).paid_amount == Decimal("0.00")
    assert db.session.execute(select(LedgerEntry)).first() is None


def test_unknown_or_foreign_obligation(payments, user, other_user):
    ob = _rent(payments, user)
    with pytest.raises(NotFound):
        payments.record_payment(other_user.id, ob.id, 10)
    with pytest.raises(NotFound):
        payments.record_payment(user.id, ob.id + 100, 10)
    assert db.session.execute(select(LedgerEntry)).first() is None


def test_mark_overdue_is_idempotent_and_scoped(payments, user, other_user):
    early = LedgerService(payments.repository, clock=lambda: date(2023, 12, 1))
    mine = _rent(early, user, due="2024-01-01")
    theirs = _rent(early, other_user, due="2024-01-01")
    _rent(early, user, due="2024-06-01")

    assert payments.sweep_overdue(user.id, AS_OF) == 1
    assert payments.sweep_overdue(user.id, AS_OF) == 0
    db.session.expire_all()
    assert db.session.get(Payment, mine.id).status == "overdue"
    assert db.session.get(Payment, theirs.id).status == "pending"

    assert payments.sweep_all(AS_OF) == {user.id: 0, other_user.id: 1}


def test_expense_ledger_is_separate(payments, expenses, user):
    bill = expenses.create(
        user.id,
        {"title": "Water", "category": "water", "amount": Decimal("100"), "due_date": date(2024, 1, 10)},
    )
    expenses.record_payment(user.id, bill.id, 100)
    assert expenses.entries(user.id, bill.id)[0].kind == "expense"
    assert payments.aggregate_metrics(user.id).count == 0
    metrics = expenses.aggregate_metrics(user.id)
    assert metrics.paid_amount == Decimal("100.00")
    assert metrics.percent_paid == 100.0


def test_aggregate_scenario_d(payments, user):
    a = _rent(payments, user, amount="100", due="2024-01-10")
    b = _rent(payments, user, amount="200", due="2024-01-15")
    _rent(payments, user, amount="50", due="2024-03-01")
    payments.record_payment(user.id, a.id, 100)
    payments.record_payment(user.id, b.id, 50)
    metrics = payments.aggregate_metrics(user.id)
    assert (metrics.total_amount, metrics.paid_amount) == (Decimal("350.00"), Decimal("150.00"))
    assert (metrics.pending_count, metrics.overdue_count, metrics.count) == (1, 1, 3)


def test_storage_error_becomes_storage_failure(app, payments, user, monkeypatch):
    ob = _rent(payments, user)

    def boom(*args, **kwargs):
        raise OperationalError("UPDATE rentals_payment", {}, Exception("database is locked"))

    monkeypatch.setattr(db.session, "execute", boom)
    with pytest.raises(StorageFailure) as exc_info:
        payments.record_payment(user.id, ob.id, 10)
    assert isinstance(exc_info.value.__cause__, OperationalError)
    monkeypatch.undo()
    assert db.session.get(Payment, ob.id).paid_amount == Decimal("0.00")


def test_hook_changes_commit_with_the_increment(payments, user):
    ob = _rent(payments, user)

    def log(row):
        activity.record("payment.recorded", f"paid {row.paid_amount}", user_id=user.id, payload={"payment_id": row.id})

    payments.record_payment(user.id, ob.id, 500, on_applied=log)
    db.session.rollback()
    records = ActivityRecord.query.filter_by(user_id=user.id).all()
    assert [r.description for r in records] == ["paid 500.00"]
    assert db.session.get(Payment, ob.id).paid_amount == Decimal("500.00")


def test_failing_hook_rolls_back_the_increment(payments, user):
    ob = _rent(payments, user)

    def log(row):
        activity.record("payment.recorded", "staged", user_id=user.id)
        raise RuntimeError("activity feed unavailable")

    with pytest.raises(RuntimeError):
        payments.record_payment(user.id, ob.id, 500, on_applied=log)
    db.session.expire_all()
    assert db.session.get(Payment, ob.id).paid_amount == Decimal("0.00")
    assert db.session.execute(select(LedgerEntry)).first() is None
    assert ActivityRecord.query.filter_by(user_id=user.id).count() == 0

    payments.record_payment(user.id, ob.id, 500)
    assert db.session.get(Payment, ob.id).paid_amount == Decimal("500.00")
