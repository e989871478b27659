"""Ledger wiring: which storage backs the payment and expense ledgers."""

from __future__ import annotations

from dataclasses import dataclass

from flask import current_app

from rentledger.domains.rentals.ledger.repository import (
    InMemoryObligationRepository,
    SqlAlchemyObligationRepository,
)
from rentledger.domains.rentals.ledger.service import LedgerService
from rentledger.domains.rentals.models.ledger_models import Expense, Payment

KIND_PAYMENT = "payment"
KIND_EXPENSE = "expense"

_BACKENDS = ("sqlalchemy", "memory")


@dataclass
class Ledgers:
    payments: LedgerService
    expenses: LedgerService


def build_ledgers(backend: str = "sqlalchemy") -> Ledgers:
    if backend not in _BACKENDS:
        raise ValueError(f"unknown ledger backend: {backend}")
    if backend == "memory":
        return Ledgers(
            payments=LedgerService(InMemoryObligationRepository(KIND_PAYMENT)),
            expenses=LedgerService(InMemoryObligationRepository(KIND_EXPENSE)),
        )
    return Ledgers(
        payments=LedgerService(SqlAlchemyObligationRepository(Payment, KIND_PAYMENT)),
        expenses=LedgerService(SqlAlchemyObligationRepository(Expense, KIND_EXPENSE)),
    )


def get_ledgers() -> Ledgers:
    """Ledgers bound to the running app (set up by ``create_app``)."""
    return current_app.extensions["ledgers"]
