"""Scheduled task: flip past-due unpaid obligations to overdue for every owner."""

from __future__ import annotations

import logging
from datetime import date
from typing import Optional

from rentledger.domains.rentals.ledger import get_ledgers

logger = logging.getLogger(__name__)


def run(as_of: Optional[date] = None, user_id: Optional[int] = None) -> dict:
    ledgers = get_ledgers()
    results = {}
    for name, ledger in (("payments", ledgers.payments), ("expenses", ledgers.expenses)):
        if user_id is not None:
            per_owner = {user_id: ledger.sweep_overdue(user_id, as_of)}
        else:
            per_owner = ledger.sweep_all(as_of)
        results[name] = sum(per_owner.values())
    logger.info("Overdue sweep finished: %s", results)
    return results
