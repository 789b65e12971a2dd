"""Entitlement ledger: the only code allowed to read-and-change a leave balance.

Submission only checks eligibility; approval debits one day; rejection never
touches the balance. Callers hold the per-person lock around both the check
and the debit so the two observe a single order.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from leavedesk.exceptions import InsufficientBalanceError, PersonNotFoundError

if TYPE_CHECKING:
    from leavedesk.models.person import Person
    from leavedesk.services.store import RecordStore

logger = logging.getLogger(__name__)

# One approved request costs one day.
DAYS_PER_REQUEST = 1


def check_eligible(person: Person) -> bool:
    """True iff the person has at least one day left."""
    return person.leave_balance >= DAYS_PER_REQUEST


def ensure_eligible(person: Person) -> None:
    """Raise ``InsufficientBalanceError`` carrying the current balance."""
    if not check_eligible(person):
        raise InsufficientBalanceError(person.id, person.leave_balance)


async def debit(store: RecordStore, person_id: str, amount: int = -DAYS_PER_REQUEST) -> Person:
    """Add ``amount`` to the stored balance and return the updated person.

    No clamping is applied. Must run in the same transaction as the status
    change that caused it.
    """
    if not await store.add_to_balance(person_id, amount):
        raise PersonNotFoundError(person_id)
    person = await store.get_person(person_id)
    if person is None:
        raise PersonNotFoundError(person_id)
    logger.info("Balance of %s changed by %d to %d", person_id, amount, person.leave_balance)
    return person
