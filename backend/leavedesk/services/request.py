from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from leavedesk.exceptions import (
    InvalidTransitionError,
    LeaveValidationError,
    PersonNotFoundError,
    RequestNotFoundError,
)
from leavedesk.models.enums import LeaveStatus
from leavedesk.models.leave_request import LeaveRequest
from leavedesk.services import ledger

if TYPE_CHECKING:
    from leavedesk.models.person import Person
    from leavedesk.services.store import RecordStore

logger = logging.getLogger(__name__)

# Pending is the only state with outgoing transitions.
_TRANSITIONS: dict[LeaveStatus, frozenset[LeaveStatus]] = {
    LeaveStatus.PENDING: frozenset({LeaveStatus.APPROVED, LeaveStatus.REJECTED}),
    LeaveStatus.APPROVED: frozenset(),
    LeaveStatus.REJECTED: frozenset(),
}


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def can_transition(current: LeaveStatus, target: LeaveStatus) -> bool:
    return target in _TRANSITIONS[current]


def ensure_transition(request: LeaveRequest, target: LeaveStatus) -> None:
    """Raise ``InvalidTransitionError`` unless ``request`` may move to ``target``."""
    current = LeaveStatus(request.status)
    if not can_transition(current, target):
        raise InvalidTransitionError(request.id, current.value, target.value)


async def _move(
    store: RecordStore,
    request: LeaveRequest,
    target: LeaveStatus,
    approver_id: str | None,
) -> LeaveRequest:
    """Move a pending request to ``target`` with a compare-and-swap on its status.

    The in-memory status may be stale; the conditional update decides who wins.
    """
    ensure_transition(request, target)
    request_id = request.id
    if request_id is None:
        raise LeaveValidationError("id", "Leave request has not been stored yet")

    moved = await store.transition_request(request_id, LeaveStatus.PENDING, target, approver_id)
    current = await store.get_request(request_id)
    if current is None:
        raise RequestNotFoundError(request_id)
    if not moved:
        logger.info("Request #%s already %s, cannot move to %s", request_id, current.status, target)
        raise InvalidTransitionError(request_id, LeaveStatus(current.status).value, target.value)
    return current


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


async def create_request(
    store: RecordStore,
    person: Person,
    leave_type: str,
    start_date: str,
    end_date: str,
) -> LeaveRequest:
    """Create a Pending request for ``person``.

    Eligibility is checked first; on failure nothing is written.
    """
    ledger.ensure_eligible(person)
    request = LeaveRequest(
        employee_id=person.id,
        leave_type=leave_type,
        start_date=start_date,
        end_date=end_date,
        status=LeaveStatus.PENDING.value,
    )
    return await store.put_request(request)


async def approve_request(
    store: RecordStore,
    request: LeaveRequest,
    approver_id: str | None,
    *,
    recheck_balance: bool = True,
) -> LeaveRequest:
    """Approve a pending request and debit its owner one day.

    Status change first, balance second, both inside the caller's transaction.
    With ``recheck_balance`` the owner must still be eligible, otherwise the
    request stays Pending.
    """
    ensure_transition(request, LeaveStatus.APPROVED)

    if recheck_balance:
        owner = await store.get_person(request.employee_id, for_update=True)
        if owner is None:
            raise PersonNotFoundError(request.employee_id)
        ledger.ensure_eligible(owner)

    approved = await _move(store, request, LeaveStatus.APPROVED, approver_id)
    await ledger.debit(store, approved.employee_id)
    return approved


async def reject_request(
    store: RecordStore,
    request: LeaveRequest,
    approver_id: str | None,
) -> LeaveRequest:
    """Reject a pending request. Balances are untouched."""
    return await _move(store, request, LeaveStatus.REJECTED, approver_id)


async def find_by_id(store: RecordStore, request_id: int) -> LeaveRequest:
    """Fetch a request by ID. Raises 404 if not found."""
    request = await store.get_request(request_id)
    if request is None:
        raise RequestNotFoundError(request_id)
    return request


async def list_pending(store: RecordStore) -> list[LeaveRequest]:
    """All Pending requests in insertion order."""
    return await store.list_pending_requests()


async def list_for_person(store: RecordStore, person_id: str) -> list[LeaveRequest]:
    """Every request of one person in insertion order."""
    return await store.list_requests_for_person(person_id)
