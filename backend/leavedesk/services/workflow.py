"""Workflow coordinator: the single entry point for every leave state change.

Each operation runs in its own session and commits once, so a status flip and
the balance debit it causes land together or not at all. Conflicting callers
are serialized with in-process keyed locks (request id for decisions, person
id for anything touching a balance or a person row). Locks are always taken
request first, then person. Across processes the same ordering comes from
row locks, the status compare-and-swap and the atomic balance update.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from leavedesk.config import get_settings
from leavedesk.exceptions import (
    DuplicateIdError,
    InsufficientBalanceError,
    LeaveValidationError,
    PersonNotFoundError,
    SelfRemovalError,
)
from leavedesk.models.person import Person
from leavedesk.services import request as request_service
from leavedesk.services.locks import KeyedLock
from leavedesk.services.store import SqlRecordStore

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

    from leavedesk.config import Settings
    from leavedesk.models.leave_request import LeaveRequest

logger = logging.getLogger(__name__)


def _require_text(field: str, value: str | None) -> None:
    if value is None or not value.strip():
        raise LeaveValidationError(field, f"{field} is required")


class WorkflowCoordinator:
    """Facade composing the entitlement ledger and the request state machine."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        settings: Settings | None = None,
    ) -> None:
        self._session_factory = session_factory
        self._settings = settings or get_settings()
        self._person_locks = KeyedLock()
        self._request_locks = KeyedLock()

    @asynccontextmanager
    async def _unit_of_work(self) -> AsyncIterator[SqlRecordStore]:
        # Closing the session rolls back anything not committed.
        async with self._session_factory() as session:
            yield SqlRecordStore(session)

    # ------------------------------------------------------------------
    # Leave requests
    # ------------------------------------------------------------------

    async def submit(
        self,
        employee_id: str,
        leave_type: str,
        start_date: str,
        end_date: str,
    ) -> LeaveRequest:
        """Create a Pending request if the person has at least one day left."""
        _require_text("employee_id", employee_id)
        _require_text("leave_type", leave_type)
        _require_text("start_date", start_date)
        _require_text("end_date", end_date)

        async with self._person_locks.hold(employee_id), self._unit_of_work() as store:
            person = await store.get_person(employee_id, for_update=True)
            if person is None:
                raise PersonNotFoundError(employee_id)
            try:
                request = await request_service.create_request(store, person, leave_type, start_date, end_date)
            except InsufficientBalanceError as exc:
                logger.warning("Submission refused for %s: balance %d", employee_id, exc.balance)
                raise
            await store.commit()

        logger.info(
            "Request #%s submitted by %s (%s %s..%s)", request.id, employee_id, leave_type, start_date, end_date
        )
        return request

    async def decide(self, request_id: int, approve: bool, acting_approver: str | None = None) -> LeaveRequest:
        """Approve or reject a pending request; the loser of a race gets InvalidTransitionError.

        Both keyed locks are held before the deciding session checks out a
        connection, so a caller waiting on a lock never pins a pooled connection.
        """
        async with self._unit_of_work() as store:
            employee_id = (await request_service.find_by_id(store, request_id)).employee_id

        async with self._request_locks.hold(request_id), self._person_locks.hold(employee_id):
            async with self._unit_of_work() as store:
                request = await request_service.find_by_id(store, request_id)
                if approve:
                    decided = await request_service.approve_request(
                        store,
                        request,
                        acting_approver,
                        recheck_balance=self._settings.recheck_balance_on_approval,
                    )
                else:
                    decided = await request_service.reject_request(store, request, acting_approver)
                await store.commit()

        logger.info("Request #%s %s by %s", request_id, decided.status, acting_approver)
        return decided

    async def get_request(self, request_id: int) -> LeaveRequest:
        async with self._unit_of_work() as store:
            return await request_service.find_by_id(store, request_id)

    async def list_pending(self) -> list[LeaveRequest]:
        async with self._unit_of_work() as store:
            return await request_service.list_pending(store)

    async def list_requests_for_person(self, person_id: str) -> list[LeaveRequest]:
        """All requests of one person, oldest first; empty for unknown or removed persons."""
        async with self._unit_of_work() as store:
            return await request_service.list_for_person(store, person_id)

    # ------------------------------------------------------------------
    # Persons
    # ------------------------------------------------------------------

    async def add_person(
        self,
        person_id: str,
        name: str,
        starting_balance: int | None = None,
        is_approver: bool = False,
    ) -> Person:
        _require_text("id", person_id)
        _require_text("name", name)
        balance = self._settings.default_leave_balance if starting_balance is None else starting_balance
        if balance < 0:
            raise LeaveValidationError("leave_balance", "leave_balance must not be negative")

        async with self._person_locks.hold(person_id), self._unit_of_work() as store:
            if await store.get_person(person_id) is not None:
                logger.warning("Refused to add %s: id already taken", person_id)
                raise DuplicateIdError(person_id)
            person = Person(id=person_id, name=name, leave_balance=balance, is_approver=is_approver)
            await store.put_person(person)
            await store.commit()

        role = "approver" if is_approver else "worker"
        logger.info("Added %s %s (%s) with balance %d", role, person_id, name, balance)
        return person

    async def remove_person(self, person_id: str, acting_identity: str | None = None) -> int:
        """Delete a person and every request they own. Returns the number of requests deleted.

        ``acting_identity`` is the approver performing the removal, when known;
        an approver may not remove themselves.
        """
        async with self._person_locks.hold(person_id), self._unit_of_work() as store:
            person = await store.get_person(person_id, for_update=True)
            if person is None:
                raise PersonNotFoundError(person_id)
            if acting_identity is not None and acting_identity == person_id:
                logger.warning("Refused self-removal by %s", acting_identity)
                raise SelfRemovalError(person_id)
            removed = await store.delete_requests_for_person(person_id)
            await store.delete_person(person_id)
            await store.commit()

        logger.info("Removed %s and %d leave requests", person_id, removed)
        return removed

    async def rename_person(self, person_id: str, name: str) -> Person:
        _require_text("name", name)
        async with self._person_locks.hold(person_id), self._unit_of_work() as store:
            person = await store.get_person(person_id, for_update=True)
            if person is None:
                raise PersonNotFoundError(person_id)
            person.name = name
            await store.put_person(person)
            await store.commit()

        logger.info("Renamed %s to %s", person_id, name)
        return person

    async def get_person(self, person_id: str) -> Person:
        async with self._unit_of_work() as store:
            person = await store.get_person(person_id)
        if person is None:
            raise PersonNotFoundError(person_id)
        return person

    async def list_persons(self) -> list[Person]:
        async with self._unit_of_work() as store:
            return await store.list_persons()
