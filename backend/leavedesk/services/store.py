"""Record store: durable keyed storage for persons and leave requests.

The workflow core talks to persistence only through ``RecordStore``. Every
failure of the underlying database is surfaced as ``StoreUnavailableError``;
nothing here retries.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from sqlalchemy import delete, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import col

from leavedesk.exceptions import DuplicateIdError, StoreUnavailableError
from leavedesk.models.enums import LeaveStatus
from leavedesk.models.leave_request import LeaveRequest
from leavedesk.models.person import Person

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from sqlalchemy.ext.asyncio import AsyncSession

logger = logging.getLogger(__name__)


@runtime_checkable
class RecordStore(Protocol):
    """Interface the workflow core requires from persistence."""

    async def get_person(self, person_id: str, *, for_update: bool = False) -> Person | None: ...

    async def put_person(self, person: Person) -> Person: ...

    async def delete_person(self, person_id: str) -> bool: ...

    async def list_persons(self) -> list[Person]: ...

    async def add_to_balance(self, person_id: str, amount: int) -> bool: ...

    async def get_request(self, request_id: int, *, for_update: bool = False) -> LeaveRequest | None: ...

    async def put_request(self, request: LeaveRequest) -> LeaveRequest: ...

    async def transition_request(
        self,
        request_id: int,
        expected: LeaveStatus,
        new: LeaveStatus,
        decided_by: str | None,
    ) -> bool: ...

    async def delete_requests_for_person(self, person_id: str) -> int: ...

    async def list_pending_requests(self) -> list[LeaveRequest]: ...

    async def list_requests_for_person(self, person_id: str) -> list[LeaveRequest]: ...

    async def commit(self) -> None: ...

    async def rollback(self) -> None: ...


@asynccontextmanager
async def _store_call(operation: str) -> AsyncIterator[None]:
    try:
        yield
    except SQLAlchemyError as exc:
        logger.exception("Record store failure during %s", operation)
        raise StoreUnavailableError(operation) from exc


class SqlRecordStore:
    """``RecordStore`` backed by an async SQLAlchemy session.

    Writes are flushed, never committed, until ``commit`` is called, so one
    store instance spans exactly one transaction.
    """

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    # -- persons -----------------------------------------------------------

    async def get_person(self, person_id: str, *, for_update: bool = False) -> Person | None:
        query = select(Person).where(col(Person.id) == person_id).execution_options(populate_existing=True)
        if for_update:
            query = query.with_for_update()
        async with _store_call("get_person"):
            result = await self._session.execute(query)
        return result.scalar_one_or_none()

    async def put_person(self, person: Person) -> Person:
        self._session.add(person)
        try:
            await self._session.flush()
        except IntegrityError:
            await self._session.rollback()
            raise DuplicateIdError(person.id) from None
        except SQLAlchemyError as exc:
            logger.exception("Record store failure during put_person")
            raise StoreUnavailableError("put_person") from exc
        return person

    async def delete_person(self, person_id: str) -> bool:
        stmt = delete(Person).where(col(Person.id) == person_id).execution_options(synchronize_session=False)
        async with _store_call("delete_person"):
            result = await self._session.execute(stmt)
        return result.rowcount == 1

    async def list_persons(self) -> list[Person]:
        async with _store_call("list_persons"):
            result = await self._session.execute(select(Person).order_by(col(Person.name), col(Person.id)))
        return list(result.scalars().all())

    async def add_to_balance(self, person_id: str, amount: int) -> bool:
        """Atomically add ``amount`` to the stored balance. False if the person is gone."""
        stmt = (
            update(Person)
            .where(col(Person.id) == person_id)
            .values(leave_balance=col(Person.leave_balance) + amount, version=col(Person.version) + 1)
            .execution_options(synchronize_session=False)
        )
        async with _store_call("add_to_balance"):
            result = await self._session.execute(stmt)
        return result.rowcount == 1

    # -- leave requests ----------------------------------------------------

    async def get_request(self, request_id: int, *, for_update: bool = False) -> LeaveRequest | None:
        query = (
            select(LeaveRequest)
            .where(col(LeaveRequest.id) == request_id)
            .execution_options(populate_existing=True)
        )
        if for_update:
            query = query.with_for_update()
        async with _store_call("get_request"):
            result = await self._session.execute(query)
        return result.scalar_one_or_none()

    async def put_request(self, request: LeaveRequest) -> LeaveRequest:
        self._session.add(request)
        async with _store_call("put_request"):
            await self._session.flush()
        return request

    async def transition_request(
        self,
        request_id: int,
        expected: LeaveStatus,
        new: LeaveStatus,
        decided_by: str | None,
    ) -> bool:
        """Compare-and-swap the status. True only for the caller that moved it."""
        stmt = (
            update(LeaveRequest)
            .where(col(LeaveRequest.id) == request_id, col(LeaveRequest.status) == expected.value)
            .values(status=new.value, decided_by=decided_by, decided_at=datetime.now(UTC))
            .execution_options(synchronize_session=False)
        )
        async with _store_call("transition_request"):
            result = await self._session.execute(stmt)
        return result.rowcount == 1

    async def delete_requests_for_person(self, person_id: str) -> int:
        stmt = (
            delete(LeaveRequest)
            .where(col(LeaveRequest.employee_id) == person_id)
            .execution_options(synchronize_session=False)
        )
        async with _store_call("delete_requests_for_person"):
            result = await self._session.execute(stmt)
        return result.rowcount

    async def list_pending_requests(self) -> list[LeaveRequest]:
        query = (
            select(LeaveRequest)
            .where(col(LeaveRequest.status) == LeaveStatus.PENDING.value)
            .order_by(col(LeaveRequest.id))
        )
        async with _store_call("list_pending_requests"):
            result = await self._session.execute(query)
        return list(result.scalars().all())

    async def list_requests_for_person(self, person_id: str) -> list[LeaveRequest]:
        query = (
            select(LeaveRequest)
            .where(col(LeaveRequest.employee_id) == person_id)
            .order_by(col(LeaveRequest.id))
        )
        async with _store_call("list_requests_for_person"):
            result = await self._session.execute(query)
        return list(result.scalars().all())

    # -- transaction -------------------------------------------------------

    async def commit(self) -> None:
        async with _store_call("commit"):
            await self._session.commit()

    async def rollback(self) -> None:
        async with _store_call("rollback"):
            await self._session.rollback()
