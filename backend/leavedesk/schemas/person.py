# ruff: noqa: TC003
from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from leavedesk.models.person import Person


class CreatePersonRequest(BaseModel):
    """Request body for adding a worker or approver."""

    id: str = Field(min_length=1, max_length=64)
    name: str = Field(min_length=1, max_length=255)
    leave_balance: int | None = Field(default=None, ge=0)
    is_approver: bool = False


class RenamePersonRequest(BaseModel):
    """Request body for renaming a person."""

    name: str = Field(min_length=1, max_length=255)


class PersonResponse(BaseModel):
    """Response schema for a person."""

    id: str
    name: str
    leave_balance: int
    is_approver: bool
    created_at: datetime

    @classmethod
    def from_model(cls, person: Person) -> PersonResponse:
        return cls(
            id=person.id,
            name=person.name,
            leave_balance=person.leave_balance,
            is_approver=person.is_approver,
            created_at=person.created_at,
        )


class PersonListResponse(BaseModel):
    """List of persons."""

    items: list[PersonResponse]
    total: int
