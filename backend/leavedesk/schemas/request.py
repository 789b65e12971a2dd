# ruff: noqa: TC003
from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from leavedesk.models.enums import LeaveStatus
from leavedesk.models.leave_request import LeaveRequest

# ---------------------------------------------------------------------------
# Request payloads
# ---------------------------------------------------------------------------


class SubmitLeavePayload(BaseModel):
    """Request body for submitting a new leave request."""

    employee_id: str = Field(min_length=1, max_length=64)
    leave_type: str = Field(min_length=1, max_length=100)
    start_date: str = Field(min_length=1, max_length=32, examples=["2025-01-01"])
    end_date: str = Field(min_length=1, max_length=32, examples=["2025-01-05"])


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class LeaveRequestResponse(BaseModel):
    """Response schema for a single leave request."""

    id: int
    employee_id: str
    leave_type: str
    start_date: str
    end_date: str
    status: LeaveStatus
    decided_by: str | None
    decided_at: datetime | None
    created_at: datetime
    summary: str

    @classmethod
    def from_model(cls, request: LeaveRequest) -> LeaveRequestResponse:
        return cls(
            id=request.id,  # ty: ignore[invalid-argument-type]
            employee_id=request.employee_id,
            leave_type=request.leave_type,
            start_date=request.start_date,
            end_date=request.end_date,
            status=LeaveStatus(request.status),
            decided_by=request.decided_by,
            decided_at=request.decided_at,
            created_at=request.created_at,
            summary=request.describe(),
        )


class LeaveRequestListResponse(BaseModel):
    """List of leave requests."""

    items: list[LeaveRequestResponse]
    total: int

    @classmethod
    def from_models(cls, requests: list[LeaveRequest]) -> LeaveRequestListResponse:
        return cls(items=[LeaveRequestResponse.from_model(r) for r in requests], total=len(requests))
