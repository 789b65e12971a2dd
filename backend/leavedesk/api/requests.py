from __future__ import annotations

from fastapi import APIRouter, status

from leavedesk.api.deps import ApproverDep, CoordinatorDep
from leavedesk.schemas.request import LeaveRequestListResponse, LeaveRequestResponse, SubmitLeavePayload

requests_router = APIRouter(prefix="/requests", tags=["requests"])


@requests_router.post("", response_model=LeaveRequestResponse, status_code=status.HTTP_201_CREATED)
async def submit_request(payload: SubmitLeavePayload, coordinator: CoordinatorDep) -> LeaveRequestResponse:
    """Submit a new leave request."""
    request = await coordinator.submit(payload.employee_id, payload.leave_type, payload.start_date, payload.end_date)
    return LeaveRequestResponse.from_model(request)


@requests_router.get("/pending", response_model=LeaveRequestListResponse)
async def list_pending(coordinator: CoordinatorDep, approver: ApproverDep) -> LeaveRequestListResponse:
    """List requests awaiting a decision (approver only)."""
    return LeaveRequestListResponse.from_models(await coordinator.list_pending())


@requests_router.get("/{request_id}", response_model=LeaveRequestResponse)
async def get_request(request_id: int, coordinator: CoordinatorDep) -> LeaveRequestResponse:
    """Get a single leave request."""
    return LeaveRequestResponse.from_model(await coordinator.get_request(request_id))


@requests_router.post("/{request_id}/approve", response_model=LeaveRequestResponse)
async def approve_request(request_id: int, coordinator: CoordinatorDep, approver: ApproverDep) -> LeaveRequestResponse:
    """Approve a pending leave request (approver only)."""
    return LeaveRequestResponse.from_model(await coordinator.decide(request_id, True, approver.id))


@requests_router.post("/{request_id}/reject", response_model=LeaveRequestResponse)
async def reject_request(request_id: int, coordinator: CoordinatorDep, approver: ApproverDep) -> LeaveRequestResponse:
    """Reject a pending leave request (approver only)."""
    return LeaveRequestResponse.from_model(await coordinator.decide(request_id, False, approver.id))
