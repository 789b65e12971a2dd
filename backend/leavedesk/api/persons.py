from __future__ import annotations

from fastapi import APIRouter, Response, status

from leavedesk.api.deps import ApproverDep, CoordinatorDep
from leavedesk.schemas.person import CreatePersonRequest, PersonListResponse, PersonResponse, RenamePersonRequest
from leavedesk.schemas.request import LeaveRequestListResponse

persons_router = APIRouter(prefix="/persons", tags=["persons"])


@persons_router.post("", response_model=PersonResponse, status_code=status.HTTP_201_CREATED)
async def add_person(
    payload: CreatePersonRequest,
    coordinator: CoordinatorDep,
    approver: ApproverDep,
) -> PersonResponse:
    """Add a worker or approver (approver only)."""
    person = await coordinator.add_person(payload.id, payload.name, payload.leave_balance, payload.is_approver)
    return PersonResponse.from_model(person)


@persons_router.get("", response_model=PersonListResponse)
async def list_persons(coordinator: CoordinatorDep) -> PersonListResponse:
    """List all persons ordered by name."""
    persons = await coordinator.list_persons()
    return PersonListResponse(items=[PersonResponse.from_model(p) for p in persons], total=len(persons))


@persons_router.get("/{person_id}", response_model=PersonResponse)
async def get_person(person_id: str, coordinator: CoordinatorDep) -> PersonResponse:
    """Get a single person with their current balance."""
    return PersonResponse.from_model(await coordinator.get_person(person_id))


@persons_router.patch("/{person_id}", response_model=PersonResponse)
async def rename_person(
    person_id: str,
    payload: RenamePersonRequest,
    coordinator: CoordinatorDep,
    approver: ApproverDep,
) -> PersonResponse:
    """Rename a person (approver only)."""
    return PersonResponse.from_model(await coordinator.rename_person(person_id, payload.name))


@persons_router.delete("/{person_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_person(person_id: str, coordinator: CoordinatorDep, approver: ApproverDep) -> Response:
    """Remove a person and all of their leave requests (approver only, never oneself)."""
    await coordinator.remove_person(person_id, acting_identity=approver.id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@persons_router.get("/{person_id}/requests", response_model=LeaveRequestListResponse)
async def list_person_requests(person_id: str, coordinator: CoordinatorDep) -> LeaveRequestListResponse:
    """Every leave request of one person, oldest first. Unknown persons are a 404."""
    await coordinator.get_person(person_id)
    return LeaveRequestListResponse.from_models(await coordinator.list_requests_for_person(person_id))
