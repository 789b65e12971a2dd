# ruff: noqa: B008
from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Header

from leavedesk.db import get_session_factory
from leavedesk.exceptions import ForbiddenError, PersonNotFoundError
from leavedesk.models.person import Person
from leavedesk.services.workflow import WorkflowCoordinator

_coordinator: WorkflowCoordinator | None = None


def get_coordinator() -> WorkflowCoordinator:
    """FastAPI dependency for the shared workflow coordinator."""
    global _coordinator
    if _coordinator is None:
        _coordinator = WorkflowCoordinator(get_session_factory())
    return _coordinator


def set_coordinator(coordinator: WorkflowCoordinator | None) -> None:
    """Replace the shared coordinator; None makes the next request build a fresh one."""
    global _coordinator
    _coordinator = coordinator


CoordinatorDep = Annotated[WorkflowCoordinator, Depends(get_coordinator)]


async def get_acting_person_id(x_person_id: str = Header(min_length=1)) -> str:
    """Identity of the caller, as established by the authentication front end."""
    return x_person_id


ActorDep = Annotated[str, Depends(get_acting_person_id)]


async def require_approver(actor: ActorDep, coordinator: CoordinatorDep) -> Person:
    """Require the acting person to exist and hold approver capability."""
    try:
        person = await coordinator.get_person(actor)
    except PersonNotFoundError:
        raise ForbiddenError("Invalid approver id or missing approver privileges") from None
    if not person.is_approver:
        raise ForbiddenError("Invalid approver id or missing approver privileges")
    return person


ApproverDep = Annotated[Person, Depends(require_approver)]
