from sqlmodel import SQLModel

from leavedesk.models.base import TimestampMixin
from leavedesk.models.enums import LeaveStatus
from leavedesk.models.leave_request import LeaveRequest
from leavedesk.models.person import Person

__all__ = [
    "LeaveRequest",
    "LeaveStatus",
    "Person",
    "SQLModel",
    "TimestampMixin",
]
