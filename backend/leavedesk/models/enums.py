from __future__ import annotations

import enum


class LeaveStatus(enum.StrEnum):
    """State machine for leave requests."""

    PENDING = "Pending"
    APPROVED = "Approved"
    REJECTED = "Rejected"

    @property
    def is_terminal(self) -> bool:
        return self is not LeaveStatus.PENDING
