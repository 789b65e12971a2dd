# ruff: noqa: TC003
from __future__ import annotations

from datetime import datetime

import sqlalchemy as sa
from sqlmodel import Field

from leavedesk.models.base import TimestampMixin
from leavedesk.models.enums import LeaveStatus


class LeaveRequest(TimestampMixin, table=True):
    """A person's leave request with its approval state."""

    __tablename__ = "leave_request"
    __table_args__ = (sa.Index("ix_leave_request_employee_status", "employee_id", "status"),)

    id: int | None = Field(default=None, primary_key=True)
    employee_id: str = Field(
        sa_column=sa.Column(
            sa.String(64), sa.ForeignKey("person.id", ondelete="CASCADE"), nullable=False, index=True
        ),
    )
    leave_type: str = Field(max_length=100)
    # Dates are stored as entered (YYYY-MM-DD by convention) and never parsed.
    start_date: str = Field(max_length=32)
    end_date: str = Field(max_length=32)
    status: str = Field(
        default=LeaveStatus.PENDING, max_length=20, index=True, sa_column_kwargs={"server_default": "Pending"}
    )
    decided_by: str | None = Field(default=None, max_length=64)
    decided_at: datetime | None = Field(default=None, sa_type=sa.DateTime(timezone=True))  # ty: ignore[invalid-argument-type]

    def describe(self) -> str:
        """One-line summary used in listings."""
        return (
            f"[Request #{self.id}] Emp ID: {self.employee_id}, Type: {self.leave_type}, "
            f"From: {self.start_date} To: {self.end_date}, Status: {self.status}"
        )
