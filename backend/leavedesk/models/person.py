from __future__ import annotations

import sqlalchemy as sa
from sqlmodel import Field

from leavedesk.models.base import TimestampMixin


class Person(TimestampMixin, table=True):
    """An entitled individual; approvers carry the is_approver capability."""

    __tablename__ = "person"

    id: str = Field(primary_key=True, max_length=64)
    name: str = Field(max_length=255)
    leave_balance: int = Field(default=0, sa_column_kwargs={"server_default": "0"})
    is_approver: bool = Field(default=False, sa_column_kwargs={"server_default": sa.false()})
    version: int = Field(default=1, sa_column_kwargs={"server_default": "1"})
