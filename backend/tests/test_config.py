from __future__ import annotations

import pytest
from pydantic import ValidationError

from leavedesk.config import Settings


def test_defaults() -> None:
    settings = Settings(_env_file=None)  # type: ignore[call-arg]
    assert settings.default_leave_balance == 6
    assert settings.recheck_balance_on_approval is True
    assert settings.database_url.startswith("sqlite+aiosqlite://")


def test_reads_prefixed_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("LEAVE_DESK_DEFAULT_LEAVE_BALANCE", "10")
    monkeypatch.setenv("LEAVE_DESK_RECHECK_BALANCE_ON_APPROVAL", "false")

    settings = Settings(_env_file=None)  # type: ignore[call-arg]

    assert settings.default_leave_balance == 10
    assert settings.recheck_balance_on_approval is False


def test_negative_default_balance_rejected() -> None:
    with pytest.raises(ValidationError):
        Settings(default_leave_balance=-1)
