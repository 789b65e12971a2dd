from __future__ import annotations

from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """Standard error response schema."""

    error: str
    code: str
    detail: str | None = None
    details: dict[str, Any] | None = None
    status_code: int


class AppError(Exception):
    """Base application exception."""

    code = "app_error"

    def __init__(
        self,
        message: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)


# ---------------------------------------------------------------------------
# Domain errors
# ---------------------------------------------------------------------------


class NotFoundError(AppError):
    """A person or leave request is absent from the store."""

    code = "not_found"

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message, status_code=status.HTTP_404_NOT_FOUND, details=details)


class PersonNotFoundError(NotFoundError):
    code = "person_not_found"

    def __init__(self, person_id: str) -> None:
        self.person_id = person_id
        super().__init__(f"Person '{person_id}' not found", details={"person_id": person_id})


class RequestNotFoundError(NotFoundError):
    code = "request_not_found"

    def __init__(self, request_id: int) -> None:
        self.request_id = request_id
        super().__init__(f"Leave request #{request_id} not found", details={"request_id": request_id})


class DuplicateIdError(AppError):
    code = "duplicate_id"

    def __init__(self, person_id: str) -> None:
        self.person_id = person_id
        super().__init__(
            f"A person with id '{person_id}' already exists",
            status_code=status.HTTP_409_CONFLICT,
            details={"person_id": person_id},
        )


class InsufficientBalanceError(AppError):
    """Raised when a person has no leave days left."""

    code = "insufficient_balance"

    def __init__(self, person_id: str, balance: int) -> None:
        self.person_id = person_id
        self.balance = balance
        super().__init__(
            f"Insufficient leave balance. Person '{person_id}' has {balance} days left.",
            status_code=status.HTTP_409_CONFLICT,
            details={"person_id": person_id, "balance": balance},
        )


class InvalidTransitionError(AppError):
    """Raised when a decided request is decided again."""

    code = "invalid_transition"

    def __init__(self, request_id: int | None, current: str, target: str) -> None:
        self.request_id = request_id
        self.current = current
        self.target = target
        super().__init__(
            f"Leave request #{request_id} is {current} and cannot become {target}",
            status_code=status.HTTP_409_CONFLICT,
            details={"request_id": request_id, "status": current, "target": target},
        )


class LeaveValidationError(AppError):
    """A required field is empty or out of range."""

    code = "validation_error"

    def __init__(self, field: str, message: str) -> None:
        self.field = field
        super().__init__(
            message,
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            details={"field": field},
        )


class SelfRemovalError(AppError):
    code = "self_removal"

    def __init__(self, person_id: str) -> None:
        self.person_id = person_id
        super().__init__(
            "You cannot remove your own approver account",
            status_code=status.HTTP_409_CONFLICT,
            details={"person_id": person_id},
        )


class StoreUnavailableError(AppError):
    """The record store failed to answer."""

    code = "store_unavailable"

    def __init__(self, operation: str) -> None:
        self.operation = operation
        super().__init__(
            f"Record store unavailable during {operation}",
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            details={"operation": operation},
        )


class ForbiddenError(AppError):
    code = "forbidden"

    def __init__(self, message: str) -> None:
        super().__init__(message, status_code=status.HTTP_403_FORBIDDEN)


# ---------------------------------------------------------------------------
# Handlers
# ---------------------------------------------------------------------------


async def _app_exception_handler(request: Request, exc: AppError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(
            error=type(exc).__name__,
            code=exc.code,
            detail=exc.message,
            details=exc.details or None,
            status_code=exc.status_code,
        ).model_dump(),
    )


async def _validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content=ErrorResponse(
            error="ValidationError",
            code=LeaveValidationError.code,
            detail=str(exc.errors()),
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        ).model_dump(),
    )


def setup_exception_handlers(app: FastAPI) -> None:
    """Register exception handlers on the application."""
    app.add_exception_handler(AppError, _app_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, _validation_exception_handler)  # type: ignore[arg-type]
