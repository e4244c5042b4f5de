# app/core/exceptions.py
import enum
import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class ErrorKind(str, enum.Enum):
    INPUT = "input"
    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    SYSTEM = "system"


class RejectionReason(str, enum.Enum):
    NOT_FOUND = "not_found"
    INACTIVE = "inactive"
    EXPIRED = "expired"
    USAGE_EXCEEDED = "usage_exceeded"
    BELOW_MINIMUM_ORDER = "below_minimum_order"
    NO_ELIGIBLE_ITEMS = "no_eligible_items"


_STATUS_BY_KIND = {
    ErrorKind.INPUT: 400,
    ErrorKind.VALIDATION: 400,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.SYSTEM: 500,
}


class AppError(Exception):
    """Operational error carrying a client-facing message and a classification."""

    def __init__(self, message: str, kind: ErrorKind = ErrorKind.SYSTEM, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.kind = kind
        self.status_code = status_code or _STATUS_BY_KIND[kind]


class InstrumentRejected(AppError):
    """A voucher or promotion failed one of the eligibility checks."""

    def __init__(self, instrument: str, code: str, reason: RejectionReason, message: str):
        super().__init__(message, kind=ErrorKind.VALIDATION)
        self.instrument = instrument
        self.code = code
        self.reason = reason


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    reason = getattr(exc, "reason", None)
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "detail": exc.message,
            "kind": exc.kind.value,
            "reason": reason.value if reason else None,
        },
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, app_error_handler)
