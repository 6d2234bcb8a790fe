"""
Mapping of domain exceptions onto HTTP responses.

Registered on the app in ``label_tracker.main``.
"""

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from label_tracker.core.exceptions import (
    BusinessRuleError,
    ConflictError,
    DomainError,
    InvalidStateError,
    NotFoundError,
    PermissionDeniedError,
)
from label_tracker.core.logging import get_logger

logger = get_logger(__name__)

STATUS_BY_ERROR = (
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (ConflictError, status.HTTP_409_CONFLICT),
    (InvalidStateError, status.HTTP_409_CONFLICT),
    (BusinessRuleError, status.HTTP_422_UNPROCESSABLE_ENTITY),
    (PermissionDeniedError, status.HTTP_403_FORBIDDEN),
)


def status_for(exc: DomainError) -> int:
    for error_cls, status_code in STATUS_BY_ERROR:
        if isinstance(exc, error_cls):
            return status_code
    return status.HTTP_400_BAD_REQUEST


async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
    status_code = status_for(exc)

    if isinstance(exc, PermissionDeniedError):
        # Uniform signal, nothing about what was attempted
        content = {"detail": "Forbidden", "code": exc.code}
    else:
        content = {"detail": exc.message, "code": exc.code}
        if exc.field:
            content["field"] = exc.field

    logger.info(
        "Domain error",
        path=request.url.path,
        status_code=status_code,
        code=exc.code,
        error=exc.message,
    )
    return JSONResponse(status_code=status_code, content=content)


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(DomainError, domain_error_handler)
