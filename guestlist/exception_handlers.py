import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from guestlist.errors import (
    ConflictError,
    DomainError,
    GuestNotFoundError,
    InvalidInputError,
    NotFoundError,
    UnauthorizedError,
)

logger = logging.getLogger(__name__)

# Most specific class first; the first isinstance match wins.
STATUS_CODES: list[tuple[type[DomainError], int]] = [
    (UnauthorizedError, status.HTTP_401_UNAUTHORIZED),
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (GuestNotFoundError, status.HTTP_404_NOT_FOUND),
    (ConflictError, status.HTTP_409_CONFLICT),
    (InvalidInputError, 422),
]


def status_code_for(exc: DomainError) -> int:
    for error_class, status_code in STATUS_CODES:
        if isinstance(exc, error_class):
            return status_code
    return status.HTTP_400_BAD_REQUEST


async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
    status_code = status_code_for(exc)
    logger.info(f"{request.method} {request.url.path} -> {status_code} {exc.code}: {exc}")
    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, UnauthorizedError) else None
    return JSONResponse(
        status_code=status_code,
        content={"detail": str(exc), "error": exc.code},
        headers=headers,
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(DomainError, domain_error_handler)  # type: ignore[arg-type]
