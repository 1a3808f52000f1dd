"""Global exception handlers that map domain exceptions to HTTP responses."""

from fastapi import Request, status
from fastapi.responses import JSONResponse

from marketplace.errors import (
    DUPLICATE_RESOURCE,
    MARKETPLACE_ERROR,
    NOT_FOUND,
    VALIDATION_ERROR,
    DomainValidationError,
    DuplicateResourceError,
    MarketplaceError,
    NotFoundError,
)
from marketplace.schemas.error import ErrorResponse


def _error_response(status_code: int, detail: str, code: str) -> JSONResponse:
    """Return a standardized error response with detail and machine-readable code."""
    body = ErrorResponse(detail=detail, code=code)
    return JSONResponse(status_code=status_code, content=body.model_dump())


def domain_validation_error_handler(
    _request: Request, exc: DomainValidationError
) -> JSONResponse:
    return _error_response(
        status.HTTP_400_BAD_REQUEST,
        str(exc),
        VALIDATION_ERROR,
    )


def duplicate_resource_error_handler(
    _request: Request, exc: DuplicateResourceError
) -> JSONResponse:
    return _error_response(
        status.HTTP_409_CONFLICT,
        str(exc),
        DUPLICATE_RESOURCE,
    )


def not_found_error_handler(_request: Request, exc: NotFoundError) -> JSONResponse:
    return _error_response(
        status.HTTP_404_NOT_FOUND,
        str(exc),
        NOT_FOUND,
    )


def marketplace_error_handler(request: Request, exc: MarketplaceError) -> JSONResponse:
    """
    Marketplace failures without a more specific kind are server errors,
    unless they wrap a client error (e.g. installing a profile twice).
    """
    cause = exc.__cause__
    if isinstance(cause, DuplicateResourceError):
        return _error_response(
            status.HTTP_409_CONFLICT,
            f"{exc}: {cause}",
            DUPLICATE_RESOURCE,
        )
    if isinstance(cause, DomainValidationError):
        return _error_response(
            status.HTTP_400_BAD_REQUEST,
            f"{exc}: {cause}",
            VALIDATION_ERROR,
        )
    return _error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        str(exc),
        MARKETPLACE_ERROR,
    )


def register_exception_handlers(app):
    """Register domain exception handlers on the FastAPI app."""
    app.add_exception_handler(DomainValidationError, domain_validation_error_handler)
    app.add_exception_handler(DuplicateResourceError, duplicate_resource_error_handler)
    app.add_exception_handler(NotFoundError, not_found_error_handler)
    app.add_exception_handler(MarketplaceError, marketplace_error_handler)
