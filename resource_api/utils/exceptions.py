"""Error handlers mapping classified errors to HTTP responses"""
from fastapi import Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
import traceback
from resource_api.core.errors import CoreError, ErrorKind
from resource_api.utils.logger import logger


STATUS_BY_KIND = {
    ErrorKind.DATA_ERROR: status.HTTP_400_BAD_REQUEST,
    ErrorKind.RESOURCE_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.OPERATION_NOT_AUTHORIZED: status.HTTP_401_UNAUTHORIZED,
    ErrorKind.OPERATION_FORBIDDEN: status.HTTP_403_FORBIDDEN,
    ErrorKind.UNKNOWN_ERROR: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def _error_response(request: Request, kind: ErrorKind, detail: str) -> JSONResponse:
    headers = None
    if kind is ErrorKind.OPERATION_NOT_AUTHORIZED:
        headers = {"WWW-Authenticate": "Bearer"}
    return JSONResponse(
        status_code=STATUS_BY_KIND[kind],
        content={
            "error": kind.value,
            "detail": detail,
            "path": str(request.url.path)
        },
        headers=headers
    )


async def core_error_exception_handler(request: Request, exc: CoreError):
    """Handle classified errors"""
    if exc.kind is ErrorKind.UNKNOWN_ERROR:
        logger.error(f"{exc.kind.value} on {request.url.path}: {exc.message}")
    else:
        logger.warning(f"{exc.kind.value} on {request.url.path}: {exc.message}")
    return _error_response(request, exc.kind, exc.message)


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Handle validation errors as data errors"""
    logger.warning(f"Validation error on {request.url.path}: {exc.errors()}")
    detail = "; ".join(
        f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
        for error in exc.errors()
    )
    return _error_response(request, ErrorKind.DATA_ERROR, detail or "Invalid request")


async def generic_exception_handler(request: Request, exc: Exception):
    """Handle generic exceptions"""
    logger.error(f"Unhandled exception on {request.url.path}: {str(exc)}\n{traceback.format_exc()}")
    return _error_response(
        request,
        ErrorKind.UNKNOWN_ERROR,
        "An unexpected error occurred. Please try again later."
    )
