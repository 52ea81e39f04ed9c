#!/usr/bin/env python3
"""
Custom exceptions and error handlers for the web application.
"""

import logging
from fastapi import Request, HTTPException
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class ServiceException(Exception):
    """Base exception for service layer errors."""
    status_code = 500


class ValidationError(ServiceException):
    """Raised when request input is missing or malformed."""
    status_code = 400


class UnauthorizedError(ServiceException):
    """Raised when the acting user is missing or unknown."""
    status_code = 401


class ForbiddenError(ServiceException):
    """Raised when the acting user may not perform the operation."""
    status_code = 403


class NotFoundError(ServiceException):
    """Raised when a referenced record does not exist."""
    status_code = 404


class ConflictError(ServiceException):
    """Raised when the operation conflicts with existing state."""
    status_code = 409


class InvalidTransitionError(ConflictError):
    """Raised when an application status change is not allowed."""
    pass


def _error_response(status_code: int, error, error_type: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "success": False,
            "error": error,
            "type": error_type
        }
    )


async def service_exception_handler(
    request: Request,
    exc: ServiceException
) -> JSONResponse:
    """
    Handle service layer exceptions.

    Args:
        request: The FastAPI request.
        exc: The service exception.

    Returns:
        JSONResponse with error details.
    """
    if exc.status_code >= 500:
        logger.error(f"Service error in {request.url.path}: {exc}", exc_info=True)
    else:
        logger.info(f"{exc.__class__.__name__} in {request.method} {request.url.path}: {exc}")

    return _error_response(exc.status_code, str(exc), exc.__class__.__name__)


async def request_validation_exception_handler(
    request: Request,
    exc: RequestValidationError
) -> JSONResponse:
    """Report malformed request bodies as 400 in the common error format."""
    messages = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        messages.append(f"{location}: {error.get('msg')}" if location else error.get("msg"))

    return _error_response(400, "; ".join(messages) or "Invalid request.", "ValidationError")


async def http_exception_handler(
    request: Request,
    exc: HTTPException
) -> JSONResponse:
    """
    Handle FastAPI HTTP exceptions with consistent format.

    Args:
        request: The FastAPI request.
        exc: The HTTP exception.

    Returns:
        JSONResponse with error details.
    """
    return _error_response(exc.status_code, exc.detail, "HTTPException")


async def general_exception_handler(
    request: Request,
    exc: Exception
) -> JSONResponse:
    """
    Handle unexpected exceptions.

    Args:
        request: The FastAPI request.
        exc: The exception.

    Returns:
        JSONResponse with error details.
    """
    logger.exception(f"Unexpected error in {request.url.path}")

    return _error_response(500, "Internal server error", "InternalError")
