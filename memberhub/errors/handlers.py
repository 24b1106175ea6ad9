"""Error handlers for the application"""
from fastapi import Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from sqlalchemy.exc import SQLAlchemyError
import logging

from memberhub.errors.exceptions import BaseHTTPException
from memberhub.errors.response_codes import ErrorCode, error_response

logger = logging.getLogger(__name__)


async def app_exception_handler(request: Request, exc: BaseHTTPException):
    """
    Handle the application's own HTTP exceptions
    """
    if exc.status_code >= 500:
        logger.error(f"{exc.__class__.__name__} on {request.url}: {exc.detail}")
    elif exc.status_code in (status.HTTP_409_CONFLICT, status.HTTP_429_TOO_MANY_REQUESTS):
        logger.warning(f"{exc.__class__.__name__} on {request.url}: {exc.detail}")

    return JSONResponse(
        status_code=exc.status_code,
        content=error_response(exc.response_code, message=exc.detail),
        headers=exc.headers,
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """
    Handle validation errors
    """
    errors = []
    for error in exc.errors():
        errors.append({
            "field": " -> ".join(str(x) for x in error["loc"]),
            "message": error["msg"],
            "type": error["type"]
        })

    logger.warning(f"Validation error on {request.url}: {errors}")

    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content=error_response(ErrorCode.VALIDATION_ERROR, errors=errors)
    )


async def sqlalchemy_exception_handler(request: Request, exc: SQLAlchemyError):
    """
    Handle SQLAlchemy database errors
    """
    logger.error(f"Database error on {request.url}: {str(exc)}")

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_response(
            ErrorCode.DATABASE_ERROR,
            message="An internal database error occurred. Please try again later."
        )
    )


async def general_exception_handler(request: Request, exc: Exception):
    """
    Handle general exceptions
    """
    logger.error(f"Unhandled exception on {request.url}: {str(exc)}", exc_info=True)

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_response(
            ErrorCode.INTERNAL_ERROR,
            message="An unexpected error occurred. Please try again later."
        )
    )
