"""Custom exceptions for error handling"""
from fastapi import HTTPException

from memberhub.errors.response_codes import ErrorCode, ResponseCode


class BaseHTTPException(HTTPException):
    """Base exception class for all custom HTTP exceptions"""
    response_code: ResponseCode = ErrorCode.INTERNAL_ERROR

    def __init__(self, detail: str = None, headers: dict = None):
        super().__init__(
            status_code=self.response_code.status_code,
            detail=detail or self.response_code.message,
            headers=headers
        )


class BadRequestException(BaseHTTPException):
    """400 Bad Request"""
    response_code = ErrorCode.BAD_REQUEST


class InvalidInputException(BadRequestException):
    """400 Missing or malformed fields, detected before any I/O"""
    response_code = ErrorCode.INVALID_INPUT


class MissingFieldException(InvalidInputException):
    """400 One or more required fields are absent or blank"""
    response_code = ErrorCode.MISSING_REQUIRED_FIELD

    def __init__(self, fields):
        self.fields = list(fields)
        super().__init__(detail=f"Missing required fields: {', '.join(self.fields)}")


class InvalidOrExpiredOTPException(BadRequestException):
    """400 Wrong, expired, used or never-issued code"""
    response_code = ErrorCode.INVALID_OR_EXPIRED_OTP


class VerificationRequiredException(BadRequestException):
    """400 Contact was not verified by this server"""
    response_code = ErrorCode.VERIFICATION_REQUIRED


class UnauthorizedException(BaseHTTPException):
    """401 Unauthorized"""
    response_code = ErrorCode.UNAUTHORIZED

    def __init__(self, detail: str = None):
        super().__init__(
            detail=detail,
            headers={"WWW-Authenticate": "Bearer"}
        )


class ForbiddenException(BaseHTTPException):
    """403 Forbidden"""
    response_code = ErrorCode.FORBIDDEN


class NotFoundException(BaseHTTPException):
    """404 Not Found"""
    response_code = ErrorCode.NOT_FOUND


class ConflictException(BaseHTTPException):
    """409 Conflict"""
    response_code = ErrorCode.CONFLICT


class AlreadyProcessedException(ConflictException):
    """409 Review action on a request that is no longer pending"""
    response_code = ErrorCode.ALREADY_PROCESSED


class TooManyAttemptsException(BaseHTTPException):
    """429 OTP attempt limit reached"""
    response_code = ErrorCode.TOO_MANY_ATTEMPTS


class InternalServerException(BaseHTTPException):
    """500 Internal Server Error"""
    response_code = ErrorCode.INTERNAL_ERROR


class DatabaseException(InternalServerException):
    """Database operation failed"""
    response_code = ErrorCode.DATABASE_ERROR


class ServiceUnavailableException(BaseHTTPException):
    """503 Service Unavailable"""
    response_code = ErrorCode.SERVICE_UNAVAILABLE


class DeliveryUnavailableException(ServiceUnavailableException):
    """503 Email/SMS transport could not deliver a code"""
    response_code = ErrorCode.DELIVERY_UNAVAILABLE


class EmailConfigurationError(RuntimeError):
    """Raised before any SMTP traffic when required SMTP settings are unset"""

    def __init__(self, missing):
        self.missing = list(missing)
        super().__init__(f"Missing SMTP configuration: {', '.join(self.missing)}")
