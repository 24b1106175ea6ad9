"""Error handling module"""
from memberhub.errors.exceptions import (
    BadRequestException,
    InvalidInputException,
    MissingFieldException,
    InvalidOrExpiredOTPException,
    VerificationRequiredException,
    UnauthorizedException,
    ForbiddenException,
    NotFoundException,
    ConflictException,
    AlreadyProcessedException,
    TooManyAttemptsException,
    InternalServerException,
    DatabaseException,
    ServiceUnavailableException,
    DeliveryUnavailableException,
    EmailConfigurationError,
)
from memberhub.errors.response_codes import (
    SuccessCode,
    ErrorCode,
    success_response,
    error_response,
)

__all__ = [
    "BadRequestException",
    "InvalidInputException",
    "MissingFieldException",
    "InvalidOrExpiredOTPException",
    "VerificationRequiredException",
    "UnauthorizedException",
    "ForbiddenException",
    "NotFoundException",
    "ConflictException",
    "AlreadyProcessedException",
    "TooManyAttemptsException",
    "InternalServerException",
    "DatabaseException",
    "ServiceUnavailableException",
    "DeliveryUnavailableException",
    "EmailConfigurationError",
    "SuccessCode",
    "ErrorCode",
    "success_response",
    "error_response",
]
