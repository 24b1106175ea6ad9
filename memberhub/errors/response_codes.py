"""
HTTP Response Codes and Messages
Centralized response handling for consistent API responses
"""
from typing import Any, Dict, Optional
from fastapi import status


class ResponseCode:
    """HTTP Response Code Container"""
    def __init__(self, code: int, message: str, status_code: int):
        self.code = code
        self.message = message
        self.status_code = status_code


class SuccessCode:
    """Success Response Codes (2xx)"""

    OK = ResponseCode(
        code=200,
        message="Request processed successfully",
        status_code=status.HTTP_200_OK
    )

    OTP_SENT = ResponseCode(
        code=2004,
        message="Verification code sent",
        status_code=status.HTTP_200_OK
    )

    OTP_VERIFIED = ResponseCode(
        code=2005,
        message="Verification code accepted",
        status_code=status.HTTP_200_OK
    )

    CREATED = ResponseCode(
        code=201,
        message="Resource created successfully",
        status_code=status.HTTP_201_CREATED
    )

    REQUEST_SUBMITTED = ResponseCode(
        code=2013,
        message="Registration submitted successfully! Please wait for admin approval.",
        status_code=status.HTTP_201_CREATED
    )

    APPLICATION_SUBMITTED = ResponseCode(
        code=2014,
        message="Membership application submitted successfully!",
        status_code=status.HTTP_201_CREATED
    )


class ErrorCode:
    """Error Response Codes (4xx, 5xx)"""

    # 400 - Bad Request
    BAD_REQUEST = ResponseCode(
        code=400,
        message="Bad request",
        status_code=status.HTTP_400_BAD_REQUEST
    )

    INVALID_INPUT = ResponseCode(
        code=4001,
        message="Invalid input provided",
        status_code=status.HTTP_400_BAD_REQUEST
    )

    MISSING_REQUIRED_FIELD = ResponseCode(
        code=4004,
        message="Missing required field",
        status_code=status.HTTP_400_BAD_REQUEST
    )

    INVALID_OR_EXPIRED_OTP = ResponseCode(
        code=4006,
        message="Invalid or expired OTP",
        status_code=status.HTTP_400_BAD_REQUEST
    )

    VERIFICATION_REQUIRED = ResponseCode(
        code=4007,
        message="Contact verification is required. Please verify your email or phone first.",
        status_code=status.HTTP_400_BAD_REQUEST
    )

    # 401 - Unauthorized
    UNAUTHORIZED = ResponseCode(
        code=401,
        message="Authentication required",
        status_code=status.HTTP_401_UNAUTHORIZED
    )

    INVALID_CREDENTIALS = ResponseCode(
        code=4011,
        message="Invalid credentials",
        status_code=status.HTTP_401_UNAUTHORIZED
    )

    # 403 - Forbidden
    FORBIDDEN = ResponseCode(
        code=403,
        message="Access forbidden",
        status_code=status.HTTP_403_FORBIDDEN
    )

    ACCOUNT_DISABLED = ResponseCode(
        code=4032,
        message="Account is disabled",
        status_code=status.HTTP_403_FORBIDDEN
    )

    # 404 - Not Found
    NOT_FOUND = ResponseCode(
        code=404,
        message="Resource not found",
        status_code=status.HTTP_404_NOT_FOUND
    )

    # 409 - Conflict
    CONFLICT = ResponseCode(
        code=409,
        message="Resource already exists",
        status_code=status.HTTP_409_CONFLICT
    )

    ALREADY_PROCESSED = ResponseCode(
        code=4094,
        message="Request has already been processed",
        status_code=status.HTTP_409_CONFLICT
    )

    # 422 - Unprocessable Entity
    VALIDATION_ERROR = ResponseCode(
        code=422,
        message="Validation error",
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY
    )

    # 429 - Too Many Requests
    TOO_MANY_ATTEMPTS = ResponseCode(
        code=4291,
        message="Too many incorrect codes. Please request a new one.",
        status_code=status.HTTP_429_TOO_MANY_REQUESTS
    )

    # 500 - Internal Server Error
    INTERNAL_ERROR = ResponseCode(
        code=500,
        message="Internal server error",
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR
    )

    DATABASE_ERROR = ResponseCode(
        code=5001,
        message="Database operation failed",
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR
    )

    # 503 - Service Unavailable
    SERVICE_UNAVAILABLE = ResponseCode(
        code=503,
        message="Service temporarily unavailable",
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE
    )

    DELIVERY_UNAVAILABLE = ResponseCode(
        code=5033,
        message="Verification code could not be delivered",
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE
    )


def success_response(
    code: ResponseCode = SuccessCode.OK,
    data: Any = None,
    message: Optional[str] = None
) -> Dict[str, Any]:
    """
    Create a standardized success response

    Args:
        code: ResponseCode object
        data: Response data
        message: Optional custom message

    Returns:
        Standardized response dictionary
    """
    return {
        "success": True,
        "code": code.code,
        "message": message or code.message,
        "data": data
    }


def error_response(
    code: ResponseCode = ErrorCode.INTERNAL_ERROR,
    message: Optional[str] = None,
    errors: Optional[Any] = None
) -> Dict[str, Any]:
    """
    Create a standardized error response

    ``detail`` mirrors ``message`` so clients reading FastAPI's default
    error shape keep working.
    """
    response = {
        "success": False,
        "code": code.code,
        "message": message or code.message,
        "detail": message or code.message,
    }

    if errors:
        response["errors"] = errors

    return response
