"""
Application error taxonomy.

Services raise these; the exception handlers registered in app.main turn them
into JSON responses of the form {"error": <message>, "code": <kind>}.
"""
from typing import Optional
from fastapi import status


class AppError(Exception):
    """Base class for errors that map onto an HTTP response."""
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    code: str = "internal_error"
    default_message: str = "Internal server error"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    code = "validation_error"
    default_message = "Invalid request"


class InvalidPlanError(ValidationError):
    code = "invalid_plan"
    default_message = "Plan type does not match user type"


class AuthenticationError(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    code = "unauthorized"
    default_message = "Invalid or expired OTP"


class NotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    code = "not_found"
    default_message = "Resource not found"


class ConflictError(AppError):
    status_code = status.HTTP_409_CONFLICT
    code = "conflict"
    default_message = "Resource already exists"


class RateLimitError(AppError):
    status_code = status.HTTP_429_TOO_MANY_REQUESTS
    code = "rate_limited"
    default_message = "Too many requests"


class InternalError(AppError):
    pass


class UnavailableError(AppError):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    code = "service_unavailable"
    default_message = "Service temporarily unavailable"


# OTP verification outcomes

class OtpNotFoundError(AuthenticationError):
    code = "otp_not_found"
    default_message = "Invalid or expired OTP"


class OtpAlreadyVerifiedError(AuthenticationError):
    code = "otp_already_verified"
    default_message = "OTP has already been verified"


class OtpExpiredError(AuthenticationError):
    code = "otp_expired"
    default_message = "OTP has expired"


class InvalidOtpCodeError(AuthenticationError):
    code = "otp_invalid"
    default_message = "Invalid OTP code"


class TooManyAttemptsError(RateLimitError):
    code = "otp_attempts_exhausted"
    default_message = "Too many verification attempts. Please request a new OTP."


class DeliveryError(UnavailableError):
    code = "delivery_failed"
    default_message = "Failed to send OTP email"
