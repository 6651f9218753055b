"""
Pydantic schemas for OTP authentication endpoints.
"""
from pydantic import EmailStr, Field

from app.schemas.base import CamelModel, ActionResponse


class SendOtpRequest(CamelModel):
    """Request schema for sending a one-time code."""
    email: EmailStr = Field(..., description="Email address to send OTP to")

    class Config:
        json_schema_extra = {
            "example": {
                "email": "jane.doe@example.com"
            }
        }


class SendOtpResponse(ActionResponse):
    expires_in: int = Field(..., description="Seconds until OTP expires")


class VerifyOtpRequest(CamelModel):
    """Request schema for verifying a one-time code."""
    email: EmailStr = Field(..., description="Email address")
    code: str = Field(..., min_length=1, max_length=32, description="6-digit OTP code")

    class Config:
        json_schema_extra = {
            "example": {
                "email": "jane.doe@example.com",
                "code": "042137"
            }
        }


class CleanupOtpResponse(ActionResponse):
    deleted: int = Field(..., description="Number of expired records removed")
