"""
Email one-time passcode endpoints.
"""
import logging
from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session

from app.api.deps import get_db, get_email_sender
from app.core import config
from app.core.rate_limit import check_rate_limit
from app.schemas.auth import (
    CleanupOtpResponse,
    SendOtpRequest,
    SendOtpResponse,
    VerifyOtpRequest,
)
from app.schemas.base import ActionResponse
from app.services.email_service import EmailSender
from app.services.otp_service import (
    OTP_EXPIRATION_MINUTES,
    cleanup_expired_otps,
    issue_otp,
    verify_otp,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Auth"])


# ✅ SEND OTP
@router.post("/send-otp", status_code=status.HTTP_200_OK, response_model=SendOtpResponse)
def send_otp(
    payload: SendOtpRequest,
    request: Request,
    db: Session = Depends(get_db),
    mailer: EmailSender = Depends(get_email_sender),
):
    """
    Email a fresh 6-digit code, replacing any earlier code for the address.
    """
    check_rate_limit(
        request,
        scope="send_otp",
        max_requests=config.OTP_SEND_MAX_REQUESTS,
        window_seconds=config.OTP_SEND_WINDOW_SECONDS,
    )

    issue_otp(db, payload.email, mailer)

    return SendOtpResponse(
        message="OTP sent successfully",
        expires_in=OTP_EXPIRATION_MINUTES * 60,
    )


# ✅ VERIFY OTP
@router.post("/verify-otp", status_code=status.HTTP_200_OK, response_model=ActionResponse)
def verify(payload: VerifyOtpRequest, db: Session = Depends(get_db)):
    verify_otp(db, payload.email, payload.code)
    return ActionResponse(message="OTP verified successfully")


# ✅ CLEANUP EXPIRED OTPS
@router.delete("/cleanup-otps", status_code=status.HTTP_200_OK, response_model=CleanupOtpResponse)
def cleanup_otps(db: Session = Depends(get_db)):
    deleted = cleanup_expired_otps(db)
    return CleanupOtpResponse(
        message="Expired OTPs cleaned up successfully",
        deleted=deleted,
    )
